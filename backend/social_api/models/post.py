"""
Social API Backend — Post SQLAlchemy Model
============================================

What:  A post authored by a profile, with optional image.
Query Patterns:
    - Single post: WHERE id = :id (primary key)
    - Posts of a profile: WHERE profile_id = :id → idx_posts_profile_id
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Relative path of the stored upload; NULL when the post has no image
    image_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    profile_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_posts_profile_id", "profile_id"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, profile_id={self.profile_id})>"
