"""
Social API Backend — Like SQLAlchemy Model
============================================

What:  A profile liking a post.
Invariant:
    A profile likes a given post at most once. The UNIQUE constraint on
    (profile_id, post_id) is what guarantees it when two first-or-create
    requests race; the service-level lookup only avoids the common case
    of hitting the constraint.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


class Like(Base):
    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    profile_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("profile_id", "post_id", name="uq_likes_profile_post"),
        Index("idx_likes_post_id", "post_id"),
    )

    def __repr__(self) -> str:
        return f"<Like(profile_id={self.profile_id}, post_id={self.post_id})>"
