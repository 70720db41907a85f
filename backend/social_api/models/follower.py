"""
Social API Backend — Follower Edge SQLAlchemy Model
=====================================================

What:  Directed edge: follower_id follows followed_id.
Invariants:
    - unique (follower_id, followed_id)
    - follower_id != followed_id (CHECK constraint; rejected earlier by
      FollowerService with a validation message)

Query Patterns:
    - Who follows X:  WHERE followed_id = :x → idx_followers_followed_id
    - Whom X follows: WHERE follower_id = :x → leading column of the unique index
"""

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


class Follower(Base):
    __tablename__ = "followers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    followed_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_followers_pair"),
        CheckConstraint("follower_id <> followed_id", name="ck_followers_not_self"),
        Index("idx_followers_followed_id", "followed_id"),
    )

    def __repr__(self) -> str:
        return f"<Follower(follower_id={self.follower_id}, followed_id={self.followed_id})>"
