"""
Social API Backend — Profile SQLAlchemy Model
===============================================

What:  The public social account. Owns posts, comments, likes and
       follower edges in both directions.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    """
    Represents a user profile.

    Invariants:
        - username and email are unique across all profiles (UNIQUE
          constraints; the service pre-checks for a readable message)
        - password_hash is never returned by any endpoint

    Lifecycle:
        Created by POST /api/profiles, updated field-by-field by PUT,
        deleted together with everything it owns (see ProfileService.delete).
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relative path under storage_root, e.g. profile_pictures/2024/01/15/<uuid>.png
    profile_picture: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        default=None,
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

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username='{self.username}')>"
