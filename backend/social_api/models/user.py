"""
Social API Backend — User SQLAlchemy Model
============================================

What:  The authentication identity created by /api/register.
Why:   Login credentials and issued tokens hang off User, not Profile.
       A Profile is the public social account; a User is who holds a token.
How:   Linked to a Profile only by a matching email address (see
       AccessGate.resolve_actor), never by a foreign key.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # bcrypt hash; never serialized
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
