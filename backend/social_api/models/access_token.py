"""
Social API Backend — Personal Access Token Model
==================================================

What:  Bearer tokens issued at login.
Why:   Tokens are opaque and server-side so logout can revoke them by
       deleting rows. A signed stateless token could not be revoked.
How:   The client receives "<id>|<secret>". Only the SHA-256 digest of the
       secret is stored, so a database leak does not leak usable tokens.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


class AccessToken(Base):
    """
    One issued bearer token.

    Lifecycle:
        1. Created by AuthService.login()
        2. last_used_at touched on every authenticated request
        3. Deleted (with all siblings of the same user) by logout
    """

    __tablename__ = "personal_access_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # hex SHA-256 of the secret part of the token
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    last_used_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    __table_args__ = (
        Index("idx_personal_access_tokens_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<AccessToken(id={self.id}, user_id={self.user_id})>"
