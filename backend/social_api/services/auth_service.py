"""
Social API Backend — Authentication Service
=============================================

What:  register / login / logout, and bearer-token authentication.
How:   Users hold bcrypt password hashes. Login issues an opaque personal
       access token ("<id>|<secret>") whose SHA-256 digest is stored.
       Logout deletes every token of the user, so all sessions end at once.

Token lifecycle:
    login ──▶ row inserted, plaintext returned once
    request ──▶ digest matched, last_used_at touched, Actor built
    logout ──▶ all rows of the user deleted → next request gets 401
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.config import settings
from social_api.exceptions import AuthError, AuthenticationRequiredError, ValidationError
from social_api.models.access_token import AccessToken
from social_api.models.user import User
from social_api.schemas.auth import LoginRequest, RegisterRequest
from social_api.security import (
    format_token,
    generate_token_secret,
    hash_password,
    hash_token,
    parse_token,
    token_matches,
    verify_password,
)
from social_api.services.access_gate import Actor, access_gate

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless; every method receives the request's session."""

    async def register(self, db: AsyncSession, data: RegisterRequest) -> User:
        """
        Create a User.

        Raises:
            ValidationError: name or email already taken
        """
        fields: Dict[str, List[str]] = {}
        if await self._exists(db, User.name == data.name):
            fields["name"] = ["The name has already been taken."]
        if await self._exists(db, User.email == data.email):
            fields["email"] = ["The email has already been taken."]
        if fields:
            raise ValidationError(message=next(iter(fields.values()))[0], fields=fields)

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name/email
            raise ValidationError(
                message="The email has already been taken.",
                field="email",
            )
        logger.info("User registered: id=%s", user.id)
        return user

    async def login(self, db: AsyncSession, data: LoginRequest) -> Tuple[str, User]:
        """
        Check credentials and issue a new token.

        Returns:
            (plaintext_token, user)

        Raises:
            AuthError: unknown email or wrong password (same message for
                both, so the response does not reveal which emails exist)
        """
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthError()

        secret = generate_token_secret()
        token = AccessToken(
            user_id=user.id,
            name=settings.token_name,
            token_hash=hash_token(secret),
        )
        db.add(token)
        await db.flush()

        logger.info("Token %s issued to user %s", token.id, user.id)
        return format_token(token.id, secret), user

    async def logout(self, db: AsyncSession, actor: Actor) -> int:
        """Revoke every token of the actor's user. Returns how many were removed."""
        result = await db.execute(
            delete(AccessToken).where(AccessToken.user_id == actor.user_id)
        )
        await db.flush()
        logger.info("Revoked %d token(s) of user %s", result.rowcount, actor.user_id)
        return result.rowcount

    async def authenticate(self, db: AsyncSession, raw_token: Optional[str]) -> Actor:
        """
        Resolve a presented bearer token into an Actor.

        Raises:
            AuthenticationRequiredError: missing, unknown or revoked token
        """
        if not raw_token:
            raise AuthenticationRequiredError()

        token_id, secret = parse_token(raw_token)
        if token_id is not None:
            token = await db.get(AccessToken, token_id)
            if token is not None and not token_matches(secret, token.token_hash):
                token = None
        else:
            result = await db.execute(
                select(AccessToken).where(AccessToken.token_hash == hash_token(secret))
            )
            token = result.scalar_one_or_none()

        if token is None:
            raise AuthenticationRequiredError()

        user = await db.get(User, token.user_id)
        if user is None:
            raise AuthenticationRequiredError()

        token.last_used_at = datetime.now(timezone.utc)

        return Actor(
            user_id=user.id,
            name=user.name,
            email=user.email,
            token_id=token.id,
            profile_id=await access_gate.linked_profile_id(db, user.email),
        )

    async def _exists(self, db: AsyncSession, condition) -> bool:
        result = await db.execute(select(User.id).where(condition).limit(1))
        return result.scalar_one_or_none() is not None


auth_service = AuthService()
