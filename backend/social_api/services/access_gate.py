"""
Social API Backend — Access Gate
==================================

What:  Turns a bearer token into an explicit Actor and decides whether
       that actor may perform a mutation on a given entity.
Why:   Per-request identity is passed as a value into every service call
       rather than read from ambient framework state, so each service
       signature shows exactly who is acting.

Actor states:
    anonymous              → no Actor; only reads, register and login
    authenticated-as-user  → Actor; every create/update/delete

Ownership:
    By default the gate only requires authentication: any authenticated
    actor may update or delete any post, comment or profile. This is the
    observed behaviour of the system and is kept as the default.

    With ENFORCE_OWNERSHIP=true the gate also compares the actor's linked
    profile (the Profile whose email equals the User's email) against the
    owner of the target:

        post / comment      → entity.profile_id
        profile             → entity.id (creating a profile is unrestricted)
        like                → request profile_id
        follower edge       → request follower_id
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.config import settings
from social_api.exceptions import AuthenticationRequiredError, ForbiddenError
from social_api.models.profile import Profile

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of one request."""
    user_id: int
    name: str
    email: str
    token_id: int
    profile_id: Optional[int] = None


class AccessGate:
    """
    Stateless authorization policy.

    Args:
        enforce_ownership: override settings.enforce_ownership (tests).
    """

    def __init__(self, enforce_ownership: Optional[bool] = None):
        self._enforce_ownership = enforce_ownership

    @property
    def enforce_ownership(self) -> bool:
        if self._enforce_ownership is not None:
            return self._enforce_ownership
        return settings.enforce_ownership

    async def linked_profile_id(self, db: AsyncSession, email: str) -> Optional[int]:
        result = await db.execute(select(Profile.id).where(Profile.email == email))
        return result.scalar_one_or_none()

    def authorize(
        self,
        actor: Optional[Actor],
        action: Action,
        resource: str,
        owner_profile_id: Optional[int] = None,
    ) -> Actor:
        """
        Allow or refuse one mutation.

        Args:
            actor:            the request's Actor, None when anonymous
            action:           create / update / delete
            resource:         entity kind, for logs and messages
            owner_profile_id: profile owning the target (None = no owner,
                              e.g. creating a profile)

        Returns:
            The actor, narrowed to non-None.

        Raises:
            AuthenticationRequiredError: anonymous caller (→ 401)
            ForbiddenError: ownership enforced and not the owner (→ 403)
        """
        if actor is None:
            raise AuthenticationRequiredError()

        if not self.enforce_ownership or owner_profile_id is None:
            return actor

        if actor.profile_id != owner_profile_id:
            logger.warning(
                "Denied %s on %s: user %s (profile %s) is not owner profile %s",
                action.value,
                resource,
                actor.user_id,
                actor.profile_id,
                owner_profile_id,
            )
            raise ForbiddenError(
                message=f"You are not allowed to {action.value} this {resource}.",
                context={"resource": resource, "action": action.value},
            )
        return actor


access_gate = AccessGate()
