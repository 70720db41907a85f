"""
Social API Backend — Follower Service
=======================================

What:  follow / unfollow, i.e. maintaining directed follower edges.
Semantics:
    - follow is first-or-create on (follower_id, followed_id)
    - a profile cannot follow itself (validation error)
    - unfollow of an absent edge raises RelationNotFoundError
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import RelationNotFoundError, ValidationError
from social_api.models.follower import Follower
from social_api.models.profile import Profile
from social_api.schemas.relation import FollowRequest
from social_api.services.access_gate import Action, Actor, access_gate
from social_api.services.store import ensure_reference, find_first, first_or_create

logger = logging.getLogger(__name__)


class FollowerService:

    async def follow(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        data: FollowRequest,
    ) -> Follower:
        access_gate.authorize(actor, Action.CREATE, "follower")
        follower, followed = await self._resolve_pair(db, data)
        access_gate.authorize(actor, Action.CREATE, "follower", owner_profile_id=follower.id)

        if follower.id == followed.id:
            raise ValidationError(
                message="A profile cannot follow itself.",
                field="followed_id",
            )

        edge, created = await first_or_create(
            db, Follower, follower_id=follower.id, followed_id=followed.id
        )
        if created:
            logger.info("Profile %s now follows profile %s", follower.id, followed.id)
        return edge

    async def unfollow(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        data: FollowRequest,
    ) -> None:
        access_gate.authorize(actor, Action.DELETE, "follower")
        follower, followed = await self._resolve_pair(db, data)
        access_gate.authorize(actor, Action.DELETE, "follower", owner_profile_id=follower.id)

        edge = await find_first(
            db, Follower, follower_id=follower.id, followed_id=followed.id
        )
        if edge is None:
            raise RelationNotFoundError(
                message="Follow relation not found",
                context={"follower_id": follower.id, "followed_id": followed.id},
            )

        await db.delete(edge)
        await db.flush()
        logger.info("Profile %s unfollowed profile %s", follower.id, followed.id)

    async def _resolve_pair(self, db: AsyncSession, data: FollowRequest):
        follower = await ensure_reference(db, Profile, data.follower_id, "follower_id")
        followed = await ensure_reference(db, Profile, data.followed_id, "followed_id")
        return follower, followed


follower_service = FollowerService()
