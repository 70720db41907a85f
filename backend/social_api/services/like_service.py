"""
Social API Backend — Like Service
===================================

What:  like / unlike.
Semantics:
    - like is first-or-create: liking twice returns the existing row
    - unlike of a pair that was never liked raises RelationNotFoundError,
      never a silent success
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import RelationNotFoundError
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.schemas.relation import LikeRequest
from social_api.services.access_gate import Action, Actor, access_gate
from social_api.services.store import ensure_reference, find_first, first_or_create

logger = logging.getLogger(__name__)


class LikeService:

    async def like(self, db: AsyncSession, actor: Optional[Actor], data: LikeRequest) -> Like:
        access_gate.authorize(actor, Action.CREATE, "like")
        post = await ensure_reference(db, Post, data.post_id, "post_id")
        profile = await ensure_reference(db, Profile, data.profile_id, "profile_id")
        access_gate.authorize(actor, Action.CREATE, "like", owner_profile_id=profile.id)

        like, created = await first_or_create(db, Like, profile_id=profile.id, post_id=post.id)
        if created:
            logger.info("Profile %s liked post %s", profile.id, post.id)
        return like

    async def unlike(self, db: AsyncSession, actor: Optional[Actor], data: LikeRequest) -> None:
        """
        Raises:
            RelationNotFoundError: the profile does not like the post (→ 403)
        """
        access_gate.authorize(actor, Action.DELETE, "like")
        post = await ensure_reference(db, Post, data.post_id, "post_id")
        profile = await ensure_reference(db, Profile, data.profile_id, "profile_id")
        access_gate.authorize(actor, Action.DELETE, "like", owner_profile_id=profile.id)

        like = await find_first(db, Like, profile_id=profile.id, post_id=post.id)
        if like is None:
            raise RelationNotFoundError(
                message="Like not found",
                context={"profile_id": profile.id, "post_id": post.id},
            )

        await db.delete(like)
        await db.flush()
        logger.info("Profile %s unliked post %s", profile.id, post.id)


like_service = LikeService()
