"""
Social API Backend — Comment Service
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from social_api.models.comment import Comment
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.schemas.comment import CommentCreate, CommentUpdate
from social_api.services.access_gate import Action, Actor, access_gate
from social_api.services.store import ensure_reference, get_or_404

logger = logging.getLogger(__name__)


class CommentService:

    async def create_comment(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        data: CommentCreate,
    ) -> Comment:
        """Both the commenting profile and the post must exist (→ 400 otherwise)."""
        access_gate.authorize(actor, Action.CREATE, "comment")
        profile = await ensure_reference(db, Profile, data.profile_id, "profile_id")
        post = await ensure_reference(db, Post, data.post_id, "post_id")
        access_gate.authorize(actor, Action.CREATE, "comment", owner_profile_id=profile.id)

        comment = Comment(profile_id=profile.id, post_id=post.id, content=data.content)
        db.add(comment)
        await db.flush()
        logger.info("Comment %s added to post %s by profile %s", comment.id, post.id, profile.id)
        return comment

    async def update_comment(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        comment_id: int,
        data: CommentUpdate,
    ) -> Comment:
        comment = await get_or_404(db, Comment, comment_id, "comment")
        access_gate.authorize(
            actor, Action.UPDATE, "comment", owner_profile_id=comment.profile_id
        )

        comment.content = data.content
        await db.flush()
        await db.refresh(comment)
        return comment

    async def delete_comment(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        comment_id: int,
    ) -> None:
        comment = await get_or_404(db, Comment, comment_id, "comment")
        access_gate.authorize(
            actor, Action.DELETE, "comment", owner_profile_id=comment.profile_id
        )

        await db.delete(comment)
        await db.flush()
        logger.info("Comment %s deleted", comment_id)


comment_service = CommentService()
