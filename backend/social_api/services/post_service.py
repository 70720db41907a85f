"""
Social API Backend — Post Service
===================================

What:  Create / update / delete posts.
Flow (create):
    ┌───────────────┐   ┌─────────────┐   ┌──────────────┐   ┌──────────┐
    │ profile_id    │──▶│ Access Gate │──▶│ store image  │──▶│ insert   │
    │ must exist    │   │             │   │ (optional)   │   │ (flush)  │
    └───────────────┘   └─────────────┘   └──────────────┘   └──────────┘

    A failure after the image was stored removes the file again.

A replaced image is removed from disk once the update has been flushed.
Delete removes the post's comments and likes in the same transaction,
then its image file.
"""

import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.models.comment import Comment
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.schemas.post import PostCreate, PostUpdate
from social_api.services.access_gate import Action, Actor, access_gate
from social_api.services.file_service import POST_IMAGES_FOLDER, Upload, file_service
from social_api.services.store import ensure_reference, get_or_404

logger = logging.getLogger(__name__)


class PostService:
    """
    Business logic for post mutations. Reads go through the
    RelationshipResolver, which assembles the author/comment views.
    """

    async def create_post(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        data: PostCreate,
        image: Optional[Upload] = None,
    ) -> Post:
        """
        Raises:
            AuthenticationRequiredError: anonymous caller
            ValidationError: unknown profile_id, bad image
            ForbiddenError: ownership enforced and actor is not the author
        """
        access_gate.authorize(actor, Action.CREATE, "post")
        profile = await ensure_reference(db, Profile, data.profile_id, "profile_id")
        access_gate.authorize(actor, Action.CREATE, "post", owner_profile_id=profile.id)

        absolute_path: Optional[str] = None
        try:
            post = Post(profile_id=profile.id, content=data.content)
            if image is not None:
                absolute_path, relative_path = await file_service.validate_and_store(
                    image, POST_IMAGES_FOLDER, field="image_url"
                )
                post.image_url = relative_path

            db.add(post)
            await db.flush()
        except Exception:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            raise

        logger.info("Post %s created by profile %s", post.id, profile.id)
        return post

    async def update_post(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        post_id: int,
        data: PostUpdate,
        image: Optional[Upload] = None,
    ) -> Post:
        """
        Partial update. content changes only when sent; image_url changes
        only when a new file is sent.
        """
        post = await get_or_404(db, Post, post_id, "post")
        access_gate.authorize(actor, Action.UPDATE, "post", owner_profile_id=post.profile_id)

        previous_image = post.image_url
        absolute_path: Optional[str] = None
        try:
            if data.content is not None:
                post.content = data.content
            if image is not None:
                absolute_path, relative_path = await file_service.validate_and_store(
                    image, POST_IMAGES_FOLDER, field="image_url"
                )
                post.image_url = relative_path
            await db.flush()
        except Exception:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            raise

        if absolute_path and previous_image:
            await file_service.remove_stored(previous_image)

        await db.refresh(post)
        logger.info("Post %s updated", post.id)
        return post

    async def delete_post(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        post_id: int,
    ) -> None:
        post = await get_or_404(db, Post, post_id, "post")
        access_gate.authorize(actor, Action.DELETE, "post", owner_profile_id=post.profile_id)

        no_sync = {"synchronize_session": False}
        await db.execute(delete(Comment).where(Comment.post_id == post.id), execution_options=no_sync)
        await db.execute(delete(Like).where(Like.post_id == post.id), execution_options=no_sync)
        image_url = post.image_url
        await db.delete(post)
        await db.flush()
        await file_service.remove_stored(image_url)
        logger.info("Post %s deleted with its comments and likes", post_id)


post_service = PostService()
