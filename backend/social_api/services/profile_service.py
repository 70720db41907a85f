"""
Social API Backend — Profile Service
======================================

What:  Create / update / delete profiles.
How:   Uniqueness of username and email is pre-checked for a readable
       message and backed by the UNIQUE constraints. The optional picture
       goes through FileService before the row is written; if anything
       after that fails, the stored file is removed again.

Cascade policy on delete:
    Deleting a profile deletes, in one transaction:
        - likes and comments on its posts, then its posts
        - its own likes and comments on other posts
        - every follower edge it appears in, in either direction
    so no row is left pointing at a missing profile. The profile picture
    and the images of its posts are then removed from disk, as is a
    picture replaced by an update.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.exceptions import ValidationError
from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.schemas.profile import ProfileCreate, ProfileUpdate
from social_api.security import hash_password
from social_api.services.access_gate import Action, Actor, access_gate
from social_api.services.file_service import PROFILE_PICTURES_FOLDER, Upload, file_service
from social_api.services.store import get_or_404

logger = logging.getLogger(__name__)


class ProfileService:

    async def create_profile(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        data: ProfileCreate,
        picture: Optional[Upload] = None,
    ) -> Profile:
        """
        Raises:
            ValidationError: username/email taken, bad picture
        """
        access_gate.authorize(actor, Action.CREATE, "profile")
        await self._check_unique(db, username=data.username, email=data.email)

        absolute_path: Optional[str] = None
        try:
            profile = Profile(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password),
            )
            if picture is not None:
                absolute_path, relative_path = await file_service.validate_and_store(
                    picture, PROFILE_PICTURES_FOLDER, field="profile_picture"
                )
                profile.profile_picture = relative_path

            db.add(profile)
            await self._flush_unique(db)
        except Exception:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            raise

        logger.info("Profile created: id=%s", profile.id)
        return profile

    async def update_profile(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        profile_id: int,
        data: ProfileUpdate,
        picture: Optional[Upload] = None,
    ) -> Profile:
        """
        Partial update: only fields present in `data` (and the picture, if
        a new file was sent) change.
        """
        profile = await get_or_404(db, Profile, profile_id, "profile")
        access_gate.authorize(actor, Action.UPDATE, "profile", owner_profile_id=profile.id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        await self._check_unique(
            db,
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_id=profile.id,
        )

        previous_picture = profile.profile_picture
        absolute_path: Optional[str] = None
        try:
            if "username" in changes:
                profile.username = changes["username"]
            if "email" in changes:
                profile.email = changes["email"]
            if "password" in changes:
                profile.password_hash = hash_password(changes["password"])
            if picture is not None:
                absolute_path, relative_path = await file_service.validate_and_store(
                    picture, PROFILE_PICTURES_FOLDER, field="profile_picture"
                )
                profile.profile_picture = relative_path

            await self._flush_unique(db)
        except Exception:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            raise

        if absolute_path and previous_picture:
            await file_service.remove_stored(previous_picture)

        # reload so updated_at is populated for serialization
        await db.refresh(profile)
        logger.info("Profile %s updated: fields=%s", profile.id, sorted(changes))
        return profile

    async def delete_profile(
        self,
        db: AsyncSession,
        actor: Optional[Actor],
        profile_id: int,
    ) -> None:
        profile = await get_or_404(db, Profile, profile_id, "profile")
        access_gate.authorize(actor, Action.DELETE, "profile", owner_profile_id=profile.id)

        own_posts = select(Post.id).where(Post.profile_id == profile.id)
        no_sync = {"synchronize_session": False}

        result = await db.execute(
            select(Post.image_url).where(Post.profile_id == profile.id, Post.image_url.is_not(None))
        )
        stored_files = [profile.profile_picture, *result.scalars().all()]

        await db.execute(
            delete(Like).where(or_(Like.profile_id == profile.id, Like.post_id.in_(own_posts))),
            execution_options=no_sync,
        )
        await db.execute(
            delete(Comment).where(
                or_(Comment.profile_id == profile.id, Comment.post_id.in_(own_posts))
            ),
            execution_options=no_sync,
        )
        await db.execute(
            delete(Follower).where(
                or_(Follower.follower_id == profile.id, Follower.followed_id == profile.id)
            ),
            execution_options=no_sync,
        )
        await db.execute(
            delete(Post).where(Post.profile_id == profile.id),
            execution_options=no_sync,
        )
        await db.delete(profile)
        await db.flush()
        for relative_path in stored_files:
            await file_service.remove_stored(relative_path)
        logger.info("Profile %s deleted with its posts, comments, likes and edges", profile_id)

    async def _check_unique(
        self,
        db: AsyncSession,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> None:
        fields: Dict[str, List[str]] = {}
        for name, column, value in (
            ("username", Profile.username, username),
            ("email", Profile.email, email),
        ):
            if value is None:
                continue
            query = select(Profile.id).where(column == value)
            if exclude_id is not None:
                query = query.where(Profile.id != exclude_id)
            result = await db.execute(query.limit(1))
            if result.scalar_one_or_none() is not None:
                fields[name] = [f"The {name} has already been taken."]
        if fields:
            raise ValidationError(message=next(iter(fields.values()))[0], fields=fields)

    async def _flush_unique(self, db: AsyncSession) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            logger.info("Profile uniqueness violated at write time: %s", e.orig)
            raise ValidationError(
                message="The username or email has already been taken.",
                fields={
                    "username": ["The username may already be taken."],
                    "email": ["The email may already be taken."],
                },
            )


profile_service = ProfileService()
