"""
Social API Backend — Relationship Resolver
============================================

What:  Builds the read views that embed related entities:
         post      + author summary (+ comments with authors, likes_count)
         comment   + author summary + parent post summary
         profile   + counts (+ posts / followers / following on request)
How:   Relations are plain foreign-key columns, so every view is one
       explicit query with OUTER JOINs rather than ORM lazy loading (which
       an AsyncSession cannot do implicitly anyway).
Rule:  A parent row that no longer exists yields None for its summary.
       The resolver never raises for a dangling child; only the requested
       root entity can be "not found".

Read-only: nothing in this module adds, changes or deletes rows.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.schemas.comment import CommentDetailResponse, PostCommentItem
from social_api.schemas.common import PostSummary, ProfileSummary
from social_api.schemas.post import PostDetailResponse, PostListItem, PostResponse
from social_api.schemas.profile import ProfileDetailResponse, ProfileResponse
from social_api.services.store import get_or_404

logger = logging.getLogger(__name__)

PROFILE_INCLUDES = frozenset({"posts", "followers", "following"})


def _profile_summary(profile: Optional[Profile]) -> Optional[ProfileSummary]:
    return ProfileSummary.model_validate(profile) if profile is not None else None


def _post_summary(post: Optional[Post]) -> Optional[PostSummary]:
    return PostSummary.model_validate(post) if post is not None else None


class RelationshipResolver:
    """Stateless; each method takes the request's session."""

    # ── Posts ────────────────────────────────────────────────────────────

    async def post_list(
        self,
        db: AsyncSession,
        limit: int = 100,
        offset: int = 0,
    ) -> List[PostListItem]:
        query = (
            select(Post, Profile)
            .outerjoin(Profile, Profile.id == Post.profile_id)
            .order_by(Post.id)
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(query)
        return [
            PostListItem.model_validate(post).model_copy(
                update={"profile": _profile_summary(author)}
            )
            for post, author in result.all()
        ]

    async def post_view(self, db: AsyncSession, post_id: int) -> PostDetailResponse:
        """
        Raises:
            NotFoundError: the post does not exist
        """
        post = await get_or_404(db, Post, post_id, "post")
        author = await db.get(Profile, post.profile_id)

        comments_query = (
            select(Comment, Profile)
            .outerjoin(Profile, Profile.id == Comment.profile_id)
            .where(Comment.post_id == post.id)
            .order_by(Comment.id)
        )
        comment_rows = (await db.execute(comments_query)).all()

        likes_count = await self._count(db, Like.post_id == post.id, Like)

        return PostDetailResponse.model_validate(post).model_copy(
            update={
                "profile": _profile_summary(author),
                "comments": [
                    PostCommentItem.model_validate(comment).model_copy(
                        update={"profile": _profile_summary(commenter)}
                    )
                    for comment, commenter in comment_rows
                ],
                "likes_count": likes_count,
            }
        )

    # ── Comments ─────────────────────────────────────────────────────────

    async def comment_list(
        self,
        db: AsyncSession,
        limit: int = 100,
        offset: int = 0,
    ) -> List[CommentDetailResponse]:
        query = (
            select(Comment, Profile, Post)
            .outerjoin(Profile, Profile.id == Comment.profile_id)
            .outerjoin(Post, Post.id == Comment.post_id)
            .order_by(Comment.id)
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(query)
        return [
            self._comment_detail(comment, author, post)
            for comment, author, post in result.all()
        ]

    async def comment_view(self, db: AsyncSession, comment_id: int) -> CommentDetailResponse:
        comment = await get_or_404(db, Comment, comment_id, "comment")
        author = await db.get(Profile, comment.profile_id)
        post = await db.get(Post, comment.post_id)
        return self._comment_detail(comment, author, post)

    def _comment_detail(
        self,
        comment: Comment,
        author: Optional[Profile],
        post: Optional[Post],
    ) -> CommentDetailResponse:
        return CommentDetailResponse.model_validate(comment).model_copy(
            update={"profile": _profile_summary(author), "post": _post_summary(post)}
        )

    # ── Profiles ─────────────────────────────────────────────────────────

    async def profile_list(
        self,
        db: AsyncSession,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ProfileResponse]:
        query = select(Profile).order_by(Profile.id).limit(limit).offset(offset)
        result = await db.execute(query)
        return [ProfileResponse.model_validate(p) for p in result.scalars().all()]

    async def profile_view(
        self,
        db: AsyncSession,
        profile_id: int,
        include: Iterable[str] = (),
    ) -> ProfileDetailResponse:
        """
        Profile with counts; `include` names extra lists to embed.

        Unknown include names are ignored.
        """
        profile = await get_or_404(db, Profile, profile_id, "profile")
        wanted = PROFILE_INCLUDES.intersection(include)

        update = {
            "posts_count": await self._count(db, Post.profile_id == profile.id, Post),
            "followers_count": await self._count(db, Follower.followed_id == profile.id, Follower),
            "following_count": await self._count(db, Follower.follower_id == profile.id, Follower),
        }

        if "posts" in wanted:
            posts = await db.execute(
                select(Post).where(Post.profile_id == profile.id).order_by(Post.id)
            )
            update["posts"] = [PostResponse.model_validate(p) for p in posts.scalars().all()]
        if "followers" in wanted:
            update["followers"] = await self.followers_of(db, profile.id)
        if "following" in wanted:
            update["following"] = await self.following_of(db, profile.id)

        return ProfileDetailResponse.model_validate(profile).model_copy(update=update)

    async def followers_of(self, db: AsyncSession, profile_id: int) -> List[ProfileSummary]:
        """Profiles that follow `profile_id`, in edge creation order."""
        query = (
            select(Profile)
            .join(Follower, Follower.follower_id == Profile.id)
            .where(Follower.followed_id == profile_id)
            .order_by(Follower.id)
        )
        return self._summaries((await db.execute(query)).scalars().all())

    async def following_of(self, db: AsyncSession, profile_id: int) -> List[ProfileSummary]:
        """Profiles that `profile_id` follows."""
        query = (
            select(Profile)
            .join(Follower, Follower.followed_id == Profile.id)
            .where(Follower.follower_id == profile_id)
            .order_by(Follower.id)
        )
        return self._summaries((await db.execute(query)).scalars().all())

    # ── Helpers ──────────────────────────────────────────────────────────

    def _summaries(self, profiles: Sequence[Profile]) -> List[ProfileSummary]:
        return [ProfileSummary.model_validate(p) for p in profiles]

    async def _count(self, db: AsyncSession, condition, model) -> int:
        result = await db.execute(select(func.count(model.id)).where(condition))
        return int(result.scalar_one())


relationship_resolver = RelationshipResolver()
