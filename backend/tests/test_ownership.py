"""
Social API Backend — Ownership Enforcement Tests
==================================================

What:  With ENFORCE_OWNERSHIP on, every mutation is limited to the actor's
       linked profile: comments and likes by profile_id, profiles by their
       own id, follower edges by follower_id.
How:   settings.enforce_ownership is switched on for the module; the
       module-level access_gate singleton reads it on every call.
"""

from unittest.mock import patch

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from social_api.config import settings
from social_api.exceptions import ForbiddenError
from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.schemas.comment import CommentCreate, CommentUpdate
from social_api.schemas.profile import ProfileUpdate
from social_api.schemas.relation import FollowRequest, LikeRequest
from social_api.services.comment_service import comment_service
from social_api.services.follower_service import follower_service
from social_api.services.like_service import like_service
from social_api.services.profile_service import profile_service


@pytest.fixture(autouse=True)
def enforce_ownership():
    with patch.object(settings, "enforce_ownership", True):
        yield


@pytest_asyncio.fixture
async def pair(db_session):
    """owner and intruder profiles, plus a post by owner."""
    owner = Profile(username="owner", email="owner@example.com", password_hash="x")
    intruder = Profile(username="intruder", email="intruder@example.com", password_hash="x")
    db_session.add_all([owner, intruder])
    await db_session.flush()
    post = Post(profile_id=owner.id, content="owned")
    db_session.add(post)
    await db_session.flush()
    return owner, intruder, post


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


class TestCommentOwnership:

    @pytest.mark.asyncio
    async def test_create_as_someone_else(self, db_session, make_actor, pair):
        owner, intruder, post = pair

        with pytest.raises(ForbiddenError):
            await comment_service.create_comment(
                db_session,
                make_actor(profile_id=intruder.id),
                CommentCreate(profile_id=owner.id, post_id=post.id, content="not me"),
            )

        assert await _count(db_session, Comment) == 0

    @pytest.mark.asyncio
    async def test_update_and_delete_limited_to_author(self, db_session, make_actor, pair):
        owner, intruder, post = pair
        comment = Comment(post_id=post.id, profile_id=owner.id, content="mine")
        db_session.add(comment)
        await db_session.flush()

        with pytest.raises(ForbiddenError, match="not allowed to update this comment"):
            await comment_service.update_comment(
                db_session, make_actor(profile_id=intruder.id), comment.id, CommentUpdate(content="x")
            )
        with pytest.raises(ForbiddenError, match="not allowed to delete this comment"):
            await comment_service.delete_comment(
                db_session, make_actor(profile_id=intruder.id), comment.id
            )

        updated = await comment_service.update_comment(
            db_session, make_actor(profile_id=owner.id), comment.id, CommentUpdate(content="edited")
        )
        assert updated.content == "edited"

    @pytest.mark.asyncio
    async def test_actor_without_linked_profile(self, db_session, make_actor, pair):
        owner, _, post = pair

        with pytest.raises(ForbiddenError):
            await comment_service.create_comment(
                db_session,
                make_actor(profile_id=None),
                CommentCreate(profile_id=owner.id, post_id=post.id, content="who am I"),
            )


class TestProfileOwnership:

    @pytest.mark.asyncio
    async def test_update_other_profile(self, db_session, make_actor, pair):
        owner, intruder, _ = pair

        with pytest.raises(ForbiddenError, match="not allowed to update this profile"):
            await profile_service.update_profile(
                db_session,
                make_actor(profile_id=intruder.id),
                owner.id,
                ProfileUpdate(username="hijacked"),
            )

    @pytest.mark.asyncio
    async def test_delete_other_profile(self, db_session, make_actor, pair):
        owner, intruder, _ = pair

        with pytest.raises(ForbiddenError):
            await profile_service.delete_profile(
                db_session, make_actor(profile_id=intruder.id), owner.id
            )

        assert await db_session.get(Profile, owner.id) is not None

    @pytest.mark.asyncio
    async def test_owner_updates_own_profile(self, db_session, make_actor, pair):
        owner, _, _ = pair

        updated = await profile_service.update_profile(
            db_session, make_actor(profile_id=owner.id), owner.id, ProfileUpdate(username="renamed")
        )

        assert updated.username == "renamed"


class TestLikeOwnership:

    @pytest.mark.asyncio
    async def test_like_on_behalf_of_another_profile(self, db_session, make_actor, pair):
        owner, intruder, post = pair

        with pytest.raises(ForbiddenError):
            await like_service.like(
                db_session,
                make_actor(profile_id=intruder.id),
                LikeRequest(post_id=post.id, profile_id=owner.id),
            )

        assert await _count(db_session, Like) == 0

    @pytest.mark.asyncio
    async def test_unlike_on_behalf_of_another_profile(self, db_session, make_actor, pair):
        owner, intruder, post = pair
        db_session.add(Like(post_id=post.id, profile_id=owner.id))
        await db_session.flush()

        with pytest.raises(ForbiddenError):
            await like_service.unlike(
                db_session,
                make_actor(profile_id=intruder.id),
                LikeRequest(post_id=post.id, profile_id=owner.id),
            )

        assert await _count(db_session, Like) == 1

    @pytest.mark.asyncio
    async def test_liking_as_yourself_any_post(self, db_session, make_actor, pair):
        _, intruder, post = pair

        like = await like_service.like(
            db_session,
            make_actor(profile_id=intruder.id),
            LikeRequest(post_id=post.id, profile_id=intruder.id),
        )

        assert like.profile_id == intruder.id


class TestFollowerOwnership:

    @pytest.mark.asyncio
    async def test_follow_on_behalf_of_another_profile(self, db_session, make_actor, pair):
        owner, intruder, _ = pair

        with pytest.raises(ForbiddenError):
            await follower_service.follow(
                db_session,
                make_actor(profile_id=intruder.id),
                FollowRequest(follower_id=owner.id, followed_id=intruder.id),
            )

        assert await _count(db_session, Follower) == 0

    @pytest.mark.asyncio
    async def test_unfollow_on_behalf_of_another_profile(self, db_session, make_actor, pair):
        owner, intruder, _ = pair
        db_session.add(Follower(follower_id=owner.id, followed_id=intruder.id))
        await db_session.flush()

        with pytest.raises(ForbiddenError):
            await follower_service.unfollow(
                db_session,
                make_actor(profile_id=intruder.id),
                FollowRequest(follower_id=owner.id, followed_id=intruder.id),
            )

        assert await _count(db_session, Follower) == 1

    @pytest.mark.asyncio
    async def test_followed_side_does_not_own_the_edge(self, db_session, make_actor, pair):
        owner, intruder, _ = pair
        db_session.add(Follower(follower_id=intruder.id, followed_id=owner.id))
        await db_session.flush()

        # Being followed gives no right to remove the edge
        with pytest.raises(ForbiddenError):
            await follower_service.unfollow(
                db_session,
                make_actor(profile_id=owner.id),
                FollowRequest(follower_id=intruder.id, followed_id=owner.id),
            )

        await follower_service.unfollow(
            db_session,
            make_actor(profile_id=intruder.id),
            FollowRequest(follower_id=intruder.id, followed_id=owner.id),
        )
        assert await _count(db_session, Follower) == 0
