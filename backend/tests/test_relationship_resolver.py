"""
Social API Backend — Relationship Resolver Tests
==================================================

What:  The read views: embedded author/post summaries, comment lists,
       like and follower counts, ?include lists, and None for parents
       that no longer exist.
"""

import pytest
import pytest_asyncio
from sqlalchemy import delete

from social_api.exceptions import NotFoundError
from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.services.relationship_resolver import relationship_resolver


@pytest_asyncio.fixture
async def world(db_session):
    """
    alice ──follows──▶ bob ──follows──▶ alice,  carol ──follows──▶ alice
    alice wrote post1 (2 comments, 2 likes); bob wrote post2.
    """
    alice = Profile(username="alice", email="a@example.com", password_hash="x")
    bob = Profile(username="bob", email="b@example.com", password_hash="x")
    carol = Profile(username="carol", email="c@example.com", password_hash="x")
    db_session.add_all([alice, bob, carol])
    await db_session.flush()

    post1 = Post(profile_id=alice.id, content="post one")
    post2 = Post(profile_id=bob.id, content="post two")
    db_session.add_all([post1, post2])
    await db_session.flush()

    db_session.add_all([
        Comment(post_id=post1.id, profile_id=bob.id, content="nice"),
        Comment(post_id=post1.id, profile_id=carol.id, content="agreed"),
        Like(post_id=post1.id, profile_id=bob.id),
        Like(post_id=post1.id, profile_id=carol.id),
        Follower(follower_id=alice.id, followed_id=bob.id),
        Follower(follower_id=bob.id, followed_id=alice.id),
        Follower(follower_id=carol.id, followed_id=alice.id),
    ])
    await db_session.flush()
    return {"alice": alice, "bob": bob, "carol": carol, "post1": post1, "post2": post2}


class TestPostViews:

    @pytest.mark.asyncio
    async def test_post_list_embeds_authors_in_id_order(self, db_session, world):
        posts = await relationship_resolver.post_list(db_session)

        assert [p.id for p in posts] == [world["post1"].id, world["post2"].id]
        assert posts[0].profile.username == "alice"
        assert posts[1].profile.username == "bob"

    @pytest.mark.asyncio
    async def test_post_list_paging(self, db_session, world):
        page = await relationship_resolver.post_list(db_session, limit=1, offset=1)

        assert [p.id for p in page] == [world["post2"].id]

    @pytest.mark.asyncio
    async def test_post_view_has_comments_and_likes(self, db_session, world):
        view = await relationship_resolver.post_view(db_session, world["post1"].id)

        assert view.profile.id == world["alice"].id
        assert [c.content for c in view.comments] == ["nice", "agreed"]
        assert [c.profile.username for c in view.comments] == ["bob", "carol"]
        assert view.likes_count == 2

    @pytest.mark.asyncio
    async def test_post_view_without_comments(self, db_session, world):
        view = await relationship_resolver.post_view(db_session, world["post2"].id)

        assert view.comments == []
        assert view.likes_count == 0

    @pytest.mark.asyncio
    async def test_post_view_missing(self, db_session, world):
        with pytest.raises(NotFoundError):
            await relationship_resolver.post_view(db_session, 9999)

    @pytest.mark.asyncio
    async def test_post_with_deleted_author_has_null_profile(self, db_session, world):
        # Bypass the service cascade to leave a dangling post behind
        await db_session.execute(delete(Profile).where(Profile.id == world["bob"].id))
        db_session.expunge_all()

        view = await relationship_resolver.post_view(db_session, world["post2"].id)

        assert view.profile is None


class TestCommentViews:

    @pytest.mark.asyncio
    async def test_comment_list_embeds_profile_and_post(self, db_session, world):
        comments = await relationship_resolver.comment_list(db_session)

        assert len(comments) == 2
        assert comments[0].profile.username == "bob"
        assert comments[0].post.id == world["post1"].id
        assert comments[0].post.content == "post one"

    @pytest.mark.asyncio
    async def test_comment_with_deleted_post_has_null_post(self, db_session, world):
        comment_id = (await relationship_resolver.comment_list(db_session))[0].id
        await db_session.execute(delete(Post).where(Post.id == world["post1"].id))
        db_session.expunge_all()

        view = await relationship_resolver.comment_view(db_session, comment_id)

        assert view.post is None
        assert view.profile.username == "bob"

    @pytest.mark.asyncio
    async def test_comment_view_missing(self, db_session, world):
        with pytest.raises(NotFoundError, match="Comment not found"):
            await relationship_resolver.comment_view(db_session, 9999)


class TestProfileViews:

    @pytest.mark.asyncio
    async def test_counts_without_lists(self, db_session, world):
        view = await relationship_resolver.profile_view(db_session, world["alice"].id)

        assert view.posts_count == 1
        assert view.followers_count == 2
        assert view.following_count == 1
        assert view.posts is None
        assert view.followers is None
        assert view.following is None

    @pytest.mark.asyncio
    async def test_include_lists(self, db_session, world):
        view = await relationship_resolver.profile_view(
            db_session, world["alice"].id, {"posts", "followers", "following", "bogus"}
        )

        assert [p.content for p in view.posts] == ["post one"]
        assert [p.username for p in view.followers] == ["bob", "carol"]
        assert [p.username for p in view.following] == ["bob"]

    @pytest.mark.asyncio
    async def test_profile_list_never_exposes_password_hash(self, db_session, world):
        profiles = await relationship_resolver.profile_list(db_session)

        assert [p.username for p in profiles] == ["alice", "bob", "carol"]
        assert "password_hash" not in profiles[0].model_dump()
