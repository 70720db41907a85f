"""
Social API Backend — ORM Models
=================================

Importing this package registers every table on Base.metadata, which
Alembic autogenerate and the test suite's create_all both rely on.

Relations are plain foreign-key columns. There are no relationship()
graphs: joins are written explicitly in the relationship resolver.
"""

from social_api.models.access_token import AccessToken
from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.like import Like
from social_api.models.post import Post
from social_api.models.profile import Profile
from social_api.models.user import User

__all__ = [
    "AccessToken",
    "Comment",
    "Follower",
    "Like",
    "Post",
    "Profile",
    "User",
]
