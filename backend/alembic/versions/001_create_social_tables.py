"""Create users, tokens, profiles, posts, comments, likes and followers

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema.
Integrity:
    - UNIQUE users.name, users.email, profiles.username, profiles.email
    - UNIQUE likes(profile_id, post_id), followers(follower_id, followed_id)
    - CHECK followers.follower_id <> followed_id
    - every FK is ON DELETE CASCADE, matching the service-level cascade

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=None if nullable else sa.text("CURRENT_TIMESTAMP"),
        nullable=nullable,
    )


def _fk(name: str, target: str) -> sa.Column:
    return sa.Column(
        name,
        sa.Integer(),
        sa.ForeignKey(target, ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    # ── Authentication ────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "personal_access_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("user_id", "users.id"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "token_hash",
            sa.String(64),
            nullable=False,
            comment="SHA-256 hex digest of the token secret; the secret itself is never stored",
        ),
        _timestamp("created_at"),
        _timestamp("last_used_at", nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token_hash"),
    )
    op.create_index(
        "idx_personal_access_tokens_user_id", "personal_access_tokens", ["user_id"]
    )

    # ── Social graph ──────────────────────────────────────────────────────
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("profile_picture", sa.String(255), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(255), nullable=True),
        _fk("profile_id", "profiles.id"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_posts_profile_id", "posts", ["profile_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _fk("post_id", "posts.id"),
        _fk("profile_id", "profiles.id"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])
    op.create_index("idx_comments_profile_id", "comments", ["profile_id"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("profile_id", "profiles.id"),
        _fk("post_id", "posts.id"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "post_id", name="uq_likes_profile_post"),
    )
    op.create_index("idx_likes_post_id", "likes", ["post_id"])

    op.create_table(
        "followers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _fk("follower_id", "profiles.id"),
        _fk("followed_id", "profiles.id"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "followed_id", name="uq_followers_pair"),
        sa.CheckConstraint("follower_id <> followed_id", name="ck_followers_not_self"),
    )
    op.create_index("idx_followers_followed_id", "followers", ["followed_id"])


def downgrade() -> None:
    """Drop everything, children before parents."""
    op.drop_index("idx_followers_followed_id", table_name="followers")
    op.drop_table("followers")
    op.drop_index("idx_likes_post_id", table_name="likes")
    op.drop_table("likes")
    op.drop_index("idx_comments_profile_id", table_name="comments")
    op.drop_index("idx_comments_post_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_posts_profile_id", table_name="posts")
    op.drop_table("posts")
    op.drop_table("profiles")
    op.drop_index("idx_personal_access_tokens_user_id", table_name="personal_access_tokens")
    op.drop_table("personal_access_tokens")
    op.drop_table("users")
