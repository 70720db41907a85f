"""
Social API Backend — Comment Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from social_api.schemas.common import PostSummary, ProfileSummary


class CommentCreate(BaseModel):
    profile_id: int
    post_id: int
    content: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class CommentResponse(BaseModel):
    id: int
    content: str
    post_id: int
    profile_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostCommentItem(CommentResponse):
    """A comment as listed inside a post view: with its author."""
    profile: Optional[ProfileSummary] = None


class CommentDetailResponse(CommentResponse):
    """
    A comment with both parents resolved.

    Either summary is null when its row no longer exists.
    """
    profile: Optional[ProfileSummary] = None
    post: Optional[PostSummary] = None
