"""
Social API Backend — Post Schemas
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from social_api.schemas.comment import PostCommentItem
from social_api.schemas.common import ProfileSummary


class PostCreate(BaseModel):
    """Form fields of POST /api/posts (the image arrives as a file part)."""
    profile_id: int
    content: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class PostUpdate(BaseModel):
    """
    Form fields of PUT /api/posts/{id}.

    Partial: a field left out keeps its stored value. Sending a new image
    file replaces image_url; omitting it keeps the current one.
    """
    content: Optional[str] = Field(default=None, min_length=1)

    model_config = {"str_strip_whitespace": True}


class PostResponse(BaseModel):
    id: int
    content: str
    image_url: Optional[str] = None
    profile_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostListItem(PostResponse):
    profile: Optional[ProfileSummary] = None


class PostDetailResponse(PostListItem):
    """
    GET /api/posts/{id}: the post, its author, its comments (oldest first)
    and how many likes it has.
    """
    comments: List[PostCommentItem] = Field(default_factory=list)
    likes_count: int = 0
