"""
Social API Backend — Profile Schemas
======================================

Create/update arrive as multipart forms (profile_picture is a file part)
and are validated through schemas.common.build_form.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from social_api.schemas.common import DisplayName, Password, ProfileSummary
from social_api.schemas.post import PostResponse


class ProfileCreate(BaseModel):
    username: DisplayName
    email: EmailStr
    password: Password = Field(min_length=8)


class ProfileUpdate(BaseModel):
    """Partial update: only supplied fields change."""
    username: Optional[DisplayName] = None
    email: Optional[EmailStr] = None
    password: Optional[Password] = Field(default=None, min_length=8)


class ProfileResponse(BaseModel):
    id: int
    username: str
    email: str
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileEnvelope(BaseModel):
    """Create/update responses wrap the profile with a status message."""
    message: str
    profile: ProfileResponse


class ProfileDetailResponse(ProfileResponse):
    """
    GET /api/profiles/{id}.

    Counts are always present. The lists are filled only when requested
    through ?include=posts,followers,following and are null otherwise, so
    a client can tell "not requested" from "empty".
    """
    posts_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    posts: Optional[List[PostResponse]] = None
    followers: Optional[List[ProfileSummary]] = None
    following: Optional[List[ProfileSummary]] = None
