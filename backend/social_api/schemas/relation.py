"""
Social API Backend — Like and Follower Schemas
"""

from datetime import datetime

from pydantic import BaseModel


class LikeRequest(BaseModel):
    post_id: int
    profile_id: int


class LikeResponse(BaseModel):
    id: int
    profile_id: int
    post_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class FollowRequest(BaseModel):
    follower_id: int
    followed_id: int


class FollowerResponse(BaseModel):
    id: int
    follower_id: int
    followed_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
