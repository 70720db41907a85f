"""
Social API Backend — Follower Routes
======================================

What:  POST /api/followers (first-or-create), DELETE /api/followers.
       Both take the JSON pair {follower_id, followed_id}.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.dependencies import get_current_actor
from social_api.schemas.common import ErrorResponse, MessageResponse
from social_api.schemas.relation import FollowerResponse, FollowRequest
from social_api.services.access_gate import Actor
from social_api.services.follower_service import follower_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Followers"])


@router.post(
    "/followers",
    status_code=201,
    response_model=FollowerResponse,
    responses={
        400: {"description": "Unknown profile or self-follow", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Follow a profile",
    description="Following an already followed profile returns the existing edge.",
)
async def follow(
    payload: FollowRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> FollowerResponse:
    edge = await follower_service.follow(db, actor, payload)
    return FollowerResponse.model_validate(edge)


@router.delete(
    "/followers",
    response_model=MessageResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Follow relation not found", "model": ErrorResponse},
    },
    summary="Unfollow a profile",
)
async def unfollow(
    payload: FollowRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await follower_service.unfollow(db, actor, payload)
    return MessageResponse(message="Unfollowed successfully")
