"""
Social API Backend — Like Routes
==================================

What:  POST /api/likes (first-or-create), DELETE /api/likes.
       Both take the JSON pair {post_id, profile_id}.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.dependencies import get_current_actor
from social_api.schemas.common import ErrorResponse, MessageResponse
from social_api.schemas.relation import LikeRequest, LikeResponse
from social_api.services.access_gate import Actor
from social_api.services.like_service import like_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Likes"])


@router.post(
    "/likes",
    status_code=201,
    response_model=LikeResponse,
    responses={
        400: {"description": "Unknown post or profile", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Like a post",
    description="Liking an already liked post returns the existing like.",
)
async def like_post(
    payload: LikeRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> LikeResponse:
    like = await like_service.like(db, actor, payload)
    return LikeResponse.model_validate(like)


@router.delete(
    "/likes",
    response_model=MessageResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Like not found", "model": ErrorResponse},
    },
    summary="Remove a like",
)
async def unlike_post(
    payload: LikeRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await like_service.unlike(db, actor, payload)
    return MessageResponse(message="Like removed successfully")
