"""
Social API Backend — Comment Routes
=====================================

What:  /api/comments CRUD. JSON bodies.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.dependencies import get_current_actor
from social_api.schemas.comment import (
    CommentCreate,
    CommentDetailResponse,
    CommentResponse,
    CommentUpdate,
)
from social_api.schemas.common import ErrorResponse, MessageResponse
from social_api.services.access_gate import Actor
from social_api.services.comment_service import comment_service
from social_api.services.relationship_resolver import relationship_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Comments"])


@router.get(
    "/comments",
    response_model=List[CommentDetailResponse],
    summary="List comments with author and post",
)
async def list_comments(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentDetailResponse]:
    return await relationship_resolver.comment_list(db, limit=limit, offset=offset)


@router.post(
    "/comments",
    status_code=201,
    response_model=CommentResponse,
    responses={
        400: {"description": "Invalid fields or unknown post/profile", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Comment on a post",
)
async def create_comment(
    payload: CommentCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    comment = await comment_service.create_comment(db, actor, payload)
    return CommentResponse.model_validate(comment)


@router.get(
    "/comments/{comment_id}",
    response_model=CommentDetailResponse,
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
    summary="Get a comment with author and post",
)
async def get_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> CommentDetailResponse:
    return await relationship_resolver.comment_view(db, comment_id)


@router.put(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Comment not found", "model": ErrorResponse},
    },
    summary="Edit a comment",
)
async def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    comment = await comment_service.update_comment(db, actor, comment_id, payload)
    return CommentResponse.model_validate(comment)


@router.delete(
    "/comments/{comment_id}",
    response_model=MessageResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Comment not found", "model": ErrorResponse},
    },
    summary="Delete a comment",
)
async def delete_comment(
    comment_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await comment_service.delete_comment(db, actor, comment_id)
    return MessageResponse(message="Comment deleted")
