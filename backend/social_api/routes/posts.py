"""
Social API Backend — Post Routes
==================================

What:  /api/posts CRUD.
How:   Create/update take multipart/form-data because of the optional image
       (form field "image_url" carries the file); the text fields are
       validated through build_form into the same Pydantic schemas a JSON
       body would use.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.dependencies import get_current_actor, read_upload
from social_api.schemas.common import ErrorResponse, MessageResponse, build_form
from social_api.schemas.post import (
    PostCreate,
    PostDetailResponse,
    PostListItem,
    PostResponse,
    PostUpdate,
)
from social_api.services.access_gate import Actor
from social_api.services.post_service import post_service
from social_api.services.relationship_resolver import relationship_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Posts"])


@router.get(
    "/posts",
    response_model=List[PostListItem],
    summary="List posts with their authors",
)
async def list_posts(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostListItem]:
    return await relationship_resolver.post_list(db, limit=limit, offset=offset)


@router.post(
    "/posts",
    status_code=201,
    response_model=PostResponse,
    responses={
        400: {"description": "Invalid fields or image", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Create a post",
)
async def create_post(
    profile_id: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None),
    image_url: Optional[UploadFile] = File(default=None, description="png, jpg, jpeg or gif"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    data = build_form(PostCreate, profile_id=profile_id, content=content)
    post = await post_service.create_post(db, actor, data, await read_upload(image_url))
    return PostResponse.model_validate(post)


@router.get(
    "/posts/{post_id}",
    response_model=PostDetailResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Get a post with author, comments and like count",
)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> PostDetailResponse:
    return await relationship_resolver.post_view(db, post_id)


@router.put(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Invalid fields or image", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Update a post (partial)",
)
async def update_post(
    post_id: int,
    content: Optional[str] = Form(default=None),
    image_url: Optional[UploadFile] = File(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    data = build_form(PostUpdate, content=content)
    post = await post_service.update_post(db, actor, post_id, data, await read_upload(image_url))
    return PostResponse.model_validate(post)


@router.delete(
    "/posts/{post_id}",
    response_model=MessageResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Delete a post with its comments and likes",
)
async def delete_post(
    post_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await post_service.delete_post(db, actor, post_id)
    return MessageResponse(message="Post deleted successfully")
