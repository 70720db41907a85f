"""
Social API Backend — Profile Routes
=====================================

What:  /api/profiles CRUD.
How:   Create/update are multipart (optional "profile_picture" file part).
       GET /api/profiles/{id} takes ?include=posts,followers,following to
       embed the related lists next to the always-present counts.
"""

import logging
from typing import List, Optional, Set

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.dependencies import get_current_actor, parse_include, read_upload
from social_api.schemas.common import ErrorResponse, MessageResponse, build_form
from social_api.schemas.profile import (
    ProfileCreate,
    ProfileDetailResponse,
    ProfileEnvelope,
    ProfileResponse,
    ProfileUpdate,
)
from social_api.services.access_gate import Actor
from social_api.services.profile_service import profile_service
from social_api.services.relationship_resolver import relationship_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profiles"])


@router.get(
    "/profiles",
    response_model=List[ProfileResponse],
    summary="List profiles",
)
async def list_profiles(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[ProfileResponse]:
    return await relationship_resolver.profile_list(db, limit=limit, offset=offset)


@router.post(
    "/profiles",
    status_code=201,
    response_model=ProfileEnvelope,
    responses={
        400: {"description": "Invalid or duplicate fields, bad picture", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Create a profile",
)
async def create_profile(
    username: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    profile_picture: Optional[UploadFile] = File(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileEnvelope:
    data = build_form(ProfileCreate, username=username, email=email, password=password)
    profile = await profile_service.create_profile(
        db, actor, data, await read_upload(profile_picture)
    )
    return ProfileEnvelope(
        message="Profile created successfully",
        profile=ProfileResponse.model_validate(profile),
    )


@router.get(
    "/profiles/{profile_id}",
    response_model=ProfileDetailResponse,
    responses={404: {"description": "Profile not found", "model": ErrorResponse}},
    summary="Get a profile with counts and optional related lists",
)
async def get_profile(
    profile_id: int,
    include: Set[str] = Depends(parse_include),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileDetailResponse:
    return await relationship_resolver.profile_view(db, profile_id, include)


@router.put(
    "/profiles/{profile_id}",
    response_model=ProfileEnvelope,
    responses={
        400: {"description": "Invalid or duplicate fields, bad picture", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Profile not found", "model": ErrorResponse},
    },
    summary="Update a profile (partial)",
)
async def update_profile(
    profile_id: int,
    username: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    profile_picture: Optional[UploadFile] = File(default=None),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileEnvelope:
    data = build_form(ProfileUpdate, username=username, email=email, password=password)
    profile = await profile_service.update_profile(
        db, actor, profile_id, data, await read_upload(profile_picture)
    )
    return ProfileEnvelope(
        message="Profile updated successfully",
        profile=ProfileResponse.model_validate(profile),
    )


@router.delete(
    "/profiles/{profile_id}",
    response_model=MessageResponse,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Profile not found", "model": ErrorResponse},
    },
    summary="Delete a profile and everything that references it",
)
async def delete_profile(
    profile_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await profile_service.delete_profile(db, actor, profile_id)
    return MessageResponse(message="Profile deleted successfully")
