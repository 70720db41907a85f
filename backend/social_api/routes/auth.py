"""
Social API Backend — Authentication Routes
============================================

What:  POST /api/register, POST /api/login, POST /api/logout.
Who:   register and login are open; logout needs a bearer token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.dependencies import get_current_actor
from social_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from social_api.schemas.common import ErrorResponse, MessageResponse
from social_api.services.access_gate import Actor
from social_api.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={400: {"description": "Invalid or duplicate fields", "model": ErrorResponse}},
    summary="Register a user",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    user = await auth_service.register(db, payload)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"description": "Wrong email or password", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
    description=(
        "Returns a personal access token. Send it as `Authorization: Bearer <token>` "
        "on every mutating request."
    ),
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    token, user = await auth_service.login(db, payload)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="Revoke all tokens of the current user",
)
async def logout(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await auth_service.logout(db, actor)
    return MessageResponse(message="Logged out successfully")
