"""
Social API Backend — Route Dependencies
=========================================

What:  FastAPI dependencies shared by the route modules.

    get_current_actor   Authorization: Bearer <token> → Actor, or 401
    read_upload         multipart file part → Upload, or None when blank
    parse_include       ?include=posts,followers → {"posts", "followers"}

The resulting Actor is passed explicitly into every service call; services
never look at the request themselves.
"""

import logging
from typing import Optional, Set

from fastapi import Depends, Query, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import get_db_session
from social_api.services.access_gate import Actor
from social_api.services.auth_service import auth_service
from social_api.services.file_service import Upload

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must become our own 401 body, not
# FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Actor:
    """
    Raises:
        AuthenticationRequiredError: no header, or an unknown/revoked token
    """
    return await auth_service.authenticate(
        db, credentials.credentials if credentials else None
    )


def parse_include(
    include: Optional[str] = Query(
        default=None,
        description="Comma-separated related lists to embed: posts, followers, following",
    ),
) -> Set[str]:
    if not include:
        return set()
    return {part.strip().lower() for part in include.split(",") if part.strip()}


async def read_upload(file: Optional[UploadFile]) -> Optional[Upload]:
    """
    Read a multipart file part into an Upload.

    Browsers send an empty part with no filename when the file input is
    left blank; that counts as "no file".
    """
    if file is None or not file.filename:
        return None
    content = await file.read()
    return Upload(filename=file.filename, content=content, content_length=file.size)
