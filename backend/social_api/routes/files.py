"""
Social API Backend — Stored File Route
========================================

What:  GET /api/files/{path}: serves post images and profile pictures by
       the relative path stored in image_url / profile_picture.
Security:
    The path is resolved under STORAGE_ROOT; anything escaping it (../)
    is rejected before the filesystem is touched.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from social_api.exceptions import NotFoundError
from social_api.schemas.common import ErrorResponse
from social_api.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    full_path = file_service.resolve(file_path)
    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # Stored names are random UUIDs, so the content never changes in place
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
