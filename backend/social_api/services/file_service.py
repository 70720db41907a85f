"""
Social API Backend — Image Upload Storage Service
===================================================

What:  Validates and stores uploaded images (post images, profile pictures).
Why:   Centralizes all file system operations with security checks.
How:   Validates extension, size and MIME type, stores in date-organized
       directories under a per-kind folder, with UUID filenames.
Who:   Called by PostService and ProfileService when a request carries a file.

Security Model:
    1. Extension check:  fast rejection of obviously wrong files
    2. Size check:       max_upload_size (default 2 MiB)
    3. MIME type check:  python-magic inspects the header bytes
    4. UUID filename:    no user input reaches the file system path
"""

import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from social_api.config import settings
from social_api.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif"}

POST_IMAGES_FOLDER = "post_images"
PROFILE_PICTURES_FOLDER = "profile_pictures"


@dataclass
class Upload:
    """An uploaded file already read into memory by the route."""
    filename: str
    content: bytes
    content_length: Optional[int] = None


class FileService:
    """
    Manages image validation and storage.

    Directory Structure:
        storage/
        ├── post_images/2024/01/15/<uuid>.jpg
        └── profile_pictures/2024/01/15/<uuid>.png
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str, field: str = "file") -> str:
        """Returns the normalized (lowercase, dotted) extension."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"The {field} must be a file of type: "
                    f"{', '.join(e.lstrip('.') for e in sorted(ALLOWED_EXTENSIONS))}."
                ),
                field=field,
                context={"extension": ext},
            )
        return ext

    def validate_size(
        self,
        content_length: Optional[int],
        actual_size: int,
        field: str = "file",
    ) -> None:
        """
        Checks Content-Length first, then the actual byte count
        (some clients send a wrong header). Empty files are rejected.
        """
        max_kb = settings.max_upload_size // 1024

        if actual_size == 0:
            raise ValidationError(message=f"The {field} must not be empty.", field=field)

        if content_length and content_length > settings.max_upload_size:
            raise ValidationError(
                message=f"The {field} may not be greater than {max_kb} kilobytes.",
                field=field,
                context={"reported_size": content_length},
            )

        if actual_size > settings.max_upload_size:
            raise ValidationError(
                message=f"The {field} may not be greater than {max_kb} kilobytes.",
                field=field,
                context={"actual_size": actual_size},
            )

    def validate_mime_type(self, file_content: bytes, field: str = "file") -> str:
        """
        Detect the real content type from the file's magic bytes.

        Raises:
            ValidationError if the bytes are not a supported image
            FileStorageError if detection itself fails
        """
        try:
            import magic
            mime_type = magic.from_buffer(file_content, mime=True)
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=f"The {field} must be an image.",
                field=field,
                context={"detected_mime": mime_type},
            )

        return mime_type

    def _generate_storage_path(self, folder: str, extension: str) -> Tuple[Path, str]:
        """Builds <folder>/YYYY/MM/DD/<uuid><ext>; returns (absolute, relative)."""
        now = datetime.now(timezone.utc)
        date_dir = now.strftime("%Y/%m/%d")
        unique_name = f"{uuid.uuid4()}{extension}"

        relative_path = f"{folder}/{date_dir}/{unique_name}"
        absolute_path = self.storage_root / relative_path

        return absolute_path, relative_path

    async def store_file(self, content: bytes, folder: str, extension: str) -> Tuple[str, str]:
        """
        Write validated content to disk.

        Raises:
            FileStorageError if directory creation or file write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(folder, extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("File stored: %s (%d bytes)", relative_path, len(content))
            return str(absolute_path), relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a file by absolute path: one whose request failed after it
        was stored, or one no longer referenced.

        Best-effort: a missing file is fine, other failures are logged.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def remove_stored(self, relative_path: Optional[str]) -> None:
        """Remove a previously stored file given the relative path kept in the database."""
        if not relative_path:
            return
        try:
            full_path = self.resolve(relative_path)
        except ValidationError:
            logger.warning("Not removing path outside storage: %s", relative_path)
            return
        await self.cleanup_file(str(full_path))

    async def validate_and_store(
        self,
        upload: Upload,
        folder: str,
        field: str = "file",
    ) -> Tuple[str, str]:
        """
        Complete validation and storage pipeline, cheapest check first.

        Args:
            upload: file read by the route
            folder: POST_IMAGES_FOLDER or PROFILE_PICTURES_FOLDER
            field:  form field name used in validation messages

        Returns:
            (absolute_path, relative_path_for_db)
        """
        ext = self.validate_extension(upload.filename, field)
        self.validate_size(upload.content_length, len(upload.content), field)
        self.validate_mime_type(upload.content, field)
        return await self.store_file(upload.content, folder, ext)

    def resolve(self, relative_path: str) -> Path:
        """
        Map a stored relative path back to disk, refusing anything that
        would escape storage_root (../ traversal).
        """
        full_path = (self.storage_root / relative_path).resolve()
        if not full_path.is_relative_to(self.storage_root):
            raise ValidationError(message="Invalid file path", field="path")
        return full_path


file_service = FileService()
