"""
Social API Backend — File Service Unit Tests
===============================================

What:  Extension, size and MIME validation, storage layout, cleanup and
       path resolution of FileService.
How:   Each test gets a FileService rooted in its own temp directory.
       python-magic is patched where MIME detection is not the subject.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from social_api.exceptions import FileStorageError, ValidationError
from social_api.services.file_service import (
    POST_IMAGES_FOLDER,
    PROFILE_PICTURES_FOLDER,
    FileService,
    Upload,
)


class TestExtensionValidation:
    """validate_extension()"""

    def setup_method(self):
        self.service = FileService()

    @pytest.mark.parametrize("filename", ["a.png", "a.jpg", "a.jpeg", "a.gif"])
    def test_allowed_extensions(self, filename):
        assert self.service.validate_extension(filename) == Path(filename).suffix

    def test_extension_is_case_insensitive(self):
        assert self.service.validate_extension("photo.JPG") == ".jpg"
        assert self.service.validate_extension("photo.Png") == ".png"

    @pytest.mark.parametrize("filename", ["doc.pdf", "malware.exe", "noextension", "a.bmp"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError, match="must be a file of type"):
            self.service.validate_extension(filename)

    def test_error_names_the_form_field(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_extension("doc.pdf", field="image_url")
        assert exc_info.value.field == "image_url"
        assert "image_url" in exc_info.value.context["fields"]


class TestSizeValidation:
    """validate_size()"""

    def setup_method(self):
        self.service = FileService()

    def test_within_limit(self):
        self.service.validate_size(None, 1000)

    def test_exactly_at_limit(self):
        from social_api.config import settings
        self.service.validate_size(settings.max_upload_size, settings.max_upload_size)

    def test_over_limit_by_actual_size(self):
        from social_api.config import settings
        with pytest.raises(ValidationError, match="may not be greater than"):
            self.service.validate_size(None, settings.max_upload_size + 1)

    def test_over_limit_by_reported_length(self):
        from social_api.config import settings
        with pytest.raises(ValidationError, match="may not be greater than"):
            self.service.validate_size(settings.max_upload_size + 1, 10)

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            self.service.validate_size(0, 0)


def _fake_magic(**kwargs):
    """Stand-in for the magic module so libmagic need not be installed."""
    module = MagicMock()
    module.from_buffer = MagicMock(**kwargs)
    return patch.dict("sys.modules", {"magic": module})


class TestMimeValidation:
    """validate_mime_type() with the magic module replaced."""

    def setup_method(self):
        self.service = FileService()

    def test_image_accepted(self):
        with _fake_magic(return_value="image/png"):
            assert self.service.validate_mime_type(b"bytes") == "image/png"

    def test_non_image_rejected(self):
        with _fake_magic(return_value="application/pdf"):
            with pytest.raises(ValidationError, match="must be an image"):
                self.service.validate_mime_type(b"%PDF-1.4")

    def test_detection_failure_is_storage_error(self):
        with _fake_magic(side_effect=RuntimeError("libmagic missing")):
            with pytest.raises(FileStorageError):
                self.service.validate_mime_type(b"bytes")


class TestStorage:
    """store_file(), validate_and_store(), cleanup_file(), resolve()"""

    @pytest.mark.asyncio
    async def test_store_file_uses_folder_and_date_layout(self, temp_storage, sample_image_bytes):
        service = FileService(storage_root=temp_storage)

        abs_path, rel_path = await service.store_file(sample_image_bytes, POST_IMAGES_FOLDER, ".png")

        parts = rel_path.split("/")
        assert parts[0] == POST_IMAGES_FOLDER
        assert len(parts) == 5  # folder/YYYY/MM/DD/name
        assert rel_path.endswith(".png")
        assert Path(abs_path).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_validate_and_store_ignores_client_filename(self, temp_storage, sample_image_bytes):
        service = FileService(storage_root=temp_storage)
        upload = Upload(filename="../../etc/evil.png", content=sample_image_bytes)

        with patch.object(service, "validate_mime_type", return_value="image/png"):
            abs_path, rel_path = await service.validate_and_store(
                upload, PROFILE_PICTURES_FOLDER, field="profile_picture"
            )

        assert rel_path.startswith(f"{PROFILE_PICTURES_FOLDER}/")
        assert "evil" not in rel_path
        assert Path(abs_path).is_relative_to(Path(temp_storage).resolve())

    @pytest.mark.asyncio
    async def test_validate_and_store_rejects_before_writing(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        upload = Upload(filename="notes.txt", content=b"hello")

        with pytest.raises(ValidationError):
            await service.validate_and_store(upload, POST_IMAGES_FOLDER)

        assert not (Path(temp_storage) / POST_IMAGES_FOLDER).exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, tmp_path):
        test_file = tmp_path / "test.png"
        test_file.write_bytes(b"test content")

        await FileService(storage_root=str(tmp_path)).cleanup_file(str(test_file))
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        await FileService(storage_root=str(tmp_path)).cleanup_file(str(tmp_path / "gone.png"))

    @pytest.mark.asyncio
    async def test_remove_stored_by_relative_path(self, temp_storage, sample_image_bytes):
        service = FileService(storage_root=temp_storage)
        abs_path, rel_path = await service.store_file(sample_image_bytes, POST_IMAGES_FOLDER, ".png")

        await service.remove_stored(rel_path)
        await service.remove_stored(None)

        assert not Path(abs_path).exists()

    @pytest.mark.asyncio
    async def test_remove_stored_never_leaves_root(self, tmp_path):
        outside = tmp_path / "outside.png"
        outside.write_bytes(b"keep me")
        root = tmp_path / "storage"
        root.mkdir()

        await FileService(storage_root=str(root)).remove_stored("../outside.png")

        assert outside.exists()

    def test_resolve_inside_root(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        resolved = service.resolve("post_images/2024/01/15/x.png")
        assert resolved.is_relative_to(service.storage_root)

    def test_resolve_rejects_traversal(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        with pytest.raises(ValidationError, match="Invalid file path"):
            service.resolve("../../etc/passwd")
