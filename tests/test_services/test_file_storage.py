import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from examgen.exceptions import UploadRejectedError
from examgen.services.file_storage import FileStorageService


def _upload(name, content_type, data=b"data"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=name,
        headers=Headers({"content-type": content_type}),
    )


class TestFileStorageService:
    @pytest.fixture(autouse=True)
    def setup_storage(self, tmp_path):
        self.storage_dir = tmp_path / "uploads"
        self.storage = FileStorageService(storage_dir=str(self.storage_dir), max_file_size_mb=1)

    @pytest.mark.asyncio
    async def test_store_file(self):
        stored = await self.storage.store_file(_upload("../notes.pdf", "application/pdf", b"%PDF-1.4"))

        assert stored.original_name == "notes.pdf"
        assert stored.path.endswith("-notes.pdf")
        assert stored.size == 8
        assert stored.content_type == "application/pdf"
        assert Path(stored.path).parent == self.storage_dir

    @pytest.mark.asyncio
    async def test_invalid_type_rejected(self):
        with pytest.raises(UploadRejectedError) as exc_info:
            await self.storage.store_file(_upload("script.sh", "text/x-shellscript"))

        assert exc_info.value.message == "Invalid file type"
        assert list(self.storage_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_too_large_rejected(self):
        with pytest.raises(UploadRejectedError) as exc_info:
            await self.storage.store_file(_upload("big.png", "image/png", b"0" * (1024 * 1024 + 1)))

        assert "too large" in exc_info.value.message.lower()

    @pytest.mark.parametrize("content_type", [
        "application/msword",
        "application/vnd.ms-powerpoint",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "image/jpeg",
    ])
    def test_accepted_types(self, content_type):
        valid, error = self.storage.validate_file(_upload("file", content_type))

        assert valid
        assert error is None

    def test_delete_files(self, tmp_path):
        existing = tmp_path / "a.txt"
        existing.write_text("x")

        assert self.storage.delete_files([str(existing), str(tmp_path / "missing.txt"), None]) == 1
        assert not existing.exists()
