import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import structlog
from fastapi import UploadFile

from ..exceptions import UploadRejectedError
from ..utils.file_utils import remove_files

logger = structlog.get_logger(__name__)

ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "image/jpeg",
    "image/png",
})


@dataclass
class StoredFile:
    path: str
    original_name: str
    content_type: str
    size: int


class FileStorageService:
    def __init__(self, storage_dir: str = "./uploads", max_file_size_mb: int = 50):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.max_file_size = max_file_size_mb * 1024 * 1024
        self.allowed_mime_types = ALLOWED_MIME_TYPES

    def validate_file(self, file: UploadFile) -> tuple[bool, Optional[str]]:
        if not file.filename:
            return False, "No filename provided"

        if (file.content_type or "").lower() not in self.allowed_mime_types:
            return False, "Invalid file type"

        if hasattr(file.file, 'seek') and hasattr(file.file, 'tell'):
            file.file.seek(0, 2)
            file_size = file.file.tell()
            file.file.seek(0)

            if file_size > self.max_file_size:
                return False, f"File too large: {file_size} bytes (max: {self.max_file_size})"

        return True, None

    async def store_file(self, file: UploadFile) -> StoredFile:
        is_valid, error_msg = self.validate_file(file)
        if not is_valid:
            logger.warning("upload_rejected", file_name=file.filename, content_type=file.content_type, reason=error_msg)
            raise UploadRejectedError(error_msg, details={"file_name": file.filename})

        original_name = os.path.basename(file.filename)
        file_path = self.storage_dir / f"{uuid.uuid4()}-{original_name}"

        try:
            with open(file_path, "wb") as stored_file:
                shutil.copyfileobj(file.file, stored_file)
        except OSError:
            if file_path.exists():
                file_path.unlink()
            raise

        stored = StoredFile(
            path=str(file_path),
            original_name=original_name,
            content_type=file.content_type.lower(),
            size=file_path.stat().st_size,
        )
        logger.info("upload_stored", file_name=original_name, size=stored.size, content_type=stored.content_type)
        return stored

    def delete_files(self, paths: Iterable[str]) -> int:
        return remove_files(paths)
