import os
from pathlib import Path

import structlog

from ..exceptions import ExtractionError

logger = structlog.get_logger(__name__)


def validate_file_exists(file_path: str) -> None:
    if not os.path.exists(file_path):
        raise ExtractionError(f"File not found: {file_path}")


def validate_file_size(file_path: str, max_size_mb: int) -> None:
    file_size = os.path.getsize(file_path)
    max_size_bytes = max_size_mb * 1024 * 1024
    if file_size > max_size_bytes:
        raise ExtractionError(f"File too large: {file_size / 1024 / 1024:.1f}MB > {max_size_mb}MB")


def extract_filename(file_path: str) -> str:
    return Path(file_path).name


def extract_title(file_path: str) -> str:
    return Path(file_path).stem


def page_image_path(file_path: str, page_number: int = 1) -> str:
    """Rendered page image stored next to its source file."""
    path = Path(file_path)
    return str(path.with_name(f"{path.stem}-page{page_number}.png"))


def remove_files(paths) -> int:
    removed = 0
    for path in paths:
        try:
            if path and os.path.exists(path):
                os.remove(path)
                removed += 1
        except OSError as e:
            logger.warning("Failed to remove file", path=path, error=str(e))
    return removed
