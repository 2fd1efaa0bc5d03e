"""Uploaded media files, filtered by an extension allow-list.

Uploads live in a plain directory and share no locks with the document store.
"""

from collections.abc import Iterable
import logging
from pathlib import Path
import shutil
from typing import BinaryIO

from tome.errors import StorageError

logger = logging.getLogger(__name__)


def list_media(media_dir: Path) -> list[str]:
    if not media_dir.is_dir():
        return []
    return sorted(p.name for p in media_dir.iterdir() if p.is_file())


def is_allowed(filename: str, allowed_uploads: Iterable[str]) -> bool:
    """True if filename is a bare file name ending in an allowed extension."""
    if not filename or Path(filename).name != filename or filename in (".", ".."):
        return False
    lowered = filename.lower()
    return any(lowered.endswith(ext.lower()) for ext in allowed_uploads)


def save_upload(media_dir: Path, filename: str, stream: BinaryIO) -> Path:
    path = media_dir / filename
    try:
        media_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            shutil.copyfileobj(stream, f)
    except OSError as exc:
        raise StorageError(f"cannot save upload {filename!r}: {exc}") from exc
    logger.info("saved upload %s", path)
    return path
