"""BlobStorage: sandboxed local directory holding knowledge-file blobs."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from src.config import settings

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

MAX_BLOB_SIZE = 20 * 1024 * 1024  # 20 MB per file

_SAFE_NAME_RE = re.compile(r"[^a-zA-Z0-9._\-]")


class BlobStorage:
    """Stores uploaded files under a single root directory.

    Singleton accessed via ``BlobStorage.get()``.  Pass an explicit *root*
    for test isolation (e.g. ``tmp_path / "blobs"``).

    Storage paths are relative, ``/``-separated keys such as
    ``"1700000000_handbook.pdf"``; they are never allowed to escape the root.
    """

    _instance: BlobStorage | None = None

    def __init__(self, root: Path | None = None) -> None:
        self._root = (root or settings.storage_dir).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get(cls) -> BlobStorage:
        """Return the shared BlobStorage instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Clear the singleton (for tests)."""
        cls._instance = None

    @property
    def root(self) -> Path:
        return self._root

    @staticmethod
    def sanitize_name(name: str) -> str:
        """Replace unsafe characters, strip leading dots, truncate to 255 chars.

        Raises ``ValueError`` if the result is empty.
        """
        sanitized = _SAFE_NAME_RE.sub("_", name).lstrip(".")[:255]
        if not sanitized:
            msg = f"Name is empty after sanitization: {name!r}"
            raise ValueError(msg)
        return sanitized

    def resolve(self, storage_path: str) -> Path:
        """Map a storage path to an absolute file path inside the root."""
        parts = [self.sanitize_name(p) for p in storage_path.split("/") if p]
        if not parts:
            msg = f"Storage path resolves to empty: {storage_path!r}"
            raise ValueError(msg)
        target = self._root.joinpath(*parts).resolve()
        if not target.is_relative_to(self._root):
            msg = f"Path traversal detected: {storage_path!r}"
            raise ValueError(msg)
        return target

    def upload(self, storage_path: str, data: bytes) -> Path:
        """Write *data* at *storage_path*, replacing any existing blob."""
        if len(data) > MAX_BLOB_SIZE:
            msg = f"File too large: {len(data)} bytes (max {MAX_BLOB_SIZE})"
            raise ValueError(msg)
        target = self.resolve(storage_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Stored blob %s (%d bytes)", storage_path, len(data))
        return target

    def download(self, storage_path: str) -> bytes:
        """Return the raw bytes at *storage_path*.

        Raises ``FileNotFoundError`` if there is no such blob.
        """
        target = self.resolve(storage_path)
        if not target.is_file():
            msg = f"Blob not found: {storage_path}"
            raise FileNotFoundError(msg)
        return target.read_bytes()

    def delete(self, storage_path: str) -> bool:
        """Delete a blob. Returns True if deleted, False if not found."""
        target = self.resolve(storage_path)
        if not target.is_file():
            return False
        target.unlink()
        return True
