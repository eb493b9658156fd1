"""Add local files to the knowledge base (blob + metadata row)."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from src.knowledge.blobs import BlobStorage
    from src.knowledge.store import KnowledgeStore
    from src.models import KnowledgeFile

logger = logging.getLogger(__name__)

DEFAULT_INGEST_CHARS = 5000


def extract_text(data: bytes, max_chars: int = DEFAULT_INGEST_CHARS) -> str | None:
    """Return up to *max_chars* of UTF-8 text, or None for binary data."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if "\x00" in text:
        return None
    return text[:max_chars]


async def ingest_file(
    path: Path,
    store: KnowledgeStore,
    blobs: BlobStorage,
    *,
    max_chars: int = DEFAULT_INGEST_CHARS,
) -> KnowledgeFile:
    """Copy *path* into blob storage and record it in the knowledge table.

    Text files get a pre-extracted ``content`` excerpt; binary files are
    stored without one and are read from the blob at retrieval time.
    """
    data = path.read_bytes()
    storage_path = f"{int(time.time())}_{blobs.sanitize_name(path.name)}"
    blobs.upload(storage_path, data)

    content = extract_text(data, max_chars)
    if content is None:
        logger.info("%s is not UTF-8 text; storing without an excerpt", path.name)

    return await store.add(
        name=path.name, storage_path=storage_path, size=len(data), content=content
    )


async def remove_file(file_id: int, store: KnowledgeStore, blobs: BlobStorage) -> bool:
    """Delete a knowledge file's row and its blob. Returns False if unknown."""
    record = await store.get_by_id(file_id)
    if record is None:
        return False
    try:
        blobs.delete(record.storage_path)
    except ValueError:
        logger.warning("Invalid storage path on file %d: %s", file_id, record.storage_path)
    return await store.delete(file_id)
