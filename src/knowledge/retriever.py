"""Knowledge-base retrieval for prompt augmentation.

Retrieval is unranked: the first few knowledge files (by id) are used as-is.
Each file resolves to either an ``Excerpt`` or, when its text can't be
obtained, an ``Unavailable`` marker that still names the file in the prompt.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.knowledge.blobs import BlobStorage
    from src.knowledge.store import KnowledgeStore
    from src.models import KnowledgeFile

logger = logging.getLogger(__name__)

RAG_HEADER = "\n\nKnowledge Base:\n"
RAG_SEPARATOR = "\n---\n"


@dataclass(frozen=True)
class Excerpt:
    """Text obtained for a knowledge file."""

    file: KnowledgeFile
    text: str

    def render(self) -> str:
        return f"File: {self.file.name}\n{self.text}"


@dataclass(frozen=True)
class Unavailable:
    """A knowledge file whose text could not be read."""

    file: KnowledgeFile
    reason: str

    def render(self) -> str:
        return f"File: {self.file.name} ({self.file.size} bytes)"


KnowledgeResult = Excerpt | Unavailable


def render_rag_fragment(results: list[KnowledgeResult]) -> str:
    """Format retrieval results for the system prompt. Empty input → ``""``."""
    if not results:
        return ""
    return RAG_HEADER + RAG_SEPARATOR.join(r.render() for r in results)


class KnowledgeRetriever:
    """Fetches a bounded number of knowledge files and their text."""

    def __init__(
        self,
        store: KnowledgeStore,
        blobs: BlobStorage,
        *,
        file_limit: int = 3,
        excerpt_chars: int = 1000,
    ) -> None:
        self._store = store
        self._blobs = blobs
        self._file_limit = file_limit
        self._excerpt_chars = excerpt_chars

    async def retrieve(self) -> list[KnowledgeResult]:
        """Return one result per retrieved file. Never raises."""
        try:
            files = await self._store.list_files(limit=self._file_limit)
        except Exception:
            logger.exception("Could not list knowledge files; continuing without them")
            return []

        # The store honours the limit, but the prompt bound must hold regardless.
        files = files[: self._file_limit]
        if files:
            logger.info("Found %d knowledge file(s)", len(files))

        return [await self._load(f) for f in files]

    async def _load(self, file: KnowledgeFile) -> KnowledgeResult:
        if file.content:
            return Excerpt(file=file, text=file.content[: self._excerpt_chars])

        try:
            data = await asyncio.to_thread(self._blobs.download, file.storage_path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read content of %s: %s", file.name, exc)
            return Unavailable(file=file, reason=str(exc))

        text = data.decode("utf-8", errors="replace")[: self._excerpt_chars]
        logger.debug("Loaded content from %s", file.name)
        return Excerpt(file=file, text=text)

    async def build_fragment(self) -> str:
        """Retrieve and render in one step."""
        return render_rag_fragment(await self.retrieve())
