"""Data models for the rows Relay reads from the store."""

from pydantic import BaseModel


class AllowlistEntry(BaseModel):
    """A channel permitted to receive bot replies."""

    id: int
    channel_id: str


class Instructions(BaseModel):
    """Operator-authored system prompt (singleton row)."""

    id: int
    content: str = ""


class MemorySummary(BaseModel):
    """Rolling conversation log (singleton row).

    ``summary`` holds alternating ``User:`` / ``Bot:`` lines, oldest first.
    """

    id: int
    summary: str = ""


class KnowledgeFile(BaseModel):
    """An uploaded reference document.

    ``content`` is an optional pre-extracted text excerpt; when missing the
    raw blob at ``storage_path`` is read instead.
    """

    id: int
    name: str
    storage_path: str
    size: int = 0
    content: str | None = None
    created_at: str = ""
