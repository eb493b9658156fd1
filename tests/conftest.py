"""Shared test fixtures."""

from pathlib import Path

import pytest

from src.knowledge.blobs import BlobStorage


@pytest.fixture
def blobs(tmp_path):
    """Create a BlobStorage rooted in a temporary directory."""
    BlobStorage._reset()
    b = BlobStorage(root=tmp_path / "blobs")
    BlobStorage._instance = b
    yield b
    BlobStorage._reset()


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture(autouse=False)
def _no_turso(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure tests use local file, not remote Turso."""
    monkeypatch.setattr("src.config.settings.turso_database_url", "")
