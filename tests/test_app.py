"""Tests for pipeline assembly."""

from src.bot.app import create_pipeline
from src.bot.pipeline import Pipeline
from src.config import Settings


def test_create_pipeline_uses_settings(blobs) -> None:
    s = Settings(
        claude_model="claude-test",
        max_output_tokens=123,
        temperature=0.2,
        knowledge_file_limit=2,
        memory_max_exchanges=5,
    )

    pipeline = create_pipeline(s)

    assert isinstance(pipeline, Pipeline)
    assert pipeline._config.model == "claude-test"  # noqa: SLF001
    assert pipeline._config.max_output_tokens == 123  # noqa: SLF001
    assert pipeline._completion.model == "claude-test"  # noqa: SLF001
    assert pipeline._retriever._file_limit == 2  # noqa: SLF001
    assert pipeline._updater._max_exchanges == 5  # noqa: SLF001


def test_create_pipeline_passes_key_and_timeout(blobs) -> None:
    s = Settings(anthropic_api_key="sk-test", completion_timeout_seconds=12.5)

    pipeline = create_pipeline(s)

    assert pipeline._completion._api_key == "sk-test"  # noqa: SLF001
    assert pipeline._completion._timeout == 12.5  # noqa: SLF001
