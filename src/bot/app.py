"""Pipeline assembly from settings and the shared stores."""

from __future__ import annotations

import logging

from src.allowlist.filter import AllowlistFilter
from src.allowlist.store import AllowlistStore
from src.bot.pipeline import Pipeline
from src.config import PipelineConfig, Settings, settings
from src.instructions.store import InstructionsStore
from src.knowledge.blobs import BlobStorage
from src.knowledge.retriever import KnowledgeRetriever
from src.knowledge.store import KnowledgeStore
from src.llm.client import CompletionClient
from src.memory.store import MemoryStore
from src.memory.updater import MemoryUpdater

logger = logging.getLogger(__name__)


def create_pipeline(app_settings: Settings | None = None) -> Pipeline:
    """Build a Pipeline wired to the configured database, storage and model."""
    s = app_settings or settings
    config = PipelineConfig.from_settings(s)
    memory = MemoryStore.get()

    pipeline = Pipeline(
        allowlist=AllowlistFilter(AllowlistStore.get()),
        instructions=InstructionsStore.get(),
        memory=memory,
        retriever=KnowledgeRetriever(
            KnowledgeStore.get(),
            BlobStorage.get(),
            file_limit=config.knowledge_file_limit,
            excerpt_chars=config.knowledge_excerpt_chars,
        ),
        completion=CompletionClient(
            model=config.model,
            max_tokens=config.max_output_tokens,
            temperature=config.temperature,
            api_key=s.anthropic_api_key or None,
            timeout=s.completion_timeout_seconds,
        ),
        updater=MemoryUpdater(memory, max_exchanges=config.memory_max_exchanges),
        config=config,
    )
    logger.info(
        "Pipeline ready: model=%s, max_tokens=%d, temperature=%.2f, knowledge_files=%d",
        config.model,
        config.max_output_tokens,
        config.temperature,
        config.knowledge_file_limit,
    )
    return pipeline
