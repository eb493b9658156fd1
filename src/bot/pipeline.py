"""Message-to-completion pipeline.

One call to :meth:`Pipeline.handle` takes an inbound chat message through::

    Arrived → (Denied | Admitted) → ContextBuilt
        → (CompletionFailed | CompletionSucceeded)
        → DeliveryFailed | (DeliveryPartial | DeliveryComplete) → MemoryPersisted

A failed completion or delivery is reported to the sender with a fixed error
reply. Memory is written only once at least part of the reply went out.
Every other failure is logged and absorbed, and ``handle`` never raises, so
one bad message can't take down the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from src.bot.delivery import deliver_reply
from src.llm.client import CompletionError
from src.llm.prompt import build_prompt_context

if TYPE_CHECKING:
    from src.allowlist.filter import AllowlistFilter
    from src.bot.messages import IncomingMessage
    from src.config import PipelineConfig
    from src.instructions.store import InstructionsStore
    from src.knowledge.retriever import KnowledgeRetriever
    from src.llm.client import CompletionClient
    from src.memory.store import MemoryStore
    from src.memory.updater import MemoryUpdater
    from src.models import MemorySummary

logger = logging.getLogger(__name__)


class MessageState(StrEnum):
    IGNORED = "ignored"
    ARRIVED = "arrived"
    DENIED = "denied"
    ADMITTED = "admitted"
    CONTEXT_BUILT = "context_built"
    COMPLETION_FAILED = "completion_failed"
    COMPLETION_SUCCEEDED = "completion_succeeded"
    DELIVERY_FAILED = "delivery_failed"
    DELIVERY_PARTIAL = "delivery_partial"
    DELIVERY_COMPLETE = "delivery_complete"
    MEMORY_PERSISTED = "memory_persisted"


_REPLIED = {
    MessageState.DELIVERY_PARTIAL,
    MessageState.DELIVERY_COMPLETE,
    MessageState.MEMORY_PERSISTED,
}


@dataclass
class _Trace:
    channel_id: str
    state: MessageState = MessageState.ARRIVED

    def advance(self, state: MessageState) -> None:
        logger.debug("[%s] %s → %s", self.channel_id, self.state, state)
        self.state = state


class Pipeline:
    """Wires the admission, context, completion, delivery and memory steps."""

    def __init__(
        self,
        *,
        allowlist: AllowlistFilter,
        instructions: InstructionsStore,
        memory: MemoryStore,
        retriever: KnowledgeRetriever,
        completion: CompletionClient,
        updater: MemoryUpdater,
        config: PipelineConfig,
    ) -> None:
        self._allowlist = allowlist
        self._instructions = instructions
        self._memory = memory
        self._retriever = retriever
        self._completion = completion
        self._updater = updater
        self._config = config

    async def handle(self, message: IncomingMessage) -> MessageState:
        """Process one inbound message and return the state it ended in."""
        if message.author_is_bot or not message.content.strip():
            return MessageState.IGNORED

        logger.info("Message from %s: %r", message.author, message.content[:80])
        trace = _Trace(channel_id=message.channel_id)
        try:
            await self._process(message, trace)
        except Exception:
            logger.exception("Error processing message in %s", message.channel_id)
            if trace.state not in _REPLIED:
                await self._send_error_notice(message)
        return trace.state

    async def _process(self, message: IncomingMessage, trace: _Trace) -> None:
        if not await self._allowlist.admit(message.channel_id):
            trace.advance(MessageState.DENIED)
            return
        trace.advance(MessageState.ADMITTED)

        instructions, memory, rag_fragment = await asyncio.gather(
            self._load_instructions(),
            self._load_memory(),
            self._retriever.build_fragment(),
        )
        context = build_prompt_context(
            instructions=instructions,
            rag_fragment=rag_fragment,
            memory=memory.summary if memory else "",
            user_message=message.content,
        )
        trace.advance(MessageState.CONTEXT_BUILT)

        try:
            reply = await self._completion.complete(context)
        except CompletionError:
            logger.exception("Completion failed for message in %s", message.channel_id)
            trace.advance(MessageState.COMPLETION_FAILED)
            await self._send_error_notice(message)
            return
        trace.advance(MessageState.COMPLETION_SUCCEEDED)

        report = await deliver_reply(
            message,
            reply,
            limit=self._config.message_char_limit,
            chunk_size=self._config.reply_chunk_size,
        )
        if report.complete:
            trace.advance(MessageState.DELIVERY_COMPLETE)
        elif report.sent == 0:
            trace.advance(MessageState.DELIVERY_FAILED)
            await self._send_error_notice(message)
            return
        else:
            trace.advance(MessageState.DELIVERY_PARTIAL)
            await self._send_error_notice(message)

        summary = await self._updater.append_exchange(
            memory.id if memory else None, message.content, reply
        )
        if summary is not None:
            trace.advance(MessageState.MEMORY_PERSISTED)

    async def _load_instructions(self) -> str:
        try:
            record = await self._instructions.read()
        except Exception:
            logger.exception("Error fetching instructions; using defaults")
            return self._config.default_instructions
        if record is None or not record.content:
            return self._config.default_instructions
        return record.content

    async def _load_memory(self) -> MemorySummary | None:
        try:
            return await self._memory.read()
        except Exception:
            logger.exception("Error fetching memory; continuing without it")
            return None

    async def _send_error_notice(self, message: IncomingMessage) -> None:
        try:
            await message.reply(self._config.error_reply)
        except Exception:
            logger.exception("Error sending error message to %s", message.channel_id)
