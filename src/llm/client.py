"""Async Claude client for single-shot reply generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import anthropic

if TYPE_CHECKING:
    from src.llm.prompt import PromptContext

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """The completion backend failed or returned no usable text."""


def _get_client(api_key: str | None, timeout: float) -> anthropic.AsyncAnthropic:
    """Build the Anthropic client.

    SDK retries are disabled: a failed completion is reported to the user
    rather than retried.
    """
    return anthropic.AsyncAnthropic(api_key=api_key, max_retries=0, timeout=timeout)


def _extract_text(response: Any) -> str:
    """Join the text blocks of a Messages API response."""
    parts = [
        block.text
        for block in getattr(response, "content", None) or []
        if getattr(block, "type", "text") == "text" and getattr(block, "text", None)
    ]
    return "".join(parts)


class CompletionClient:
    """Sends a prompt context to Claude with a fixed decoding configuration."""

    def __init__(
        self,
        *,
        model: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        api_key: str | None = None,
        timeout: float = 60.0,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, context: PromptContext) -> str:
        """Return the generated reply for *context*.

        Raises:
            CompletionError: on any API failure (rate limit, timeout,
                connection, bad status) or an empty response.
        """
        if self._client is None:
            self._client = _get_client(self._api_key, self._timeout)
        client = self._client
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                system=context.system_prompt,
                messages=[{"role": "user", "content": context.user_prompt}],
            )
        except anthropic.APIError as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        text = _extract_text(response)
        if not text:
            msg = "Completion returned no text"
            raise CompletionError(msg)

        logger.info("Got response: %r", text[:50])
        return text
