"""IncomingMessage protocol: what the pipeline needs from a chat message."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IncomingMessage(Protocol):
    """A message received from the chat platform."""

    @property
    def channel_id(self) -> str:
        """Identifier of the channel the message was posted in."""
        ...

    @property
    def content(self) -> str:
        """Message text."""
        ...

    @property
    def author(self) -> str:
        """Display tag of the sender, for logging."""
        ...

    @property
    def author_is_bot(self) -> bool:
        ...

    async def reply(self, text: str) -> None:
        """Post *text* as a reply to this message."""
        ...
