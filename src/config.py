"""Application settings loaded from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Relay configuration. All values come from environment variables."""

    # Discord
    discord_token: str = Field(default="")

    # Anthropic
    anthropic_api_key: str = Field(default="")
    claude_model: str = Field(default="claude-sonnet-4-5-20250929")
    max_output_tokens: int = Field(default=500)
    temperature: float = Field(default=0.7)
    completion_timeout_seconds: float = Field(default=60.0)

    # Database
    database_path: Path = Field(default=Path("data/relay.db"))

    # Turso (hosted libSQL): when set, overrides local database_path
    turso_database_url: str = Field(default="")
    turso_auth_token: str = Field(default="")

    # Blob storage for knowledge files
    storage_dir: Path = Field(default=Path("data/knowledge-base"))

    # Knowledge retrieval
    knowledge_file_limit: int = Field(default=3)
    knowledge_excerpt_chars: int = Field(default=1000)
    knowledge_ingest_chars: int = Field(default=5000)

    # Reply delivery (Discord rejects messages over 2000 characters)
    message_char_limit: int = Field(default=2000)
    reply_chunk_size: int = Field(default=1990)

    # Rolling memory; 0 keeps every exchange
    memory_max_exchanges: int = Field(default=0)

    # Prompting
    default_instructions: str = Field(default="You are a helpful Discord bot assistant.")
    error_reply: str = Field(default="❌ An error occurred processing your message.")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)


@dataclass(frozen=True)
class PipelineConfig:
    """Knobs the message pipeline needs, resolved once at startup.

    Tests build this directly instead of going through the environment.
    """

    model: str = "claude-sonnet-4-5-20250929"
    max_output_tokens: int = 500
    temperature: float = 0.7
    knowledge_file_limit: int = 3
    knowledge_excerpt_chars: int = 1000
    message_char_limit: int = 2000
    reply_chunk_size: int = 1990
    memory_max_exchanges: int = 0
    default_instructions: str = "You are a helpful Discord bot assistant."
    error_reply: str = "❌ An error occurred processing your message."

    def __post_init__(self) -> None:
        if self.reply_chunk_size <= 0:
            msg = f"reply_chunk_size must be positive, got {self.reply_chunk_size}"
            raise ValueError(msg)
        if self.reply_chunk_size > self.message_char_limit:
            msg = (
                f"reply_chunk_size ({self.reply_chunk_size}) exceeds "
                f"message_char_limit ({self.message_char_limit})"
            )
            raise ValueError(msg)

    @classmethod
    def from_settings(cls, s: Settings) -> "PipelineConfig":
        return cls(
            model=s.claude_model,
            max_output_tokens=s.max_output_tokens,
            temperature=s.temperature,
            knowledge_file_limit=s.knowledge_file_limit,
            knowledge_excerpt_chars=s.knowledge_excerpt_chars,
            message_char_limit=s.message_char_limit,
            reply_chunk_size=s.reply_chunk_size,
            memory_max_exchanges=s.memory_max_exchanges,
            default_instructions=s.default_instructions,
            error_reply=s.error_reply,
        )


settings = Settings()
