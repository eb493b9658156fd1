"""Relay bot entry point."""

import logging

from src.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


def _check_environment() -> bool:
    ok = True
    for name, value in (
        ("DISCORD_TOKEN", settings.discord_token),
        ("ANTHROPIC_API_KEY", settings.anthropic_api_key),
    ):
        if value:
            logger.info("%s: set", name)
        else:
            logger.error("%s: missing", name)
            ok = False
    if settings.turso_database_url:
        logger.info("Database: Turso (%s)", settings.turso_database_url)
    else:
        logger.info("Database: %s", settings.database_path)
    return ok


def main() -> None:
    """Start the bot on Discord."""
    from src.bot.app import create_pipeline
    from src.bot.discord.app import create_client

    if not _check_environment():
        raise SystemExit(1)

    logger.info("Starting Relay with model %s...", settings.claude_model)
    client = create_client(create_pipeline())
    # log_handler=None: discord.py logs through the root config above.
    client.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
