"""Telegram moderation bot entrypoint with handler registration and polling."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv
from telegram.ext import Application

load_dotenv()

from quotequeue.bot.config import BotSettings
from quotequeue.bot.handlers.callbacks import build_callback_handlers
from quotequeue.bot.handlers.commands import build_command_handlers
from quotequeue.pipeline.config import ModerationSettings
from quotequeue.pipeline.service import ModerationPipeline


logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def build_application(settings: BotSettings, pipeline: ModerationPipeline) -> Application:
    """Build PTB Application with all handlers registered."""
    application = Application.builder().token(settings.token).build()

    application.bot_data["pipeline"] = pipeline
    application.bot_data["queue_page_size"] = settings.queue_page_size

    for handler in build_command_handlers():
        application.add_handler(handler)

    for handler in build_callback_handlers():
        application.add_handler(handler)

    logger.info("Registered all handlers: commands, callbacks")
    return application


async def run_bot(settings: BotSettings, moderation_settings: ModerationSettings) -> None:
    """Run bot with polling and graceful shutdown."""
    pipeline = ModerationPipeline.from_settings(moderation_settings)
    application = build_application(settings, pipeline)

    await application.initialize()
    logger.info("Bot initialized. Starting polling...")

    await application.start()
    updater = application.updater
    if updater is None:
        raise RuntimeError("Bot updater is not initialized")

    await updater.start_polling(allowed_updates=["message", "callback_query"])
    logger.info("Bot polling started. Press Ctrl+C to stop.")

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Received stop signal. Shutting down...")
    finally:
        await updater.stop()
        await application.stop()
        await application.shutdown()
        pipeline.close()

    logger.info("Bot stopped cleanly.")


def main() -> None:
    """Main entrypoint for the moderation bot."""
    try:
        settings = BotSettings.from_env()
        moderation_settings = ModerationSettings.from_env()
        logger.info(
            "Loaded bot config: repo=%s, db=%s, remotes=%s/%s, branch=%s",
            moderation_settings.repo_path,
            moderation_settings.db_path,
            moderation_settings.pull_remote,
            moderation_settings.push_remote,
            moderation_settings.branch,
        )
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        asyncio.run(run_bot(settings, moderation_settings))
    except KeyboardInterrupt:
        logger.info("Bot interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
