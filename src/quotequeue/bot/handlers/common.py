"""Shared bot handler context resolvers."""

from __future__ import annotations

from telegram import Update
from telegram.ext import ContextTypes

from quotequeue.pipeline.service import ModerationPipeline


class ConfigError(RuntimeError):
    """Raised when required handler configuration is missing or invalid."""


def resolve_pipeline(context: ContextTypes.DEFAULT_TYPE) -> ModerationPipeline:
    pipeline = context.bot_data.get("pipeline")
    if pipeline is None:
        raise ConfigError("Moderation pipeline missing from context.bot_data['pipeline']")
    if not isinstance(pipeline, ModerationPipeline):
        raise ConfigError("context.bot_data['pipeline'] must be a ModerationPipeline")
    return pipeline


def resolve_required(context: ContextTypes.DEFAULT_TYPE, key: str) -> object:
    value = context.bot_data.get(key)
    if value is None:
        raise ConfigError(f"{key} missing from context.bot_data['{key}']")
    return value


def resolve_queue_page_size(context: ContextTypes.DEFAULT_TYPE) -> int:
    return int(resolve_required(context, "queue_page_size"))


def resolve_user_name(update: Update) -> str | None:
    """Return the Telegram username, or the full name when none is set."""

    user = getattr(update, "effective_user", None)
    if user is None:
        return None
    username = getattr(user, "username", None)
    if username:
        return str(username)
    full_name = getattr(user, "full_name", None)
    if full_name:
        return str(full_name)
    return str(user.id)
