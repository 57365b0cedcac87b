"""Callback handlers for the Approve/Refuse buttons under /queue."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import CallbackQueryHandler, ContextTypes

from quotequeue.bot.handlers.common import ConfigError, resolve_pipeline, resolve_user_name
from quotequeue.bot.handlers.renderers import (
    APPROVE_PREFIX,
    REFUSE_PREFIX,
    render_approval,
    render_moderation_error,
)
from quotequeue.pipeline.errors import ModerationError

logger = logging.getLogger(__name__)


async def approve_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle approve_<id> button presses."""
    query = update.callback_query
    if query is None or query.data is None:
        return

    # Always answer callback to clear loading state
    await query.answer()

    pending_id = query.data.removeprefix(APPROVE_PREFIX)
    approver = resolve_user_name(update)
    if not pending_id or approver is None:
        await query.edit_message_text("Invalid moderation action.")
        return

    try:
        pipeline = resolve_pipeline(context)
    except ConfigError as error:
        logger.error("approve callback failed due to configuration error: %s", error)
        await query.edit_message_text("Approvals are temporarily unavailable.")
        return

    try:
        result = await pipeline.approve(pending_id, approver=approver)
    except ModerationError as error:
        logger.warning("approve callback for %s failed: %s", pending_id, error)
        await query.edit_message_text(render_moderation_error(error))
        return

    await query.edit_message_text(render_approval(result))


async def refuse_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle refuse_<id> button presses."""
    query = update.callback_query
    if query is None or query.data is None:
        return

    await query.answer()

    pending_id = query.data.removeprefix(REFUSE_PREFIX)
    if not pending_id:
        await query.edit_message_text("Invalid moderation action.")
        return

    try:
        pipeline = resolve_pipeline(context)
    except ConfigError as error:
        logger.error("refuse callback failed due to configuration error: %s", error)
        await query.edit_message_text("Refusals are temporarily unavailable.")
        return

    try:
        await pipeline.refuse(pending_id)
    except ModerationError as error:
        logger.warning("refuse callback for %s failed: %s", pending_id, error)
        await query.edit_message_text(render_moderation_error(error))
        return

    await query.edit_message_text(f"Refused quote {pending_id}.")


def build_callback_handlers() -> list[CallbackQueryHandler]:
    """Build callback query handlers for moderation buttons."""
    return [
        CallbackQueryHandler(approve_callback, pattern=rf"^{APPROVE_PREFIX}"),
        CallbackQueryHandler(refuse_callback, pattern=rf"^{REFUSE_PREFIX}"),
    ]
