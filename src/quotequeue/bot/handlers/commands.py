"""Command handlers for /start, /help, /submit, /queue, /approve and /refuse."""

from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from quotequeue.bot.handlers.common import (
    ConfigError,
    resolve_pipeline,
    resolve_queue_page_size,
    resolve_user_name,
)
from quotequeue.bot.handlers.renderers import (
    build_moderation_keyboard,
    render_approval,
    render_moderation_error,
    render_queue_page,
    render_submit_outcome,
)
from quotequeue.pipeline.errors import ModerationError
from quotequeue.pipeline.service import ALL_LANGUAGES

logger = logging.getLogger(__name__)

SUBMIT_USAGE = (
    "Usage: /submit <language> | <source> | <text>\n\n"
    "Example: /submit english | Alice in Wonderland | Curiouser and curiouser!"
)


def _parse_submit_args(raw: str) -> tuple[str, str, str] | None:
    parts = [part.strip() for part in raw.split("|", 2)]
    if len(parts) != 3 or not all(parts):
        return None
    language, source, text = parts
    return language, source, text


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command with usage instructions."""
    del context
    if update.message is None:
        return

    text = (
        "Quote moderation bot.\n\n"
        "Use:\n"
        "• /submit <language> | <source> | <text> — submit a quote\n"
        "• /queue [language] — show the oldest pending quotes\n"
        "• /approve <id> [edited text] — publish a pending quote\n"
        "• /refuse <id> — drop a pending quote\n"
        "• /help — command reference"
    )
    await update.message.reply_text(text)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command with detailed usage guidance."""
    del context
    if update.message is None:
        return

    text = (
        "Commands:\n\n"
        "/submit <language> | <source> | <text>\n"
        "  Rejected when the queue is full, the language has no quote file,\n"
        "  or the text is too close to a published quote.\n\n"
        "/queue [language]\n"
        "  Up to 10 oldest pending quotes, with Approve/Refuse buttons.\n"
        "  Without a language all languages are listed.\n\n"
        "/approve <id> [edited text]\n"
        "  Pulls the quote file, checks for duplicates, commits and pushes.\n\n"
        "/refuse <id>\n"
        "  Removes the quote from the queue without publishing."
    )
    await update.message.reply_text(text)


async def submit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /submit <language> | <source> | <text>."""
    if update.message is None:
        return

    submitter = resolve_user_name(update)
    if submitter is None:
        await update.message.reply_text("Could not determine the user.")
        return

    parsed = _parse_submit_args(" ".join(context.args or []))
    if parsed is None:
        await update.message.reply_text(SUBMIT_USAGE)
        return
    language, source, text = parsed

    try:
        pipeline = resolve_pipeline(context)
    except ConfigError as error:
        logger.error("/submit failed due to configuration error: %s", error)
        await update.message.reply_text("Submissions are temporarily unavailable.")
        return

    try:
        outcome = await pipeline.submit(text, source, language, submitter)
    except ModerationError as error:
        logger.warning("/submit rejected: %s", error)
        await update.message.reply_text(render_moderation_error(error))
        return

    await update.message.reply_text(render_submit_outcome(outcome))


async def queue_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /queue [language] with moderation buttons."""
    if update.message is None:
        return

    language = " ".join(context.args or []).strip() or ALL_LANGUAGES

    try:
        pipeline = resolve_pipeline(context)
        page_size = resolve_queue_page_size(context)
    except ConfigError as error:
        logger.error("/queue failed due to configuration error: %s", error)
        await update.message.reply_text("The queue is temporarily unavailable.")
        return

    try:
        pending = await pipeline.list_pending(language)
    except ModerationError as error:
        logger.warning("/queue failed: %s", error)
        await update.message.reply_text(render_moderation_error(error))
        return

    shown = pending[:page_size]
    await update.message.reply_text(
        render_queue_page(quotes=shown, language=language),
        reply_markup=build_moderation_keyboard(shown),
    )


async def approve_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /approve <id> [edited text]."""
    if update.message is None:
        return

    approver = resolve_user_name(update)
    if approver is None:
        await update.message.reply_text("Could not determine the user.")
        return

    args = list(context.args or [])
    if not args:
        await update.message.reply_text("Usage: /approve <id> [edited text]")
        return
    pending_id = args[0]
    edited_text = " ".join(args[1:]).strip() or None

    try:
        pipeline = resolve_pipeline(context)
    except ConfigError as error:
        logger.error("/approve failed due to configuration error: %s", error)
        await update.message.reply_text("Approvals are temporarily unavailable.")
        return

    try:
        result = await pipeline.approve(pending_id, edited_text=edited_text, approver=approver)
    except ModerationError as error:
        logger.warning("/approve %s failed: %s", pending_id, error)
        await update.message.reply_text(render_moderation_error(error))
        return

    await update.message.reply_text(render_approval(result))


async def refuse_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /refuse <id>."""
    if update.message is None:
        return

    args = list(context.args or [])
    if not args:
        await update.message.reply_text("Usage: /refuse <id>")
        return
    pending_id = args[0]

    try:
        pipeline = resolve_pipeline(context)
    except ConfigError as error:
        logger.error("/refuse failed due to configuration error: %s", error)
        await update.message.reply_text("Refusals are temporarily unavailable.")
        return

    try:
        await pipeline.refuse(pending_id)
    except ModerationError as error:
        logger.warning("/refuse %s failed: %s", pending_id, error)
        await update.message.reply_text(render_moderation_error(error))
        return

    await update.message.reply_text(f"Refused quote {pending_id}.")


def build_command_handlers() -> list[CommandHandler]:
    """Build all command handlers."""
    return [
        CommandHandler("start", start_command),
        CommandHandler("help", help_command),
        CommandHandler("submit", submit_command),
        CommandHandler("queue", queue_command),
        CommandHandler("approve", approve_command),
        CommandHandler("refuse", refuse_command),
    ]
