"""Rendering helpers for moderation queue and outcome messages."""

from __future__ import annotations

from collections.abc import Sequence

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from quotequeue.pipeline.errors import (
    DuplicateQuoteError,
    InfrastructureError,
    ModerationError,
    NotFoundError,
    StagingCleanupError,
    ValidationError,
)
from quotequeue.pipeline.service import ApprovalResult, SubmitOutcome, SubmitStatus
from quotequeue.quotes.models import PendingQuote

APPROVE_PREFIX = "approve_"
REFUSE_PREFIX = "refuse_"
PREVIEW_SIZE = 300


def render_queue_page(*, quotes: Sequence[PendingQuote], language: str) -> str:
    """Render the pending queue as a numbered list."""
    if not quotes:
        return f"No pending quotes for {language}."

    text = f"Pending quotes ({language}), oldest first:\n\n"
    for idx, quote in enumerate(quotes, 1):
        preview = quote.text if len(quote.text) <= PREVIEW_SIZE else quote.text[:PREVIEW_SIZE] + "..."
        text += f"{idx}. [{quote.language}] {preview}\n   — {quote.source}\n   id: {quote.id}\n\n"
    return text


def build_moderation_keyboard(quotes: Sequence[PendingQuote]) -> InlineKeyboardMarkup | None:
    """Build one Approve/Refuse button row per pending quote."""
    rows = [
        [
            InlineKeyboardButton(f"✅ {idx}", callback_data=f"{APPROVE_PREFIX}{quote.id}"),
            InlineKeyboardButton(f"❌ {idx}", callback_data=f"{REFUSE_PREFIX}{quote.id}"),
        ]
        for idx, quote in enumerate(quotes, 1)
    ]
    if not rows:
        return None
    return InlineKeyboardMarkup(rows)


def render_submit_outcome(outcome: SubmitOutcome) -> str:
    if outcome.status is SubmitStatus.ACCEPTED:
        return f"Quote submitted for review. Id: {outcome.pending_id}"
    if outcome.status is SubmitStatus.QUEUE_FULL:
        return f"The review queue for {outcome.language} is full. Please try again later."
    if outcome.status is SubmitStatus.LANGUAGE_MISSING:
        return f"There is no quote file for {outcome.language} yet."
    return (
        f"This quote looks like an existing one (id {outcome.duplicate_id}, "
        f"similarity {outcome.similarity:.2f})."
    )


def render_approval(result: ApprovalResult) -> str:
    quote = result.quote
    return f"{result.message}\nId: {quote.id}, length: {quote.length}\n{quote.text}\n— {quote.source}"


def render_infrastructure_error(error: InfrastructureError) -> str:
    if error.stage == "gateway":
        return "Moderation is unavailable: the quote repository is not a usable git working copy."
    if error.stage == "read":
        return "The quote file could not be read. Nothing was changed; please check the repository."
    return f"Publishing failed at {error.stage}. The quote stays in the queue; please retry."


def render_moderation_error(error: ModerationError) -> str:
    """Map a pipeline failure to a moderator-facing message."""
    if isinstance(error, NotFoundError):
        return str(error)
    if isinstance(error, DuplicateQuoteError):
        return f"Duplicate of quote {error.duplicate_id} (similarity {error.similarity:.2f}). Not published."
    if isinstance(error, ValidationError):
        return f"Invalid request: {error}"
    if isinstance(error, StagingCleanupError):
        return (
            f"Quote {error.quote.id} was published, but its queue entry {error.pending_id} "
            "could not be removed. Please remove it manually."
        )
    if isinstance(error, InfrastructureError):
        return render_infrastructure_error(error)
    return f"Moderation failed: {error}"
