"""Error taxonomy raised by moderation pipeline operations."""

from __future__ import annotations

from dataclasses import dataclass

from quotequeue.quotes.models import ApprovedQuote


class ModerationError(RuntimeError):
    """Base class for failures surfaced by the moderation pipeline."""


@dataclass(slots=True)
class ValidationError(ModerationError):
    """A request carried a malformed value; nothing was changed."""

    message: str
    value: str | None = None

    def __str__(self) -> str:
        if self.value is None:
            return self.message
        return f"{self.message}: {self.value!r}"


@dataclass(slots=True)
class CapacityError(ModerationError):
    language: str
    cap: int

    def __str__(self) -> str:
        return f"There are already {self.cap} quotes in the queue for {self.language}."


@dataclass(slots=True)
class NotFoundError(ModerationError):
    pending_id: str

    def __str__(self) -> str:
        return "Quote not found. It might have already been reviewed. Please refresh the list."


@dataclass(slots=True)
class DuplicateQuoteError(ModerationError):
    """Candidate text is too similar to an already published quote."""

    duplicate_id: int
    similarity: float

    def __str__(self) -> str:
        return f"Duplicate quote (id={self.duplicate_id}, similarity={self.similarity:.3f})"


@dataclass(slots=True)
class MissingCanonicalFileError(ModerationError):
    language: str

    def __str__(self) -> str:
        return f"No quote file exists for language {self.language!r}"


@dataclass(slots=True)
class InfrastructureError(ModerationError):
    """git, filesystem or id allocation failed; the staging entry was kept."""

    stage: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (stage={self.stage})"


@dataclass(slots=True)
class StagingCleanupError(ModerationError):
    """The quote was pushed but its staging entry could not be removed."""

    quote: ApprovedQuote
    pending_id: str
    message: str

    def __str__(self) -> str:
        return (
            f"Published quote {self.quote.id} but staging entry {self.pending_id} was not removed: "
            f"{self.message}"
        )
