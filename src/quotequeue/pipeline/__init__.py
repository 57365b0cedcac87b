"""Moderation pipeline for community-submitted quotes."""

from quotequeue.pipeline.config import ModerationSettings
from quotequeue.pipeline.errors import (
    CapacityError,
    DuplicateQuoteError,
    InfrastructureError,
    MissingCanonicalFileError,
    ModerationError,
    NotFoundError,
    StagingCleanupError,
    ValidationError,
)
from quotequeue.pipeline.service import (
    ALL_LANGUAGES,
    ApprovalResult,
    ModerationPipeline,
    SubmitOutcome,
    SubmitStatus,
    validate_language,
)

__all__ = [
    "ALL_LANGUAGES",
    "ApprovalResult",
    "CapacityError",
    "DuplicateQuoteError",
    "InfrastructureError",
    "MissingCanonicalFileError",
    "ModerationError",
    "ModerationPipeline",
    "ModerationSettings",
    "NotFoundError",
    "StagingCleanupError",
    "SubmitOutcome",
    "SubmitStatus",
    "ValidationError",
    "validate_language",
]
