"""Quote data model, canonical quote files and duplicate detection."""

from quotequeue.quotes.models import ApprovedQuote, CanonicalQuote, PendingQuote
from quotequeue.quotes.quote_file import (
    DEFAULT_GROUPS,
    IdAllocationError,
    QuoteFile,
    QuoteFileFormatError,
    QuoteFileRepository,
)
from quotequeue.quotes.similarity import (
    APPROVAL_DUPLICATE_THRESHOLD,
    SUBMISSION_DUPLICATE_THRESHOLD,
    DuplicateMatch,
    compare_two_strings,
    find_best_match,
)

__all__ = [
    "APPROVAL_DUPLICATE_THRESHOLD",
    "ApprovedQuote",
    "CanonicalQuote",
    "DEFAULT_GROUPS",
    "DuplicateMatch",
    "IdAllocationError",
    "PendingQuote",
    "QuoteFile",
    "QuoteFileFormatError",
    "QuoteFileRepository",
    "SUBMISSION_DUPLICATE_THRESHOLD",
    "compare_two_strings",
    "find_best_match",
]
