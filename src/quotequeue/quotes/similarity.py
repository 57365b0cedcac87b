"""Bigram similarity scoring for near-duplicate quote detection."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
import re

from quotequeue.quotes.models import CanonicalQuote

SUBMISSION_DUPLICATE_THRESHOLD = 0.9
APPROVAL_DUPLICATE_THRESHOLD = 0.8

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    """Best-scoring existing quote for a candidate text."""

    quote_id: int
    score: float


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[idx : idx + 2] for idx in range(len(text) - 1))


def compare_two_strings(first: str, second: str) -> float:
    """Return the Dice coefficient of character bigrams, ignoring whitespace.

    Identical strings score 1.0, strings sharing no bigram score 0.0. The
    comparison is case-sensitive and symmetric.
    """

    first = _WHITESPACE_RE.sub("", first)
    second = _WHITESPACE_RE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = _bigrams(first)
    second_bigrams = _bigrams(second)
    intersection = sum((first_bigrams & second_bigrams).values())
    return (2.0 * intersection) / (len(first) + len(second) - 2)


def find_best_match(
    candidate: str,
    population: Iterable[CanonicalQuote],
    *,
    threshold: float,
) -> DuplicateMatch | None:
    """Scan every quote and return the highest score at or above ``threshold``."""

    if not 0.0 <= threshold <= 1.0:
        raise ValueError("threshold must be between 0.0 and 1.0")

    best: DuplicateMatch | None = None
    for quote in population:
        score = compare_two_strings(quote.text, candidate)
        if score < threshold:
            continue
        if best is None or score > best.score:
            best = DuplicateMatch(quote_id=quote.id, score=score)
    return best
