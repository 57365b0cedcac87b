"""Staging area for submissions awaiting moderation."""

from quotequeue.staging.repository import DEFAULT_LIST_LIMIT, StagingRepository

__all__ = ["DEFAULT_LIST_LIMIT", "StagingRepository"]
