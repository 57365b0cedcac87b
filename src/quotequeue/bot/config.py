"""Runtime configuration for the Telegram moderation bot."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_QUEUE_PAGE_SIZE = 5


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Validated Telegram bot runtime settings."""

    token: str
    queue_page_size: int = DEFAULT_QUEUE_PAGE_SIZE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BotSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        token = source.get("TELEGRAM_BOT_TOKEN", "").strip()
        if not token:
            raise ValueError("Missing required bot environment variable: TELEGRAM_BOT_TOKEN")

        page_size_raw = source.get("QUOTEQUEUE_QUEUE_PAGE_SIZE", str(DEFAULT_QUEUE_PAGE_SIZE)).strip()
        if not page_size_raw:
            raise ValueError("QUOTEQUEUE_QUEUE_PAGE_SIZE cannot be empty")

        queue_page_size = _parse_positive_int(
            name="QUOTEQUEUE_QUEUE_PAGE_SIZE",
            raw_value=page_size_raw,
            minimum=1,
        )
        return cls(token=token, queue_page_size=queue_page_size)
