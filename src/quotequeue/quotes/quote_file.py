"""Per-language canonical quote files stored inside a git working copy."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any

from quotequeue.quotes.models import CanonicalQuote

DEFAULT_QUOTES_DIR = "frontend/static/quotes"
DEFAULT_GROUPS: tuple[tuple[int, int], ...] = ((0, 100), (101, 300), (301, 600), (601, 9999))

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuoteFileFormatError(RuntimeError):
    """Raised when a quote file on disk does not have the expected shape."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class IdAllocationError(RuntimeError):
    """Raised when no valid next id can be derived from a quote file."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_payload(path: Path, payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise QuoteFileFormatError(path=path, message="Quote file must contain a JSON object")

    if not isinstance(payload.get("language"), str):
        raise QuoteFileFormatError(path=path, message="Quote file is missing string 'language'")

    groups = payload.get("groups")
    if not isinstance(groups, list):
        raise QuoteFileFormatError(path=path, message="Quote file is missing list 'groups'")
    for group in groups:
        if not isinstance(group, list) or len(group) != 2 or not all(_is_int(bound) for bound in group):
            raise QuoteFileFormatError(path=path, message=f"Invalid length group: {group!r}")

    quotes = payload.get("quotes")
    if not isinstance(quotes, list):
        raise QuoteFileFormatError(path=path, message="Quote file is missing list 'quotes'")
    for idx, quote in enumerate(quotes):
        if not isinstance(quote, dict):
            raise QuoteFileFormatError(path=path, message=f"Quote #{idx} is not an object")
        if not isinstance(quote.get("text"), str) or not isinstance(quote.get("source"), str):
            raise QuoteFileFormatError(path=path, message=f"Quote #{idx} needs string 'text' and 'source'")
        if not _is_int(quote.get("length")) or not _is_int(quote.get("id")):
            raise QuoteFileFormatError(path=path, message=f"Quote #{idx} needs integer 'length' and 'id'")
        for optional_key in ("britishText", "approvedBy"):
            if optional_key in quote and not isinstance(quote[optional_key], str):
                raise QuoteFileFormatError(path=path, message=f"Quote #{idx} has non-string '{optional_key}'")

    return payload


@dataclass(slots=True)
class QuoteFile:
    """Decoded quote file.

    The raw payload is kept as decoded so that an append leaves key order,
    unknown keys and every earlier quote exactly as they were on disk.
    """

    language: str
    path: Path
    payload: dict[str, Any]
    trailing_newline: bool = False
    created: bool = field(default=False, compare=False)

    @classmethod
    def new(cls, language: str, path: Path) -> "QuoteFile":
        payload: dict[str, Any] = {
            "language": language,
            "groups": [list(group) for group in DEFAULT_GROUPS],
            "quotes": [],
        }
        return cls(language=language, path=path, payload=payload, created=True)

    @classmethod
    def from_json(cls, raw_text: str, *, path: Path) -> "QuoteFile":
        try:
            decoded = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise QuoteFileFormatError(path=path, message=f"Invalid JSON: {exc.msg}") from exc

        payload = _validate_payload(path, decoded)
        return cls(
            language=payload["language"],
            path=path,
            payload=payload,
            trailing_newline=raw_text.endswith("\n"),
        )

    @property
    def groups(self) -> list[list[int]]:
        return self.payload["groups"]

    @property
    def quotes(self) -> list[CanonicalQuote]:
        return [CanonicalQuote.from_dict(item) for item in self.payload["quotes"]]

    def next_id(self) -> int:
        next_id = max((int(item["id"]) for item in self.payload["quotes"]), default=0) + 1
        if next_id < 1:
            raise IdAllocationError(path=self.path, message="Failed to get max id")
        return next_id

    def append(self, quote: CanonicalQuote) -> None:
        self.payload["quotes"].append(quote.to_dict())

    def to_json(self) -> str:
        text = json.dumps(self.payload, ensure_ascii=False, indent=2)
        return text + "\n" if self.trailing_newline else text


class QuoteFileRepository:
    """Filesystem access to the canonical quote files of one working copy."""

    def __init__(self, root: str | Path, quotes_dir: str = DEFAULT_QUOTES_DIR) -> None:
        self._root = Path(root)
        self._quotes_dir = quotes_dir

    @property
    def root(self) -> Path:
        return self._root

    def relative_path_for(self, language: str) -> str:
        return f"{self._quotes_dir.strip('/')}/{language}.json"

    def path_for(self, language: str) -> Path:
        return self._root / self.relative_path_for(language)

    def exists(self, language: str) -> bool:
        return self.path_for(language).is_file()

    def load(self, language: str) -> QuoteFile | None:
        path = self.path_for(language)
        if not path.is_file():
            return None
        try:
            raw_text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise QuoteFileFormatError(path=path, message=f"File is not valid UTF-8: {exc.reason}") from exc
        return QuoteFile.from_json(raw_text, path=path)

    def save(self, quote_file: QuoteFile) -> None:
        quote_file.path.parent.mkdir(parents=True, exist_ok=True)
        quote_file.path.write_text(quote_file.to_json(), encoding="utf-8")
        logger.debug("Wrote %s quotes to %s", len(quote_file.payload["quotes"]), quote_file.path)

    def discard(self, language: str) -> None:
        self.path_for(language).unlink(missing_ok=True)
