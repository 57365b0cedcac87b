"""Data structures shared by the staging area, quote files and the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class PendingQuote:
    """A community submission waiting for moderation."""

    id: str
    text: str
    source: str
    language: str
    submitted_by: str
    timestamp: int
    approved: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "source": self.source,
            "language": self.language,
            "submitted_by": self.submitted_by,
            "timestamp": self.timestamp,
            "approved": self.approved,
        }


@dataclass(slots=True)
class CanonicalQuote:
    """A published quote as stored in a per-language quote file."""

    id: int
    text: str
    source: str
    length: int
    british_text: str | None = None
    approved_by: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CanonicalQuote":
        return cls(
            id=int(payload["id"]),
            text=str(payload["text"]),
            source=str(payload["source"]),
            length=int(payload["length"]),
            british_text=payload.get("britishText"),
            approved_by=payload.get("approvedBy"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk key names and order."""

        payload: dict[str, Any] = {"text": self.text}
        if self.british_text is not None:
            payload["britishText"] = self.british_text
        if self.approved_by is not None:
            payload["approvedBy"] = self.approved_by
        payload["source"] = self.source
        payload["length"] = self.length
        payload["id"] = self.id
        return payload


# An approval always records who approved it.
ApprovedQuote = CanonicalQuote
