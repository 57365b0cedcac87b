from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from quotequeue.quotes.models import PendingQuote
from quotequeue.staging.repository import StagingRepository


def _pending(quote_id: str, *, language: str = "english", timestamp: int = 1_000) -> PendingQuote:
    return PendingQuote(
        id=quote_id,
        text=f"Quote text {quote_id}",
        source="Somewhere",
        language=language,
        submitted_by="user-1",
        timestamp=timestamp,
    )


def test_insert_and_get_round_trip(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        repository.insert(_pending("a"))

        stored = repository.get("a")

    assert stored == _pending("a")
    assert stored is not None and stored.approved is False


def test_get_returns_none_for_unknown_id(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        assert repository.get("missing") is None


def test_list_pending_orders_by_timestamp_and_limits(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        for idx in range(12):
            repository.insert(_pending(f"q{idx}", timestamp=10_000 - idx))
        repository.insert(_pending("other", language="german", timestamp=1))

        english = repository.list_pending("english", limit=10)
        everything = repository.list_pending(None, limit=3)

    assert len(english) == 10
    assert [quote.id for quote in english[:3]] == ["q11", "q10", "q9"]
    assert all(quote.language == "english" for quote in english)
    assert [quote.id for quote in everything] == ["other", "q11", "q10"]


def test_list_pending_breaks_timestamp_ties_by_insertion_order(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        repository.insert(_pending("first", timestamp=5))
        repository.insert(_pending("second", timestamp=5))

        listed = repository.list_pending("english")

    assert [quote.id for quote in listed] == ["first", "second"]


def test_list_pending_skips_approved_entries(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        repository.insert(_pending("open"))
        approved = _pending("done")
        approved.approved = True
        repository.insert(approved)

        listed = repository.list_pending("english")
        count = repository.count_pending("english")

    assert [quote.id for quote in listed] == ["open"]
    assert count == 1


def test_insert_within_cap_refuses_when_queue_is_full(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        assert repository.insert_within_cap(_pending("a"), cap=2) is True
        assert repository.insert_within_cap(_pending("b"), cap=2) is True
        assert repository.insert_within_cap(_pending("c"), cap=2) is False
        assert repository.insert_within_cap(_pending("d", language="german"), cap=2) is True

        assert repository.count_pending("english") == 2
        assert repository.get("c") is None


def test_insert_within_cap_validates_cap(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        with pytest.raises(ValueError):
            repository.insert_within_cap(_pending("a"), cap=0)


def test_delete_reports_removed_rows(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        repository.insert(_pending("a"))

        assert repository.delete("a") == 1
        assert repository.delete("a") == 0
        assert repository.list_pending("english") == []


def test_list_pending_validates_limit(tmp_path: Path) -> None:
    with StagingRepository(tmp_path / "staging.db") as repository:
        with pytest.raises(ValueError):
            repository.list_pending("english", limit=0)


def test_repository_is_usable_from_worker_threads(tmp_path: Path) -> None:
    async def _fill(repository: StagingRepository) -> list[bool]:
        return await asyncio.gather(
            *(asyncio.to_thread(repository.insert_within_cap, _pending(f"t{idx}"), 5) for idx in range(8))
        )

    with StagingRepository(tmp_path / "staging.db") as repository:
        inserted = asyncio.run(_fill(repository))
        pending = repository.list_pending("english")

    assert inserted.count(True) == 5
    assert len(pending) == 5
