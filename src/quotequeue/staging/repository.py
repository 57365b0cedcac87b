"""SQLite-backed staging area for pending quote submissions."""

from __future__ import annotations

from pathlib import Path
import sqlite3
import threading

from quotequeue.quotes.models import PendingQuote


PRAGMA_BUSY_TIMEOUT_MS = 5000
DEFAULT_LIST_LIMIT = 10


def apply_runtime_pragmas(connection: sqlite3.Connection) -> None:
    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute(f"PRAGMA busy_timeout={PRAGMA_BUSY_TIMEOUT_MS};")
    connection.execute("PRAGMA synchronous=NORMAL;")


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the pending quote table and its lookup index if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS pending_quotes (
            id TEXT PRIMARY KEY,
            text TEXT NOT NULL,
            source TEXT NOT NULL,
            language TEXT NOT NULL,
            submitted_by TEXT NOT NULL,
            timestamp INTEGER NOT NULL,
            approved INTEGER NOT NULL DEFAULT 0 CHECK(approved IN (0, 1))
        );

        CREATE INDEX IF NOT EXISTS idx_pending_quotes_language_timestamp
        ON pending_quotes(language, approved, timestamp);
        """
    )


def _row_to_quote(row: sqlite3.Row) -> PendingQuote:
    return PendingQuote(
        id=row["id"],
        text=row["text"],
        source=row["source"],
        language=row["language"],
        submitted_by=row["submitted_by"],
        timestamp=int(row["timestamp"]),
        approved=bool(row["approved"]),
    )


class StagingRepository:
    """Keyed collection of pending quotes, queryable by language and age.

    The connection is shared with worker threads, so every statement runs
    under one lock.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._connection = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._lock = threading.Lock()
        self._connection.row_factory = sqlite3.Row
        apply_runtime_pragmas(self._connection)
        ensure_schema(self._connection)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        with self._lock:
            self._connection.close()

    def __enter__(self) -> "StagingRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def count_pending(self, language: str) -> int:
        with self._lock:
            row = self._connection.execute(
                "SELECT COUNT(*) AS c FROM pending_quotes WHERE language = ? AND approved = 0",
                (language,),
            ).fetchone()
        return int(row["c"])

    def insert(self, quote: PendingQuote) -> None:
        with self._lock, self._connection:
            self._connection.execute(
                """
                INSERT INTO pending_quotes (id, text, source, language, submitted_by, timestamp, approved)
                VALUES (:id, :text, :source, :language, :submitted_by, :timestamp, :approved)
                """,
                quote.to_dict(),
            )

    def insert_within_cap(self, quote: PendingQuote, cap: int) -> bool:
        """Insert only while fewer than ``cap`` entries are pending for the language."""

        if cap < 1:
            raise ValueError("cap must be positive")

        with self._lock, self._connection:
            cursor = self._connection.execute(
                """
                INSERT INTO pending_quotes (id, text, source, language, submitted_by, timestamp, approved)
                SELECT :id, :text, :source, :language, :submitted_by, :timestamp, :approved
                WHERE (
                    SELECT COUNT(*) FROM pending_quotes
                    WHERE language = :language AND approved = 0
                ) < :cap
                """,
                {**quote.to_dict(), "cap": cap},
            )
        return cursor.rowcount == 1

    def get(self, quote_id: str) -> PendingQuote | None:
        with self._lock:
            row = self._connection.execute(
                "SELECT * FROM pending_quotes WHERE id = ?",
                (quote_id,),
            ).fetchone()
        if row is None:
            return None
        return _row_to_quote(row)

    def list_pending(self, language: str | None = None, limit: int = DEFAULT_LIST_LIMIT) -> list[PendingQuote]:
        """Return the oldest unresolved entries, optionally for one language."""

        if limit <= 0:
            raise ValueError("limit must be positive")

        with self._lock:
            if language is None:
                rows = self._connection.execute(
                    """
                    SELECT * FROM pending_quotes
                    WHERE approved = 0
                    ORDER BY timestamp ASC, rowid ASC
                    LIMIT ?
                    """,
                    (limit,),
                ).fetchall()
            else:
                rows = self._connection.execute(
                    """
                    SELECT * FROM pending_quotes
                    WHERE approved = 0 AND language = ?
                    ORDER BY timestamp ASC, rowid ASC
                    LIMIT ?
                    """,
                    (language, limit),
                ).fetchall()
        return [_row_to_quote(row) for row in rows]

    def delete(self, quote_id: str) -> int:
        with self._lock, self._connection:
            cursor = self._connection.execute(
                "DELETE FROM pending_quotes WHERE id = ?",
                (quote_id,),
            )
        return int(cursor.rowcount)
