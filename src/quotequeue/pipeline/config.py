"""Runtime configuration for the moderation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from quotequeue.quotes.quote_file import DEFAULT_QUOTES_DIR
from quotequeue.vcs.gateway import DEFAULT_GIT_EXECUTABLE, DEFAULT_GIT_TIMEOUT_SECONDS


DEFAULT_DB_PATH = ".quotequeue-staging.db"
DEFAULT_PULL_REMOTE = "upstream"
DEFAULT_PUSH_REMOTE = "origin"
DEFAULT_BRANCH = "master"


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    value = float(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ModerationSettings:
    """Validated locations and remotes used by the moderation pipeline."""

    repo_path: Path
    db_path: Path = Path(DEFAULT_DB_PATH)
    quotes_dir: str = DEFAULT_QUOTES_DIR
    pull_remote: str = DEFAULT_PULL_REMOTE
    push_remote: str = DEFAULT_PUSH_REMOTE
    branch: str = DEFAULT_BRANCH
    git_executable: str = DEFAULT_GIT_EXECUTABLE
    git_timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ModerationSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        repo_path_raw = source.get("QUOTEQUEUE_REPO_PATH", "").strip()
        if not repo_path_raw:
            raise ValueError("Missing required environment variable: QUOTEQUEUE_REPO_PATH")

        values = {
            "QUOTEQUEUE_DB_PATH": source.get("QUOTEQUEUE_DB_PATH", DEFAULT_DB_PATH).strip(),
            "QUOTEQUEUE_QUOTES_DIR": source.get("QUOTEQUEUE_QUOTES_DIR", DEFAULT_QUOTES_DIR).strip(),
            "QUOTEQUEUE_PULL_REMOTE": source.get("QUOTEQUEUE_PULL_REMOTE", DEFAULT_PULL_REMOTE).strip(),
            "QUOTEQUEUE_PUSH_REMOTE": source.get("QUOTEQUEUE_PUSH_REMOTE", DEFAULT_PUSH_REMOTE).strip(),
            "QUOTEQUEUE_BRANCH": source.get("QUOTEQUEUE_BRANCH", DEFAULT_BRANCH).strip(),
            "QUOTEQUEUE_GIT_EXECUTABLE": source.get("QUOTEQUEUE_GIT_EXECUTABLE", DEFAULT_GIT_EXECUTABLE).strip(),
            "QUOTEQUEUE_GIT_TIMEOUT_SECONDS": source.get(
                "QUOTEQUEUE_GIT_TIMEOUT_SECONDS", str(DEFAULT_GIT_TIMEOUT_SECONDS)
            ).strip(),
        }
        for name, value in values.items():
            if not value:
                raise ValueError(f"{name} cannot be empty")

        git_timeout_seconds = _parse_positive_float(
            name="QUOTEQUEUE_GIT_TIMEOUT_SECONDS",
            raw_value=values["QUOTEQUEUE_GIT_TIMEOUT_SECONDS"],
            minimum=1.0,
        )

        return cls(
            repo_path=Path(repo_path_raw),
            db_path=Path(values["QUOTEQUEUE_DB_PATH"]),
            quotes_dir=values["QUOTEQUEUE_QUOTES_DIR"],
            pull_remote=values["QUOTEQUEUE_PULL_REMOTE"],
            push_remote=values["QUOTEQUEUE_PUSH_REMOTE"],
            branch=values["QUOTEQUEUE_BRANCH"],
            git_executable=values["QUOTEQUEUE_GIT_EXECUTABLE"],
            git_timeout_seconds=git_timeout_seconds,
        )
