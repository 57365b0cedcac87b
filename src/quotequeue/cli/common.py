"""Shared helpers for the moderation CLI entrypoints."""

from __future__ import annotations

import argparse
import json
import os
from typing import Any

from dotenv import load_dotenv

from quotequeue.pipeline.config import ModerationSettings
from quotequeue.pipeline.errors import ModerationError
from quotequeue.pipeline.service import ModerationPipeline

EXIT_OK = 0
EXIT_MODERATION_ERROR = 1
EXIT_CONFIG_ERROR = 2


def add_settings_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--repo-path", default=None, help="Git working copy holding the quote files")
    parser.add_argument("--db-path", default=None, help="SQLite staging database path")


def load_settings(args: argparse.Namespace) -> ModerationSettings:
    load_dotenv()
    environ = dict(os.environ)
    if args.repo_path:
        environ["QUOTEQUEUE_REPO_PATH"] = args.repo_path
    if args.db_path:
        environ["QUOTEQUEUE_DB_PATH"] = args.db_path
    return ModerationSettings.from_env(environ)


def open_pipeline(args: argparse.Namespace) -> ModerationPipeline | None:
    """Build the pipeline, printing a config error payload on failure."""

    try:
        settings = load_settings(args)
    except ValueError as exc:
        print_payload({"error": str(exc), "kind": "ConfigError"})
        return None
    return ModerationPipeline.from_settings(settings)


def error_payload(error: ModerationError) -> dict[str, Any]:
    return {"error": str(error), "kind": type(error).__name__}


def print_payload(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))
