"""CLI entrypoint for submitting a quote into the moderation queue."""

from __future__ import annotations

import argparse
import asyncio

from quotequeue.cli.common import (
    EXIT_CONFIG_ERROR,
    EXIT_MODERATION_ERROR,
    EXIT_OK,
    add_settings_arguments,
    error_payload,
    open_pipeline,
    print_payload,
)
from quotequeue.pipeline.errors import ModerationError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Submit a quote for moderation")
    parser.add_argument("--text", required=True, help="Quote text")
    parser.add_argument("--source", required=True, help="Where the quote comes from")
    parser.add_argument("--language", required=True, help="Language tag, e.g. english")
    parser.add_argument("--submitted-by", required=True, help="Submitter identity")
    add_settings_arguments(parser)
    args = parser.parse_args(argv)

    pipeline = open_pipeline(args)
    if pipeline is None:
        return EXIT_CONFIG_ERROR

    try:
        outcome = asyncio.run(pipeline.submit(args.text, args.source, args.language, args.submitted_by))
    except ModerationError as exc:
        print_payload(error_payload(exc))
        return EXIT_MODERATION_ERROR
    finally:
        pipeline.close()

    print_payload(
        {
            "status": outcome.status.value,
            "language": outcome.language,
            "pending_id": outcome.pending_id,
            "duplicate_id": outcome.duplicate_id,
            "similarity": outcome.similarity,
        }
    )
    return EXIT_OK if outcome.accepted else EXIT_MODERATION_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
