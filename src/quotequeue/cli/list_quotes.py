"""CLI entrypoint for listing the oldest pending quotes."""

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
from quotequeue.pipeline.service import ALL_LANGUAGES


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="List pending quotes, oldest first")
    parser.add_argument("--language", default=ALL_LANGUAGES, help="Language tag or 'all'")
    add_settings_arguments(parser)
    args = parser.parse_args(argv)

    pipeline = open_pipeline(args)
    if pipeline is None:
        return EXIT_CONFIG_ERROR

    try:
        pending = asyncio.run(pipeline.list_pending(args.language))
    except ModerationError as exc:
        print_payload(error_payload(exc))
        return EXIT_MODERATION_ERROR
    finally:
        pipeline.close()

    print_payload({"language": args.language, "results": [quote.to_dict() for quote in pending]})
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
