"""CLI entrypoint for refusing a pending quote."""

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
    parser = argparse.ArgumentParser(description="Refuse a pending quote")
    parser.add_argument("--id", required=True, dest="pending_id", help="Pending quote id")
    add_settings_arguments(parser)
    args = parser.parse_args(argv)

    pipeline = open_pipeline(args)
    if pipeline is None:
        return EXIT_CONFIG_ERROR

    try:
        asyncio.run(pipeline.refuse(args.pending_id))
    except ModerationError as exc:
        print_payload(error_payload(exc))
        return EXIT_MODERATION_ERROR
    finally:
        pipeline.close()

    print_payload({"refused": args.pending_id})
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
