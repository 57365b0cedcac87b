"""CLI entrypoint for approving a pending quote and publishing it."""

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
from quotequeue.pipeline.errors import ModerationError, StagingCleanupError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Approve a pending quote and push it upstream")
    parser.add_argument("--id", required=True, dest="pending_id", help="Pending quote id")
    parser.add_argument("--approver", required=True, help="Name recorded as approvedBy")
    parser.add_argument("--text", default=None, help="Edited quote text")
    parser.add_argument("--source", default=None, help="Edited quote source")
    add_settings_arguments(parser)
    args = parser.parse_args(argv)

    pipeline = open_pipeline(args)
    if pipeline is None:
        return EXIT_CONFIG_ERROR

    try:
        result = asyncio.run(
            pipeline.approve(
                args.pending_id,
                edited_text=args.text,
                edited_source=args.source,
                approver=args.approver,
            )
        )
    except StagingCleanupError as exc:
        payload = error_payload(exc)
        payload["quote"] = exc.quote.to_dict()
        print_payload(payload)
        return EXIT_MODERATION_ERROR
    except ModerationError as exc:
        print_payload(error_payload(exc))
        return EXIT_MODERATION_ERROR
    finally:
        pipeline.close()

    print_payload({"message": result.message, "path": result.path, "quote": result.quote.to_dict()})
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
