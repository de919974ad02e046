"""
Run the thumbnail handler locally against a saved S3 event.

Usage:
  python -m thumbnail_lambda event.json
  python -m thumbnail_lambda event.json --max-workers 1 --propagate-publish-errors

Uses the default AWS credential chain, so objects are really read and written.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from thumbnail_lambda.config import get_settings
from thumbnail_lambda.exceptions import BatchPublishError
from thumbnail_lambda.handler import process_event


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build S3 thumbnails from a saved event")
    parser.add_argument("event_path", help="Path to an S3 (or SQS-wrapped S3) event JSON file")
    parser.add_argument("--max-workers", type=int, default=None, help="Record worker pool size")
    parser.add_argument(
        "--propagate-publish-errors",
        action="store_true",
        help="Exit non-zero when any thumbnail upload fails",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s:%(name)s: %(message)s",
    )

    path = Path(args.event_path)
    if not path.exists():
        print(f"Error: event file not found at {path}", file=sys.stderr)
        return 2

    updates: dict = {}
    if args.max_workers is not None:
        updates["max_workers"] = max(1, args.max_workers)
    if args.propagate_publish_errors:
        updates["propagate_publish_errors"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    event = json.loads(path.read_text(encoding="utf-8"))
    try:
        response = process_event(event, settings)
    except BatchPublishError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(response, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
