"""
AWS Lambda handler: S3 thumbnails

Triggered by S3 ObjectCreated events (directly or through an SQS queue).

Flow:
  1. Flattens the event into S3 notification records.
  2. Skips anything that is not an ObjectCreated event with a bucket and key.
  3. Downloads the PNG, shrinks it to a small thumbnail (128 px longest edge).
  4. Uploads it under the same key into "<source bucket>-thumbs".

Deployment notes:
  - The "-thumbs" bucket must exist next to every source bucket.
  - The function needs s3:GetObject on the source and s3:PutObject on the
    "-thumbs" bucket.
  - Only PNG uploads should be routed to this function.

Environment variables: see thumbnail_lambda.config.Settings.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from thumbnail_lambda.config import Settings, get_settings
from thumbnail_lambda.events import parse_event
from thumbnail_lambda.pipeline import ThumbnailPipeline
from thumbnail_lambda.s3 import ObjectStore, S3ObjectStore, build_s3_client
from thumbnail_lambda.schemas import BatchResult

logger = logging.getLogger()
logger.setLevel(get_settings().log_level)


@lru_cache
def get_object_store() -> S3ObjectStore:
    """One client per container; reused across warm invocations."""
    return S3ObjectStore(build_s3_client(get_settings()))


def process_event(
    event: dict,
    settings: Settings,
    store: ObjectStore | None = None,
) -> dict:
    """Run one invocation's records through the pipeline and build the response."""
    records = parse_event(event)
    if not records:
        return BatchResult().to_response()

    pipeline = ThumbnailPipeline(store or get_object_store(), settings)
    return pipeline.process(records).to_response()


def handler(event: dict, context: object) -> dict:
    """Lambda entry point: builds thumbnails for S3 object-created events."""
    logger.info(
        "Invocation %s: %d top-level records",
        getattr(context, "aws_request_id", "-"),
        len(event.get("Records") or []),
    )
    return process_event(event, get_settings())
