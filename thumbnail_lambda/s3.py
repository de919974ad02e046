"""
AWS S3 access: object fetch and thumbnail publish.

Flow:
  1. The handler builds one boto3 client per container (region resolved from
     settings, then the boto3 session, then a fixed fallback).
  2. The pipeline reads source objects through ``S3ObjectStore.fetch``.
  3. Thumbnails are written with a single ``PutObject`` through
     ``S3ObjectStore.publish``; the object either lands whole or not at all.

botocore errors never leave this module: they are turned into FetchError or
PublishError with the bucket/key and the S3 error code attached.
"""
from __future__ import annotations

import logging
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from thumbnail_lambda.config import Settings
from thumbnail_lambda.constants import THUMBNAIL_CONTENT_TYPE
from thumbnail_lambda.exceptions import FetchError, PublishError
from thumbnail_lambda.schemas import DestinationRef, SourceRef

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Storage collaborator used by the pipeline. Must be thread-safe."""

    def fetch(self, ref: SourceRef) -> bytes: ...

    def publish(self, dest: DestinationRef, payload: bytes) -> None: ...


def resolve_region(settings: Settings) -> str:
    """Explicit setting, then the boto3 default chain, then the fallback region."""
    if settings.aws_region:
        return settings.aws_region
    return boto3.session.Session().region_name or settings.default_aws_region


def build_s3_client(settings: Settings):
    region = resolve_region(settings)
    client = boto3.client("s3", region_name=region)
    logger.info("S3 client region %s", region)
    return client


def _error_code(exc: Exception) -> str | None:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code") or None
    return None


class S3ObjectStore:
    """ObjectStore backed by a boto3 S3 client. No retries beyond botocore's own."""

    def __init__(self, client) -> None:
        self._client = client

    def fetch(self, ref: SourceRef) -> bytes:
        """Download the whole object into memory."""
        logger.info("Fetching %s", ref)
        try:
            response = self._client.get_object(Bucket=ref.bucket_name, Key=ref.object_key)
            data = response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise FetchError(ref.bucket_name, ref.object_key, str(exc), _error_code(exc)) from exc

        if not data:
            raise FetchError(ref.bucket_name, ref.object_key, "object is empty")

        logger.info("Downloaded %s (%d bytes)", ref, len(data))
        return data

    def publish(self, dest: DestinationRef, payload: bytes) -> None:
        """Write the thumbnail, overwriting whatever is at the destination key."""
        logger.info("Publishing %s (%d bytes)", dest, len(payload))
        try:
            self._client.put_object(
                Bucket=dest.bucket_name,
                Key=dest.object_key,
                Body=payload,
                ContentType=THUMBNAIL_CONTENT_TYPE,
            )
        except (BotoCoreError, ClientError) as exc:
            raise PublishError(dest.bucket_name, dest.object_key, str(exc), _error_code(exc)) from exc
