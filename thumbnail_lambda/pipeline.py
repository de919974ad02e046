"""
Batch orchestrator: filter, fetch, transform, resolve, publish.

Each record runs its steps strictly in order; records are independent and
are fanned out over a bounded thread pool (``max_workers=1`` runs them one
after another).  Every per-record failure ends in a terminal RecordStatus:

  skipped_invalid           not a creation event, or bucket/key missing
  skipped_fetch_failed      GetObject failed or the object was empty
  skipped_transform_failed  payload is not a decodable PNG
  published                 thumbnail written to <bucket>-thumbs/<key>
  publish_failed            PutObject failed (logged, not propagated by default)
  skipped_error             any other exception (logged with traceback)

No record can fail the batch.  With ``propagate_publish_errors`` the batch
still completes, then BatchPublishError is raised for the failed uploads.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from thumbnail_lambda.config import Settings
from thumbnail_lambda.constants import DEFAULT_BUCKET_SUFFIX, RecordStatus
from thumbnail_lambda.events import filter_record, rejection_reason
from thumbnail_lambda.exceptions import BatchPublishError, FetchError, PublishError, TransformError
from thumbnail_lambda.processor import ThumbnailProcessor
from thumbnail_lambda.s3 import ObjectStore
from thumbnail_lambda.schemas import (
    BatchResult,
    DestinationRef,
    NotificationRecord,
    RecordResult,
    SourceRef,
)

logger = logging.getLogger(__name__)


def resolve_destination_bucket(bucket_name: str, suffix: str = DEFAULT_BUCKET_SUFFIX) -> str:
    return bucket_name + suffix


def resolve_destination(ref: SourceRef, suffix: str = DEFAULT_BUCKET_SUFFIX) -> DestinationRef:
    """Sibling bucket, same key."""
    return DestinationRef(
        bucket_name=resolve_destination_bucket(ref.bucket_name, suffix),
        object_key=ref.object_key,
    )


class ThumbnailPipeline:
    """Runs notification batches against an injected object store."""

    def __init__(
        self,
        store: ObjectStore,
        settings: Settings,
        processor: ThumbnailProcessor | None = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._processor = processor or ThumbnailProcessor(settings.thumbnail_max_size)

    def process(self, records: list[NotificationRecord]) -> BatchResult:
        workers = min(self._settings.max_workers, len(records))
        if workers <= 1:
            results = [self.process_record(r) for r in records]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="thumbs") as pool:
                results = list(pool.map(self.process_record, records))

        batch = BatchResult(results=results)
        logger.info(batch.summary)

        if self._settings.propagate_publish_errors and batch.publish_failed:
            failures = [
                PublishError(r.bucket_name, r.object_key, r.detail or "")
                for r in batch.results
                if r.status is RecordStatus.PUBLISH_FAILED
            ]
            raise BatchPublishError(failures)
        return batch

    def process_record(self, record: NotificationRecord) -> RecordResult:
        """Run one record to a terminal state. Never raises."""
        try:
            return self._run_record(record)
        except Exception as exc:
            logger.exception(
                "Unexpected error processing s3://%s/%s",
                record.bucket_name,
                record.object_key,
            )
            return RecordResult(
                RecordStatus.SKIPPED_ERROR,
                record.bucket_name,
                record.object_key,
                f"{type(exc).__name__}: {exc}",
            )

    def _run_record(self, record: NotificationRecord) -> RecordResult:
        settings = self._settings

        source = filter_record(
            record,
            event_prefix=settings.event_name_prefix,
            decode_keys=settings.decode_object_keys,
        )
        if source is None:
            reason = rejection_reason(record, event_prefix=settings.event_name_prefix)
            logger.warning("Record skipped: %s", reason)
            return RecordResult(
                RecordStatus.SKIPPED_INVALID,
                record.bucket_name,
                record.object_key,
                reason,
            )

        bucket, key = source.bucket_name, source.object_key

        try:
            payload = self._store.fetch(source)
        except FetchError as exc:
            logger.warning("Skipping %s: fetch failed (%s): %s", source, exc.code or "error", exc.detail)
            return RecordResult(RecordStatus.SKIPPED_FETCH_FAILED, bucket, key, str(exc))

        try:
            thumbnail = self._processor.transform(payload)
        except TransformError as exc:
            logger.warning("Skipping %s: %s", source, exc.detail)
            return RecordResult(RecordStatus.SKIPPED_TRANSFORM_FAILED, bucket, key, str(exc))

        dest = resolve_destination(source, settings.thumbnail_bucket_suffix)

        try:
            self._store.publish(dest, thumbnail)
        except PublishError as exc:
            logger.error("Thumbnail upload failed for %s -> %s: %s", source, dest, exc.detail)
            return RecordResult(RecordStatus.PUBLISH_FAILED, dest.bucket_name, dest.object_key, exc.detail)

        logger.info("Thumbnail for %s published to %s", source, dest)
        return RecordResult(RecordStatus.PUBLISHED, dest.bucket_name, dest.object_key)
