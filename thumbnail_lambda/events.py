"""
Event decoding and record filtering.

Two shapes reach the handler:
  1. Direct S3 notifications: ``{"Records": [{"eventName": ..., "s3": {...}}]}``.
  2. S3 notifications delivered through SQS: each SQS record carries a JSON
     body whose ``Records`` list holds the S3 notifications.

Records that cannot be validated are kept as empty records so that the
filter skips them and they still show up in the batch summary.
"""
from __future__ import annotations

import json
import logging
import urllib.parse

from pydantic import ValidationError

from thumbnail_lambda.constants import DEFAULT_EVENT_PREFIX, SQS_EVENT_SOURCE
from thumbnail_lambda.schemas import NotificationRecord, SourceRef

logger = logging.getLogger(__name__)


def parse_event(event: dict) -> list[NotificationRecord]:
    """Flatten a Lambda event into notification records, in delivery order."""
    records: list[NotificationRecord] = []

    for record in event.get("Records") or []:
        if isinstance(record, dict) and record.get("eventSource") == SQS_EVENT_SOURCE:
            records.extend(_unwrap_sqs_record(record))
        else:
            records.append(_to_notification_record(record))

    return records


def _unwrap_sqs_record(record: dict) -> list[NotificationRecord]:
    try:
        body = json.loads(record.get("body") or "{}")
    except json.JSONDecodeError:
        logger.warning("Unreadable SQS body in message %s", record.get("messageId"))
        return [NotificationRecord()]

    if not isinstance(body, dict):
        return [NotificationRecord()]
    # s3:TestEvent messages carry no Records
    return [_to_notification_record(r) for r in body.get("Records") or []]


def _to_notification_record(raw: object) -> NotificationRecord:
    if not isinstance(raw, dict):
        return NotificationRecord()
    try:
        return NotificationRecord.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Malformed S3 record (%d validation errors)", exc.error_count())
        return NotificationRecord()


def rejection_reason(
    record: NotificationRecord,
    *,
    event_prefix: str = DEFAULT_EVENT_PREFIX,
) -> str | None:
    """Why the record is not a usable creation event, or None when it is."""
    if record.event_name is None:
        return "missing event name"
    if not record.event_name.startswith(event_prefix):
        return f"not a creation event: {record.event_name}"
    if record.bucket_name is None or record.object_key is None:
        return "missing bucket name or object key"
    if not record.bucket_name or not record.object_key:
        return "empty bucket name or object key"
    return None


def filter_record(
    record: NotificationRecord,
    *,
    event_prefix: str = DEFAULT_EVENT_PREFIX,
    decode_keys: bool = False,
) -> SourceRef | None:
    """Return the source reference of a creation event, or None. Never raises."""
    if rejection_reason(record, event_prefix=event_prefix) is not None:
        return None

    key = record.object_key
    if decode_keys:
        key = urllib.parse.unquote_plus(key)
    return SourceRef(bucket_name=record.bucket_name, object_key=key)
