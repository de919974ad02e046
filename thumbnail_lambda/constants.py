"""
Thumbnail pipeline: static constants and enum types.
"""
import enum


class RecordStatus(str, enum.Enum):
    """Terminal state of one notification record."""
    SKIPPED_INVALID = "skipped_invalid"
    SKIPPED_FETCH_FAILED = "skipped_fetch_failed"
    SKIPPED_TRANSFORM_FAILED = "skipped_transform_failed"
    SKIPPED_ERROR = "skipped_error"  # unexpected exception, logged with traceback
    PUBLISHED = "published"
    PUBLISH_FAILED = "publish_failed"


SKIPPED_STATUSES = frozenset({
    RecordStatus.SKIPPED_INVALID,
    RecordStatus.SKIPPED_FETCH_FAILED,
    RecordStatus.SKIPPED_TRANSFORM_FAILED,
    RecordStatus.SKIPPED_ERROR,
})

# Only PNG is supported end to end
THUMBNAIL_FORMAT = "PNG"
THUMBNAIL_CONTENT_TYPE = "image/png"

DEFAULT_EVENT_PREFIX = "ObjectCreated"
DEFAULT_BUCKET_SUFFIX = "-thumbs"
DEFAULT_THUMBNAIL_SIZE = 128  # px, longest edge

SQS_EVENT_SOURCE = "aws:sqs"
