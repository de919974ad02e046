"""
Thumbnail pipeline: notification records, object references and results.

Notification records mirror the S3 event schema, where no field is
guaranteed: every field is optional and presence is checked explicitly by
the record filter.  References are plain frozen dataclasses built after
validation.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from thumbnail_lambda.constants import SKIPPED_STATUSES, RecordStatus


# ── Notification records ─────────────────────────────────────────────────────

class S3Bucket(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    arn: str | None = None


class S3Object(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    key: str | None = None
    size: int | None = None
    e_tag: str | None = Field(default=None, alias="eTag")


class S3Entity(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    bucket: S3Bucket | None = None
    object_: S3Object | None = Field(default=None, alias="object")


class NotificationRecord(BaseModel):
    """One S3 notification record: event name, bucket name and object key."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    event_name: str | None = Field(default=None, alias="eventName")
    event_source: str | None = Field(default=None, alias="eventSource")
    aws_region: str | None = Field(default=None, alias="awsRegion")
    s3: S3Entity | None = None

    @property
    def bucket_name(self) -> str | None:
        if self.s3 is None or self.s3.bucket is None:
            return None
        return self.s3.bucket.name

    @property
    def object_key(self) -> str | None:
        if self.s3 is None or self.s3.object_ is None:
            return None
        return self.s3.object_.key


# ── References ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SourceRef:
    """Validated bucket/key of the object that triggered processing."""

    bucket_name: str
    object_key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket_name}/{self.object_key}"


@dataclass(frozen=True)
class DestinationRef:
    bucket_name: str
    object_key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket_name}/{self.object_key}"


# ── Results ──────────────────────────────────────────────────────────────────

@dataclass
class RecordResult:
    status: RecordStatus
    bucket_name: str | None = None
    object_key: str | None = None
    detail: str | None = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "bucket": self.bucket_name,
            "key": self.object_key,
            "detail": self.detail,
        }


@dataclass
class BatchResult:
    """Outcome of one batch. Result order is not the record order."""

    results: list[RecordResult] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.results)

    @property
    def published(self) -> int:
        return self._count(RecordStatus.PUBLISHED)

    @property
    def publish_failed(self) -> int:
        return self._count(RecordStatus.PUBLISH_FAILED)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status in SKIPPED_STATUSES)

    @property
    def summary(self) -> str:
        return (
            f"{self.attempted} records received from S3: {self.published} published, "
            f"{self.skipped} skipped, {self.publish_failed} failed to publish"
        )

    def _count(self, status: RecordStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    def to_response(self) -> dict:
        """Lambda return value; always a 200 for per-record failures."""
        return {
            "statusCode": 200,
            "summary": self.summary,
            "attempted": self.attempted,
            "published": self.published,
            "skipped": self.skipped,
            "publish_failed": self.publish_failed,
            "results": [r.to_dict() for r in self.results],
        }
