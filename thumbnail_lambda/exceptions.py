"""
Thumbnail pipeline: per-record failure types.

Every exception builds its own message from the bucket/key context it is
given, so call sites never format messages themselves.  The orchestrator
catches these per record; none of them fails a batch unless publish error
propagation is switched on.
"""
from __future__ import annotations


class ThumbnailPipelineError(Exception):
    """Base class for every error raised inside the pipeline."""


# ── Storage ──────────────────────────────────────────────────────────────────

class FetchError(ThumbnailPipelineError):
    def __init__(self, bucket: str, key: str, detail: str, code: str | None = None) -> None:
        self.bucket = bucket
        self.key = key
        self.detail = detail
        self.code = code
        super().__init__(f"Could not fetch s3://{bucket}/{key}: {detail}")


class PublishError(ThumbnailPipelineError):
    def __init__(self, bucket: str, key: str, detail: str, code: str | None = None) -> None:
        self.bucket = bucket
        self.key = key
        self.detail = detail
        self.code = code
        super().__init__(f"Could not publish s3://{bucket}/{key}: {detail}")


# ── Image ────────────────────────────────────────────────────────────────────

class TransformError(ThumbnailPipelineError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Could not build thumbnail: {detail}")


# ── Batch ────────────────────────────────────────────────────────────────────

class BatchPublishError(ThumbnailPipelineError):
    """Raised after a batch completes when publish errors must be surfaced."""

    def __init__(self, failures: list[PublishError]) -> None:
        self.failures = failures
        targets = ", ".join(f"s3://{f.bucket}/{f.key}" for f in failures)
        super().__init__(f"{len(failures)} thumbnail(s) failed to publish: {targets}")
