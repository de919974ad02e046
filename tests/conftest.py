import io
import threading

import pytest
from PIL import Image

from thumbnail_lambda.config import Settings
from thumbnail_lambda.exceptions import FetchError, PublishError
from thumbnail_lambda.schemas import DestinationRef, NotificationRecord, SourceRef


def make_s3_event_record(event_name: str | None, bucket_name: str | None, object_key: str | None) -> dict:
    """A raw S3 notification record as delivered in ``event["Records"]``."""
    return {
        "eventVersion": "2.1",
        "eventSource": "aws:s3",
        "awsRegion": "us-east-2",
        "eventTime": "1970-01-01T00:00:00.000Z",
        "eventName": event_name,
        "userIdentity": {"principalId": "X"},
        "requestParameters": {"sourceIPAddress": ""},
        "responseElements": {},
        "s3": {
            "s3SchemaVersion": "1.0",
            "configurationId": "",
            "bucket": {"name": bucket_name, "ownerIdentity": {"principalId": ""}, "arn": ""},
            "object": {"key": object_key, "size": 1, "eTag": "", "sequencer": ""},
        },
    }


def make_record(event_name: str | None, bucket_name: str | None, object_key: str | None) -> NotificationRecord:
    return NotificationRecord.model_validate(make_s3_event_record(event_name, bucket_name, object_key))


def make_png(width: int, height: int, mode: str = "RGB") -> bytes:
    color = (200, 30, 30, 255)[: len(mode)] if mode in ("RGB", "RGBA") else 128
    buf = io.BytesIO()
    Image.new(mode, (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeObjectStore:
    """In-memory ObjectStore that records every call."""

    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None) -> None:
        self.objects = dict(objects or {})
        self.fetched: list[SourceRef] = []
        self.published: list[DestinationRef] = []
        self.denied_buckets: set[str] = set()
        self._lock = threading.Lock()

    def fetch(self, ref: SourceRef) -> bytes:
        with self._lock:
            self.fetched.append(ref)
            data = self.objects.get((ref.bucket_name, ref.object_key))
        if data is None:
            raise FetchError(ref.bucket_name, ref.object_key, "The specified key does not exist.", "NoSuchKey")
        if not data:
            raise FetchError(ref.bucket_name, ref.object_key, "object is empty")
        return data

    def publish(self, dest: DestinationRef, payload: bytes) -> None:
        if dest.bucket_name in self.denied_buckets:
            raise PublishError(dest.bucket_name, dest.object_key, "Access Denied", "AccessDenied")
        with self._lock:
            self.published.append(dest)
            self.objects[(dest.bucket_name, dest.object_key)] = payload

    @property
    def calls(self) -> int:
        return len(self.fetched) + len(self.published)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, max_workers=1, aws_region="us-east-2")


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()
