import pytest
from pydantic import ValidationError

from thumbnail_lambda.config import Settings
from thumbnail_lambda.constants import DEFAULT_BUCKET_SUFFIX, DEFAULT_EVENT_PREFIX, DEFAULT_THUMBNAIL_SIZE


def test_defaults_follow_constants() -> None:
    settings = Settings(_env_file=None)
    assert settings.thumbnail_bucket_suffix == DEFAULT_BUCKET_SUFFIX == "-thumbs"
    assert settings.thumbnail_max_size == DEFAULT_THUMBNAIL_SIZE == 128
    assert settings.event_name_prefix == DEFAULT_EVENT_PREFIX == "ObjectCreated"


def test_log_level_is_case_insensitive(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Settings(_env_file=None).log_level == "DEBUG"


def test_unknown_log_level_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="VERBOSE")


@pytest.mark.parametrize("field", ["thumbnail_max_size", "max_workers"])
def test_bounds_must_be_positive(field: str) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})
