from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from thumbnail_lambda.constants import (
    DEFAULT_BUCKET_SUFFIX,
    DEFAULT_EVENT_PREFIX,
    DEFAULT_THUMBNAIL_SIZE,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_files() -> list[str]:
    """Load .env from the project root (when running from a checkout) then local .env."""
    base = Path(__file__).resolve().parent.parent  # project root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Thumbnails ───────────────────────────────────────────────────────────
    thumbnail_bucket_suffix: str = DEFAULT_BUCKET_SUFFIX
    thumbnail_max_size: int = Field(default=DEFAULT_THUMBNAIL_SIZE, ge=1)  # longest edge, px

    # ── Event filtering ──────────────────────────────────────────────────────
    event_name_prefix: str = DEFAULT_EVENT_PREFIX
    # S3 event keys arrive URL-encoded ("my+photo.png"); off keeps keys verbatim
    decode_object_keys: bool = False

    # ── Batch execution ──────────────────────────────────────────────────────
    max_workers: int = Field(default=4, ge=1)
    propagate_publish_errors: bool = False

    # ── AWS ───────────────────────────────────────────────────────────────────
    aws_region: str = ""
    default_aws_region: str = "us-east-2"

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    return Settings()
