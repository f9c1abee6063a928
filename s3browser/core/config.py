"""Application configuration management."""
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGION = "us-east-1"
DEFAULT_PORT = 8080
DEFAULT_PRESIGN_TTL_SECONDS = 3600
DEFAULT_LIST_MAX_KEYS = 1000
DEFAULT_STREAM_CHUNK_SIZE = 64 * 1024


class BucketNotConfigured(RuntimeError):
    """Signalling that no bucket name was provided via AWS_BUCKET."""


class Settings(BaseSettings):
    """Resolved application settings, read from the process environment."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    aws_region: str = Field(DEFAULT_REGION, description="Bucket region")
    aws_access_key_id: Optional[str] = Field(default=None, description="Static access key id")
    aws_secret_access_key: Optional[str] = Field(default=None, description="Static secret access key")
    aws_session_token: Optional[str] = Field(default=None, description="Optional session token")
    aws_bucket: str = Field("", description="Bucket exposed by the browser")
    aws_endpoint: Optional[str] = Field(
        default=None,
        description="Custom endpoint URL for S3-compatible storage (MinIO, Ceph, ...)",
    )
    aws_use_path_style: bool = Field(False, description="Force path-style bucket addressing")
    aws_verify_ssl: bool = Field(True, description="Verify TLS certificates of the endpoint")

    base_directory: str = Field(
        "",
        description="Optional key prefix that scopes all browsing to a subtree of the bucket",
    )

    host: str = Field(
        "0.0.0.0",
        validation_alias=AliasChoices("SERVER_HOST", "host"),
        description="Application bind address",
    )
    port: int = Field(
        DEFAULT_PORT,
        validation_alias=AliasChoices("SERVER_PORT", "port"),
        description="Application bind port",
    )
    log_level: str = Field("INFO", description="Root logging level")

    presign_ttl_seconds: int = Field(
        DEFAULT_PRESIGN_TTL_SECONDS,
        gt=0,
        description="Lifetime of presigned download URLs",
    )
    list_max_keys: int = Field(
        DEFAULT_LIST_MAX_KEYS,
        gt=0,
        le=1000,
        description="Upper bound of keys requested by a single listing call",
    )
    stream_chunk_size: int = Field(
        DEFAULT_STREAM_CHUNK_SIZE,
        gt=0,
        description="Chunk size used when proxying object bodies",
    )
    s3_connect_timeout: float = Field(5.0, gt=0, description="Backend connect timeout in seconds")
    s3_read_timeout: float = Field(30.0, gt=0, description="Backend read timeout in seconds")
    s3_max_attempts: int = Field(3, ge=1, description="Total attempts for retryable backend calls")

    app_version: str = Field("dev", description="Release version injected at build time")
    git_commit: str = Field("unknown", description="Git commit injected at build time")
    build_time: str = Field("unknown", description="Build timestamp injected at build time")

    @field_validator("base_directory", mode="before")
    @classmethod
    def _trim_base_directory(cls, value: Optional[str]) -> str:
        return (value or "").strip().strip("/")

    @field_validator("aws_endpoint", mode="before")
    @classmethod
    def _blank_endpoint_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)


def load_settings(**overrides) -> Settings:
    """Build the settings object once at startup.

    Raises:
        BucketNotConfigured: when AWS_BUCKET is empty.
    """

    settings = Settings(**overrides)
    if not settings.aws_bucket:
        raise BucketNotConfigured("AWS_BUCKET environment variable is required")
    return settings
