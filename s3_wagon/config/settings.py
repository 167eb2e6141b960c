"""
Wagon configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation when the wagon is created (fail fast if config is wrong)
- Documentation of what's optional and what the defaults are
- Easy testing with different configurations

Everything here is optional. A wagon with no configuration at all talks to
AWS S3 using boto3's default credential and region discovery.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Wagon settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # Region
    s3_region: Optional[str] = Field(
        default=None,
        description="Region override for the repository bucket. Checked before AWS_DEFAULT_REGION."
    )
    aws_default_region: Optional[str] = Field(
        default=None,
        description="Standard AWS default region variable, used when S3_REGION is not set."
    )

    # Endpoint
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint for S3-compatible stores (MinIO, R2). Leave unset for AWS."
    )
    s3_path_style_access: bool = Field(
        default=False,
        description="Address buckets as https://endpoint/bucket instead of https://bucket.endpoint."
    )

    # Uploads and downloads
    s3_public_read: bool = Field(
        default=True,
        description="Apply the public-read canned ACL to uploaded artifacts."
    )
    s3_transfer_chunk_size: int = Field(
        default=64 * 1024,
        gt=0,
        description="Buffer size in bytes used when streaming downloads to disk."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def region_override(self) -> Optional[str]:
        """First non-blank region from S3_REGION, then AWS_DEFAULT_REGION."""
        for candidate in (self.s3_region, self.aws_default_region):
            if candidate and candidate.strip():
                return candidate.strip()
        return None


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
