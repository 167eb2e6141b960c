"""
Shared fixtures for the wagon tests.

Settings are cached per process and read from the environment, so every test
starts from a clean cache with no region variables leaking in from the machine
running the suite.
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from s3_wagon.config.settings import Settings, get_settings
from s3_wagon.infrastructure.storage.client import S3StorageRepository

REGION_VARIABLES = ("S3_REGION", "AWS_DEFAULT_REGION", "AWS_REGION")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in REGION_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def s3_client() -> MagicMock:
    """Stands in for the boto3 S3 client."""
    return MagicMock(name="s3_client")


@pytest.fixture
def repository(s3_client, settings) -> S3StorageRepository:
    """A repository already connected to the fake client."""
    repo = S3StorageRepository(
        "artifacts",
        "maven/releases",
        settings=settings,
        client_factory=lambda session, region: s3_client,
    )
    repo.connect()
    return repo


@pytest.fixture
def client_error():
    """Builds real botocore ClientErrors with a given S3 error code."""
    def build(code: str, operation: str = "GetObject", status: int = 400) -> ClientError:
        return ClientError(
            {
                "Error": {"Code": code, "Message": code},
                "ResponseMetadata": {"HTTPStatusCode": status},
            },
            operation,
        )
    return build
