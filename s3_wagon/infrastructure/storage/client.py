"""
S3 storage repository.

This is the piece that actually talks to S3. It resolves artifact paths
into keys under the repository's base directory, connects with whatever
credentials and region it can find, and translates boto3 failures into the
wagon's small error set.

No retries happen here beyond what botocore does by default. Every call
is a single attempt and blocks until S3 answers.
"""

import logging
import shutil
from contextlib import closing
from pathlib import Path
from typing import Any, Callable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from ...config.settings import Settings, get_settings
from ...core.repository.errors import (
    AuthenticationError,
    NotConnectedError,
    ResourceDoesNotExistError,
    TransferFailedError,
)
from ...core.repository.models import AuthenticationInfo, RepositoryLocation
from ...core.repository.resolver import KeyResolver
from ...core.repository.transfer import (
    PathLike,
    ProgressFileReader,
    ProgressFileWriter,
    TransferListener,
    TransferProgress,
)
from ...core.repository.wagon import StorageWagon
from .credentials import CredentialsFactory, RegionProperty

logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = "public-read"

# S3 reports a missing key as NoSuchKey on GET and a bare 404 on HEAD
NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})

REGION_MISSING_HINTS = (
    "unable to find a region",
    "must specify a region",
)

REGION_REMEDIATION = (
    "Please provide a region as the region argument or as an environment "
    "variable using AWS_DEFAULT_REGION"
)

ClientFactory = Callable[[boto3.session.Session, Optional[str]], Any]


def build_s3_client(
    session: boto3.session.Session,
    region: Optional[str],
    settings: Optional[Settings] = None,
) -> Any:
    """
    Create an S3 client from a credentials session.

    A region of None leaves the choice to boto3. Endpoint and addressing
    style come from settings so S3-compatible stores work too.
    """
    settings = settings or get_settings()

    kwargs: dict[str, Any] = {}
    if region:
        kwargs["region_name"] = region
    if settings.s3_endpoint_url:
        kwargs["endpoint_url"] = settings.s3_endpoint_url
    if settings.s3_path_style_access:
        kwargs["config"] = Config(s3={"addressing_style": "path"})

    return session.client("s3", **kwargs)


def _is_not_found(error: ClientError) -> bool:
    code = error.response.get("Error", {}).get("Code")
    return code in NOT_FOUND_CODES


def _is_region_missing(error: Exception) -> bool:
    """
    Whether a connect failure means no region could be resolved.

    botocore raises NoRegionError for this. Wrapped or third-party errors
    only carry the message, so fall back to matching it.
    """
    if isinstance(error, NoRegionError):
        return True
    message = str(error).lower()
    return any(hint in message for hint in REGION_MISSING_HINTS)


class S3StorageRepository:
    """
    One bucket and base directory, accessed through a boto3 S3 client.

    Starts disconnected. connect() creates the client, disconnect() drops
    it, and every data operation in between requires it.
    """

    def __init__(
        self,
        bucket: str,
        base_directory: str = "",
        settings: Optional[Settings] = None,
        credentials_factory: Optional[CredentialsFactory] = None,
        region_property: Optional[RegionProperty] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.bucket = bucket
        self.base_directory = base_directory

        self._settings = settings or get_settings()
        self._credentials_factory = credentials_factory or CredentialsFactory()
        self._region_property = region_property or RegionProperty(self._settings)
        self._client_factory = client_factory or (
            lambda session, region: build_s3_client(session, region, self._settings)
        )
        self._key_resolver = KeyResolver()
        self._client: Optional[Any] = None

    @classmethod
    def from_location(cls, location: RepositoryLocation, **kwargs: Any) -> "S3StorageRepository":
        return cls(location.bucket, location.base_directory, **kwargs)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    # -----------------------------------------------------------------------
    # Connection
    # -----------------------------------------------------------------------

    def connect(
        self,
        authentication_info: Optional[AuthenticationInfo] = None,
        region: Optional[str] = None,
    ) -> None:
        """
        Create the client and check it can reach S3.

        The region argument wins, then S3_REGION / AWS_DEFAULT_REGION, then
        whatever boto3 decides. list_buckets() is issued straight away so
        bad credentials fail here and not on the first download.
        """
        effective_region = region if region is not None else self._region_property.get()

        try:
            session = self._credentials_factory.create(authentication_info)
            client = self._client_factory(session, effective_region)
            client.list_buckets()
        except Exception as e:
            logger.error(
                "Could not connect to S3",
                extra={"bucket": self.bucket, "region": effective_region, "error": str(e)},
                exc_info=True,
            )
            if _is_region_missing(e):
                raise AuthenticationError(REGION_REMEDIATION) from e
            raise AuthenticationError("Could not authenticate") from e

        self._client = client

        logger.info(
            "Connected to S3",
            extra={
                "bucket": self.bucket,
                "base_directory": self.base_directory,
                "region": effective_region,
            }
        )

    def disconnect(self) -> None:
        self._client = None
        logger.debug("Disconnected from S3", extra={"bucket": self.bucket})

    # -----------------------------------------------------------------------
    # Transfers
    # -----------------------------------------------------------------------

    def copy(self, resource_name: str, destination: PathLike, progress: TransferProgress) -> None:
        """
        Download resource_name into the destination file.

        Raises ResourceDoesNotExistError if the key is missing and
        TransferFailedError for anything else that goes wrong.
        """
        key = self._resolve_key(resource_name)
        client = self._require_client()

        try:
            response = client.get_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            if isinstance(e, ClientError) and _is_not_found(e):
                logger.error(
                    "Resource does not exist",
                    extra={"bucket": self.bucket, "key": key},
                    exc_info=True,
                )
                raise ResourceDoesNotExistError(f"Resource {key} does not exist", resource=key) from e

            logger.error(
                "Could not fetch resource",
                extra={"bucket": self.bucket, "key": key, "error": str(e)},
                exc_info=True,
            )
            raise TransferFailedError(f"Could not download resource {key}", resource=key) from e

        body = response["Body"]
        opened = False
        try:
            with closing(body), ProgressFileWriter(destination, progress) as output:
                opened = True
                shutil.copyfileobj(body, output, self._settings.s3_transfer_chunk_size)
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error(
                "Could not transfer file",
                extra={"bucket": self.bucket, "key": key, "destination": str(destination)},
                exc_info=True,
            )
            if opened:
                # no partial artifacts left on disk
                Path(destination).unlink(missing_ok=True)
            raise TransferFailedError(f"Could not download resource {key}", resource=key) from e

    def put(self, file: PathLike, destination: str, progress: TransferProgress) -> None:
        """
        Upload a local file as destination.

        Uploaded objects get the public-read canned ACL unless
        S3_PUBLIC_READ is turned off.
        """
        key = self._resolve_key(destination)
        client = self._require_client()

        extra_args: dict[str, str] = {}
        if self._settings.s3_public_read:
            extra_args["ACL"] = PUBLIC_READ_ACL

        try:
            with ProgressFileReader(file, progress) as body:
                client.put_object(Bucket=self.bucket, Key=key, Body=body, **extra_args)
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error(
                "Could not transfer file",
                extra={"bucket": self.bucket, "key": key, "source": str(file)},
                exc_info=True,
            )
            raise TransferFailedError(
                f"Could not transfer file {Path(file).name}", resource=str(file)
            ) from e

        logger.debug("Uploaded object", extra={"bucket": self.bucket, "key": key})

    # -----------------------------------------------------------------------
    # Metadata and listing
    # -----------------------------------------------------------------------

    def exists(self, resource_name: str) -> bool:
        """
        Whether the key exists.

        A missing key is a plain False. Any other S3 error is raised as-is.
        """
        key = self._resolve_key(resource_name)
        client = self._require_client()

        try:
            client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                return False
            raise
        return True

    def new_resource_available(self, resource_name: str, timestamp: int) -> bool:
        """
        Whether the object changed after timestamp (ms since the epoch).

        Unlike exists(), a missing key is an error here.
        """
        key = self._resolve_key(resource_name)
        client = self._require_client()

        logger.debug("Checking if new key exists", extra={"bucket": self.bucket, "key": key})

        try:
            metadata = client.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Could not retrieve key",
                extra={"bucket": self.bucket, "key": key},
                exc_info=True,
            )
            raise ResourceDoesNotExistError(f"Could not retrieve key {key}", resource=key) from e

        updated = int(metadata["LastModified"].timestamp() * 1000)
        return updated > timestamp

    def list(self, path: str) -> list[str]:
        """
        Every key under path, across all result pages.

        boto3's paginator follows the continuation tokens; pages are
        consumed one at a time. Keys come back in S3's order.
        """
        prefix = self._resolve_key(path)
        client = self._require_client()

        paginator = client.get_paginator("list_objects_v2")
        keys: list[str] = []
        pages = 0

        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            pages += 1
            keys.extend(item["Key"] for item in page.get("Contents", []))

        logger.debug(
            "Listed objects",
            extra={"bucket": self.bucket, "prefix": prefix, "pages": pages, "count": len(keys)},
        )
        return keys

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _resolve_key(self, path: str) -> str:
        return self._key_resolver.resolve(self.base_directory, path)

    def _require_client(self) -> Any:
        if self._client is None:
            raise NotConnectedError(
                f"Repository for bucket {self.bucket} is not connected. Call connect() first."
            )
        return self._client


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_s3_wagon(
    repository_url: str,
    settings: Optional[Settings] = None,
    listeners: Optional[list[TransferListener]] = None,
    client_factory: Optional[ClientFactory] = None,
) -> StorageWagon:
    """
    Create a wagon for an s3:// repository URL.

    Args:
        repository_url: e.g. s3://my-bucket/maven/releases
        settings: Wagon settings (defaults to the environment)
        listeners: Callables notified of transfer progress
        client_factory: Builds the S3 client from (session, region); tests pass a fake

    Returns:
        A disconnected StorageWagon. Call connect() before transferring.
    """
    location = RepositoryLocation.from_url(repository_url)
    repository = S3StorageRepository.from_location(
        location,
        settings=settings,
        client_factory=client_factory,
    )

    logger.debug("Created wagon", extra={"repository": location.url})
    return StorageWagon(repository, listeners)
