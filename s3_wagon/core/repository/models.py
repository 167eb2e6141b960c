"""
Value types shared by the wagon and its storage repositories.

These have no dependencies on boto3. The repository location and the
authentication info are what a host build tool hands us; everything else
is derived from them.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

REPOSITORY_SCHEME = "s3"


@dataclass(frozen=True)
class AuthenticationInfo:
    """
    Credentials supplied by the host for one repository.

    For S3 the user name carries the access key id and the password carries
    the secret access key. Either may be missing, in which case the
    provider's default credential discovery is used instead.
    """
    user_name: Optional[str] = None
    password: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.user_name) and bool(self.password)

    def __repr__(self) -> str:
        # never print the secret
        return f"AuthenticationInfo(user_name={self.user_name!r}, password=***)"


@dataclass(frozen=True)
class RepositoryLocation:
    """
    The bucket and base directory a repository serves.

    Frozen because a repository never moves once configured.
    """
    bucket: str
    base_directory: str = ""

    def __post_init__(self) -> None:
        if not self.bucket or not self.bucket.strip():
            raise ValueError("Repository bucket cannot be empty")

    @classmethod
    def from_url(cls, url: str) -> "RepositoryLocation":
        """
        Parse a repository URL such as s3://my-bucket/maven/releases.

        The host part is the bucket, the path is the base directory.
        """
        parts = urlsplit(url)
        if parts.scheme.lower() != REPOSITORY_SCHEME:
            raise ValueError(f"Unsupported repository URL scheme: {url}")
        if not parts.netloc:
            raise ValueError(f"Repository URL has no bucket: {url}")
        return cls(bucket=parts.netloc, base_directory=parts.path.strip("/"))

    @property
    def url(self) -> str:
        if self.base_directory:
            return f"{REPOSITORY_SCHEME}://{self.bucket}/{self.base_directory}"
        return f"{REPOSITORY_SCHEME}://{self.bucket}"
