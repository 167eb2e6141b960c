"""
S3 object storage for the wagon.

Implements the StorageRepository protocol from core.repository.wagon.
"""

from .client import S3StorageRepository, build_s3_client, create_s3_wagon
from .credentials import CredentialsFactory, RegionProperty

__all__ = [
    "CredentialsFactory",
    "RegionProperty",
    "S3StorageRepository",
    "build_s3_client",
    "create_s3_wagon",
]
