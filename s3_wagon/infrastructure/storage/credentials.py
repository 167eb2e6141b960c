"""
Credential and region discovery for the S3 client.

Both fall back to what boto3 would find on its own. Explicit values from the
host win, but nothing here is required.
"""

import logging
from typing import Optional

import boto3
from pydantic import ValidationError

from ...config.settings import Settings, get_settings
from ...core.repository.models import AuthenticationInfo

logger = logging.getLogger(__name__)


class CredentialsFactory:
    """
    Builds the boto3 session that carries credentials for a connection.

    With a complete AuthenticationInfo the session holds static keys.
    Otherwise the session is left to boto3's provider chain (environment,
    shared config file, container or instance role). That chain is only
    walked when the first request is signed, so a bad setup shows up in
    connect() rather than here.
    """

    def create(self, authentication_info: Optional[AuthenticationInfo] = None) -> boto3.session.Session:
        if authentication_info is not None and authentication_info.is_complete:
            logger.debug(
                "Using static credentials",
                extra={"access_key_id": authentication_info.user_name},
            )
            return boto3.session.Session(
                aws_access_key_id=authentication_info.user_name,
                aws_secret_access_key=authentication_info.password,
            )

        logger.debug("Using default credential provider chain")
        return boto3.session.Session()


class RegionProperty:
    """Region override from S3_REGION or AWS_DEFAULT_REGION, if any."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings

    def get(self) -> Optional[str]:
        try:
            settings = self._settings or get_settings()
        except ValidationError as e:
            logger.warning("Ignoring invalid settings while resolving region", extra={"error": str(e)})
            return None
        return settings.region_override
