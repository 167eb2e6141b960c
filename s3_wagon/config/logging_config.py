"""
Logging setup for hosts embedding the wagon.

The wagon modules only ever call logging.getLogger(__name__). A host that
doesn't configure logging itself can call configure_logging() once at startup.
"""

import logging
from typing import Optional

from .settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> int:
    """
    Configure root logging with the wagon's format.

    Args:
        level: Level name. Defaults to the LOG_LEVEL setting.

    Returns:
        The numeric level that was applied.
    """
    level_name = (level or get_settings().log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    logging.basicConfig(format=LOG_FORMAT, level=numeric_level)
    logging.getLogger().setLevel(numeric_level)

    # boto's own debug output drowns out the wagon's
    for noisy in ("boto3", "botocore", "urllib3"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.INFO))

    return numeric_level
