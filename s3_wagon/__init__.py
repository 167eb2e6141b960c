"""
s3-wagon - use an S3 bucket as a build artifact repository.

This package contains the complete transport:
- core: Framework-agnostic repository logic (keys, progress, errors, wagon facade)
- infrastructure: boto3-backed storage repository
- config: Settings and logging setup
"""

__version__ = "0.1.0"
