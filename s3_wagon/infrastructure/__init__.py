"""
Infrastructure layer - external service integrations.

- storage: S3 object storage via boto3

These wrappers translate between boto3 and the wagon's repository types.
"""
