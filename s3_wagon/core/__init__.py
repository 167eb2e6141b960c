"""
Core repository logic for the wagon.

This module is framework-agnostic - it doesn't import boto3 or any
infrastructure concerns. The S3 specifics live in s3_wagon.infrastructure.
"""
