"""boto3 client construction for the S3 provider."""

from .s3_client import S3ClientConfig, S3ClientManager

__all__ = ["S3ClientConfig", "S3ClientManager"]
