"""Build a ready-to-use adapter from a storage configuration."""

from bucketfs.core import get_logger
from bucketfs.objectstorage.clients import S3ClientConfig, S3ClientManager
from bucketfs.objectstorage.provider import S3Provider
from bucketfs.schemas import S3StorageConfig

from .storage_adapter import ObjectStorageAdapter

logger = get_logger(__name__)


def create_adapter(config: S3StorageConfig) -> ObjectStorageAdapter:
    """Create an S3-backed adapter.

    Credentials and endpoint come only from ``config``.

    Args:
        config: Connection and adapter configuration

    Returns:
        ObjectStorageAdapter rooted at ``config.bucket``/``config.prefix``
    """
    client_config = S3ClientConfig(
        access_key_id=config.access_key_id,
        secret_access_key=config.secret_access_key,
        session_token=config.session_token,
        region_name=config.region_name or "us-east-1",
        endpoint_url=config.endpoint_url,
        aws_profile=config.aws_profile,
    )
    manager = S3ClientManager(client_config)
    logger.debug("Creating S3 storage adapter", bucket=config.bucket)
    return ObjectStorageAdapter.from_config(S3Provider(manager.client), config)
