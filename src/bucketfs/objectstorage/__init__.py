"""Object storage access for S3-compatible services."""

from .clients import S3ClientConfig, S3ClientManager
from .listing import ObjectEnumerator
from .provider import (
    ObjectInfo,
    ObjectListPage,
    ObjectMeta,
    ObjectStorageProvider,
    S3Provider,
)
from .visibility import acl_to_visibility, grants_to_acl, visibility_to_acl

__all__ = [
    "ObjectEnumerator",
    "ObjectInfo",
    "ObjectListPage",
    "ObjectMeta",
    "ObjectStorageProvider",
    "S3ClientConfig",
    "S3ClientManager",
    "S3Provider",
    "acl_to_visibility",
    "grants_to_acl",
    "visibility_to_acl",
]
