"""Filesystem-style access to S3-compatible object storage.

This package maps directory and file semantics (paths, metadata, visibility,
listing) onto object storage primitives (buckets, keys, prefixes, ACLs). It
drives the vendor SDK through an explicit provider contract and reshapes every
response into a small set of result types.

Key Features:
    - Read, write, copy, rename and delete files
    - Directory emulation over delimited prefixes, with recursive listing and
      deletion that follow the provider's pagination markers
    - Visibility (public/private) mapped onto object ACLs
    - Public and time-limited signed URLs
    - CLI interface

Recommended Usage:

    >>> from bucketfs import S3StorageConfig, create_adapter
    >>> adapter = create_adapter(
    ...     S3StorageConfig(bucket="media", prefix="uploads", aws_profile="prod")
    ... )
    >>> adapter.write("images/logo.png", b"...")
    >>> [entry.path for entry in adapter.list_contents("images")]

Advanced Usage:
    Construct the adapter around any object implementing
    :class:`bucketfs.objectstorage.ObjectStorageProvider`:

    >>> from bucketfs.adapter import ObjectStorageAdapter
    >>> adapter = ObjectStorageAdapter(my_provider, "media")
"""

__version__ = "0.1.0"

from .adapter import (
    FileContents,
    FileStream,
    ObjectStorageAdapter,
    StorageEntry,
    VisibilityInfo,
    create_adapter,
)
from .core.exceptions import BucketFSError, ProviderError, ValidationError
from .objectstorage import (
    ObjectEnumerator,
    ObjectStorageProvider,
    S3ClientConfig,
    S3Provider,
)
from .objectstorage.visibility import (
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
    VISIBILITY_PUBLIC_READ_WRITE,
)
from .schemas import AdapterConfig, S3StorageConfig, WriteConfig

__all__ = [
    # Configuration
    "AdapterConfig",
    "S3StorageConfig",
    "WriteConfig",
    # Adapter
    "FileContents",
    "FileStream",
    "ObjectStorageAdapter",
    "StorageEntry",
    "VisibilityInfo",
    "create_adapter",
    # Object storage
    "ObjectEnumerator",
    "ObjectStorageProvider",
    "S3ClientConfig",
    "S3Provider",
    # Visibility labels
    "VISIBILITY_PRIVATE",
    "VISIBILITY_PUBLIC",
    "VISIBILITY_PUBLIC_READ_WRITE",
    # Errors
    "BucketFSError",
    "ProviderError",
    "ValidationError",
]
