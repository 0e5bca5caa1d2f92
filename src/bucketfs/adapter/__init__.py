"""Filesystem-style adapter over object storage."""

from .entries import FileContents, FileStream, StorageEntry, VisibilityInfo
from .factory import create_adapter
from .paths import PathPrefixer
from .storage_adapter import ObjectStorageAdapter

__all__ = [
    "FileContents",
    "FileStream",
    "ObjectStorageAdapter",
    "PathPrefixer",
    "StorageEntry",
    "VisibilityInfo",
    "create_adapter",
]
