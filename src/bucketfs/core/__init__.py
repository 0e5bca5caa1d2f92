"""Core utilities and shared components for bucketfs."""

from .config import settings
from .exceptions import BucketFSError, ProviderError, ValidationError
from .observability import get_logger

__all__ = ["settings", "BucketFSError", "ProviderError", "ValidationError", "get_logger"]
