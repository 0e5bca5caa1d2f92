"""Exception hierarchy for bucketfs."""

from typing import Optional


class BucketFSError(Exception):
    """Base exception for all bucketfs errors."""

    pass


class ValidationError(BucketFSError):
    """Raised when validation fails."""

    pass


class ProviderError(BucketFSError):
    """Raised when the object storage provider rejects or fails a request.

    Transport errors, missing keys, permission problems and malformed requests
    all surface as this one kind. The provider's own error code, when there is
    one, is kept on ``code`` for logging.
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code
