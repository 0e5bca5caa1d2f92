"""Filesystem-style storage adapter over an object storage bucket.

The adapter turns path based operations (write, read, list a directory, ...)
into requests against an :class:`ObjectStorageProvider` and reshapes the
responses into :mod:`bucketfs.adapter.entries` values.

Failure convention:
    Provider failures never escape the adapter. Operations returning a record
    return ``None`` on failure, operations returning a flag return ``False``.
    ``has`` returns ``None`` on failure so that "missing" stays distinguishable.
    ``list_contents`` returns an empty list unless ``raise_on_error`` is set.
"""

import io
from datetime import datetime, timedelta, timezone
from typing import Any, BinaryIO, Mapping, Optional, Union

from bucketfs.core import get_logger
from bucketfs.core.exceptions import ProviderError, ValidationError
from bucketfs.objectstorage.listing import ObjectEnumerator
from bucketfs.objectstorage.provider import ObjectInfo, ObjectStorageProvider
from bucketfs.objectstorage.visibility import acl_to_visibility, visibility_to_acl
from bucketfs.schemas import AdapterConfig, WriteConfig

from .entries import (
    FileContents,
    FileStream,
    StorageEntry,
    VisibilityInfo,
    to_timestamp,
)
from .paths import SEPARATOR, PathPrefixer

logger = get_logger(__name__)

Expiration = Union[int, timedelta, datetime]


class ObjectStorageAdapter:
    """Exposes a bucket (optionally below a key prefix) as a filesystem."""

    def __init__(
        self,
        provider: ObjectStorageProvider,
        bucket: str,
        domain: Optional[str] = None,
        prefix: str = "",
        options: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize the adapter.

        Args:
            provider: Provider that executes object storage requests
            bucket: Bucket holding the files
            domain: External base URL for :meth:`get_url`
            prefix: Key prefix the adapter is rooted at
            options: Fixed request parameters sent with every write and copy
        """
        self._provider = provider
        self.bucket = bucket
        self.domain = domain
        self.prefixer = PathPrefixer(prefix)
        self.options = dict(options or {})
        logger.info(
            "Storage adapter initialized", bucket=bucket, prefix=self.prefixer.prefix
        )

    @classmethod
    def from_config(
        cls, provider: ObjectStorageProvider, config: AdapterConfig
    ) -> "ObjectStorageAdapter":
        return cls(
            provider,
            config.bucket,
            domain=config.domain,
            prefix=config.prefix,
            options=config.options,
        )

    @property
    def client(self) -> ObjectStorageProvider:
        """The provider this adapter drives."""
        return self._provider

    @property
    def domain(self) -> str:
        return self._domain

    @domain.setter
    def domain(self, domain: Optional[str]) -> None:
        self._domain = (domain or "").rstrip(SEPARATOR) + SEPARATOR

    def _request_options(self, config: Optional[WriteConfig] = None) -> dict[str, Any]:
        options = dict(self.options)
        if config is not None:
            options.update(config.headers)
            if config.visibility:
                options["ACL"] = visibility_to_acl(config.visibility)
        return options

    def _enumerator(self) -> ObjectEnumerator:
        return ObjectEnumerator(self._provider, self.bucket)

    def _failed(self, operation: str, path: str, error: ProviderError) -> None:
        logger.warning(
            "Storage operation failed",
            operation=operation,
            bucket=self.bucket,
            path=path,
            code=error.code,
            error=str(error),
        )

    # Existence

    def has(self, path: str) -> Optional[bool]:
        """Check whether a file exists; ``None`` if the provider failed."""
        try:
            return self._provider.object_exists(self.bucket, self.prefixer.apply(path))
        except ProviderError as e:
            self._failed("has", path, e)
            return None

    # Writing

    def write(
        self,
        path: str,
        contents: Union[bytes, str],
        config: Optional[WriteConfig] = None,
    ) -> Optional[StorageEntry]:
        """Write a file, replacing any existing object at ``path``."""
        config = config or WriteConfig()
        body = contents.encode("utf-8") if isinstance(contents, str) else contents
        options = self._request_options(config)

        size = config.content_length
        if size is None:
            size = len(body)
            options["ContentLength"] = size

        try:
            self._provider.put_object(
                self.bucket, self.prefixer.apply(path), body, options
            )
        except ProviderError as e:
            self._failed("write", path, e)
            return None

        logger.info("File written", bucket=self.bucket, path=path, size=size)
        return StorageEntry(path=path, kind="file", size=size)

    def write_stream(
        self, path: str, stream: BinaryIO, config: Optional[WriteConfig] = None
    ) -> Optional[StorageEntry]:
        """Write a file from a readable binary stream."""
        return self.write(path, stream.read(), config)

    def update(
        self,
        path: str,
        contents: Union[bytes, str],
        config: Optional[WriteConfig] = None,
    ) -> Optional[StorageEntry]:
        return self.write(path, contents, config)

    def update_stream(
        self, path: str, stream: BinaryIO, config: Optional[WriteConfig] = None
    ) -> Optional[StorageEntry]:
        return self.write_stream(path, stream, config)

    # Reading

    def read(self, path: str) -> Optional[FileContents]:
        try:
            contents = self._provider.get_object(self.bucket, self.prefixer.apply(path))
        except ProviderError as e:
            self._failed("read", path, e)
            return None

        return FileContents(path=path, contents=contents)

    def read_stream(self, path: str) -> Optional[FileStream]:
        """Read a file into an in-memory stream positioned at its start."""
        result = self.read(path)
        if result is None:
            return None
        return FileStream(path=path, stream=io.BytesIO(result.contents))

    # Copying, moving and deleting

    def copy(self, path: str, new_path: str) -> bool:
        try:
            self._provider.copy_object(
                self.bucket,
                self.prefixer.apply(path),
                self.bucket,
                self.prefixer.apply(new_path),
                self._request_options(),
            )
        except ProviderError as e:
            self._failed("copy", path, e)
            return False

        logger.info("File copied", bucket=self.bucket, path=path, new_path=new_path)
        return True

    def rename(self, path: str, new_path: str) -> bool:
        """Move a file by copying it and deleting the source."""
        if not self.copy(path, new_path):
            return False
        return self.delete(path)

    def delete(self, path: str) -> bool:
        """Delete a file. Deleting a missing file succeeds."""
        try:
            self._provider.delete_object(self.bucket, self.prefixer.apply(path))
        except ProviderError as e:
            self._failed("delete", path, e)
            return False

        logger.info("File deleted", bucket=self.bucket, path=path)
        return True

    def delete_dir(self, dirname: str) -> bool:
        """Delete a directory and everything below it.

        Objects are removed one listing page at a time with a bulk delete.
        The first failing listing or delete stops the walk; pages already
        deleted stay deleted.
        """
        if not dirname.strip("\\/"):
            logger.warning(
                "Refusing to delete the adapter root", bucket=self.bucket
            )
            return False

        prefix = self.prefixer.directory(dirname)
        deleted = 0

        def delete_page(objects: list[ObjectInfo], prefixes: list[str], _: str) -> None:
            nonlocal deleted
            if objects:
                self._provider.delete_objects(self.bucket, [obj.key for obj in objects])
                deleted += len(objects)

        try:
            self._enumerator().walk(prefix, True, delete_page)
        except ProviderError as e:
            self._failed("delete_dir", dirname, e)
            return False

        logger.info(
            "Directory deleted", bucket=self.bucket, path=dirname, objects=deleted
        )
        return True

    def create_dir(
        self, dirname: str, config: Optional[WriteConfig] = None
    ) -> Optional[StorageEntry]:
        """Create a directory marker object."""
        try:
            self._provider.create_directory(
                self.bucket, self.prefixer.apply(dirname), self._request_options(config)
            )
        except ProviderError as e:
            self._failed("create_dir", dirname, e)
            return None

        return StorageEntry(path=dirname, kind="dir")

    # Metadata

    def get_metadata(self, path: str) -> Optional[StorageEntry]:
        try:
            meta = self._provider.get_object_meta(self.bucket, self.prefixer.apply(path))
        except ProviderError as e:
            self._failed("get_metadata", path, e)
            return None

        return StorageEntry(
            path=path,
            kind="dir" if path.endswith(SEPARATOR) else "file",
            size=meta.size,
            timestamp=to_timestamp(meta.last_modified),
            mimetype=meta.content_type,
        )

    def get_size(self, path: str) -> Optional[StorageEntry]:
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> Optional[StorageEntry]:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Optional[StorageEntry]:
        return self.get_metadata(path)

    # Visibility

    def get_visibility(self, path: str) -> Optional[VisibilityInfo]:
        try:
            acl = self._provider.get_object_acl(self.bucket, self.prefixer.apply(path))
        except ProviderError as e:
            self._failed("get_visibility", path, e)
            return None

        return VisibilityInfo(path=path, visibility=acl_to_visibility(acl))

    def set_visibility(self, path: str, visibility: str) -> Optional[VisibilityInfo]:
        try:
            self._provider.put_object_acl(
                self.bucket, self.prefixer.apply(path), visibility_to_acl(visibility)
            )
        except ProviderError as e:
            self._failed("set_visibility", path, e)
            return None

        return VisibilityInfo(path=path, visibility=visibility)

    # Listing

    def list_contents(
        self,
        directory: str = "",
        recursive: bool = False,
        *,
        raise_on_error: bool = False,
    ) -> list[StorageEntry]:
        """List the files and directories below ``directory``.

        Args:
            directory: Directory to list, the adapter root by default
            recursive: Include everything below sub-directories as well
            raise_on_error: Raise the provider error instead of returning an
                empty list, for callers that must tell "empty" from "failed"

        Returns:
            Flat list of entries with paths relative to the adapter root.
            The directory's own marker object is never included.

        Raises:
            ProviderError: Only when ``raise_on_error`` is set
        """
        prefix = self.prefixer.directory(directory)
        contents: list[StorageEntry] = []

        def collect(objects: list[ObjectInfo], prefixes: list[str], page_prefix: str) -> None:
            for sub_prefix in prefixes:
                contents.append(
                    StorageEntry(
                        path=self.prefixer.strip(sub_prefix).rstrip(SEPARATOR),
                        kind="dir",
                    )
                )
            for obj in objects:
                if obj.key == page_prefix:
                    continue
                contents.append(
                    StorageEntry(
                        path=self.prefixer.strip(obj.key),
                        kind="file",
                        size=obj.size,
                        timestamp=to_timestamp(obj.last_modified),
                    )
                )

        try:
            self._enumerator().walk(prefix, recursive, collect)
        except ProviderError as e:
            if raise_on_error:
                raise
            self._failed("list_contents", directory, e)
            return []

        return contents

    # URLs

    def get_url(self, path: str) -> str:
        """Public URL of a file under the configured domain."""
        return self.domain + self.prefixer.apply(path)

    def temporary_url(
        self,
        path: str,
        expiration: Expiration,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Create a time-limited signed GET URL.

        Args:
            path: File path
            expiration: Lifetime in seconds, a timedelta, or the absolute
                expiry time
            options: Extra signed request parameters, e.g.
                ``{"ResponseContentDisposition": "attachment"}``

        Raises:
            ValidationError: If the expiration is not in the future
        """
        timeout = self._normalize_timeout(expiration)
        if timeout <= 0:
            raise ValidationError(f"Expiration must be in the future, got {timeout}s")

        try:
            return self._provider.sign_url(
                self.bucket, self.prefixer.apply(path), timeout, "GET", options
            )
        except ProviderError as e:
            self._failed("temporary_url", path, e)
            return None

    @staticmethod
    def _normalize_timeout(expiration: Expiration) -> int:
        if isinstance(expiration, datetime):
            now = datetime.now(timezone.utc) if expiration.tzinfo else datetime.now()
            return int((expiration - now).total_seconds())
        if isinstance(expiration, timedelta):
            return int(expiration.total_seconds())
        return int(expiration)
