"""Object storage provider contract and its boto3 implementation.

The adapter never talks to boto3 directly. It drives an
:class:`ObjectStorageProvider`, which lists every provider operation the
adapter needs. :class:`S3Provider` is the production implementation; tests
substitute mocks or fakes with the same surface.

Every provider method raises :class:`~bucketfs.core.exceptions.ProviderError`
when the request fails for any reason.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Mapping, Optional, Protocol, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from bucketfs.core import get_logger
from bucketfs.core.exceptions import ProviderError
from bucketfs.objectstorage.visibility import grants_to_acl

logger = get_logger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


@dataclass(frozen=True)
class ObjectInfo:
    """One object returned by a listing call."""

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass(frozen=True)
class ObjectListPage:
    """One page of a delimited prefix listing.

    Attributes:
        objects: Objects directly under the queried prefix
        prefixes: Sub-prefixes (one directory level down), each ending in the
            delimiter
        next_marker: Marker to resume from, empty string on the final page
    """

    objects: list[ObjectInfo] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    next_marker: str = ""


@dataclass(frozen=True)
class ObjectMeta:
    """Metadata reported for a single object."""

    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
    etag: Optional[str] = None


class ObjectStorageProvider(Protocol):
    """Operations the adapter requires from an object storage service."""

    def object_exists(self, bucket: str, key: str) -> bool:
        ...

    def put_object(
        self, bucket: str, key: str, body: bytes, options: Mapping[str, Any]
    ) -> None:
        ...

    def get_object(self, bucket: str, key: str) -> bytes:
        ...

    def delete_object(self, bucket: str, key: str) -> None:
        ...

    def delete_objects(self, bucket: str, keys: Sequence[str]) -> None:
        ...

    def copy_object(
        self,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str,
        options: Mapping[str, Any],
    ) -> None:
        ...

    def create_directory(
        self, bucket: str, key: str, options: Mapping[str, Any]
    ) -> None:
        ...

    def get_object_meta(self, bucket: str, key: str) -> ObjectMeta:
        ...

    def get_object_acl(self, bucket: str, key: str) -> str:
        ...

    def put_object_acl(self, bucket: str, key: str, acl: str) -> None:
        ...

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        delimiter: str,
        max_keys: int,
        marker: str,
    ) -> ObjectListPage:
        ...

    def sign_url(
        self,
        bucket: str,
        key: str,
        expires_in: int,
        method: str = "GET",
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        ...


def _error_code(exc: Exception) -> Optional[str]:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    return None


@contextmanager
def _provider_errors(operation: str, bucket: str, key: str = "") -> Iterator[None]:
    """Convert botocore failures raised inside the block into ProviderError."""
    try:
        yield
    except (ClientError, BotoCoreError) as e:
        code = _error_code(e)
        logger.debug(
            "S3 request failed",
            operation=operation,
            bucket=bucket,
            key=key,
            code=code,
        )
        raise ProviderError(f"{operation} failed for '{bucket}/{key}': {e}", code) from e


class S3Provider:
    """:class:`ObjectStorageProvider` backed by a boto3 S3 client."""

    SIGNED_METHODS = {"GET": "get_object", "PUT": "put_object", "HEAD": "head_object"}

    def __init__(self, client):
        self.client = client

    def object_exists(self, bucket: str, key: str) -> bool:
        try:
            self.client.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return False
            raise ProviderError(
                f"head_object failed for '{bucket}/{key}': {e}", _error_code(e)
            ) from e
        except BotoCoreError as e:
            raise ProviderError(f"head_object failed for '{bucket}/{key}': {e}") from e
        return True

    def put_object(
        self, bucket: str, key: str, body: bytes, options: Mapping[str, Any]
    ) -> None:
        with _provider_errors("put_object", bucket, key):
            self.client.put_object(Bucket=bucket, Key=key, Body=body, **options)

    def get_object(self, bucket: str, key: str) -> bytes:
        with _provider_errors("get_object", bucket, key):
            response = self.client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()

    def delete_object(self, bucket: str, key: str) -> None:
        with _provider_errors("delete_object", bucket, key):
            self.client.delete_object(Bucket=bucket, Key=key)

    def delete_objects(self, bucket: str, keys: Sequence[str]) -> None:
        with _provider_errors("delete_objects", bucket):
            response = self.client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
            )
        errors = response.get("Errors") or []
        if errors:
            first = errors[0]
            raise ProviderError(
                f"delete_objects failed for {len(errors)} key(s) in '{bucket}', "
                f"first '{first.get('Key')}': {first.get('Message')}",
                first.get("Code"),
            )

    def copy_object(
        self,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str,
        options: Mapping[str, Any],
    ) -> None:
        with _provider_errors("copy_object", dest_bucket, dest_key):
            self.client.copy_object(
                CopySource={"Bucket": source_bucket, "Key": source_key},
                Bucket=dest_bucket,
                Key=dest_key,
                **options,
            )

    def create_directory(
        self, bucket: str, key: str, options: Mapping[str, Any]
    ) -> None:
        marker_key = key.rstrip("/") + "/"
        with _provider_errors("create_directory", bucket, marker_key):
            self.client.put_object(Bucket=bucket, Key=marker_key, Body=b"", **options)

    def get_object_meta(self, bucket: str, key: str) -> ObjectMeta:
        with _provider_errors("head_object", bucket, key):
            response = self.client.head_object(Bucket=bucket, Key=key)
        return ObjectMeta(
            size=response.get("ContentLength"),
            last_modified=response.get("LastModified"),
            content_type=response.get("ContentType"),
            etag=response.get("ETag"),
        )

    def get_object_acl(self, bucket: str, key: str) -> str:
        with _provider_errors("get_object_acl", bucket, key):
            response = self.client.get_object_acl(Bucket=bucket, Key=key)
        return grants_to_acl(response.get("Grants", []))

    def put_object_acl(self, bucket: str, key: str, acl: str) -> None:
        with _provider_errors("put_object_acl", bucket, key):
            self.client.put_object_acl(Bucket=bucket, Key=key, ACL=acl)

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        delimiter: str,
        max_keys: int,
        marker: str,
    ) -> ObjectListPage:
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Prefix": prefix,
            "Delimiter": delimiter,
            "MaxKeys": max_keys,
        }
        if marker:
            params["Marker"] = marker

        with _provider_errors("list_objects", bucket, prefix):
            response = self.client.list_objects(**params)

        objects = [
            ObjectInfo(
                key=obj["Key"],
                size=obj.get("Size", 0),
                last_modified=obj.get("LastModified"),
                etag=obj.get("ETag"),
            )
            for obj in response.get("Contents", [])
        ]
        prefixes = [common["Prefix"] for common in response.get("CommonPrefixes", [])]

        next_marker = ""
        if response.get("IsTruncated", False):
            # NextMarker is only guaranteed when a delimiter is sent
            next_marker = response.get("NextMarker") or max(
                [obj.key for obj in objects] + prefixes, default=""
            )

        return ObjectListPage(objects=objects, prefixes=prefixes, next_marker=next_marker)

    def sign_url(
        self,
        bucket: str,
        key: str,
        expires_in: int,
        method: str = "GET",
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        client_method = self.SIGNED_METHODS.get(method.upper())
        if client_method is None:
            raise ProviderError(f"Unsupported signed URL method: {method}")

        params: dict[str, Any] = {"Bucket": bucket, "Key": key}
        params.update(options or {})
        with _provider_errors("generate_presigned_url", bucket, key):
            return self.client.generate_presigned_url(
                client_method, Params=params, ExpiresIn=expires_in
            )
