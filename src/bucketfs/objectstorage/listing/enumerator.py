"""Walk every object under a prefix, following the listing marker.

Object stores have no directories, only keys. Listing with a ``/`` delimiter
groups the keys below the next separator into sub-prefixes, which is how one
directory level is emulated. A listing call returns at most ``max_keys``
entries plus a continuation marker; the walker keeps calling with the new
marker until the provider hands back an empty one.

For example, with objects:
    - images/a.jpg
    - images/2019/b.jpg
    - images/2019/raw/c.raw

walking ``images/`` non-recursively visits ``[a.jpg]`` with sub-prefixes
``[images/2019/]``. Walking it recursively first visits ``images/2019/raw/``,
then ``images/2019/``, then ``images/`` itself.
"""

from typing import Callable, Optional

from bucketfs.core import get_logger, settings
from bucketfs.core.exceptions import ValidationError
from bucketfs.core.observability import get_tracer
from bucketfs.objectstorage.provider import ObjectInfo, ObjectStorageProvider

logger = get_logger(__name__)
tracer = get_tracer(__name__)

DELIMITER = "/"
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 1000

PageVisitor = Callable[[list[ObjectInfo], list[str], str], None]


class ObjectEnumerator:
    """Streams listing pages under a prefix to a visitor callback."""

    def __init__(
        self,
        provider: ObjectStorageProvider,
        bucket: str,
        page_size: Optional[int] = None,
    ):
        """Initialize the enumerator.

        Args:
            provider: Provider issuing the listing calls
            bucket: Bucket to enumerate
            page_size: max-keys per listing call, defaults to settings

        Raises:
            ValidationError: If the page size is outside 1..1000
        """
        if page_size is None:
            page_size = settings.list_page_size
        if not MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"Page size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}: {page_size}"
            )

        self.provider = provider
        self.bucket = bucket
        self.page_size = page_size

    def walk(self, prefix: str, recursive: bool, visitor: PageVisitor) -> None:
        """Visit every page of objects under ``prefix``.

        When ``recursive`` is set, every sub-prefix of a page is walked to
        completion (depth-first, same visitor) before the page itself is
        handed to the visitor.

        Args:
            prefix: Prefix to enumerate; empty for the bucket root, otherwise
                it must end with the delimiter
            recursive: Descend into sub-prefixes
            visitor: Called as ``visitor(objects, sub_prefixes, prefix)`` once
                per page

        Raises:
            ProviderError: If any listing call fails. Pages already visited
                are not revisited or undone.
            ValidationError: If the prefix does not end with the delimiter
        """
        if prefix and not prefix.endswith(DELIMITER):
            raise ValidationError(
                f"Listing prefix must end with '{DELIMITER}': {prefix!r}"
            )

        with tracer.start_as_current_span("bucketfs.walk") as span:
            span.set_attribute("bucketfs.bucket", self.bucket)
            span.set_attribute("bucketfs.prefix", prefix)
            span.set_attribute("bucketfs.recursive", recursive)
            page_count = self._walk(prefix, recursive, visitor)

        logger.debug(
            "Prefix walk completed",
            bucket=self.bucket,
            prefix=prefix,
            recursive=recursive,
            pages=page_count,
        )

    def _walk(self, prefix: str, recursive: bool, visitor: PageVisitor) -> int:
        marker = ""
        pages = 0
        # Some providers repeat common prefixes on every page of a listing
        seen: set[str] = set()

        while True:
            page = self.provider.list_objects(
                self.bucket, prefix, DELIMITER, self.page_size, marker
            )
            pages += 1

            new_prefixes = [p for p in page.prefixes if p not in seen]
            seen.update(new_prefixes)

            if recursive:
                for sub_prefix in new_prefixes:
                    pages += self._walk(sub_prefix, True, visitor)

            visitor(page.objects, new_prefixes, prefix)

            marker = page.next_marker
            if not marker:
                return pages
