"""Result shapes returned by the storage adapter."""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Literal, Optional

EntryKind = Literal["file", "dir"]


@dataclass(frozen=True)
class StorageEntry:
    """One file or directory as seen through the adapter.

    Attributes:
        path: Path relative to the adapter root
        kind: ``"file"`` or ``"dir"``
        size: Size in bytes, when known
        timestamp: Last modification as a Unix timestamp, when known
        mimetype: Content type, when known
    """

    path: str
    kind: EntryKind = "file"
    size: Optional[int] = None
    timestamp: Optional[int] = None
    mimetype: Optional[str] = None

    @property
    def is_dir(self) -> bool:
        return self.kind == "dir"


@dataclass(frozen=True)
class FileContents:
    """Contents of a file read in full."""

    path: str
    contents: bytes
    kind: EntryKind = "file"


@dataclass(frozen=True)
class FileStream:
    """A file opened for reading as a binary stream."""

    path: str
    stream: BinaryIO
    kind: EntryKind = "file"


@dataclass(frozen=True)
class VisibilityInfo:
    """Visibility label of a file."""

    path: str
    visibility: str


def to_timestamp(value: Optional[datetime]) -> Optional[int]:
    """Convert a provider datetime to a Unix timestamp."""
    if value is None:
        return None
    return int(value.timestamp())
