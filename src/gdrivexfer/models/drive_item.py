"""Data model for remote Drive items."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class DriveItemType(str, Enum):
    """Kind of a remote entry."""

    FILE = "FILE"
    FOLDER = "FOLDER"


@dataclass(slots=True, frozen=True)
class Hashes:
    """Content digests reported for a file (uppercase hex, empty if unknown)."""

    sha1: str = ""
    sha256: str = ""


@dataclass(slots=True, frozen=True)
class FileFacet:
    mime_type: str
    hashes: Hashes = Hashes()


@dataclass(slots=True, frozen=True)
class FolderFacet:
    child_count: int = 0

    def __post_init__(self) -> None:
        if self.child_count < 0:
            raise ValueError("child_count must be non-negative")


@dataclass(slots=True, frozen=True)
class DriveItem:
    """
    Snapshot of a file or folder in the remote hierarchy.

    Notes:
        - Exactly one of `folder` / `file` is set, matching `type`.
        - `name` is the leaf name only; it never contains path separators.
        - Values are not cached or refreshed; fetch again to see changes.
    """

    name: str
    type: DriveItemType
    size_bytes: int = 0

    folder: Optional[FolderFacet] = None
    file: Optional[FileFacet] = None

    id: Optional[str] = None
    modified_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError("size_bytes must be non-negative")
        if (self.folder is None) == (self.file is None):
            raise ValueError("exactly one of folder/file must be set")
        if self.type is DriveItemType.FOLDER and self.folder is None:
            raise ValueError("FOLDER item requires a folder facet")
        if self.type is DriveItemType.FILE and self.file is None:
            raise ValueError("FILE item requires a file facet")

    @property
    def is_folder(self) -> bool:
        return self.type is DriveItemType.FOLDER

    @property
    def is_file(self) -> bool:
        return self.type is DriveItemType.FILE
