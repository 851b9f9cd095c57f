"""Public model exports for gdrivexfer."""

from __future__ import annotations

from .drive_item import DriveItem, DriveItemType, FileFacet, FolderFacet, Hashes

__all__ = [
    "DriveItem",
    "DriveItemType",
    "FileFacet",
    "FolderFacet",
    "Hashes",
]
