"""Field selectors for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "parents,"
    "trashed,"
    "modifiedTime,"
    "size,"
    "sha1Checksum,"
    "sha256Checksum"
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

# Counting children only needs IDs.
COUNT_FIELDS: str = "nextPageToken,files(id)"

# Path walking needs just enough to pick the matching child.
LOOKUP_FIELDS: str = "nextPageToken,files(id,name,mimeType)"
