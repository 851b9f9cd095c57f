from __future__ import annotations

import mimetypes
import os

FOLDER_MIME: str = "application/vnd.google-apps.folder"
DEFAULT_MIME: str = "application/octet-stream"

# Registries differ between platforms; these are pinned.
_KNOWN_TYPES: dict[str, str] = {
    ".txt": "text/plain",
    ".htm": "text/html",
    ".html": "text/html",
    ".css": "text/css",
    ".csv": "text/csv",
    ".js": "text/javascript",
    ".json": "application/json",
    ".xml": "text/xml",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".zip": "application/zip",
    ".dat": DEFAULT_MIME,
    ".bin": DEFAULT_MIME,
}


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def guess_mime_type(path: str) -> str:
    """
    Return the content type declared when uploading `path`.

    Text types carry an explicit utf-8 charset (e.g. "text/plain; charset=utf-8").
    Unknown or extensionless files are "application/octet-stream".
    """
    ext = os.path.splitext(path)[1].lower()
    if not ext:
        return DEFAULT_MIME

    mime = _KNOWN_TYPES.get(ext)
    if mime is None:
        mime = mimetypes.guess_type(f"x{ext}", strict=False)[0] or DEFAULT_MIME

    if mime.startswith("text/") or mime in ("application/json", "image/svg+xml"):
        return f"{mime}; charset=utf-8"
    return mime
