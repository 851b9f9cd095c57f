"""Conversions between Drive API payloads and gdrivexfer types."""

from __future__ import annotations

import json
from typing import Any

from gdrivexfer.errors import HttpErrorInfo
from gdrivexfer.models import DriveItem, DriveItemType, FileFacet, FolderFacet, Hashes
from gdrivexfer.util.mime import is_folder
from gdrivexfer.util.time import parse_optional_rfc3339


def file_dict_to_drive_item(data: dict[str, Any], *, child_count: int = 0) -> DriveItem:
    """
    Build a DriveItem from a Drive `files` resource.

    Drive does not report child counts, so folders take `child_count` from
    the caller. Checksums are uppercased.
    """
    file_id = data.get("id")
    name = data.get("name")
    mime_type = data.get("mimeType")
    mime_type = mime_type if isinstance(mime_type, str) else ""

    common: dict[str, Any] = {
        "name": name if isinstance(name, str) else "",
        "id": file_id if isinstance(file_id, str) else None,
        "modified_time": parse_optional_rfc3339(data.get("modifiedTime")),
    }

    if is_folder(mime_type):
        return DriveItem(
            type=DriveItemType.FOLDER,
            size_bytes=0,
            folder=FolderFacet(child_count=child_count),
            **common,
        )

    hashes = Hashes(
        sha1=_upper_hex(data.get("sha1Checksum")),
        sha256=_upper_hex(data.get("sha256Checksum")),
    )
    return DriveItem(
        type=DriveItemType.FILE,
        size_bytes=_parse_size(data.get("size")),
        file=FileFacet(mime_type=mime_type, hashes=hashes),
        **common,
    )


def http_error_to_info(exc: Any) -> HttpErrorInfo:
    """Extract status and reason from a googleapiclient HttpError."""
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)
    return _error_info(status_code, reason, getattr(exc, "content", None))


def response_error_info(response: Any) -> HttpErrorInfo:
    """Extract status and reason from a requests Response."""
    return _error_info(
        getattr(response, "status_code", None),
        getattr(response, "reason", None),
        getattr(response, "content", None),
    )


def _error_info(status_code: Any, reason: Any, content: Any) -> HttpErrorInfo:
    message = None
    details: dict[str, Any] = {}

    if isinstance(content, (bytes, bytearray)) and content:
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None

        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )


def _parse_size(value: Any) -> int:
    if isinstance(value, int) and value >= 0:
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return 0


def _upper_hex(value: Any) -> str:
    return value.upper() if isinstance(value, str) else ""
