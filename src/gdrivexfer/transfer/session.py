"""Resumable (chunked) upload session against the Drive upload endpoint."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Optional

import requests
from google.auth.exceptions import RefreshError, TransportError

from gdrivexfer.controller.fields import FILE_FIELDS
from gdrivexfer.controller.mapping import file_dict_to_drive_item, response_error_info
from gdrivexfer.errors import (
    AuthError,
    ChunkUploadError,
    IncompleteUploadError,
    InvalidStateError,
    NetworkError,
    SessionCreateError,
    is_transient,
    map_http_error,
)
from gdrivexfer.models import DriveItem

logger = logging.getLogger(__name__)

UPLOAD_ENDPOINT: str = "https://www.googleapis.com/upload/drive/v3/files"

# Status used by the upload endpoint for "range accepted, send more".
_RESUME_INCOMPLETE = 308

_RANGE_RE = re.compile(r"bytes=(\d+)-(\d+)")


class SessionState(str, Enum):
    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABORTED = "ABORTED"


class UploadSession:
    """
    One chunked upload: open -> send_chunk (in order) -> complete.

    Chunks must continue exactly where the committed range ends. A rejected
    chunk aborts the session; the upload must then restart from a new one.
    Transient failures (network, 429, 5xx) leave the session usable so the
    same chunk can be sent again.

    `http` is a requests-compatible session that authorizes its requests
    (google.auth.transport.requests.AuthorizedSession in production).
    """

    def __init__(
        self,
        http: Any,
        session_uri: str,
        total_size: int,
        *,
        name: str = "",
        parent_id: str = "",
        timeout_sec: float = 60.0,
    ) -> None:
        self._http = http
        self._session_uri = session_uri
        self._total_size = total_size
        self._name = name
        self._parent_id = parent_id
        self._timeout_sec = timeout_sec

        self._committed = 0
        self._state = SessionState.CREATED
        self._result: Optional[dict[str, Any]] = None

    @classmethod
    def open(
        cls,
        http: Any,
        parent_id: str,
        name: str,
        total_size: int,
        mime_type: str,
        *,
        supports_all_drives: bool = True,
        timeout_sec: float = 60.0,
    ) -> "UploadSession":
        """
        Ask the remote for a new upload session.

        Raises:
            SessionCreateError: if the remote refuses or cannot be reached.
        """
        if total_size <= 0:
            raise ValueError("total_size must be > 0 for a chunked upload")

        params = {"uploadType": "resumable", "fields": FILE_FIELDS}
        if supports_all_drives:
            params["supportsAllDrives"] = "true"
        body = {"name": name, "parents": [parent_id], "mimeType": mime_type}
        headers = {
            "X-Upload-Content-Type": mime_type,
            "X-Upload-Content-Length": str(total_size),
        }
        details = {"name": name, "parent_id": parent_id, "total_size": total_size}

        try:
            resp = http.post(
                UPLOAD_ENDPOINT,
                params=params,
                json=body,
                headers=headers,
                timeout=timeout_sec,
            )
        except (requests.RequestException, TransportError, RefreshError) as exc:
            raise SessionCreateError(
                "Could not reach the upload endpoint",
                details=details,
                cause=exc,
            ) from exc

        if not 200 <= resp.status_code <= 299:
            mapped = map_http_error(response_error_info(resp))
            raise SessionCreateError(
                f"Upload session refused: {mapped}",
                details={**details, **mapped.details},
                cause=mapped,
            )

        session_uri = resp.headers.get("Location")
        if not session_uri:
            raise SessionCreateError(
                "Upload session response has no Location header",
                details=details,
            )

        logger.debug("Opened upload session for %r (%d bytes)", name, total_size)
        return cls(
            http,
            session_uri,
            total_size,
            name=name,
            parent_id=parent_id,
            timeout_sec=timeout_sec,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def committed(self) -> int:
        """Bytes the remote has confirmed."""
        return self._committed

    @property
    def total_size(self) -> int:
        return self._total_size

    @property
    def session_uri(self) -> str:
        return self._session_uri

    def send_chunk(self, offset: int, data: bytes) -> int:
        """
        Send bytes [offset, offset + len(data)) and return the committed count.

        Raises:
            InvalidStateError: if the session is completed or aborted.
            ChunkUploadError: if the chunk is out of order or rejected (the
                session is aborted).
            NetworkError / RateLimitError / ApiError: transient failure; the
                session stays usable and nothing new is committed.
        """
        self._require_active()

        end = offset + len(data)
        if offset != self._committed or not data or end > self._total_size:
            self.abort()
            raise ChunkUploadError(
                "Chunk does not continue the committed range",
                details=self._details(offset=offset, length=len(data)),
            )

        headers = {
            "Content-Length": str(len(data)),
            "Content-Range": f"bytes {offset}-{end - 1}/{self._total_size}",
        }
        try:
            resp = self._http.put(
                self._session_uri,
                data=data,
                headers=headers,
                timeout=self._timeout_sec,
            )
        except RefreshError as exc:
            self.abort()
            raise AuthError("Credentials could not be refreshed", cause=exc) from exc
        except (requests.RequestException, TransportError) as exc:
            raise NetworkError(
                "Network error while sending chunk",
                details=self._details(offset=offset, length=len(data)),
                cause=exc,
            ) from exc

        if resp.status_code == _RESUME_INCOMPLETE:
            committed = _committed_from_range(resp.headers.get("Range"))
            if committed != end:
                self.abort()
                raise ChunkUploadError(
                    "Remote committed range does not match the chunk sent",
                    details=self._details(offset=offset, length=len(data), committed=committed),
                )
            self._committed = committed
            self._state = SessionState.IN_PROGRESS
            logger.debug("Committed %d/%d bytes for %r", committed, self._total_size, self._name)
            return committed

        if resp.status_code in (200, 201):
            if end != self._total_size:
                self.abort()
                raise ChunkUploadError(
                    "Remote finalized the upload before the last chunk",
                    details=self._details(offset=offset, length=len(data)),
                )
            try:
                result = resp.json()
            except ValueError as exc:
                self.abort()
                raise ChunkUploadError(
                    "Final chunk response is not valid JSON",
                    details=self._details(
                        offset=offset,
                        length=len(data),
                        status_code=resp.status_code,
                    ),
                    cause=exc,
                ) from exc
            if not isinstance(result, dict):
                self.abort()
                raise ChunkUploadError(
                    "Final chunk response is not a file resource",
                    details=self._details(offset=offset, length=len(data)),
                )
            self._committed = end
            self._state = SessionState.IN_PROGRESS
            self._result = result
            logger.debug("Final chunk accepted for %r", self._name)
            return end

        mapped = map_http_error(response_error_info(resp))
        if is_transient(mapped):
            raise mapped

        self.abort()
        raise ChunkUploadError(
            f"Chunk rejected: {mapped}",
            details={**self._details(offset=offset, length=len(data)), **mapped.details},
            cause=mapped,
        )

    def complete(self) -> DriveItem:
        """
        Finish the session and return the created item.

        Raises:
            IncompleteUploadError: if not every byte has been committed.
        """
        self._require_active()
        if self._committed != self._total_size or self._result is None:
            raise IncompleteUploadError(
                "Upload session completed before all bytes were committed",
                details=self._details(),
            )
        self._state = SessionState.COMPLETED
        return file_dict_to_drive_item(self._result)

    def abort(self) -> None:
        """Cancel the remote session. Safe to call repeatedly; never raises."""
        if self._state in (SessionState.COMPLETED, SessionState.ABORTED):
            return
        self._state = SessionState.ABORTED

        try:
            resp = self._http.delete(self._session_uri, timeout=self._timeout_sec)
        except Exception as exc:
            logger.warning("Could not cancel upload session for %r: %s", self._name, exc)
            return

        # 499 is the upload endpoint's "cancelled" reply.
        if resp.status_code not in (200, 204, 404, 410, 499):
            logger.warning(
                "Cancelling upload session for %r returned HTTP %s",
                self._name,
                resp.status_code,
            )

    def _require_active(self) -> None:
        if self._state in (SessionState.COMPLETED, SessionState.ABORTED):
            raise InvalidStateError(
                f"Upload session is {self._state.value.lower()}",
                details=self._details(),
            )

    def _details(self, **extra: Any) -> dict[str, Any]:
        details: dict[str, Any] = {
            "name": self._name,
            "parent_id": self._parent_id,
            "committed": self._committed,
            "total_size": self._total_size,
        }
        details.update(extra)
        return details


def _committed_from_range(header: Optional[str]) -> int:
    """Parse `Range: bytes=0-N` into N+1 (0 when absent or malformed)."""
    if not header:
        return 0
    m = _RANGE_RE.fullmatch(header.strip())
    if m is None or m.group(1) != "0":
        return 0
    return int(m.group(2)) + 1
