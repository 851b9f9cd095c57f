"""Google Drive API controller (internal use only)."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, Optional, TypeVar

from gdrivexfer.config import DriveConfig, RetryPolicy
from gdrivexfer.errors import (
    ApiError,
    DirectUploadError,
    GDriveXferError,
    LocalIOError,
    NetworkError,
    NotFoundError,
    RemoteError,
    is_transient,
    map_http_error,
)
from gdrivexfer.models import DriveItem
from gdrivexfer.util import paths
from gdrivexfer.util.mime import FOLDER_MIME, is_folder

from .fields import COUNT_FIELDS, FILE_FIELDS, LIST_FIELDS, LOOKUP_FIELDS
from .mapping import file_dict_to_drive_item, http_error_to_info

logger = logging.getLogger(__name__)

T = TypeVar("T")

DOWNLOAD_CHUNK_SIZE: int = 8 * 1024 * 1024


class GoogleDriveController:
    """
    Drive API controller (internal only).

    Notes:
        - Remote paths are resolved to IDs by walking names from
          `root_folder_id`; "/" is the root folder itself.
        - When several children share a name, the oldest one wins.
        - `supports_all_drives` is applied to all requests consistently.
    """

    def __init__(
        self,
        service: Any,
        *,
        root_folder_id: str = "root",
        list_order_by: Optional[str] = None,
        supports_all_drives: bool = True,
        retry: Optional[RetryPolicy] = None,
    ) -> None:
        self._service = service
        self._root_folder_id = root_folder_id
        self._list_order_by = list_order_by
        self._supports_all_drives = supports_all_drives
        self._retry_policy = retry or RetryPolicy()

    @classmethod
    def from_config(cls, service: Any, config: DriveConfig) -> "GoogleDriveController":
        return cls(
            service,
            root_folder_id=config.root_folder_id,
            list_order_by=config.list_order_by,
            supports_all_drives=config.supports_all_drives,
            retry=config.retry,
        )

    @property
    def root_folder_id(self) -> str:
        return self._root_folder_id

    # ----------------------------
    # Path resolution
    # ----------------------------
    def resolve(self, path: str) -> dict[str, Any]:
        """
        Resolve a remote path to its `{id, name, mimeType}` record.

        Raises:
            NotFoundError: if any segment is missing or an inner segment is
                not a folder.
        """
        current: dict[str, Any] = {
            "id": self._root_folder_id,
            "name": "",
            "mimeType": FOLDER_MIME,
        }
        walked = ""
        for segment in paths.split(path):
            if not is_folder(current.get("mimeType", "")):
                raise NotFoundError(
                    "Path goes through a file",
                    details={"path": paths.normalize(path), "at": walked},
                )
            walked = paths.join(walked, segment)
            child = self.find_child(current["id"], segment)
            if child is None:
                raise NotFoundError(
                    "Remote path not found",
                    details={"path": paths.normalize(path), "missing": walked},
                )
            current = child
        return current

    def resolve_folder_id(self, path: str) -> str:
        """Resolve `path` and require it to be a folder."""
        record = self.resolve(path)
        if not is_folder(record.get("mimeType", "")):
            raise NotFoundError(
                "Remote folder not found (path is a file)",
                details={"path": paths.normalize(path)},
            )
        return record["id"]

    def find_child(self, parent_id: str, name: str) -> Optional[dict[str, Any]]:
        """Return the oldest child of `parent_id` named exactly `name`, or None."""
        q = f"name = '{_escape_query(name)}' and '{parent_id}' in parents and trashed=false"
        page_token: Optional[str] = None
        while True:
            req = self._service.files().list(
                q=q,
                fields=LOOKUP_FIELDS,
                orderBy="createdTime",
                pageSize=100,
                pageToken=page_token,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute)
            for f in data.get("files", []):
                if f.get("name") == name:
                    return f

            page_token = data.get("nextPageToken")
            if not page_token:
                return None

    # ----------------------------
    # Metadata
    # ----------------------------
    def get(self, file_id: str) -> DriveItem:
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        return self._to_item(data)

    def list_children(self, parent_id: str) -> list[DriveItem]:
        """Immediate children of `parent_id`, in the order the API returns them."""
        return [self._to_item(f) for f in self._list_raw(parent_id, LIST_FIELDS)]

    def count_children(self, folder_id: str) -> int:
        return len(self._list_raw(folder_id, COUNT_FIELDS, ordered=False))

    # ----------------------------
    # Mutations
    # ----------------------------
    def create_folder(self, name: str, parent_id: str) -> DriveItem:
        body = {"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]}
        req = self._service.files().create(
            body=body,
            fields=FILE_FIELDS,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute)
        return file_dict_to_drive_item(data, child_count=0)

    def trash(self, file_id: str) -> None:
        req = self._service.files().update(
            fileId=file_id,
            body={"trashed": True},
            fields="id",
            **self._common_write_kwargs(),
        )
        self._execute(req.execute)

    def delete_permanently(self, file_id: str) -> None:
        req = self._service.files().delete(
            fileId=file_id,
            **self._common_write_kwargs(),
        )
        self._execute(req.execute)

    # ----------------------------
    # Content
    # ----------------------------
    def upload_direct(
        self,
        local_path: str,
        parent_id: str,
        *,
        name: str,
        mime_type: str,
    ) -> DriveItem:
        """
        Upload a whole file in one multipart request.

        Raises:
            LocalIOError: if the local file cannot be read.
            DirectUploadError: if the remote rejects the upload.
        """
        from googleapiclient.http import MediaIoBaseUpload

        body = {"name": name, "parents": [parent_id], "mimeType": mime_type}
        try:
            f = open(local_path, "rb")
        except OSError as exc:
            raise LocalIOError(
                "Failed to open local file",
                details={"local_path": local_path},
                cause=exc,
            ) from exc

        with f:
            media = MediaIoBaseUpload(f, mimetype=mime_type, resumable=False)
            try:
                # Non-resumable media is read into the request body here.
                req = self._service.files().create(
                    body=body,
                    media_body=media,
                    fields=FILE_FIELDS,
                    **self._common_write_kwargs(),
                )
            except OSError as exc:
                raise LocalIOError(
                    "Failed to read local file",
                    details={"local_path": local_path},
                    cause=exc,
                ) from exc
            try:
                data = self._execute(req.execute)
            except LocalIOError:
                raise
            except RemoteError as exc:
                raise DirectUploadError(
                    f"Direct upload failed: {exc}",
                    details={**exc.details, "name": name, "parent_id": parent_id},
                    cause=exc,
                ) from exc

        logger.debug("Uploaded %r in one request", name)
        return file_dict_to_drive_item(data)

    def download(self, file_id: str, local_path: str) -> None:
        """
        Stream a file's content to `local_path` (overwritten if present).

        A partially written file is removed on failure.
        """
        from googleapiclient.http import MediaIoBaseDownload

        req = self._service.files().get_media(
            fileId=file_id,
            **self._common_get_kwargs(),
        )

        try:
            parent_dir = os.path.dirname(local_path)
            if parent_dir:
                os.makedirs(parent_dir, exist_ok=True)
            f = open(local_path, "wb")
        except OSError as exc:
            raise LocalIOError(
                "Failed to open local file for writing",
                details={"local_path": local_path},
                cause=exc,
            ) from exc

        try:
            with f:
                downloader = MediaIoBaseDownload(
                    _LocalWriter(f, local_path),
                    req,
                    chunksize=DOWNLOAD_CHUNK_SIZE,
                )
                done = False
                while not done:
                    _, done = self._execute(downloader.next_chunk)
        except BaseException:
            _remove_quietly(local_path)
            raise

        logger.debug("Downloaded %s to %s", file_id, local_path)

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _common_write_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _to_item(self, data: dict[str, Any]) -> DriveItem:
        if is_folder(data.get("mimeType", "")) and isinstance(data.get("id"), str):
            return file_dict_to_drive_item(data, child_count=self.count_children(data["id"]))
        return file_dict_to_drive_item(data)

    def _list_raw(
        self,
        parent_id: str,
        fields: str,
        *,
        ordered: bool = True,
    ) -> list[dict[str, Any]]:
        q = f"'{parent_id}' in parents and trashed=false"
        extra: dict[str, Any] = {}
        if ordered and self._list_order_by:
            extra["orderBy"] = self._list_order_by

        all_files: list[dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            req = self._service.files().list(
                q=q,
                fields=fields,
                pageToken=page_token,
                **extra,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute)
            all_files.extend(data.get("files", []))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return all_files

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if is_transient(mapped) and attempt < self._retry_policy.max_retries:
                    logger.warning("Transient Drive error (%s), retrying in %.1fs", mapped, delay)
                    time.sleep(delay)
                    delay *= 2
                    continue
                if mapped is exc:
                    raise
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, GDriveXferError):
            return exc

        from googleapiclient.errors import HttpError

        if isinstance(exc, HttpError):
            info = http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        from httplib2 import HttpLib2Error

        if isinstance(exc, (OSError, TimeoutError, HttpLib2Error)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


class _LocalWriter:
    """File wrapper that reports write failures as LocalIOError."""

    def __init__(self, f: Any, local_path: str) -> None:
        self._f = f
        self._local_path = local_path

    def write(self, data: bytes) -> int:
        try:
            return self._f.write(data)
        except OSError as exc:
            raise LocalIOError(
                "Failed to write local file",
                details={"local_path": self._local_path},
                cause=exc,
            ) from exc


def _escape_query(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _remove_quietly(local_path: str) -> None:
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove partial download %s: %s", local_path, exc)
