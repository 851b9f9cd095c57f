"""DriveClient: path-based file operations on Google Drive."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, BinaryIO, Optional

from gdrivexfer.auth import OAuthClient
from gdrivexfer.config import DriveConfig
from gdrivexfer.controller import GoogleDriveController
from gdrivexfer.errors import (
    ConflictError,
    LocalIOError,
    UsageError,
    is_transient,
)
from gdrivexfer.models import DriveItem
from gdrivexfer.transfer import Strategy, TransferPlan, UploadSession, plan
from gdrivexfer.util import paths
from gdrivexfer.util.mime import guess_mime_type, is_folder

logger = logging.getLogger(__name__)


class DriveClient:
    """
    Create, upload, download, inspect, list and delete remote items by path.

    Paths are "/"-separated and rooted at `config.root_folder_id`. Every call
    blocks until the remote has answered. Files larger than
    `config.upload_session_size_limit` are uploaded through a chunked
    session owned by the call; smaller ones in a single request.
    """

    def __init__(self, config: DriveConfig) -> None:
        if config.auth is None:
            raise UsageError("DriveConfig.auth is required to build a DriveClient")

        oauth = OAuthClient(config.auth)
        creds = oauth.get_credentials(config.scopes)
        service = oauth.build_drive_service(config.scopes, credentials=creds)

        self._config = config
        self._controller = GoogleDriveController.from_config(service, config)
        self._http = oauth.build_authorized_session(config.scopes, credentials=creds)

    @classmethod
    def from_controller(
        cls,
        controller: GoogleDriveController,
        http: Any,
        config: Optional[DriveConfig] = None,
    ) -> "DriveClient":
        """Create a client with injected collaborators (useful for tests)."""
        obj = cls.__new__(cls)
        obj._config = config or DriveConfig()
        obj._controller = controller
        obj._http = http
        return obj

    @property
    def config(self) -> DriveConfig:
        return self._config

    def create_dir(self, path: str) -> DriveItem:
        """
        Create the folder at `path`. Its parent must already exist.

        Raises:
            ConflictError: if an item with that name already exists.
            NotFoundError: if the parent folder does not exist.
        """
        name = paths.leaf_name(path)
        if not name:
            raise UsageError("Cannot create the root folder", details={"path": path})

        parent_id = self._controller.resolve_folder_id(paths.parent(path))
        if self._controller.find_child(parent_id, name) is not None:
            raise ConflictError(
                "An item with this name already exists",
                details={"path": paths.normalize(path)},
            )
        return self._controller.create_folder(name, parent_id)

    def upload(self, local_path: str, remote_dir: str) -> DriveItem:
        """
        Upload a local file into `remote_dir`, keeping its base name.

        Raises:
            LocalIOError: if the local file is missing or unreadable.
            NotFoundError: if `remote_dir` does not exist.
            DirectUploadError: small-file upload rejected.
            SessionCreateError / ChunkUploadError / IncompleteUploadError:
                chunked upload failures (the session is aborted first).
        """
        try:
            size = os.stat(local_path).st_size
        except OSError as exc:
            raise LocalIOError(
                "Local file not accessible",
                details={"local_path": local_path},
                cause=exc,
            ) from exc
        if not os.path.isfile(local_path):
            raise LocalIOError("Not a regular file", details={"local_path": local_path})

        name = os.path.basename(local_path)
        mime_type = guess_mime_type(name)
        parent_id = self._controller.resolve_folder_id(remote_dir)

        transfer_plan = plan(
            size,
            self._config.upload_session_size_limit,
            self._config.chunk_size,
        )
        logger.debug(
            "Uploading %s (%d bytes) as %s",
            local_path,
            size,
            transfer_plan.strategy.value,
        )

        if transfer_plan.strategy is Strategy.DIRECT:
            return self._controller.upload_direct(
                local_path,
                parent_id,
                name=name,
                mime_type=mime_type,
            )
        return self._upload_chunked(local_path, parent_id, name, mime_type, transfer_plan)

    def download(self, remote_path: str, local_dir: str) -> str:
        """
        Download a remote file into `local_dir` under its remote name.

        Returns:
            The local file path written.
        """
        record = self._controller.resolve(remote_path)
        if is_folder(record.get("mimeType", "")):
            raise UsageError(
                "Folders cannot be downloaded",
                details={"path": paths.normalize(remote_path)},
            )

        local_path = os.path.join(local_dir, record.get("name") or paths.leaf_name(remote_path))
        self._controller.download(record["id"], local_path)
        return local_path

    def info(self, remote_path: str) -> DriveItem:
        """Metadata for the item at `remote_path` (no content transfer)."""
        record = self._controller.resolve(remote_path)
        return self._controller.get(record["id"])

    def list(self, remote_path: str) -> list[DriveItem]:
        """Immediate children of the folder at `remote_path`, in remote order."""
        folder_id = self._controller.resolve_folder_id(remote_path)
        return self._controller.list_children(folder_id)

    def delete(self, remote_path: str) -> None:
        """Delete (or trash, per config) the file or folder at `remote_path`."""
        if not paths.split(remote_path):
            raise UsageError("Refusing to delete the root folder")

        record = self._controller.resolve(remote_path)
        if self._config.delete_to_trash:
            self._controller.trash(record["id"])
        else:
            self._controller.delete_permanently(record["id"])

    # ----------------------------
    # Internals
    # ----------------------------
    def _upload_chunked(
        self,
        local_path: str,
        parent_id: str,
        name: str,
        mime_type: str,
        transfer_plan: TransferPlan,
    ) -> DriveItem:
        try:
            f = open(local_path, "rb")
        except OSError as exc:
            raise LocalIOError(
                "Failed to open local file",
                details={"local_path": local_path},
                cause=exc,
            ) from exc

        with f:
            session = UploadSession.open(
                self._http,
                parent_id,
                name,
                transfer_plan.total_size,
                mime_type,
                supports_all_drives=self._config.supports_all_drives,
                timeout_sec=self._config.timeout_sec,
            )
            try:
                for chunk in transfer_plan.chunks():
                    data = _read_exact(f, chunk.length, local_path)
                    self._send_chunk(session, chunk.offset, data)
                return session.complete()
            except BaseException:
                session.abort()
                raise

    def _send_chunk(self, session: UploadSession, offset: int, data: bytes) -> None:
        policy = self._config.retry
        delay = policy.initial_delay_sec
        attempt = 0
        while True:
            try:
                session.send_chunk(offset, data)
                return
            except Exception as exc:
                if not is_transient(exc) or attempt >= policy.max_retries:
                    raise
                attempt += 1
                logger.warning(
                    "Chunk at offset %d failed (%s), retry %d/%d in %.1fs",
                    offset,
                    exc,
                    attempt,
                    policy.max_retries,
                    delay,
                )
                time.sleep(delay)
                delay *= 2


def _read_exact(f: BinaryIO, length: int, local_path: str) -> bytes:
    try:
        data = f.read(length)
    except OSError as exc:
        raise LocalIOError(
            "Failed to read local file",
            details={"local_path": local_path},
            cause=exc,
        ) from exc
    if len(data) != length:
        raise LocalIOError(
            "Local file shrank during upload",
            details={"local_path": local_path, "expected": length, "read": len(data)},
        )
    return data
