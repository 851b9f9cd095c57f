"""Client configuration for gdrivexfer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from gdrivexfer.auth import AuthInfo

# Resumable upload chunks must be multiples of 256 KiB (except the last one).
CHUNK_GRANULARITY: int = 256 * 1024

DEFAULT_UPLOAD_SESSION_SIZE_LIMIT: int = 4 * 1024 * 1024
DEFAULT_CHUNK_SIZE: int = 16 * CHUNK_GRANULARITY
DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with exponential backoff for transient failures.

    `max_retries=0` disables retrying: every failure surfaces immediately.
    """

    max_retries: int = 0
    initial_delay_sec: float = 1.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("RetryPolicy.max_retries must be >= 0")
        if self.initial_delay_sec < 0:
            raise ValueError("RetryPolicy.initial_delay_sec must be >= 0")


@dataclass(frozen=True)
class DriveConfig:
    """
    Configuration for a DriveClient.

    Attributes:
        auth: OAuth settings. Required unless collaborators are injected.
        root_folder_id: Drive folder that "/" refers to.
        upload_session_size_limit: Files up to this size (bytes) are uploaded
            in one request; larger ones use a chunked session.
        chunk_size: Bytes per session chunk (positive multiple of 256 KiB).
        retry: Policy for transient failures of metadata requests and chunks.
        list_order_by: Drive `orderBy` for listings (e.g. "name"). None sends
            no `orderBy`, so children come back in the remote's own order.
        delete_to_trash: Trash instead of permanently deleting.
    """

    auth: Optional[AuthInfo] = None
    root_folder_id: str = "root"
    upload_session_size_limit: int = DEFAULT_UPLOAD_SESSION_SIZE_LIMIT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    list_order_by: Optional[str] = None
    delete_to_trash: bool = False
    supports_all_drives: bool = True
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    timeout_sec: float = 60.0

    def __post_init__(self) -> None:
        if not isinstance(self.root_folder_id, str) or not self.root_folder_id.strip():
            raise ValueError("DriveConfig.root_folder_id must be a non-empty string")
        if self.upload_session_size_limit < 0:
            raise ValueError("DriveConfig.upload_session_size_limit must be >= 0")
        if self.chunk_size <= 0 or self.chunk_size % CHUNK_GRANULARITY != 0:
            raise ValueError(
                f"DriveConfig.chunk_size must be a positive multiple of {CHUNK_GRANULARITY}"
            )
        if not self.scopes:
            raise ValueError("DriveConfig.scopes must not be empty")
        if self.timeout_sec <= 0:
            raise ValueError("DriveConfig.timeout_sec must be > 0")

    @classmethod
    def from_env(cls, prefix: str = "GDRIVEXFER_") -> "DriveConfig":
        """
        Build a config from environment variables.

        Required:
            - {prefix}CLIENT_SECRETS, {prefix}TOKEN_FILE
        Optional:
            - {prefix}ROOT_ID, {prefix}SIZE_LIMIT, {prefix}CHUNK_SIZE,
              {prefix}MAX_RETRIES
        """
        auth = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": _env(prefix + "CLIENT_SECRETS"),
                "token_file": _env(prefix + "TOKEN_FILE"),
            },
        )

        kwargs: dict[str, object] = {"auth": auth}
        root_id = os.environ.get(prefix + "ROOT_ID", "").strip()
        if root_id:
            kwargs["root_folder_id"] = root_id

        size_limit = _env_int(prefix + "SIZE_LIMIT")
        if size_limit is not None:
            kwargs["upload_session_size_limit"] = size_limit

        chunk_size = _env_int(prefix + "CHUNK_SIZE")
        if chunk_size is not None:
            kwargs["chunk_size"] = chunk_size

        max_retries = _env_int(prefix + "MAX_RETRIES")
        if max_retries is not None:
            kwargs["retry"] = RetryPolicy(max_retries=max_retries)

        return cls(**kwargs)  # type: ignore[arg-type]


def _env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ValueError(f"Missing env var: {name}")
    return value


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Env var {name} must be an integer, got {raw!r}") from exc
