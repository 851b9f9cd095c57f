"""Public error exports for gdrivexfer."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    ChunkUploadError,
    ConflictError,
    DirectUploadError,
    GDriveXferError,
    HttpErrorInfo,
    IncompleteUploadError,
    InvalidArgumentError,
    InvalidStateError,
    LocalIOError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    RemoteError,
    SessionCreateError,
    UsageError,
    is_transient,
    map_http_error,
)

__all__ = [
    "GDriveXferError",
    "LocalIOError",
    "InvalidStateError",
    "IncompleteUploadError",
    "UsageError",
    "RemoteError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "SessionCreateError",
    "ChunkUploadError",
    "DirectUploadError",
    "HttpErrorInfo",
    "map_http_error",
    "is_transient",
]
