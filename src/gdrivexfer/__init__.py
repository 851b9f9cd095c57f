"""gdrivexfer public API."""

from __future__ import annotations

import logging

from gdrivexfer.auth import AuthInfo, OAuthClient
from gdrivexfer.client import DriveClient
from gdrivexfer.config import DriveConfig, RetryPolicy
from gdrivexfer.errors import (
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
from gdrivexfer.models import DriveItem, DriveItemType, FileFacet, FolderFacet, Hashes
from gdrivexfer.transfer import (
    ChunkRange,
    SessionState,
    Strategy,
    TransferPlan,
    UploadSession,
    plan,
)
from gdrivexfer.util.hashing import HashAlgorithm, digest, digest_file, file_hashes, matches

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # High-level
    "DriveClient",
    "DriveConfig",
    "RetryPolicy",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Models
    "DriveItem",
    "DriveItemType",
    "FileFacet",
    "FolderFacet",
    "Hashes",
    # Transfer
    "ChunkRange",
    "SessionState",
    "Strategy",
    "TransferPlan",
    "UploadSession",
    "plan",
    # Integrity
    "HashAlgorithm",
    "digest",
    "digest_file",
    "file_hashes",
    "matches",
    # Errors
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
