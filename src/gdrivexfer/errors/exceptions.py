"""Exception hierarchy and HTTP error mapping for gdrivexfer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveXferError(Exception):
    """
    Base exception for gdrivexfer.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class LocalIOError(GDriveXferError):
    """Raised when a local file cannot be opened, read or written."""


class InvalidStateError(GDriveXferError):
    """Raised when an object is used in an invalid state (e.g., aborted session)."""


class IncompleteUploadError(GDriveXferError):
    """Raised when an upload session is completed before all bytes are committed."""


class UsageError(GDriveXferError):
    """Raised when a call is rejected locally before any request is sent."""


class RemoteError(GDriveXferError):
    """Raised when the remote side rejects a request (generic)."""


class AuthError(RemoteError):
    """Raised when OAuth authentication/refresh fails."""


class PermissionError(RemoteError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(RemoteError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class NotFoundError(RemoteError):
    """Raised when a remote path or item is not found (HTTP 404)."""


class ConflictError(RemoteError):
    """Raised when a conflict occurs (HTTP 409/412, name already taken)."""


class RateLimitError(RemoteError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(RemoteError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(RemoteError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(RemoteError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class SessionCreateError(RemoteError):
    """Raised when the remote refuses to open a resumable upload session."""


class ChunkUploadError(RemoteError):
    """Raised when a chunk is rejected (range mismatch, expired session, ...)."""


class DirectUploadError(RemoteError):
    """Raised when a single-request upload fails."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivexfer exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def _is_rate_limit_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return reason in ("rateLimitExceeded", "userRateLimitExceeded")


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> RemoteError:
    """
    Map an HTTP error to a gdrivexfer exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> RateLimitError if rate-limit reason, QuotaExceededError if
          quota-related, PermissionError otherwise
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - 5xx -> ApiError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_rate_limit_reason(info.reason):
            return RateLimitError(message, details=details, cause=cause)
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)
    if 500 <= info.status_code <= 599:
        return ApiError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)


def is_transient(exc: BaseException) -> bool:
    """Return True for failures a caller may reasonably retry."""
    if isinstance(exc, (RateLimitError, NetworkError)):
        return True
    if isinstance(exc, ApiError):
        status_code = exc.details.get("status_code")
        return isinstance(status_code, int) and 500 <= status_code <= 599
    return False
