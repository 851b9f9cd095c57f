import unittest

from gdrivexfer.errors.exceptions import (
    ApiError,
    AuthError,
    ChunkUploadError,
    ConflictError,
    DirectUploadError,
    GDriveXferError,
    HttpErrorInfo,
    IncompleteUploadError,
    InvalidArgumentError,
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


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = GDriveXferError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_hierarchy(self) -> None:
        for cls in (
            NotFoundError,
            ConflictError,
            SessionCreateError,
            ChunkUploadError,
            DirectUploadError,
            NetworkError,
        ):
            self.assertTrue(issubclass(cls, RemoteError), cls)
        self.assertFalse(issubclass(LocalIOError, RemoteError))
        self.assertFalse(issubclass(IncompleteUploadError, RemoteError))
        self.assertFalse(issubclass(UsageError, RemoteError))
        self.assertTrue(issubclass(UsageError, GDriveXferError))

    def test_map_http_error_basic(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=404, message="not found"))
        self.assertIsInstance(err, NotFoundError)
        self.assertEqual(err.details["status_code"], 404)

        err = map_http_error(HttpErrorInfo(status_code=400, message="bad req"))
        self.assertIsInstance(err, InvalidArgumentError)

        err = map_http_error(HttpErrorInfo(status_code=429, message="rate"))
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(HttpErrorInfo(status_code=409, message="conflict"))
        self.assertIsInstance(err, ConflictError)

        err = map_http_error(HttpErrorInfo(status_code=401, message="auth"))
        self.assertIsInstance(err, AuthError)

    def test_map_http_error_403_variants(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="storageQuotaExceeded", message="quota")
        )
        self.assertIsInstance(err, QuotaExceededError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="userRateLimitExceeded", message="slow")
        )
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="insufficientPermissions", message="x")
        )
        self.assertIsInstance(err, PermissionError)

    def test_map_http_error_5xx_and_other_are_api_error(self) -> None:
        self.assertIsInstance(map_http_error(HttpErrorInfo(status_code=503)), ApiError)
        self.assertIsInstance(map_http_error(HttpErrorInfo(status_code=418)), ApiError)

    def test_is_transient(self) -> None:
        self.assertTrue(is_transient(RateLimitError("x")))
        self.assertTrue(is_transient(NetworkError("x")))
        self.assertTrue(is_transient(map_http_error(HttpErrorInfo(status_code=502))))
        self.assertFalse(is_transient(map_http_error(HttpErrorInfo(status_code=418))))
        self.assertFalse(is_transient(NotFoundError("x")))
        self.assertFalse(is_transient(ChunkUploadError("x")))
        self.assertFalse(is_transient(ValueError("x")))


if __name__ == "__main__":
    unittest.main()
