import os
import unittest
from unittest.mock import patch

from gdrivexfer.config import (
    CHUNK_GRANULARITY,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_UPLOAD_SESSION_SIZE_LIMIT,
    DriveConfig,
    RetryPolicy,
)


class TestRetryPolicy(unittest.TestCase):
    def test_default_disables_retry(self) -> None:
        self.assertEqual(RetryPolicy().max_retries, 0)

    def test_rejects_negative_values(self) -> None:
        with self.assertRaises(ValueError):
            RetryPolicy(max_retries=-1)
        with self.assertRaises(ValueError):
            RetryPolicy(initial_delay_sec=-0.1)


class TestDriveConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = DriveConfig()
        self.assertIsNone(cfg.auth)
        self.assertEqual(cfg.root_folder_id, "root")
        self.assertEqual(cfg.upload_session_size_limit, DEFAULT_UPLOAD_SESSION_SIZE_LIMIT)
        self.assertEqual(cfg.chunk_size, DEFAULT_CHUNK_SIZE)
        self.assertEqual(cfg.chunk_size % CHUNK_GRANULARITY, 0)
        self.assertFalse(cfg.delete_to_trash)
        self.assertIsNone(cfg.list_order_by)

    def test_chunk_size_must_be_granular(self) -> None:
        with self.assertRaises(ValueError):
            DriveConfig(chunk_size=CHUNK_GRANULARITY + 1)
        with self.assertRaises(ValueError):
            DriveConfig(chunk_size=0)
        DriveConfig(chunk_size=3 * CHUNK_GRANULARITY)

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            DriveConfig(root_folder_id=" ")
        with self.assertRaises(ValueError):
            DriveConfig(upload_session_size_limit=-1)
        with self.assertRaises(ValueError):
            DriveConfig(scopes=())
        with self.assertRaises(ValueError):
            DriveConfig(timeout_sec=0)

    def test_zero_limit_is_allowed(self) -> None:
        self.assertEqual(DriveConfig(upload_session_size_limit=0).upload_session_size_limit, 0)


class TestDriveConfigFromEnv(unittest.TestCase):
    def test_required_and_optional_values(self) -> None:
        env = {
            "GDRIVEXFER_CLIENT_SECRETS": "/tmp/secrets.json",
            "GDRIVEXFER_TOKEN_FILE": "/tmp/token.json",
            "GDRIVEXFER_ROOT_ID": "folder123",
            "GDRIVEXFER_SIZE_LIMIT": "1024",
            "GDRIVEXFER_CHUNK_SIZE": str(2 * CHUNK_GRANULARITY),
            "GDRIVEXFER_MAX_RETRIES": "3",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = DriveConfig.from_env()

        self.assertEqual(cfg.auth.client_secrets_file, "/tmp/secrets.json")
        self.assertEqual(cfg.auth.token_file, "/tmp/token.json")
        self.assertEqual(cfg.root_folder_id, "folder123")
        self.assertEqual(cfg.upload_session_size_limit, 1024)
        self.assertEqual(cfg.chunk_size, 2 * CHUNK_GRANULARITY)
        self.assertEqual(cfg.retry.max_retries, 3)

    def test_optional_values_fall_back_to_defaults(self) -> None:
        env = {"X_CLIENT_SECRETS": "s.json", "X_TOKEN_FILE": "t.json"}
        with patch.dict(os.environ, env, clear=True):
            cfg = DriveConfig.from_env(prefix="X_")
        self.assertEqual(cfg.root_folder_id, "root")
        self.assertEqual(cfg.chunk_size, DEFAULT_CHUNK_SIZE)
        self.assertEqual(cfg.retry, RetryPolicy())

    def test_missing_required_var(self) -> None:
        with patch.dict(os.environ, {"GDRIVEXFER_TOKEN_FILE": "t.json"}, clear=True):
            with self.assertRaises(ValueError):
                DriveConfig.from_env()

    def test_non_integer_var(self) -> None:
        env = {
            "GDRIVEXFER_CLIENT_SECRETS": "s.json",
            "GDRIVEXFER_TOKEN_FILE": "t.json",
            "GDRIVEXFER_SIZE_LIMIT": "big",
        }
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ValueError):
                DriveConfig.from_env()


if __name__ == "__main__":
    unittest.main()
