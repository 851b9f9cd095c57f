"""OAuth credentials and transport objects for gdrivexfer."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Sequence

from gdrivexfer.errors import AuthError, UsageError

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)


class OAuthClient:
    """
    Load/refresh OAuth credentials and build the two transports the client uses.

    - `build_drive_service`: googleapiclient Drive v3 resource (metadata,
      listing, direct upload, download).
    - `build_authorized_session`: requests session carrying the same
      credentials (resumable upload sessions).

    Pass the credentials from `get_credentials` to both builders so the
    consent flow runs at most once.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        if auth_info.kind != "oauth":
            raise UsageError("OAuthClient requires AuthInfo(kind='oauth')")
        self._auth_info = auth_info

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True):
        """
        Return OAuth credentials for the given scopes.

        A stored token is used when present. With `ensure_valid`, an expired
        token is refreshed (and saved back); if that is impossible the
        browser consent flow runs.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: on load/refresh/flow failures.
            UsageError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise UsageError("scopes must be a non-empty sequence of strings")

        creds = self._load_token(scopes)
        if creds is not None:
            if not ensure_valid:
                return creds
            if not creds.valid and creds.refresh_token:
                self._refresh(creds)
            if creds.valid:
                return creds

        return self._run_consent_flow(scopes)

    def build_drive_service(
        self,
        scopes: Sequence[str],
        ensure_valid: bool = True,
        *,
        credentials=None,
    ):
        """
        Build a Drive API v3 service resource.

        Returns:
            googleapiclient.discovery.Resource
        """
        try:
            from googleapiclient.discovery import build
        except ImportError as exc:  # pragma: no cover
            raise _missing_library("google-api-python-client", exc) from exc

        creds = credentials or self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    def build_authorized_session(
        self,
        scopes: Sequence[str],
        ensure_valid: bool = True,
        *,
        credentials=None,
    ):
        """
        Build a requests session that signs every request with the credentials.

        Returns:
            google.auth.transport.requests.AuthorizedSession
        """
        try:
            from google.auth.transport.requests import AuthorizedSession
        except ImportError as exc:  # pragma: no cover
            raise _missing_library("google-auth[requests]", exc) from exc

        creds = credentials or self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        return AuthorizedSession(creds)

    # ----------------------------
    # Internals
    # ----------------------------
    def _load_token(self, scopes: Sequence[str]) -> Optional[Any]:
        token_file = self._auth_info.token_file
        if not os.path.exists(token_file):
            logger.debug("No stored OAuth token at %s", token_file)
            return None

        try:
            from google.oauth2.credentials import Credentials
        except ImportError as exc:  # pragma: no cover
            raise _missing_library("google-auth", exc) from exc

        try:
            return Credentials.from_authorized_user_file(token_file, scopes=list(scopes))
        except Exception as exc:
            raise AuthError(
                "Stored OAuth token could not be read",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

    def _refresh(self, creds) -> None:
        from google.auth.transport.requests import Request

        token_file = self._auth_info.token_file
        logger.debug("Refreshing OAuth token from %s", token_file)
        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError(
                "OAuth token refresh failed",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
        self._save_credentials(creds)

    def _run_consent_flow(self, scopes: Sequence[str]):
        try:
            from google_auth_oauthlib.flow import InstalledAppFlow
        except ImportError as exc:  # pragma: no cover
            raise _missing_library("google-auth-oauthlib", exc) from exc

        info = self._auth_info
        logger.info("Starting OAuth consent flow with %s", info.client_secrets_file)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                info.client_secrets_file,
                scopes=list(scopes),
            )
            creds = flow.run_local_server(port=info.flow_port)
        except Exception as exc:
            raise AuthError(
                "OAuth consent flow failed",
                details={
                    "client_secrets_file": info.client_secrets_file,
                    "token_file": info.token_file,
                },
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        try:
            token_dir = os.path.dirname(token_file)
            if token_dir:
                os.makedirs(token_dir, exist_ok=True)
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Could not write OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
        logger.debug("Saved OAuth token to %s", token_file)


def _missing_library(dist: str, exc: ImportError) -> AuthError:
    return AuthError(
        f"{dist} is not available",
        details={"hint": f"Install {dist}"},
        cause=exc,
    )
