"""Authentication settings for gdrivexfer (OAuth installed-app flow)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Only OAuth is supported:
        kind = "oauth"
        data must include:
            - client_secrets_file
            - token_file
        data may include:
            - flow_port: local port for the consent redirect (0 = any free port)
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "oauth":
            raise ValueError("AuthInfo.kind must be 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in ("client_secrets_file", "token_file"):
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

        port = self.data.get("flow_port", 0)
        if not isinstance(port, int) or port < 0:
            raise ValueError("AuthInfo.data['flow_port'] must be a non-negative int")

    @property
    def client_secrets_file(self) -> str:
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        return str(self.data["token_file"])

    @property
    def flow_port(self) -> int:
        return int(self.data.get("flow_port", 0))
