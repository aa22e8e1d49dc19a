"""OpenSearch adapter – OpenSearchSettings."""
from __future__ import annotations

import dataclasses

from docsearch.config import InvalidSettingValueError, Settings

_SCHEMES = frozenset({"http", "https"})


@dataclasses.dataclass
class OpenSearchSettings(Settings):
    """Connection settings, read from ``OPENSEARCH_*`` environment variables."""

    _prefix = "OPENSEARCH"

    host: str = "localhost"
    port: int = 9200
    scheme: str = "http"
    username: str | None = None
    password: str | None = None
    verify_certs: bool = True
    request_timeout_s: float = 10.0
    refresh_on_write: bool = False

    def _validate(self) -> None:
        if not self.host:
            raise InvalidSettingValueError("host", self.host, "must not be empty")
        if not 1 <= self.port <= 65535:
            raise InvalidSettingValueError("port", self.port, "must be between 1 and 65535")
        if self.scheme not in _SCHEMES:
            raise InvalidSettingValueError("scheme", self.scheme, "must be 'http' or 'https'")
        if self.request_timeout_s <= 0:
            raise InvalidSettingValueError("request_timeout_s", self.request_timeout_s, "must be positive")
        if bool(self.username) != bool(self.password):
            raise InvalidSettingValueError("password", self.password, "username and password must be set together")

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


__all__ = ["OpenSearchSettings"]
