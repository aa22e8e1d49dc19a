"""Infrastructure errors – failures talking to the search engine."""

from __future__ import annotations

from typing import Any

from docsearch.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class EngineUnavailableError(InfrastructureError):
    """The search engine could not be reached (connection refused, timeout, …).

    Always safe to retry: compiled queries are deterministic.
    """

    default_code = "engine_unavailable"
    retryable = True

    def __init__(
        self,
        engine: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Search engine '{engine}' is unavailable", **kwargs)
        self.engine = engine


class ExternalServiceError(InfrastructureError):
    """The search engine returned an unexpected response."""

    default_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"External service '{service}' error", **kwargs)
        self.service = service
        self.status_code = status_code


__all__ = [
    "EngineUnavailableError",
    "ExternalServiceError",
    "InfrastructureError",
]
