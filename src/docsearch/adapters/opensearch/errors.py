"""OpenSearch adapter – translate opensearch-py exceptions into domain errors."""
from __future__ import annotations

from typing import Any

from opensearchpy.exceptions import ConflictError as OpenSearchConflictError
from opensearchpy.exceptions import ConnectionError as OpenSearchConnectionError
from opensearchpy.exceptions import NotFoundError as OpenSearchNotFoundError
from opensearchpy.exceptions import OpenSearchException

from docsearch.kernel.errors import (
    BaseError,
    ConflictError,
    EngineUnavailableError,
    ExternalServiceError,
    NotFoundError,
)

ENGINE = "opensearch"


def status_of(exc: OpenSearchException) -> int | None:
    """HTTP status of *exc*; transport failures carry ``"N/A"`` and map to ``None``."""
    status = getattr(exc, "status_code", None)
    return status if isinstance(status, int) else None


def translate_error(
    exc: OpenSearchException,
    resource: str,
    identifier: Any = None,
    operation: str = "request",
) -> BaseError:
    """Map *exc* to the docsearch error hierarchy.

    Connection failures and timeouts become :class:`EngineUnavailableError`;
    404 and 409 become :class:`NotFoundError` / :class:`ConflictError`;
    anything else becomes :class:`ExternalServiceError`.
    """
    if isinstance(exc, OpenSearchConnectionError):
        return EngineUnavailableError(ENGINE, f"OpenSearch unreachable during {operation}", cause=exc)
    if isinstance(exc, OpenSearchNotFoundError):
        return NotFoundError(resource, identifier, cause=exc)
    if isinstance(exc, OpenSearchConflictError):
        return ConflictError(
            f"{resource} '{identifier}' was modified concurrently",
            detail={"operation": operation},
            cause=exc,
        )
    return ExternalServiceError(
        ENGINE,
        f"OpenSearch {operation} failed for {resource}",
        status_code=status_of(exc),
        cause=exc,
    )


__all__ = ["ENGINE", "status_of", "translate_error"]
