"""OpenSearch adapter – AsyncOpenSearch client factory."""
from __future__ import annotations

from typing import Any

from opensearchpy import AsyncOpenSearch
from opensearchpy.exceptions import OpenSearchException

from docsearch.adapters.opensearch.settings import OpenSearchSettings
from docsearch.observability.logging import get_logger

_log = get_logger(__name__)


def create_client(settings: OpenSearchSettings | None = None) -> AsyncOpenSearch:
    """Create an :class:`AsyncOpenSearch` client.

    Basic auth is used when both ``username`` and ``password`` are set;
    otherwise the client connects anonymously (local development).
    """
    if settings is None:
        settings = OpenSearchSettings()

    kwargs: dict[str, Any] = {
        "hosts": [settings.url],
        "verify_certs": settings.verify_certs,
        "timeout": settings.request_timeout_s,
    }
    if settings.username and settings.password:
        kwargs["http_auth"] = (settings.username, settings.password)

    _log.info("opensearch.client_created", url=settings.url, auth=bool(settings.username))
    return AsyncOpenSearch(**kwargs)


async def check_connection(client: AsyncOpenSearch) -> bool:
    """Return whether the cluster answers a ping."""
    try:
        return bool(await client.ping())
    except OpenSearchException as exc:
        _log.warning("opensearch.ping_failed", error=str(exc))
        return False


__all__ = ["check_connection", "create_client"]
