"""OpenSearch adapter – stored scripts referenced by compiled queries."""
from __future__ import annotations

from typing import Any

from opensearchpy.exceptions import OpenSearchException

from docsearch.adapters.opensearch.errors import translate_error
from docsearch.application.search import EQALL_MIN_SHOULD_MATCH_SCRIPT
from docsearch.observability.logging import get_logger

_log = get_logger(__name__)

# terms_set: a document matches only when it holds every requested term.
EQALL_MIN_SHOULD_MATCH_SOURCE = "params.num_terms"

STORED_SCRIPTS: dict[str, dict[str, Any]] = {
    EQALL_MIN_SHOULD_MATCH_SCRIPT: {
        "script": {"lang": "painless", "source": EQALL_MIN_SHOULD_MATCH_SOURCE},
    },
}


async def register_stored_scripts(client: Any) -> list[str]:
    """Install (or overwrite) every stored script; returns the script ids."""
    installed: list[str] = []
    for script_id, body in STORED_SCRIPTS.items():
        try:
            await client.put_script(id=script_id, body=body)
        except OpenSearchException as exc:
            raise translate_error(exc, "StoredScript", script_id, "put_script") from exc
        _log.info("opensearch.script_stored", script_id=script_id)
        installed.append(script_id)
    return installed


__all__ = ["EQALL_MIN_SHOULD_MATCH_SOURCE", "STORED_SCRIPTS", "register_stored_scripts"]
