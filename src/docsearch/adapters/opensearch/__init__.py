"""OpenSearch adapter – client factory, request/response translation and repositories."""
from docsearch.adapters.opensearch.client import check_connection, create_client
from docsearch.adapters.opensearch.errors import translate_error
from docsearch.adapters.opensearch.mapper import (
    collect_inner_hits,
    map_search_response,
    map_with_inner_hits,
)
from docsearch.adapters.opensearch.repository import CREATION_DATE_TIME, OpenSearchRepository
from docsearch.adapters.opensearch.request import (
    build_count_body,
    build_search_body,
    sort_options,
    to_query_dsl,
)
from docsearch.adapters.opensearch.scripts import STORED_SCRIPTS, register_stored_scripts
from docsearch.adapters.opensearch.settings import OpenSearchSettings

__all__ = [
    "CREATION_DATE_TIME",
    "OpenSearchRepository",
    "OpenSearchSettings",
    "STORED_SCRIPTS",
    "build_count_body",
    "build_search_body",
    "check_connection",
    "collect_inner_hits",
    "create_client",
    "map_search_response",
    "map_with_inner_hits",
    "register_stored_scripts",
    "sort_options",
    "to_query_dsl",
    "translate_error",
]
