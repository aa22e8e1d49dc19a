"""OpenSearch adapter – map ``_search`` responses back to typed results."""
from __future__ import annotations

from typing import Any, Callable, Mapping, TypeVar

from docsearch.application.search import Pagination, SearchCriteria, SearchResult

T = TypeVar("T")
S = TypeVar("S")

__all__ = [
    "collect_inner_hits",
    "hits_of",
    "map_search_response",
    "map_with_inner_hits",
    "pagination_from",
    "total_hits",
]


def hits_of(response: Mapping[str, Any]) -> list[dict[str, Any]]:
    return list(response.get("hits", {}).get("hits", []))


def total_hits(response: Mapping[str, Any]) -> int:
    """``hits.total`` as an int; accepts both ``{"value": n}`` and a bare number."""
    total = response.get("hits", {}).get("total", 0)
    if isinstance(total, Mapping):
        return int(total.get("value", 0))
    return int(total or 0)


def pagination_from(total: int, page_number: int, page_size: int) -> Pagination:
    return Pagination.of(total, page_number, page_size)


def map_search_response(
    response: Mapping[str, Any],
    criteria: SearchCriteria,
    from_source: Callable[[dict[str, Any]], T],
) -> SearchResult[T]:
    items = [from_source(hit["_source"]) for hit in hits_of(response) if hit.get("_source") is not None]
    return SearchResult(
        search_text=criteria.search_text,
        items=items,
        pagination=pagination_from(
            total_hits(response),
            criteria.effective_page_number,
            criteria.effective_page_size,
        ),
        took_ms=int(response.get("took", 0)),
    )


def collect_inner_hits(
    response: Mapping[str, Any],
    scope: str,
    from_source: Callable[[dict[str, Any]], S],
    sort_key: Callable[[S], Any],
) -> dict[str, list[S]]:
    """Inner hits of *scope* grouped by parent ``_id``, each list sorted by *sort_key*."""
    grouped: dict[str, list[S]] = {}
    for hit in hits_of(response):
        inner = hit.get("inner_hits", {}).get(scope, {}).get("hits", {}).get("hits", [])
        if not inner:
            continue
        children = [from_source(child["_source"]) for child in inner]
        grouped[str(hit["_id"])] = sorted(children, key=sort_key)
    return grouped


def map_with_inner_hits(
    response: Mapping[str, Any],
    criteria: SearchCriteria,
    from_source: Callable[[dict[str, Any]], T],
    scope: str,
    inner_from_source: Callable[[dict[str, Any]], S],
    sort_key: Callable[[S], Any],
    attach: Callable[[T, list[S]], T],
) -> SearchResult[T]:
    """Like :func:`map_search_response`, replacing each document's *scope*
    array with only the matching inner hits (an empty list when none matched).
    """
    inner = collect_inner_hits(response, scope, inner_from_source, sort_key)
    items = [
        attach(from_source(hit["_source"]), inner.get(str(hit["_id"]), []))
        for hit in hits_of(response)
        if hit.get("_source") is not None
    ]
    return SearchResult(
        search_text=criteria.search_text,
        items=items,
        pagination=pagination_from(
            total_hits(response),
            criteria.effective_page_number,
            criteria.effective_page_size,
        ),
        took_ms=int(response.get("took", 0)),
    )
