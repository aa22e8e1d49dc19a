"""OpenSearch adapter – serialise a QueryPlan into a search request body.

This is the only module that knows the OpenSearch query DSL; the compiler
and the plan types stay engine-agnostic.
"""
from __future__ import annotations

from typing import Any, Sequence

from docsearch.application.pagination import Sort
from docsearch.application.search.plan import (
    BoolNode,
    Exists,
    MatchAll,
    Nested,
    Not,
    PlanNode,
    QueryPlan,
    Range,
    Term,
    Terms,
    TermsSet,
    TextQuery,
)
from docsearch.kernel.errors import UnsupportedOperatorError

BOOST_OPERATOR = "^"


def _boosted(fields: Sequence[tuple[str, float]]) -> list[str]:
    return [f"{name}{BOOST_OPERATOR}{float(boost)}" for name, boost in fields]


def to_query_dsl(node: PlanNode) -> dict[str, Any]:  # noqa: PLR0911
    """Return the query DSL dict for *node*."""
    match node:
        case MatchAll():
            return {"match_all": {}}
        case Term(field=field, value=value):
            return {"term": {field: {"value": value}}}
        case Terms(field=field, values=values):
            return {"terms": {field: list(values)}}
        case TermsSet(field=field, values=values, script_id=script_id, params=params):
            return {
                "terms_set": {
                    field: {
                        "terms": list(values),
                        "minimum_should_match_script": {"id": script_id, "params": dict(params)},
                    }
                }
            }
        case Range(field=field):
            bounds = {
                name: value
                for name, value in (("gt", node.gt), ("gte", node.gte), ("lt", node.lt), ("lte", node.lte))
                if value is not None
            }
            return {"range": {field: bounds}}
        case Exists(field=field):
            return {"exists": {"field": field}}
        case TextQuery(text=text, fields=fields):
            body: dict[str, Any] = {"query": text}
            if fields:
                body["fields"] = _boosted(fields)
            return {"query_string": body}
        case Not(node=inner):
            return {"bool": {"must_not": [to_query_dsl(inner)]}}
        case BoolNode(must=must, should=should):
            clauses: dict[str, Any] = {}
            if must:
                clauses["must"] = [to_query_dsl(n) for n in must]
            if should:
                clauses["should"] = [to_query_dsl(n) for n in should]
            return {"bool": clauses}
        case Nested(path=path, query=query, score_mode=score_mode, inner_hits=inner_hits):
            nested: dict[str, Any] = {
                "path": path,
                "query": to_query_dsl(query),
                "score_mode": score_mode,
            }
            if inner_hits:
                nested["inner_hits"] = {}
            return {"nested": nested}
        case _:
            raise UnsupportedOperatorError(type(node).__name__)


def sort_options(sort: Sequence[Sort]) -> list[dict[str, Any]]:
    """``[{"field": {"order": "desc"}}, ...]`` in the given order."""
    return [{s.field: {"order": s.direction.value.lower()}} for s in sort]


def build_search_body(
    plan: QueryPlan,
    sort: Sequence[Sort],
    page_number: int,
    page_size: int,
) -> dict[str, Any]:
    """Assemble the ``_search`` body for *plan*.

    ``from`` is ``page_number * page_size``; ties left by *sort* fall back to
    the engine's score / index order.
    """
    body: dict[str, Any] = {
        "query": to_query_dsl(plan.root),
        "from": page_number * page_size,
        "size": page_size,
        "track_total_hits": True,
    }
    if sort:
        body["sort"] = sort_options(sort)
    return body


def build_count_body(plan: QueryPlan) -> dict[str, Any]:
    return {"query": to_query_dsl(plan.root)}


__all__ = ["BOOST_OPERATOR", "build_count_body", "build_search_body", "sort_options", "to_query_dsl"]
