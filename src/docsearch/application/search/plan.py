"""Application search – backend-agnostic boolean query plan.

The compiler produces a tree of these frozen nodes; adapters serialise the tree
to a concrete engine request and the in-memory evaluator interprets it
directly. Nodes compare by value, so plans can be asserted structurally.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

__all__ = [
    "And",
    "BoolNode",
    "Exists",
    "MatchAll",
    "Nested",
    "Not",
    "Or",
    "PlanNode",
    "QueryPlan",
    "Range",
    "Term",
    "Terms",
    "TermsSet",
    "TextQuery",
]


@dataclass(frozen=True)
class MatchAll:
    pass


@dataclass(frozen=True)
class Term:
    field: str
    value: str


@dataclass(frozen=True)
class Terms:
    """Field equals any of ``values``."""
    field: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class TermsSet:
    """Array field contains every one of ``values``.

    The engine resolves the required match count through the stored script
    ``script_id`` called with ``params``.
    """
    field: str
    values: tuple[str, ...]
    script_id: str
    params: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class Range:
    field: str
    gt: str | None = None
    gte: str | None = None
    lt: str | None = None
    lte: str | None = None


@dataclass(frozen=True)
class Exists:
    field: str


@dataclass(frozen=True)
class TextQuery:
    """Phrase matched against ``fields``, each weighted by its boost."""
    text: str
    fields: tuple[tuple[str, float], ...]


@dataclass(frozen=True)
class Not:
    node: "PlanNode"


@dataclass(frozen=True)
class BoolNode:
    """Every ``must`` node matches; at least one ``should`` node matches when ``must`` is empty."""

    must: tuple["PlanNode", ...] = ()
    should: tuple["PlanNode", ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.must or self.should)


@dataclass(frozen=True)
class Nested:
    """Sub-query evaluated against single elements of the ``path`` array."""
    path: str
    query: "PlanNode"
    score_mode: str = "sum"
    inner_hits: bool = False


PlanNode = Union[MatchAll, Term, Terms, TermsSet, Range, Exists, TextQuery, Not, BoolNode, Nested]


def And(*nodes: PlanNode) -> BoolNode:
    return BoolNode(must=tuple(nodes))


def Or(*nodes: PlanNode) -> BoolNode:
    return BoolNode(should=tuple(nodes))


@dataclass(frozen=True)
class QueryPlan:
    """Compiler output: the root node plus the nested scopes that asked for inner hits."""

    root: BoolNode
    inner_hit_scopes: frozenset[str] = field(default_factory=frozenset)
