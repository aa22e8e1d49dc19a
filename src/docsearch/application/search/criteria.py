"""Application search – SearchCriteria predicate model.

A :class:`SearchCriteria` is a free-text phrase plus an ordered list of
:class:`Query` groups; each group combines its :class:`QueryClause` items with
one :class:`LogicalOperatorType`, and the groups themselves are combined with
``SearchCriteria.query_operator``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from docsearch.kernel.errors import UnsupportedOperatorError, ValidationError

__all__ = [
    "DEFAULT_PAGE_NUMBER",
    "DEFAULT_PAGE_SIZE",
    "RANGE_OPERATORS",
    "WILDCARD",
    "LogicalOperatorType",
    "Query",
    "QueryClause",
    "SearchCriteria",
    "SearchOperatorType",
    "nested_scope_of",
]

DEFAULT_PAGE_NUMBER = 0
DEFAULT_PAGE_SIZE = 20
WILDCARD = "*"


class SearchOperatorType(str, Enum):
    EQ = "EQ"
    NOTEQ = "NOTEQ"
    EQALL = "EQALL"
    IN = "IN"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"
    EQIGNORECASE = "EQIGNORECASE"

    @classmethod
    def from_value(cls, value: Any) -> "SearchOperatorType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedOperatorError(value, cause=exc) from exc


RANGE_OPERATORS: frozenset[SearchOperatorType] = frozenset({
    SearchOperatorType.GT,
    SearchOperatorType.GTE,
    SearchOperatorType.LT,
    SearchOperatorType.LTE,
})


class LogicalOperatorType(str, Enum):
    AND = "AND"
    OR = "OR"

    @classmethod
    def from_value(cls, value: Any) -> "LogicalOperatorType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedOperatorError(value, cause=exc) from exc


@dataclass(frozen=True)
class QueryClause:
    """A single ``lhs <operator> rhs`` predicate.

    ``lhs`` is a field path; ``scope.field`` addresses a field inside a nested
    sub-document array when ``scope`` is one of the entity's nested scopes.
    ``rhs`` of ``None`` means absence/presence depending on the operator.
    """

    lhs: str
    operator: SearchOperatorType
    rhs: str | None = None

    def scope(self, nested_scopes: Iterable[str]) -> str | None:
        """Return the nested scope this clause addresses, if any."""
        return nested_scope_of(self.lhs, nested_scopes)

    def values(self) -> list[str]:
        """Split ``rhs`` on commas (``IN`` / ``EQALL`` value lists)."""
        if self.rhs is None:
            return []
        return self.rhs.split(",")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "QueryClause":
        lhs = payload.get("lhs")
        if not lhs:
            raise ValidationError("Query clause requires a non-empty 'lhs'")
        rhs = payload.get("rhs")
        return cls(
            lhs=str(lhs),
            operator=SearchOperatorType.from_value(payload.get("operator")),
            rhs=None if rhs is None else str(rhs),
        )


@dataclass(frozen=True)
class Query:
    """One filter group: clauses joined by a single logical operator."""

    operator: LogicalOperatorType
    clauses: tuple[QueryClause, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "clauses", tuple(self.clauses))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Query":
        return cls(
            operator=LogicalOperatorType.from_value(payload.get("operator", LogicalOperatorType.AND)),
            clauses=tuple(QueryClause.from_dict(c) for c in payload.get("clauses") or ()),
        )


@dataclass(frozen=True)
class SearchCriteria:
    search_text: str | None = None
    page_number: int | None = None
    page_size: int | None = None
    query_operator: LogicalOperatorType = LogicalOperatorType.AND
    queries: tuple[Query, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "queries", tuple(self.queries))
        if self.page_number is not None and self.page_number < 0:
            raise ValidationError("page_number must be >= 0")
        if self.page_size is not None and self.page_size < 0:
            raise ValidationError("page_size must be >= 0")

    @property
    def effective_page_number(self) -> int:
        return DEFAULT_PAGE_NUMBER if self.page_number is None else self.page_number

    @property
    def effective_page_size(self) -> int:
        return DEFAULT_PAGE_SIZE if self.page_size is None else self.page_size

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SearchCriteria":
        """Build criteria from the camelCase JSON body sent by clients.

        Example::

            SearchCriteria.from_dict({
                "searchText": "hello",
                "queryOperator": "AND",
                "queries": [{"operator": "OR", "clauses": [
                    {"lhs": "transcribeStatus", "operator": "EQ", "rhs": "COMPLETED"},
                ]}],
            })
        """
        operator = payload.get("queryOperator")
        return cls(
            search_text=payload.get("searchText"),
            page_number=payload.get("pageNumber"),
            page_size=payload.get("pageSize"),
            query_operator=(
                LogicalOperatorType.AND if operator is None
                else LogicalOperatorType.from_value(operator)
            ),
            queries=tuple(Query.from_dict(q) for q in payload.get("queries") or ()),
        )

    @classmethod
    def of_equalities(
        cls,
        fields: Mapping[str, str],
        page_number: int | None = None,
        page_size: int | None = None,
    ) -> "SearchCriteria":
        """AND of ``field EQ value`` for every entry of *fields*."""
        clauses = tuple(
            QueryClause(name, SearchOperatorType.EQ, value) for name, value in fields.items()
        )
        return cls(
            page_number=page_number,
            page_size=page_size,
            queries=(Query(LogicalOperatorType.AND, clauses),) if clauses else (),
        )


def nested_scope_of(path: str, nested_scopes: Iterable[str]) -> str | None:
    """Return the leading segment of *path* when it names a nested scope."""
    if "." not in path:
        return None
    head = path.split(".", 1)[0]
    return head if head in nested_scopes else None
