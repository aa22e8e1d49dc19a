"""Application search – compile :class:`SearchCriteria` into a :class:`QueryPlan`.

Compilation of one :class:`Query` group is a two-pass fold:

1. partition the clauses into direct clauses, range clauses keyed by field,
   and everything addressing a nested scope;
2. emit the direct nodes, then the range nodes (merged per field under AND,
   one per clause under OR), then exactly one :class:`Nested` node per scope
   holding every node for that scope.

Fields and scopes are emitted in sorted order and clauses in a canonical
order, so the plan shape does not depend on the order clauses were supplied in.
"""
from __future__ import annotations

from collections import defaultdict
from itertools import zip_longest
from typing import Callable, Iterable, Mapping

from docsearch.application.search.criteria import (
    RANGE_OPERATORS,
    WILDCARD,
    LogicalOperatorType,
    Query,
    QueryClause,
    SearchCriteria,
    SearchOperatorType,
    nested_scope_of,
)
from docsearch.application.search.plan import (
    BoolNode,
    Exists,
    MatchAll,
    Nested,
    Not,
    Or,
    PlanNode,
    QueryPlan,
    Range,
    Term,
    Terms,
    TermsSet,
    TextQuery,
)
from docsearch.kernel.errors import InvalidClauseError, UnsupportedOperatorError
from docsearch.observability.logging import get_logger

__all__ = [
    "EQALL_MIN_SHOULD_MATCH_SCRIPT",
    "LOWERCASE_SUBFIELD",
    "OWNER_FIELD",
    "QueryCompiler",
    "compile_clause",
    "compile_criteria",
]

EQALL_MIN_SHOULD_MATCH_SCRIPT = "eqall-min-should-match-script"
LOWERCASE_SUBFIELD = "lowercase"
OWNER_FIELD = "creationUserInfo.id"

_log = get_logger(__name__)

ClauseCompiler = Callable[[QueryClause], PlanNode]


# ---------------------------------------------------------------------------
# Per-operator clause compilers
# ---------------------------------------------------------------------------


def _field_absent(field: str) -> PlanNode:
    return Not(Exists(field))


def _compile_eq(clause: QueryClause) -> PlanNode:
    if clause.rhs is None:
        return _field_absent(clause.lhs)
    if clause.rhs == WILDCARD:
        # absent, or explicitly stored as the literal wildcard
        return Or(_field_absent(clause.lhs), Term(clause.lhs, WILDCARD))
    return Term(clause.lhs, clause.rhs)


def _compile_noteq(clause: QueryClause) -> PlanNode:
    if clause.rhs is None:
        return Exists(clause.lhs)
    return Not(Term(clause.lhs, clause.rhs))


def _compile_eq_ignore_case(clause: QueryClause) -> PlanNode:
    if clause.rhs is None:
        return _field_absent(clause.lhs)
    return Term(f"{clause.lhs}.{LOWERCASE_SUBFIELD}", clause.rhs)


def _require_rhs(clause: QueryClause) -> None:
    if clause.rhs is None:
        raise InvalidClauseError(clause.lhs, _op_name(clause.operator), "a value is required")


def _compile_in(clause: QueryClause) -> PlanNode:
    _require_rhs(clause)
    values = dict.fromkeys([*clause.values(), WILDCARD])
    return Terms(clause.lhs, tuple(values))


def _compile_eq_all(clause: QueryClause) -> PlanNode:
    _require_rhs(clause)
    return TermsSet(
        field=clause.lhs,
        values=tuple(clause.values()),
        script_id=EQALL_MIN_SHOULD_MATCH_SCRIPT,
        params=(("field", clause.lhs),),
    )


_CLAUSE_COMPILERS: dict[SearchOperatorType, ClauseCompiler] = {
    SearchOperatorType.EQ: _compile_eq,
    SearchOperatorType.NOTEQ: _compile_noteq,
    SearchOperatorType.EQIGNORECASE: _compile_eq_ignore_case,
    SearchOperatorType.IN: _compile_in,
    SearchOperatorType.EQALL: _compile_eq_all,
}

_RANGE_BOUNDS: dict[SearchOperatorType, str] = {
    SearchOperatorType.GT: "gt",
    SearchOperatorType.GTE: "gte",
    SearchOperatorType.LT: "lt",
    SearchOperatorType.LTE: "lte",
}
_LOWER_BOUNDS = frozenset({"gt", "gte"})


def compile_clause(clause: QueryClause) -> PlanNode:
    """Compile a single clause on its own; a range clause becomes one :class:`Range`.

    Raises:
        UnsupportedOperatorError: operator outside :class:`SearchOperatorType`.
        InvalidClauseError: ``IN`` / ``EQALL`` / range clause without a value.
    """
    if clause.operator in RANGE_OPERATORS:
        return _merge_ranges(clause.lhs, [clause])[0]
    compiler = _CLAUSE_COMPILERS.get(clause.operator)
    if compiler is None:
        raise UnsupportedOperatorError(clause.operator)
    return compiler(clause)


def _merge_ranges(field: str, clauses: Iterable[QueryClause]) -> list[Range]:
    """Fold bounds on *field* into as few :class:`Range` nodes as possible.

    Each range carries at most one lower bound (``gt``/``gte``) and one upper
    bound (``lt``/``lte``); the engine keeps only one bound per side of a
    range, so extra bounds on a side go into further ranges. The AND of the
    returned ranges is exactly the AND of the clauses.
    """
    lower: list[tuple[str, str]] = []
    upper: list[tuple[str, str]] = []
    for clause in clauses:
        if clause.rhs is None:
            raise InvalidClauseError(clause.lhs, _op_name(clause.operator), "a range bound requires a value")
        slot = _RANGE_BOUNDS[clause.operator]
        (lower if slot in _LOWER_BOUNDS else upper).append((slot, clause.rhs))
    return [
        Range(field, **dict(bound for bound in (lo, hi) if bound is not None))
        for lo, hi in zip_longest(lower, upper)
    ]


def _op_name(operator: object) -> str:
    return str(getattr(operator, "value", operator))


def _clause_key(clause: QueryClause) -> tuple[str, str, bool, str]:
    return (clause.lhs, _op_name(clause.operator), clause.rhs is None, clause.rhs or "")


def _combine(operator: LogicalOperatorType, nodes: Iterable[PlanNode]) -> BoolNode:
    nodes = tuple(nodes)
    if operator == LogicalOperatorType.AND:
        return BoolNode(must=nodes)
    if operator == LogicalOperatorType.OR:
        return BoolNode(should=nodes)
    raise UnsupportedOperatorError(operator)


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


class QueryCompiler:
    """Compile criteria for one entity type.

    Args:
        text_search_fields: searchable field -> boost weight for ``search_text``.
        nested_scopes: names of nested sub-document array fields.
        owner_field: field holding the owning caller's identity.

    The compiler holds only immutable configuration; one instance can be
    shared by concurrent searches.
    """

    def __init__(
        self,
        text_search_fields: Mapping[str, float],
        nested_scopes: Iterable[str] = (),
        owner_field: str = OWNER_FIELD,
    ) -> None:
        self._text_fields = dict(text_search_fields)
        self._nested_scopes = frozenset(nested_scopes)
        self._owner_field = owner_field

    @property
    def nested_scopes(self) -> frozenset[str]:
        return self._nested_scopes

    def compile(self, criteria: SearchCriteria, owner_id: str | None = None) -> QueryPlan:
        """Compile *criteria*; when *owner_id* is given every hit is restricted to that owner."""
        must: list[PlanNode] = []
        inner_hit_scopes: frozenset[str] = frozenset()

        text = self.text_clause(criteria.search_text)
        if text is not None:
            must.append(text)
            inner_hit_scopes = self._text_scopes() if criteria.search_text else frozenset()

        if criteria.queries:
            groups = [self.group(query) for query in criteria.queries]
            must.append(_combine(LogicalOperatorType.from_value(criteria.query_operator), groups))

        if owner_id is not None:
            must.append(Term(self._owner_field, owner_id))

        _log.debug(
            "search.compiled",
            groups=len(criteria.queries),
            has_text=text is not None,
            owner_scoped=owner_id is not None,
        )
        return QueryPlan(root=BoolNode(must=tuple(must)), inner_hit_scopes=inner_hit_scopes)

    # ------------------------------------------------------------------
    # Free text
    # ------------------------------------------------------------------

    def text_clause(self, search_text: str | None) -> PlanNode | None:
        """``""`` matches everything, blank or ``None`` adds nothing."""
        if search_text is None:
            return None
        if search_text == "":
            return MatchAll()
        if not search_text.strip():
            return None

        top_level: list[tuple[str, float]] = []
        by_scope: dict[str, list[tuple[str, float]]] = defaultdict(list)
        for name, boost in sorted(self._text_fields.items()):
            scope = nested_scope_of(name, self._nested_scopes)
            if scope is None:
                top_level.append((name, float(boost)))
            else:
                by_scope[scope].append((name, float(boost)))

        if not by_scope:
            return TextQuery(search_text, tuple(top_level))

        alternatives: list[PlanNode] = [
            Nested(scope, TextQuery(search_text, tuple(fields)), inner_hits=True)
            for scope, fields in sorted(by_scope.items())
        ]
        if top_level:
            alternatives.append(TextQuery(search_text, tuple(top_level)))
        return Or(*alternatives)

    def _text_scopes(self) -> frozenset[str]:
        scopes = (nested_scope_of(name, self._nested_scopes) for name in self._text_fields)
        return frozenset(s for s in scopes if s is not None)

    # ------------------------------------------------------------------
    # Structured groups
    # ------------------------------------------------------------------

    def group(self, query: Query) -> BoolNode:
        operator = LogicalOperatorType.from_value(query.operator)

        # pass 1: partition
        direct: list[QueryClause] = []
        ranges: dict[str, list[QueryClause]] = defaultdict(list)
        for clause in query.clauses:
            if clause.operator in RANGE_OPERATORS:
                ranges[clause.lhs].append(clause)
            elif clause.operator in _CLAUSE_COMPILERS:
                direct.append(clause)
            else:
                raise UnsupportedOperatorError(clause.operator)

        # pass 2: emit
        emitted: list[tuple[str | None, PlanNode]] = [
            (clause.scope(self._nested_scopes), compile_clause(clause))
            for clause in sorted(direct, key=_clause_key)
        ]
        for field in sorted(ranges):
            scope = nested_scope_of(field, self._nested_scopes)
            clauses = sorted(ranges[field], key=_clause_key)
            if operator == LogicalOperatorType.AND:
                emitted.extend((scope, node) for node in _merge_ranges(field, clauses))
            else:
                emitted.extend((scope, _merge_ranges(field, [c])[0]) for c in clauses)

        top_level: list[PlanNode] = []
        nested: dict[str, list[PlanNode]] = defaultdict(list)
        for scope, node in emitted:
            if scope is None:
                top_level.append(node)
            else:
                nested[scope].append(node)

        for scope in sorted(nested):
            top_level.append(Nested(scope, _combine(operator, nested[scope])))

        return _combine(operator, top_level)


def compile_criteria(
    criteria: SearchCriteria,
    text_search_fields: Mapping[str, float],
    nested_scopes: Iterable[str] = (),
    owner_id: str | None = None,
    owner_field: str = OWNER_FIELD,
) -> QueryPlan:
    """Functional shorthand for ``QueryCompiler(...).compile(criteria, owner_id)``."""
    return QueryCompiler(text_search_fields, nested_scopes, owner_field).compile(criteria, owner_id)
