"""Unit tests for the SearchCriteria predicate model."""

from __future__ import annotations

import pytest

from docsearch.application.search import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    LogicalOperatorType,
    Query,
    QueryClause,
    SearchCriteria,
    SearchOperatorType,
)
from docsearch.application.search.criteria import nested_scope_of
from docsearch.kernel.errors import UnsupportedOperatorError, ValidationError


class TestOperatorEnums:
    def test_from_value_accepts_string(self) -> None:
        assert SearchOperatorType.from_value("EQALL") is SearchOperatorType.EQALL
        assert LogicalOperatorType.from_value("OR") is LogicalOperatorType.OR

    def test_from_value_passes_enum_through(self) -> None:
        assert SearchOperatorType.from_value(SearchOperatorType.GT) is SearchOperatorType.GT

    def test_unknown_operator_raises(self) -> None:
        with pytest.raises(UnsupportedOperatorError) as exc_info:
            SearchOperatorType.from_value("LIKE")
        assert exc_info.value.operator == "LIKE"

    def test_unknown_logical_operator_raises(self) -> None:
        with pytest.raises(UnsupportedOperatorError):
            LogicalOperatorType.from_value("XOR")


class TestQueryClause:
    def test_values_split_on_comma(self) -> None:
        assert QueryClause("tags", SearchOperatorType.IN, "a,b,c").values() == ["a", "b", "c"]

    def test_values_empty_without_rhs(self) -> None:
        assert QueryClause("tags", SearchOperatorType.IN).values() == []

    def test_scope_of_nested_field(self) -> None:
        clause = QueryClause("audioSegments.transcript", SearchOperatorType.EQ, "x")
        assert clause.scope({"audioSegments"}) == "audioSegments"

    def test_dotted_path_outside_scopes_is_top_level(self) -> None:
        clause = QueryClause("creationUserInfo.id", SearchOperatorType.EQ, "u1")
        assert clause.scope({"audioSegments"}) is None

    def test_from_dict_requires_lhs(self) -> None:
        with pytest.raises(ValidationError):
            QueryClause.from_dict({"operator": "EQ", "rhs": "x"})

    def test_from_dict_stringifies_rhs(self) -> None:
        clause = QueryClause.from_dict({"lhs": "duration", "operator": "GT", "rhs": 30})
        assert clause == QueryClause("duration", SearchOperatorType.GT, "30")

    def test_is_frozen(self) -> None:
        clause = QueryClause("f", SearchOperatorType.EQ, "x")
        with pytest.raises((AttributeError, TypeError)):
            clause.rhs = "y"  # type: ignore[misc]


class TestSearchCriteria:
    def test_defaults(self) -> None:
        criteria = SearchCriteria()
        assert criteria.effective_page_number == DEFAULT_PAGE_NUMBER == 0
        assert criteria.effective_page_size == DEFAULT_PAGE_SIZE == 20
        assert criteria.query_operator is LogicalOperatorType.AND
        assert criteria.queries == ()

    def test_negative_page_number_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SearchCriteria(page_number=-1)

    def test_negative_page_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SearchCriteria(page_size=-5)

    def test_queries_coerced_to_tuple(self) -> None:
        criteria = SearchCriteria(queries=[Query(LogicalOperatorType.OR, [])])
        assert isinstance(criteria.queries, tuple)

    def test_from_dict(self) -> None:
        criteria = SearchCriteria.from_dict({
            "searchText": "hello",
            "pageNumber": 2,
            "pageSize": 5,
            "queryOperator": "OR",
            "queries": [
                {"operator": "AND", "clauses": [
                    {"lhs": "transcribeStatus", "operator": "EQ", "rhs": "COMPLETED"},
                    {"lhs": "note", "operator": "NOTEQ"},
                ]},
            ],
        })
        assert criteria.search_text == "hello"
        assert criteria.effective_page_number == 2
        assert criteria.effective_page_size == 5
        assert criteria.query_operator is LogicalOperatorType.OR
        assert criteria.queries[0].clauses == (
            QueryClause("transcribeStatus", SearchOperatorType.EQ, "COMPLETED"),
            QueryClause("note", SearchOperatorType.NOTEQ, None),
        )

    def test_from_dict_unknown_operator(self) -> None:
        with pytest.raises(UnsupportedOperatorError):
            SearchCriteria.from_dict({"queries": [{"operator": "AND", "clauses": [
                {"lhs": "f", "operator": "CONTAINS", "rhs": "x"},
            ]}]})

    def test_of_equalities(self) -> None:
        criteria = SearchCriteria.of_equalities({"id": "g1", "userId": "u1"}, page_number=0, page_size=1)
        (query,) = criteria.queries
        assert query.operator is LogicalOperatorType.AND
        assert [c.lhs for c in query.clauses] == ["id", "userId"]
        assert all(c.operator is SearchOperatorType.EQ for c in query.clauses)

    def test_of_equalities_empty(self) -> None:
        assert SearchCriteria.of_equalities({}).queries == ()


def test_nested_scope_of_requires_dotted_path() -> None:
    assert nested_scope_of("audioSegments", {"audioSegments"}) is None
    assert nested_scope_of("audioSegments.id", {"audioSegments"}) == "audioSegments"
