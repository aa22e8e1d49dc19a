"""Application search – criteria model, query plan, compiler and results."""
from docsearch.application.search.compiler import (
    EQALL_MIN_SHOULD_MATCH_SCRIPT,
    OWNER_FIELD,
    QueryCompiler,
    compile_clause,
    compile_criteria,
)
from docsearch.application.search.criteria import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    WILDCARD,
    LogicalOperatorType,
    Query,
    QueryClause,
    SearchCriteria,
    SearchOperatorType,
)
from docsearch.application.search.plan import QueryPlan
from docsearch.application.search.result import Pagination, SearchResult
from docsearch.application.search.service import InMemorySearchEngine, SearchEngine, matches

__all__ = [
    "DEFAULT_PAGE_NUMBER",
    "DEFAULT_PAGE_SIZE",
    "EQALL_MIN_SHOULD_MATCH_SCRIPT",
    "InMemorySearchEngine",
    "LogicalOperatorType",
    "OWNER_FIELD",
    "Pagination",
    "Query",
    "QueryClause",
    "QueryCompiler",
    "QueryPlan",
    "SearchCriteria",
    "SearchEngine",
    "SearchOperatorType",
    "SearchResult",
    "WILDCARD",
    "compile_clause",
    "compile_criteria",
    "matches",
]
