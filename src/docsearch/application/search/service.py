"""Application search – SearchEngine Protocol and InMemorySearchEngine."""
from __future__ import annotations

import time
from typing import Any, Callable, Generic, Iterable, Protocol, Sequence, TypeVar, runtime_checkable

from docsearch.application.pagination import Sort, SortDirection
from docsearch.application.search.compiler import LOWERCASE_SUBFIELD, QueryCompiler
from docsearch.application.search.criteria import SearchCriteria
from docsearch.application.search.plan import (
    BoolNode,
    Exists,
    MatchAll,
    Nested,
    Not,
    PlanNode,
    Range,
    Term,
    Terms,
    TermsSet,
    TextQuery,
)
from docsearch.application.search.result import Pagination, SearchResult
from docsearch.kernel.errors import UnsupportedOperatorError

T = TypeVar("T")

__all__ = ["InMemorySearchEngine", "SearchEngine", "matches"]


@runtime_checkable
class SearchEngine(Protocol[T]):
    async def search(self, criteria: SearchCriteria, owner_id: str | None = None) -> SearchResult[T]: ...


# ---------------------------------------------------------------------------
# Plan evaluation against plain dict documents
# ---------------------------------------------------------------------------


def _values_at(document: Any, path: str) -> list[Any]:
    """Every non-null value reachable at dotted *path*; lists are flattened."""
    current: list[Any] = [document]
    for part in path.split("."):
        found: list[Any] = []
        for node in current:
            items = node if isinstance(node, list) else [node]
            for item in items:
                if isinstance(item, dict) and item.get(part) is not None:
                    found.append(item[part])
        current = found
    flat: list[Any] = []
    for value in current:
        if isinstance(value, list):
            flat.extend(v for v in value if v is not None)
        else:
            flat.append(value)
    return flat


def _as_term(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _term_values(document: dict[str, Any], field: str) -> tuple[list[str], bool]:
    """Values of *field* as strings, plus whether comparison ignores case."""
    suffix = f".{LOWERCASE_SUBFIELD}"
    if field.endswith(suffix):
        return [_as_term(v).casefold() for v in _values_at(document, field[: -len(suffix)])], True
    return [_as_term(v) for v in _values_at(document, field)], False


def _compare(left: Any, right: str) -> int:
    try:
        a, b = float(left), float(right)
    except (TypeError, ValueError):
        a, b = str(left), right  # type: ignore[assignment]
    return (a > b) - (a < b)


def _in_range(value: Any, rng: Range) -> bool:
    if rng.gt is not None and not _compare(value, rng.gt) > 0:
        return False
    if rng.gte is not None and not _compare(value, rng.gte) >= 0:
        return False
    if rng.lt is not None and not _compare(value, rng.lt) < 0:
        return False
    if rng.lte is not None and not _compare(value, rng.lte) <= 0:
        return False
    return True


def _sort_key(value: Any) -> tuple[int, float, str]:
    # numbers before text, missing first; mirrors numeric vs keyword field sorting
    if value is None:
        return (0, 0.0, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, float(value), "")
    return (2, 0.0, str(value))


def matches(node: PlanNode, document: dict[str, Any]) -> bool:  # noqa: PLR0911
    """Evaluate *node* against *document* the way the search engine would."""
    match node:
        case MatchAll():
            return True
        case Term(field=field, value=value):
            values, folded = _term_values(document, field)
            return (value.casefold() if folded else value) in values
        case Terms(field=field, values=wanted):
            values, _ = _term_values(document, field)
            return any(v in values for v in wanted)
        case TermsSet(field=field, values=wanted):
            values, _ = _term_values(document, field)
            return set(wanted) <= set(values)
        case Range():
            return any(_in_range(v, node) for v in _values_at(document, node.field))
        case Exists(field=field):
            return bool(_values_at(document, field))
        case TextQuery(text=text, fields=fields):
            needle = text.casefold()
            return any(
                needle in str(v).casefold()
                for name, _boost in fields
                for v in _values_at(document, name)
            )
        case Not(node=inner):
            return not matches(inner, document)
        case BoolNode(must=must, should=should):
            if not all(matches(n, document) for n in must):
                return False
            if should and not must:
                return any(matches(n, document) for n in should)
            return True
        case Nested(path=path, query=query):
            elements = document.get(path) or []
            return any(matches(query, {path: element}) for element in elements)
        case _:
            raise UnsupportedOperatorError(type(node).__name__)


# ---------------------------------------------------------------------------
# In-memory engine
# ---------------------------------------------------------------------------


class InMemorySearchEngine(Generic[T]):
    """Search engine that evaluates compiled plans over a list of dict-like objects.

    Shares the :class:`QueryCompiler` with the OpenSearch adapter, so it runs
    the same plans without a cluster.
    """

    def __init__(
        self,
        items: list[T],
        compiler: QueryCompiler,
        key_fn: Callable[[T], dict[str, Any]] | None = None,
        sort: Sequence[Sort] = (),
    ) -> None:
        self._items = items
        self._compiler = compiler
        self._key_fn: Callable[[T], dict[str, Any]] = key_fn or (lambda x: x if isinstance(x, dict) else x.__dict__)
        self._sort = tuple(sort)

    def filter(self, node: PlanNode, items: Iterable[T] | None = None) -> list[T]:
        return [item for item in (self._items if items is None else items) if matches(node, self._key_fn(item))]

    async def search(self, criteria: SearchCriteria, owner_id: str | None = None) -> SearchResult[T]:
        t0 = time.monotonic()
        plan = self._compiler.compile(criteria, owner_id)
        results = self.filter(plan.root)

        for sf in reversed(self._sort):
            results.sort(
                key=lambda x: _sort_key(self._key_fn(x).get(sf.field)),
                reverse=(sf.direction == SortDirection.DESC),
            )

        page_number = criteria.effective_page_number
        page_size = criteria.effective_page_size
        pagination = Pagination.of(len(results), page_number, page_size)
        start = pagination.offset
        took_ms = int((time.monotonic() - t0) * 1000)
        return SearchResult(
            search_text=criteria.search_text,
            items=results[start: start + page_size],
            pagination=pagination,
            took_ms=took_ms,
        )
