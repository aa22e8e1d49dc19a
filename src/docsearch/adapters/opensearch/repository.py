"""OpenSearch adapter – OpenSearchRepository generic base."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Mapping, Sequence, TypeVar

from opensearchpy.exceptions import ConflictError as OpenSearchConflictError
from opensearchpy.exceptions import NotFoundError as OpenSearchNotFoundError
from opensearchpy.exceptions import OpenSearchException

from docsearch.adapters.opensearch.errors import translate_error
from docsearch.adapters.opensearch.mapper import hits_of, map_search_response
from docsearch.adapters.opensearch.request import build_count_body, build_search_body
from docsearch.application.pagination import Sort, SortDirection
from docsearch.application.search import (
    OWNER_FIELD,
    QueryCompiler,
    QueryPlan,
    SearchCriteria,
    SearchResult,
)
from docsearch.kernel.errors import AlreadyExistsError, NotFoundError
from docsearch.observability.logging import get_logger

T = TypeVar("T")

CREATION_DATE_TIME = "creationDateTime"

_log = get_logger(__name__)


class OpenSearchRepository(ABC, Generic[T]):
    """Generic OpenSearch repository for one document type.

    Subclasses declare the index and search conventions as class attributes
    and implement :meth:`_to_document` / :meth:`_from_document`.

    Usage::

        class GameRepository(OpenSearchRepository[Game]):
            index_name = "games"
            entity_name = "Game"
            text_search_fields = {"title": 2.0, "description": 1.0}

            def _to_document(self, game: Game) -> dict:
                return {"id": game.id, "title": game.title}

            def _from_document(self, doc: dict) -> Game:
                return Game(doc["id"], doc["title"])

    No opensearch-py exception escapes this class; every failure is raised
    as a :mod:`docsearch.kernel.errors` type.
    """

    index_name: ClassVar[str]
    entity_name: ClassVar[str] = "Document"
    text_search_fields: ClassVar[Mapping[str, float]] = {}
    nested_scopes: ClassVar[frozenset[str]] = frozenset()
    sort_fields: ClassVar[tuple[Sort, ...]] = (Sort(CREATION_DATE_TIME, SortDirection.DESC),)
    owner_field: ClassVar[str] = OWNER_FIELD

    def __init__(self, client: Any, *, refresh_on_write: bool = False) -> None:
        self._client = client
        self._refresh_on_write = refresh_on_write
        self._compiler = QueryCompiler(self.text_search_fields, self.nested_scopes, self.owner_field)
        self._log = _log.bind(index=self.index_name)

    # ------------------------------------------------------------------
    # Abstract serialisation hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _to_document(self, entity: T) -> dict[str, Any]:
        """Return the JSON-compatible ``_source`` for *entity*."""

    @abstractmethod
    def _from_document(self, source: dict[str, Any]) -> T:
        """Reconstruct an entity from a ``_source`` dict."""

    def _seq_no_primary_term(self, entity: T) -> tuple[int, int] | None:
        """Optimistic-concurrency token ``(seq_no, primary_term)``, if tracked."""
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save(self, id: str, entity: T) -> T:
        """Create-only write; raises :class:`AlreadyExistsError` when *id* is taken."""
        try:
            await self._client.index(**self._index_params(id, entity, op_type="create"))
        except OpenSearchConflictError as exc:
            self._log.info("opensearch.save_conflict", id=id)
            raise AlreadyExistsError(self.entity_name, id, cause=exc) from exc
        except OpenSearchException as exc:
            raise self._translate(exc, id, "save") from exc
        self._log.debug("opensearch.saved", id=id)
        return entity

    async def update(self, id: str, entity: T) -> T:
        """Overwrite the document at *id* (guarded by seq_no/primary_term when tracked)."""
        try:
            await self._client.index(**self._index_params(id, entity, op_type="index"))
        except OpenSearchException as exc:
            raise self._translate(exc, id, "update") from exc
        self._log.debug("opensearch.updated", id=id)
        return entity

    async def delete_by_id(self, id: str) -> str:
        """Delete *id*; deleting a missing document still succeeds."""
        try:
            await self._client.delete(**self._write_params(index=self.index_name, id=id))
        except OpenSearchNotFoundError:
            self._log.debug("opensearch.delete_missing", id=id)
        except OpenSearchException as exc:
            raise self._translate(exc, id, "delete") from exc
        return id

    def _write_params(self, **params: Any) -> dict[str, Any]:
        if self._refresh_on_write:
            params["refresh"] = "wait_for"
        return params

    def _index_params(self, id: str, entity: T, op_type: str) -> dict[str, Any]:
        params = self._write_params(
            index=self.index_name,
            id=id,
            body=self._to_document(entity),
            op_type=op_type,
        )
        token = self._seq_no_primary_term(entity)
        if token is not None:
            params["if_seq_no"], params["if_primary_term"] = token
        return params

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_id(self, id: str) -> T:
        """Raise :class:`NotFoundError` whether the engine answers 404 or ``found: false``."""
        try:
            response = await self._client.get(index=self.index_name, id=id)
        except OpenSearchNotFoundError as exc:
            raise NotFoundError(self.entity_name, id, cause=exc) from exc
        except OpenSearchException as exc:
            raise self._translate(exc, id, "get") from exc
        source = response.get("_source")
        if not response.get("found") or source is None:
            raise NotFoundError(self.entity_name, id)
        return self._from_document(source)

    async def find_by_fields(
        self,
        fields: Mapping[str, str],
        page: int = 0,
        size: int = 20,
        sort: Mapping[str, SortDirection | str] | Sequence[Sort] | None = None,
    ) -> list[T]:
        """Documents where every ``field == value`` in *fields* holds."""
        criteria = SearchCriteria.of_equalities(fields, page_number=page, page_size=size)
        plan = self.compile(criteria)
        body = build_search_body(plan, Sort.from_mapping(sort), page, size)
        response = await self._search(body)
        return [self._from_document(hit["_source"]) for hit in hits_of(response) if hit.get("_source") is not None]

    async def search(self, criteria: SearchCriteria, owner_id: str | None = None) -> SearchResult[T]:
        """Compile, execute and map *criteria*; *owner_id* restricts hits to that caller."""
        response = await self._search(self.build_request(criteria, owner_id))
        return map_search_response(response, criteria, self._from_document)

    async def count(self, criteria: SearchCriteria, owner_id: str | None = None) -> int:
        body = build_count_body(self.compile(criteria, owner_id))
        try:
            response = await self._client.count(index=self.index_name, body=body)
        except OpenSearchException as exc:
            raise self._translate(exc, None, "count") from exc
        return int(response.get("count", 0))

    def compile(self, criteria: SearchCriteria, owner_id: str | None = None) -> QueryPlan:
        return self._compiler.compile(criteria, owner_id)

    def build_request(self, criteria: SearchCriteria, owner_id: str | None = None) -> dict[str, Any]:
        """The ``_search`` body for *criteria*, sorted by :attr:`sort_fields`."""
        return self._request_body(self.compile(criteria, owner_id), criteria)

    def _request_body(self, plan: QueryPlan, criteria: SearchCriteria) -> dict[str, Any]:
        return build_search_body(
            plan,
            self.sort_fields,
            criteria.effective_page_number,
            criteria.effective_page_size,
        )

    async def _search(self, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._client.search(index=self.index_name, body=body)
        except OpenSearchException as exc:
            raise self._translate(exc, None, "search") from exc

    def _translate(self, exc: OpenSearchException, id: str | None, operation: str) -> Exception:
        error = translate_error(exc, self.entity_name, id, operation)
        self._log.warning(
            "opensearch.request_failed",
            operation=operation,
            id=id,
            error_code=error.code,
        )
        return error


__all__ = ["CREATION_DATE_TIME", "OpenSearchRepository"]
