"""OpenSearch repositories for game and transcription metadata."""
from __future__ import annotations

import dataclasses
from typing import Any

from docsearch.adapters.opensearch import OpenSearchRepository, map_search_response, map_with_inner_hits
from docsearch.application.pagination import Sort
from docsearch.application.search import SearchCriteria, SearchResult
from docsearch.kernel.errors import NotFoundError
from docsearch.metadata.models import AudioSegment, GameMetadata, TranscriptionMetadata

__all__ = [
    "AUDIO_SEGMENTS",
    "GameMetadataRepository",
    "TranscriptionMetadataRepository",
]

AUDIO_SEGMENTS = "audioSegments"


class GameMetadataRepository(OpenSearchRepository[GameMetadata]):
    index_name = "games"
    entity_name = "GameMetadata"
    text_search_fields = {"title": 2.0, "description": 1.0, "tags": 1.5}
    sort_fields = (Sort.desc("createdAt"),)
    owner_field = "userId"

    def _to_document(self, entity: GameMetadata) -> dict[str, Any]:
        return entity.to_document()

    def _from_document(self, source: dict[str, Any]) -> GameMetadata:
        return GameMetadata.from_document(source)

    async def find_by_id_and_user_id(self, id: str, user_id: str) -> GameMetadata:
        """The game *id* when it belongs to *user_id*; otherwise :class:`NotFoundError`."""
        games = await self.find_by_fields(
            {"id": id, self.owner_field: user_id}, page=0, size=1, sort=self.sort_fields
        )
        if not games:
            raise NotFoundError(self.entity_name, id)
        return games[0]

    async def find_all_by_user_id(self, user_id: str, page: int, size: int) -> SearchResult[GameMetadata]:
        criteria = SearchCriteria(page_number=page, page_size=size)
        return await self.search(criteria, owner_id=user_id)


class TranscriptionMetadataRepository(OpenSearchRepository[TranscriptionMetadata]):
    index_name = "transcription"
    entity_name = "TranscriptionMetadata"
    text_search_fields = {f"{AUDIO_SEGMENTS}.transcript": 1.0}
    nested_scopes = frozenset({AUDIO_SEGMENTS})

    def _to_document(self, entity: TranscriptionMetadata) -> dict[str, Any]:
        return entity.to_document()

    def _from_document(self, source: dict[str, Any]) -> TranscriptionMetadata:
        return TranscriptionMetadata.from_document(source)

    async def find_by_criteria(
        self, criteria: SearchCriteria, owner_id: str | None = None
    ) -> SearchResult[TranscriptionMetadata]:
        return await self.search(criteria, owner_id)

    async def search_audio_segments(
        self, criteria: SearchCriteria, owner_id: str | None = None
    ) -> SearchResult[TranscriptionMetadata]:
        """Search transcripts, keeping only the audio segments that matched.

        When the search text produced inner hits, each transcript's
        ``audio_segments`` is replaced by its matching segments sorted by start
        time (empty when none matched). Without search text the stored
        segments are returned unchanged.
        """
        plan = self.compile(criteria, owner_id)
        response = await self._search(self._request_body(plan, criteria))
        if AUDIO_SEGMENTS not in plan.inner_hit_scopes:
            return map_search_response(response, criteria, self._from_document)
        return map_with_inner_hits(
            response,
            criteria,
            self._from_document,
            AUDIO_SEGMENTS,
            AudioSegment.from_document,
            sort_key=lambda segment: segment.start_seconds,
            attach=lambda metadata, segments: dataclasses.replace(metadata, audio_segments=segments),
        )
