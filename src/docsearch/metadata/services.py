"""Metadata services – caller-scoped use cases over the metadata repositories.

The caller is always taken from :class:`SecurityContext`; every method that
needs it raises :class:`UnauthorizedError` when no principal is set.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from docsearch.application.search import SearchCriteria, SearchResult
from docsearch.kernel.errors import ValidationError
from docsearch.kernel.security import SecurityContext
from docsearch.kernel.time import Clock, SystemClock
from docsearch.metadata.models import (
    AudioSegment,
    GameMetadata,
    TranscribeStatus,
    TranscriptionMetadata,
    UserInfo,
)
from docsearch.metadata.repositories import GameMetadataRepository, TranscriptionMetadataRepository
from docsearch.observability.logging import get_logger

__all__ = ["GameMetadataService", "SearchService", "TranscriptionMetadataService"]

_log = get_logger(__name__)


class SearchService:
    """Full-text and filtered search over the caller's transcripts."""

    def __init__(self, repository: TranscriptionMetadataRepository) -> None:
        self._repository = repository

    async def search(self, criteria: SearchCriteria) -> SearchResult[TranscriptionMetadata]:
        user_id = SecurityContext.require_user_id()
        return await self._repository.search_audio_segments(criteria, owner_id=user_id)


# camelCase payload key -> attribute
_TRANSCRIPTION_ALIASES = {
    "languageCode": "language_code",
    "title": "title",
    "description": "description",
    "duration": "duration",
    "note": "note",
}


class TranscriptionMetadataService:
    def __init__(
        self,
        repository: TranscriptionMetadataRepository,
        clock: Clock | None = None,
    ) -> None:
        self._repository = repository
        self._clock = clock or SystemClock()

    async def create(self, metadata: TranscriptionMetadata) -> TranscriptionMetadata:
        """Register a new transcription job; the job name becomes the document id."""
        if not metadata.job_name:
            raise ValidationError("job_name is required", errors=[{"field": "jobName"}])
        user_id = SecurityContext.require_user_id()
        created = dataclasses.replace(
            metadata,
            id=metadata.job_name,
            creation_date_time=self._clock.now(),
            creation_user_info=UserInfo(user_id),
            transcribe_status=metadata.transcribe_status or TranscribeStatus.IN_PROGRESS,
        )
        await self._repository.save(created.id, created)
        _log.info("transcription.created", id=created.id)
        return created

    async def update(self, id: str, changes: Mapping[str, Any]) -> TranscriptionMetadata:
        """Apply the editable fields present in *changes* (camelCase or snake_case keys)."""
        updates: dict[str, Any] = {}
        for key, value in changes.items():
            attr = _TRANSCRIPTION_ALIASES.get(key, key)
            if attr not in TranscriptionMetadata.EDITABLE_FIELDS:
                raise ValidationError(f"Field '{key}' cannot be updated", errors=[{"field": key}])
            updates[attr] = value
        if "duration" in updates:
            updates["duration"] = int(updates["duration"] or 0)

        current = await self._repository.find_by_id(id)
        updated = dataclasses.replace(current, **updates)
        return await self._repository.update(id, updated)

    async def apply_job_result(self, id: str, job_output: Mapping[str, Any] | None) -> TranscriptionMetadata:
        """Record the outcome of the transcription job for *id*.

        ``None`` marks the job failed. Otherwise *job_output* is the job's JSON
        document: the transcript is the concatenation of
        ``results.transcripts[*].transcript`` and the summary is the first
        audio segment's transcript.
        """
        current = await self._repository.find_by_id(id)
        if job_output is None:
            updated = dataclasses.replace(current, transcribe_status=TranscribeStatus.FAILED)
        else:
            results = job_output.get("results") or {}
            segments = [AudioSegment.from_document(s) for s in results.get("audio_segments") or ()]
            updated = dataclasses.replace(
                current,
                transcribe_status=TranscribeStatus.COMPLETED,
                transcript="".join(t.get("transcript", "") for t in results.get("transcripts") or ()),
                audio_segments=segments,
                summary=segments[0].transcript if segments else None,
            )
        _log.info("transcription.job_applied", id=id, status=updated.transcribe_status)
        return await self._repository.update(id, updated)

    async def list_user_transcripts(self, page_number: int, page_size: int) -> SearchResult[TranscriptionMetadata]:
        user_id = SecurityContext.require_user_id()
        criteria = SearchCriteria(page_number=page_number, page_size=page_size)
        return await self._repository.find_by_criteria(criteria, owner_id=user_id)

    async def get(self, id: str) -> TranscriptionMetadata:
        return await self._repository.find_by_id(id)

    async def delete(self, id: str) -> str:
        return await self._repository.delete_by_id(id)


class GameMetadataService:
    """Game metadata use cases; reads and writes on a game are restricted to its owner
    except for the ``*_public`` lookups."""

    def __init__(self, repository: GameMetadataRepository, clock: Clock | None = None) -> None:
        self._repository = repository
        self._clock = clock or SystemClock()

    async def create(self, metadata: GameMetadata) -> GameMetadata:
        if not metadata.id:
            raise ValidationError("id is required", errors=[{"field": "id"}])
        now = self._clock.now()
        created = dataclasses.replace(
            metadata,
            user_id=metadata.user_id or SecurityContext.require_user_id(),
            created_at=metadata.created_at or now,
            updated_at=metadata.updated_at or now,
        )
        return await self._repository.save(created.id, created)

    async def update(
        self,
        id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        game_type: str | None = None,
        tags: str | None = None,
    ) -> GameMetadata:
        """Overwrite the user-editable fields of the caller's game *id*."""
        current = await self.get(id)
        updated = dataclasses.replace(
            current,
            title=title,
            description=description,
            game_type=game_type,
            tags=tags,
            updated_at=self._clock.now(),
        )
        return await self._repository.update(id, updated)

    async def replace(self, metadata: GameMetadata) -> GameMetadata:
        """Store *metadata* as-is (used by the generation pipeline)."""
        if not metadata.id:
            raise ValidationError("id is required", errors=[{"field": "id"}])
        return await self._repository.update(metadata.id, metadata)

    async def get(self, id: str) -> GameMetadata:
        user_id = SecurityContext.require_user_id()
        return await self._repository.find_by_id_and_user_id(id, user_id)

    async def list_user_games(self, page: int, size: int) -> SearchResult[GameMetadata]:
        user_id = SecurityContext.require_user_id()
        return await self._repository.find_all_by_user_id(user_id, page, size)

    async def delete(self, id: str) -> bool:
        """Delete the caller's game *id*; another user's game raises :class:`NotFoundError`."""
        await self.get(id)
        await self._repository.delete_by_id(id)
        return True

    async def list_public(self, page: int, size: int) -> SearchResult[GameMetadata]:
        return await self._repository.search(SearchCriteria(page_number=page, page_size=size))

    async def get_public(self, id: str) -> GameMetadata:
        return await self._repository.find_by_id(id)

    async def list_by_user(self, user_id: str, page: int, size: int) -> SearchResult[GameMetadata]:
        return await self._repository.find_all_by_user_id(user_id, page, size)
