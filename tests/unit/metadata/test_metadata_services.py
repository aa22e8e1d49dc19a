"""Unit tests for the metadata services."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from docsearch.application.search import SearchCriteria, SearchResult
from docsearch.kernel.errors import AlreadyExistsError, NotFoundError, UnauthorizedError, ValidationError
from docsearch.kernel.security import Principal, SecurityContext
from docsearch.metadata import (
    GameMetadata,
    GameMetadataRepository,
    GameMetadataService,
    SearchService,
    TranscribeStatus,
    TranscriptionMetadata,
    TranscriptionMetadataRepository,
    TranscriptionMetadataService,
    UserInfo,
)
from docsearch.testing.fakes import FrozenClock, InMemoryOpenSearchClient

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


@pytest.fixture(autouse=True)
def _caller() -> Iterator[None]:
    token = SecurityContext.set_current(Principal("user-1"))
    yield
    SecurityContext.reset(token)


# ---------------------------------------------------------------------------
# SearchService
# ---------------------------------------------------------------------------


class TestSearchService:
    def test_search_is_scoped_to_caller(self) -> None:
        repo = MagicMock(spec=TranscriptionMetadataRepository)
        repo.search_audio_segments = AsyncMock(return_value=SearchResult("q"))
        criteria = SearchCriteria(search_text="q")
        _run(SearchService(repo).search(criteria))
        repo.search_audio_segments.assert_awaited_once_with(criteria, owner_id="user-1")

    def test_search_without_caller(self) -> None:
        SecurityContext.clear()
        repo = MagicMock(spec=TranscriptionMetadataRepository)
        repo.search_audio_segments = AsyncMock()
        with pytest.raises(UnauthorizedError):
            _run(SearchService(repo).search(SearchCriteria()))
        repo.search_audio_segments.assert_not_awaited()


# ---------------------------------------------------------------------------
# TranscriptionMetadataService
# ---------------------------------------------------------------------------


@pytest.fixture()
def client() -> InMemoryOpenSearchClient:
    return InMemoryOpenSearchClient()


@pytest.fixture()
def transcriptions(client: InMemoryOpenSearchClient) -> TranscriptionMetadataService:
    return TranscriptionMetadataService(TranscriptionMetadataRepository(client), clock=FrozenClock(NOW))


class TestTranscriptionMetadataService:
    def test_create_sets_identity_and_creation_fields(
        self, transcriptions: TranscriptionMetadataService, client: InMemoryOpenSearchClient
    ) -> None:
        created = _run(transcriptions.create(TranscriptionMetadata(job_name="job-1", title="Standup")))
        assert created.id == "job-1"
        assert created.creation_user_info == UserInfo("user-1")
        assert created.creation_date_time == NOW
        assert created.transcribe_status is TranscribeStatus.IN_PROGRESS
        assert client.documents("transcription")["job-1"]["creationUserInfo"]["id"] == "user-1"

    def test_create_requires_job_name(self, transcriptions: TranscriptionMetadataService) -> None:
        with pytest.raises(ValidationError):
            _run(transcriptions.create(TranscriptionMetadata(title="x")))

    def test_create_twice(self, transcriptions: TranscriptionMetadataService) -> None:
        _run(transcriptions.create(TranscriptionMetadata(job_name="job-1")))
        with pytest.raises(AlreadyExistsError):
            _run(transcriptions.create(TranscriptionMetadata(job_name="job-1")))

    def test_update_applies_editable_fields(self, transcriptions: TranscriptionMetadataService) -> None:
        _run(transcriptions.create(TranscriptionMetadata(job_name="job-1", title="old", note="keep")))
        updated = _run(transcriptions.update("job-1", {"title": "new", "languageCode": "en-US", "duration": "42"}))
        assert (updated.title, updated.language_code, updated.duration, updated.note) == ("new", "en-US", 42, "keep")
        assert _run(transcriptions.get("job-1")).title == "new"

    def test_update_rejects_system_fields(self, transcriptions: TranscriptionMetadataService) -> None:
        with pytest.raises(ValidationError):
            _run(transcriptions.update("job-1", {"transcribeStatus": "COMPLETED"}))

    def test_update_missing(self, transcriptions: TranscriptionMetadataService) -> None:
        with pytest.raises(NotFoundError):
            _run(transcriptions.update("ghost", {"title": "x"}))

    def test_apply_job_result(self, transcriptions: TranscriptionMetadataService) -> None:
        _run(transcriptions.create(TranscriptionMetadata(job_name="job-1")))
        output = {
            "jobName": "job-1",
            "results": {
                "transcripts": [{"transcript": "Hello there. "}, {"transcript": "Bye."}],
                "audio_segments": [
                    {"id": 0, "transcript": "Hello there.", "start_time": "0.0", "end_time": "1.2", "items": [0, 1]},
                    {"id": 1, "transcript": "Bye.", "start_time": "1.5", "end_time": "2.0", "items": [2]},
                ],
            },
        }
        updated = _run(transcriptions.apply_job_result("job-1", output))
        assert updated.transcribe_status is TranscribeStatus.COMPLETED
        assert updated.transcript == "Hello there. Bye."
        assert updated.summary == "Hello there."
        assert [s.id for s in updated.audio_segments] == [0, 1]

    def test_apply_failed_job(self, transcriptions: TranscriptionMetadataService) -> None:
        _run(transcriptions.create(TranscriptionMetadata(job_name="job-1")))
        updated = _run(transcriptions.apply_job_result("job-1", None))
        assert updated.transcribe_status is TranscribeStatus.FAILED

    def test_list_user_transcripts(
        self, transcriptions: TranscriptionMetadataService, client: InMemoryOpenSearchClient
    ) -> None:
        _run(transcriptions.list_user_transcripts(2, 5))
        body = client.last_search_body
        assert body is not None
        assert body["query"] == {"bool": {"must": [{"term": {"creationUserInfo.id": {"value": "user-1"}}}]}}
        assert (body["from"], body["size"]) == (10, 5)

    def test_delete_is_idempotent(self, transcriptions: TranscriptionMetadataService) -> None:
        assert _run(transcriptions.delete("ghost")) == "ghost"


# ---------------------------------------------------------------------------
# GameMetadataService
# ---------------------------------------------------------------------------


@pytest.fixture()
def games(client: InMemoryOpenSearchClient) -> GameMetadataService:
    return GameMetadataService(GameMetadataRepository(client), clock=FrozenClock(NOW))


class TestGameMetadataService:
    def test_create_defaults_owner_and_timestamps(self, games: GameMetadataService) -> None:
        created = _run(games.create(GameMetadata(id="g1", title="Pong")))
        assert created.user_id == "user-1"
        assert created.created_at == created.updated_at == NOW

    def test_create_requires_id(self, games: GameMetadataService) -> None:
        with pytest.raises(ValidationError):
            _run(games.create(GameMetadata(title="Pong")))

    def test_update_own_game(self, games: GameMetadataService, client: InMemoryOpenSearchClient) -> None:
        _run(games.create(GameMetadata(id="g1", title="Pong", poster_url="p.png")))
        updated = _run(games.update("g1", title="Pong 2", tags="retro"))
        assert updated.title == "Pong 2"
        assert updated.tags == "retro"
        assert updated.poster_url == "p.png"
        assert client.documents("games")["g1"]["title"] == "Pong 2"

    def test_update_stamps_updated_at_only(self, client: InMemoryOpenSearchClient) -> None:
        clock = FrozenClock(NOW)
        service = GameMetadataService(GameMetadataRepository(client), clock=clock)
        _run(service.create(GameMetadata(id="g1", title="Pong")))
        clock.advance(minutes=5)
        updated = _run(service.update("g1", title="Pong 2"))
        assert updated.created_at == NOW
        assert updated.updated_at == NOW + timedelta(minutes=5)

    def test_other_users_game_is_not_found(self) -> None:
        client = InMemoryOpenSearchClient().set_search_response({"hits": {"total": {"value": 0}, "hits": []}})
        service = GameMetadataService(GameMetadataRepository(client))
        with pytest.raises(NotFoundError):
            _run(service.get("g1"))
        with pytest.raises(NotFoundError):
            _run(service.delete("g1"))
        assert all(name != "delete" for name, _ in client.calls)

    def test_delete_own_game(self, games: GameMetadataService, client: InMemoryOpenSearchClient) -> None:
        _run(games.create(GameMetadata(id="g1")))
        assert _run(games.delete("g1")) is True
        assert client.documents("games") == {}

    def test_public_lookups_need_no_caller(self, games: GameMetadataService) -> None:
        _run(games.create(GameMetadata(id="g1", title="Pong")))
        SecurityContext.clear()
        assert _run(games.get_public("g1")).title == "Pong"
        assert [g.id for g in _run(games.list_public(0, 10)).items] == ["g1"]
        with pytest.raises(UnauthorizedError):
            _run(games.list_user_games(0, 10))

    def test_list_by_user(self, games: GameMetadataService, client: InMemoryOpenSearchClient) -> None:
        _run(games.list_by_user("user-9", 0, 10))
        body = client.last_search_body
        assert body is not None
        assert body["query"] == {"bool": {"must": [{"term": {"userId": {"value": "user-9"}}}]}}

    def test_replace_stores_as_is(self, games: GameMetadataService, client: InMemoryOpenSearchClient) -> None:
        _run(games.replace(GameMetadata(id="g1", game_status="READY")))
        assert client.documents("games")["g1"]["gameStatus"] == "READY"
