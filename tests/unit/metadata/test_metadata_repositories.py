"""Unit tests for metadata models and their OpenSearch repositories."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

import pytest

from docsearch.application.search import SearchCriteria
from docsearch.kernel.errors import NotFoundError
from docsearch.metadata import (
    AudioSegment,
    GameMetadata,
    GameMetadataRepository,
    TranscribeStatus,
    TranscriptionMetadata,
    TranscriptionMetadataRepository,
    UserInfo,
)
from docsearch.testing.fakes import InMemoryOpenSearchClient


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


def _segment(id: int, start: str, text: str = "") -> dict[str, Any]:
    return {"id": id, "transcript": text, "start_time": start, "end_time": start, "items": [id]}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TestModels:
    def test_transcription_document_keys(self) -> None:
        meta = TranscriptionMetadata(
            id="job-1",
            job_name="job-1",
            creation_date_time=datetime(2026, 1, 1, 12, tzinfo=UTC),
            creation_user_info=UserInfo("u1"),
            transcribe_status=TranscribeStatus.COMPLETED,
            audio_segments=[AudioSegment(0, "hi", "1.5", "2.0", (1, 2))],
        )
        doc = meta.to_document()
        assert doc["jobName"] == "job-1"
        assert doc["creationUserInfo"] == {"id": "u1", "name": "", "email": "", "picture": ""}
        assert doc["creationDateTime"] == "2026-01-01T12:00:00+00:00"
        assert doc["transcribeStatus"] == "COMPLETED"
        assert doc["audioSegments"] == [
            {"id": 0, "transcript": "hi", "start_time": "1.5", "end_time": "2.0", "items": [1, 2]}
        ]
        assert TranscriptionMetadata.from_document(doc) == meta

    def test_game_document_keys(self) -> None:
        game = GameMetadata(id="g1", user_id="u1", s3_game_url="s3://b/k", created_at=datetime(2026, 2, 1, tzinfo=UTC))
        doc = game.to_document()
        assert doc["userId"] == "u1"
        assert doc["s3GameUrl"] == "s3://b/k"
        assert GameMetadata.from_document(doc) == game

    def test_from_document_tolerates_missing_keys(self) -> None:
        meta = TranscriptionMetadata.from_document({"id": "x"})
        assert meta.audio_segments == []
        assert meta.transcribe_status is None
        assert meta.duration == 0

    def test_segment_start_seconds(self) -> None:
        assert AudioSegment.from_document(_segment(1, "12.25")).start_seconds == 12.25


# ---------------------------------------------------------------------------
# GameMetadataRepository
# ---------------------------------------------------------------------------


class TestGameMetadataRepository:
    def test_find_by_id_and_user_id(self) -> None:
        client = InMemoryOpenSearchClient()
        repo = GameMetadataRepository(client)
        _run(repo.save("g1", GameMetadata(id="g1", user_id="u1")))
        assert _run(repo.find_by_id_and_user_id("g1", "u1")).id == "g1"

        body = client.last_search_body
        assert body is not None
        assert body["size"] == 1
        assert body["sort"] == [{"createdAt": {"order": "desc"}}]
        terms = body["query"]["bool"]["must"][0]["bool"]["must"][0]["bool"]["must"]
        assert terms == [{"term": {"id": {"value": "g1"}}}, {"term": {"userId": {"value": "u1"}}}]

    def test_find_by_id_and_user_id_no_hit(self) -> None:
        client = InMemoryOpenSearchClient().set_search_response({"hits": {"total": {"value": 0}, "hits": []}})
        with pytest.raises(NotFoundError):
            _run(GameMetadataRepository(client).find_by_id_and_user_id("g1", "someone-else"))

    def test_find_all_by_user_id_scopes_owner(self) -> None:
        client = InMemoryOpenSearchClient()
        result = _run(GameMetadataRepository(client).find_all_by_user_id("u1", 1, 10))
        body = client.last_search_body
        assert body is not None
        assert body["query"] == {"bool": {"must": [{"term": {"userId": {"value": "u1"}}}]}}
        assert body["from"] == 10
        assert result.pagination is not None

    def test_text_search_boosts(self) -> None:
        client = InMemoryOpenSearchClient()
        _run(GameMetadataRepository(client).search(SearchCriteria(search_text="space")))
        body = client.last_search_body
        assert body is not None
        assert body["query"]["bool"]["must"][0] == {
            "query_string": {"query": "space", "fields": ["description^1.0", "tags^1.5", "title^2.0"]}
        }


# ---------------------------------------------------------------------------
# TranscriptionMetadataRepository
# ---------------------------------------------------------------------------


def _transcript_hit(id: str, inner: list[dict[str, Any]] | None) -> dict[str, Any]:
    hit: dict[str, Any] = {
        "_id": id,
        "_source": {
            "id": id,
            "jobName": id,
            "creationUserInfo": {"id": "u1"},
            "audioSegments": [_segment(i, str(i)) for i in range(3)],
        },
    }
    if inner is not None:
        hit["inner_hits"] = {"audioSegments": {"hits": {"hits": [{"_source": s} for s in inner]}}}
    return hit


class TestTranscriptionMetadataRepository:
    RESPONSE = {
        "took": 1,
        "hits": {
            "total": {"value": 2},
            "hits": [
                _transcript_hit("t1", [_segment(7, "30.5", "b"), _segment(2, "4.25", "a")]),
                _transcript_hit("t2", None),
            ],
        },
    }

    def test_search_audio_segments_attaches_sorted_inner_hits(self) -> None:
        client = InMemoryOpenSearchClient().set_search_response(self.RESPONSE)
        repo = TranscriptionMetadataRepository(client)
        result = _run(repo.search_audio_segments(SearchCriteria(search_text="hello"), owner_id="u1"))

        first, second = result.items
        assert [s.id for s in first.audio_segments] == [2, 7]
        assert second.audio_segments == []
        assert result.search_text == "hello"

    def test_search_audio_segments_request(self) -> None:
        client = InMemoryOpenSearchClient().set_search_response(self.RESPONSE)
        _run(TranscriptionMetadataRepository(client).search_audio_segments(SearchCriteria(search_text="hello"), "u1"))
        body = client.last_search_body
        assert body is not None
        assert body["sort"] == [{"creationDateTime": {"order": "desc"}}]
        text, owner = body["query"]["bool"]["must"]
        assert text == {
            "bool": {
                "should": [
                    {
                        "nested": {
                            "path": "audioSegments",
                            "query": {"query_string": {"query": "hello", "fields": ["audioSegments.transcript^1.0"]}},
                            "score_mode": "sum",
                            "inner_hits": {},
                        }
                    }
                ]
            }
        }
        assert owner == {"term": {"creationUserInfo.id": {"value": "u1"}}}

    def test_without_search_text_segments_are_kept(self) -> None:
        client = InMemoryOpenSearchClient().set_search_response(self.RESPONSE)
        result = _run(TranscriptionMetadataRepository(client).search_audio_segments(SearchCriteria(), "u1"))
        assert [len(item.audio_segments) for item in result.items] == [3, 3]

    def test_find_by_criteria(self) -> None:
        client = InMemoryOpenSearchClient().set_search_response(self.RESPONSE)
        result = _run(TranscriptionMetadataRepository(client).find_by_criteria(SearchCriteria(), owner_id="u1"))
        assert [item.id for item in result.items] == ["t1", "t2"]
        assert result.total == 2
