"""Metadata entities stored in OpenSearch.

Document keys are camelCase, except the audio segment time bounds which keep
the ``start_time`` / ``end_time`` keys written by the transcription job.
"""
from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

__all__ = [
    "AudioSegment",
    "GameMetadata",
    "TranscribeStatus",
    "TranscriptionMetadata",
    "UserInfo",
]


def _dt_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt_from_str(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class TranscribeStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclasses.dataclass(frozen=True)
class UserInfo:
    id: str
    name: str = ""
    email: str = ""
    picture: str = ""

    def to_document(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "picture": self.picture}

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "UserInfo":
        return cls(
            id=str(doc.get("id", "")),
            name=doc.get("name") or "",
            email=doc.get("email") or "",
            picture=doc.get("picture") or "",
        )


@dataclasses.dataclass(frozen=True)
class AudioSegment:
    """One time-bounded slice of a transcript.

    ``start_time`` / ``end_time`` are seconds as decimal strings (``"12.34"``).
    """

    id: int
    transcript: str
    start_time: str
    end_time: str
    items: tuple[int, ...] = ()

    @property
    def start_seconds(self) -> float:
        return float(self.start_time)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "transcript": self.transcript,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "items": list(self.items),
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "AudioSegment":
        return cls(
            id=int(doc.get("id", 0)),
            transcript=doc.get("transcript") or "",
            start_time=str(doc.get("start_time", "0")),
            end_time=str(doc.get("end_time", "0")),
            items=tuple(int(i) for i in doc.get("items") or ()),
        )


@dataclasses.dataclass
class TranscriptionMetadata:
    id: str | None = None
    job_name: str | None = None
    language_code: str | None = None
    title: str | None = None
    description: str | None = None
    duration: int = 0
    note: str | None = None
    transcript: str | None = None
    summary: str | None = None
    creation_date_time: datetime | None = None
    creation_user_info: UserInfo | None = None
    content_file_name: str | None = None
    transcribe_status: TranscribeStatus | None = None
    audio_segments: list[AudioSegment] = dataclasses.field(default_factory=list)

    # Fields a client may change after creation.
    EDITABLE_FIELDS = ("language_code", "title", "description", "duration", "note")

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "jobName": self.job_name,
            "languageCode": self.language_code,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "note": self.note,
            "transcript": self.transcript,
            "summary": self.summary,
            "creationDateTime": _dt_to_str(self.creation_date_time),
            "creationUserInfo": (
                self.creation_user_info.to_document() if self.creation_user_info else None
            ),
            "contentFileName": self.content_file_name,
            "transcribeStatus": self.transcribe_status.value if self.transcribe_status else None,
            "audioSegments": [s.to_document() for s in self.audio_segments],
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "TranscriptionMetadata":
        user = doc.get("creationUserInfo")
        status = doc.get("transcribeStatus")
        return cls(
            id=doc.get("id"),
            job_name=doc.get("jobName"),
            language_code=doc.get("languageCode"),
            title=doc.get("title"),
            description=doc.get("description"),
            duration=int(doc.get("duration") or 0),
            note=doc.get("note"),
            transcript=doc.get("transcript"),
            summary=doc.get("summary"),
            creation_date_time=_dt_from_str(doc.get("creationDateTime")),
            creation_user_info=UserInfo.from_document(user) if user else None,
            content_file_name=doc.get("contentFileName"),
            transcribe_status=TranscribeStatus(status) if status else None,
            audio_segments=[AudioSegment.from_document(s) for s in doc.get("audioSegments") or ()],
        )


@dataclasses.dataclass
class GameMetadata:
    id: str | None = None
    title: str | None = None
    description: str | None = None
    game_status: str | None = None
    game_type: str | None = None
    s3_game_url: str | None = None
    public_game_url: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tags: str | None = None
    generated_prompt: str | None = None
    poster_url: str | None = None
    ai_response: str | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "gameStatus": self.game_status,
            "gameType": self.game_type,
            "s3GameUrl": self.s3_game_url,
            "publicGameUrl": self.public_game_url,
            "userId": self.user_id,
            "createdAt": _dt_to_str(self.created_at),
            "updatedAt": _dt_to_str(self.updated_at),
            "tags": self.tags,
            "generatedPrompt": self.generated_prompt,
            "posterUrl": self.poster_url,
            "aiResponse": self.ai_response,
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "GameMetadata":
        return cls(
            id=doc.get("id"),
            title=doc.get("title"),
            description=doc.get("description"),
            game_status=doc.get("gameStatus"),
            game_type=doc.get("gameType"),
            s3_game_url=doc.get("s3GameUrl"),
            public_game_url=doc.get("publicGameUrl"),
            user_id=doc.get("userId"),
            created_at=_dt_from_str(doc.get("createdAt")),
            updated_at=_dt_from_str(doc.get("updatedAt")),
            tags=doc.get("tags"),
            generated_prompt=doc.get("generatedPrompt"),
            poster_url=doc.get("posterUrl"),
            ai_response=doc.get("aiResponse"),
        )
