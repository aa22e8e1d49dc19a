"""Metadata – game and transcription documents, their repositories and services."""
from docsearch.metadata.models import (
    AudioSegment,
    GameMetadata,
    TranscribeStatus,
    TranscriptionMetadata,
    UserInfo,
)
from docsearch.metadata.repositories import (
    AUDIO_SEGMENTS,
    GameMetadataRepository,
    TranscriptionMetadataRepository,
)
from docsearch.metadata.services import GameMetadataService, SearchService, TranscriptionMetadataService

__all__ = [
    "AUDIO_SEGMENTS",
    "AudioSegment",
    "GameMetadata",
    "GameMetadataRepository",
    "GameMetadataService",
    "SearchService",
    "TranscribeStatus",
    "TranscriptionMetadata",
    "TranscriptionMetadataRepository",
    "TranscriptionMetadataService",
    "UserInfo",
]
