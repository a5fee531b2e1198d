"""Diary duplication domain package."""

from .errors import (
    ConfigurationError,
    DiaryDuplicationError,
    MalformedEntryError,
    NotFoundError,
    RemoteError,
)
from .gateway import (
    DiaryGateway,
    InMemoryDiaryGateway,
    NotionDiaryGateway,
    build_diary_gateway,
)
from .models import DiaryEntry
from .service import DiaryDuplicationService, DuplicationOutcome, DuplicationPreview

__all__ = [
    "ConfigurationError",
    "DiaryDuplicationError",
    "DiaryDuplicationService",
    "DiaryEntry",
    "DiaryGateway",
    "DuplicationOutcome",
    "DuplicationPreview",
    "InMemoryDiaryGateway",
    "MalformedEntryError",
    "NotFoundError",
    "NotionDiaryGateway",
    "RemoteError",
    "build_diary_gateway",
]
