"""Diary duplication workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional

from ...config import Settings
from ...infra.logging import get_logger
from ...infra.metrics import (
    DIARY_CREATED,
    DIARY_FAILED,
    DIARY_SKIPPED_EXISTING,
    MetricsClient,
    get_metrics_client,
)
from .errors import ConfigurationError, DiaryDuplicationError
from .gateway import DiaryGateway, GatewayFactory, build_diary_gateway
from .guard import diary_exists_for_today
from .models import ContentBlock, DiaryEntry, today_in
from .properties import format_new_diary_properties
from .queries import create_todays_diary, fetch_entry_blocks, find_latest_entry

__all__ = [
    "DATABASE_ID_MISSING_MESSAGE",
    "DiaryDuplicationService",
    "DuplicationOutcome",
    "DuplicationPreview",
]

logger = get_logger(__name__)

DATABASE_ID_MISSING_MESSAGE = "Database ID not configured"

Clock = Callable[[str], date]


@dataclass(frozen=True)
class DuplicationOutcome:
    """Result of one webhook invocation."""

    status: Literal["exists", "created"]
    source_entry_id: str
    created_entry_id: Optional[str] = None
    block_count: int = 0


@dataclass(frozen=True)
class DuplicationPreview:
    """What ``duplicate`` would submit, without creating anything."""

    source_entry_id: str
    exists_for_today: bool
    properties: Dict[str, Any] = field(default_factory=dict)
    children: List[ContentBlock] = field(default_factory=list)


class DiaryDuplicationService:
    """Copy the latest diary entry to a new page stamped with today's date."""

    def __init__(
        self,
        settings: Settings,
        *,
        gateway_factory: GatewayFactory = build_diary_gateway,
        clock: Clock = today_in,
        metrics: Optional[MetricsClient] = None,
    ) -> None:
        self._settings = settings
        self._gateway_factory = gateway_factory
        self._clock = clock
        self._metrics = metrics or get_metrics_client()

    def duplicate(self) -> DuplicationOutcome:
        """Run the full workflow; every failure is counted and re-raised."""

        try:
            outcome = self._duplicate()
        except Exception as exc:
            self._metrics.increment(DIARY_FAILED)
            code = exc.code if isinstance(exc, DiaryDuplicationError) else "unexpected"
            logger.error(
                "diary_duplication_failed",
                extra={"error_code": code, "error": str(exc)},
            )
            raise
        if outcome.status == "created":
            self._metrics.increment(DIARY_CREATED)
        else:
            self._metrics.increment(DIARY_SKIPPED_EXISTING)
        return outcome

    def preview(self) -> DuplicationPreview:
        """Run every read step and the transformation but skip creation."""

        database_id, gateway, today = self._prepare()
        latest = self._find_latest(gateway, database_id)
        exists = diary_exists_for_today(latest, today=today)
        if exists:
            return DuplicationPreview(source_entry_id=latest.entry_id, exists_for_today=True)
        blocks = self._fetch_blocks(gateway, latest)
        properties = self._format_properties(latest, today)
        return DuplicationPreview(
            source_entry_id=latest.entry_id,
            exists_for_today=False,
            properties=properties,
            children=blocks,
        )

    def _duplicate(self) -> DuplicationOutcome:
        database_id, gateway, today = self._prepare()
        latest = self._find_latest(gateway, database_id)

        if diary_exists_for_today(latest, today=today):
            logger.info(
                "diary_already_exists_for_today",
                extra={"page_id": latest.entry_id, "today": today.isoformat()},
            )
            return DuplicationOutcome(status="exists", source_entry_id=latest.entry_id)

        blocks = self._fetch_blocks(gateway, latest)
        properties = self._format_properties(latest, today)
        created_id = create_todays_diary(
            gateway, database_id, properties=properties, children=blocks
        )
        logger.info(
            "diary_duplicated",
            extra={
                "source_page_id": latest.entry_id,
                "page_id": created_id,
                "block_count": len(blocks),
            },
        )
        return DuplicationOutcome(
            status="created",
            source_entry_id=latest.entry_id,
            created_entry_id=created_id,
            block_count=len(blocks),
        )

    def _prepare(self) -> tuple[str, DiaryGateway, date]:
        # Checked before any client exists so a bad deploy makes no remote calls.
        database_id = self._settings.diary_database_id
        if not database_id:
            logger.error("diary_database_id_missing")
            raise ConfigurationError(DATABASE_ID_MISSING_MESSAGE)
        today = self._clock(self._settings.diary.timezone)
        gateway = self._gateway_factory(self._settings)
        return database_id, gateway, today

    def _find_latest(self, gateway: DiaryGateway, database_id: str) -> DiaryEntry:
        return find_latest_entry(
            gateway, database_id, page_size=self._settings.diary.query_page_size
        )

    def _fetch_blocks(self, gateway: DiaryGateway, entry: DiaryEntry) -> List[ContentBlock]:
        return fetch_entry_blocks(
            gateway, entry.entry_id, paginate=self._settings.diary.paginate_blocks
        )

    def _format_properties(self, entry: DiaryEntry, today: date) -> Dict[str, Any]:
        return format_new_diary_properties(
            entry.properties,
            today=today,
            title_format=self._settings.diary.title_format,
            read_only=self._settings.diary.read_only_properties,
        )
