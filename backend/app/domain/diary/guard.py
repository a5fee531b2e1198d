"""Same-day duplicate guard."""

from __future__ import annotations

from datetime import date

from ...infra.logging import get_logger
from .errors import MalformedEntryError
from .models import ENTRY_DATE_PROPERTY, DateProperty, DiaryEntry

__all__ = ["diary_exists_for_today"]

logger = get_logger(__name__)


def diary_exists_for_today(entry: DiaryEntry, *, today: date) -> bool:
    """Return True when ``entry``'s ``Entry date`` falls on ``today``.

    An unusable date property counts as "not today" so the workflow goes on
    to create a fresh entry.
    """

    try:
        entry_date = DateProperty.parse(
            ENTRY_DATE_PROPERTY, entry.properties.get(ENTRY_DATE_PROPERTY)
        )
        return entry_date.start_day() == today
    except MalformedEntryError as exc:
        logger.warning(
            "diary_entry_date_invalid",
            extra={"page_id": entry.entry_id, "reason": str(exc)},
        )
        return False
