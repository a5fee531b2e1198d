"""Typed views over the Notion page records the diary workflow touches."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, MutableMapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError, MalformedEntryError, RemoteError

__all__ = [
    "NAME_PROPERTY",
    "ENTRY_DATE_PROPERTY",
    "ContentBlock",
    "FieldSet",
    "DiaryEntry",
    "TitleProperty",
    "DateProperty",
    "today_in",
]

NAME_PROPERTY = "Name"
ENTRY_DATE_PROPERTY = "Entry date"

# Blocks are copied verbatim and never interpreted.
ContentBlock = Dict[str, Any]
FieldSet = Dict[str, Any]


def today_in(tz_name: str) -> date:
    """Return the current calendar date in ``tz_name``."""

    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown diary timezone: {tz_name}") from exc
    return datetime.now(zone).date()


@dataclass(frozen=True)
class DiaryEntry:
    """A page in the work diary database, read and never mutated."""

    entry_id: str
    properties: FieldSet = field(default_factory=dict)
    url: Optional[str] = None

    @classmethod
    def from_page(cls, page: Mapping[str, Any]) -> "DiaryEntry":
        entry_id = page.get("id") if isinstance(page, Mapping) else None
        if not entry_id:
            raise RemoteError(
                "Notion returned a page without an id", operation="query_database"
            )
        properties = page.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise MalformedEntryError(f"Page {entry_id} properties are not a mapping")
        return cls(entry_id=str(entry_id), properties=dict(properties), url=page.get("url"))


@dataclass
class TitleProperty:
    """A ``title`` property; ``fragments`` alias the underlying rich-text list."""

    name: str
    fragments: List[MutableMapping[str, Any]]

    @classmethod
    def parse(cls, name: str, value: Any) -> "TitleProperty":
        if not isinstance(value, MutableMapping):
            raise MalformedEntryError(f"{name!r} property is missing or not an object")
        kind = value.get("type")
        if kind is not None and kind != "title":
            raise MalformedEntryError(f"{name!r} property has type {kind!r}, expected 'title'")
        fragments = value.get("title")
        if not isinstance(fragments, list) or not fragments:
            raise MalformedEntryError(f"{name!r} property has no title fragments")
        first = fragments[0]
        if not isinstance(first, MutableMapping) or not isinstance(
            first.get("text"), MutableMapping
        ):
            raise MalformedEntryError(f"{name!r} first title fragment carries no text")
        return cls(name=name, fragments=fragments)

    def rename(self, label: str) -> None:
        first = self.fragments[0]
        first["text"]["content"] = label
        first["plain_text"] = label


@dataclass
class DateProperty:
    """A ``date`` property; ``payload`` aliases the nested ``date`` object."""

    name: str
    payload: MutableMapping[str, Any]

    @classmethod
    def parse(cls, name: str, value: Any) -> "DateProperty":
        if not isinstance(value, MutableMapping):
            raise MalformedEntryError(f"{name!r} property is missing or not an object")
        kind = value.get("type")
        if kind is not None and kind != "date":
            raise MalformedEntryError(f"{name!r} property has type {kind!r}, expected 'date'")
        payload = value.get("date")
        if not isinstance(payload, MutableMapping):
            raise MalformedEntryError(f"{name!r} property has no date value")
        start = payload.get("start")
        if not isinstance(start, str) or not start:
            raise MalformedEntryError(f"{name!r} property has no start date")
        return cls(name=name, payload=payload)

    @property
    def start(self) -> str:
        return self.payload["start"]

    def start_day(self) -> date:
        """Calendar day of the start value; any time-of-day part is ignored."""

        try:
            return date.fromisoformat(self.start[:10])
        except ValueError as exc:
            raise MalformedEntryError(
                f"{self.name!r} start {self.start!r} is not an ISO date"
            ) from exc
