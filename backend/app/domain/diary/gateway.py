"""Diary database gateway implementations."""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, TypeVar
from uuid import uuid4

import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from ...config import Settings
from ...infra.logging import get_logger
from .errors import RemoteError

__all__ = [
    "DiaryGateway",
    "GatewayFactory",
    "InMemoryDiaryGateway",
    "NotionDiaryGateway",
    "build_diary_gateway",
]

logger = get_logger(__name__)

T = TypeVar("T")


class DiaryGateway(Protocol):  # pragma: no cover
    """The three Notion calls the workflow needs; each returns the raw response."""

    def query_database(
        self,
        database_id: str,
        *,
        sorts: Sequence[Mapping[str, str]],
        page_size: int,
    ) -> Mapping[str, Any]: ...

    def list_block_children(
        self, block_id: str, *, start_cursor: Optional[str] = None
    ) -> Mapping[str, Any]: ...

    def create_page(
        self,
        *,
        database_id: str,
        properties: Mapping[str, Any],
        children: Sequence[Mapping[str, Any]],
    ) -> Mapping[str, Any]: ...


GatewayFactory = Callable[[Settings], DiaryGateway]


class NotionDiaryGateway(DiaryGateway):
    """Gateway backed by the official Notion SDK."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def query_database(
        self,
        database_id: str,
        *,
        sorts: Sequence[Mapping[str, str]],
        page_size: int,
    ) -> Mapping[str, Any]:
        return self._call(
            "query_database",
            lambda: self._client.request(
                path=f"databases/{database_id}/query",
                method="POST",
                body={"sorts": list(sorts), "page_size": page_size},
            ),
            database_id=database_id,
        )

    def list_block_children(
        self, block_id: str, *, start_cursor: Optional[str] = None
    ) -> Mapping[str, Any]:
        params: Dict[str, Any] = {"block_id": block_id}
        if start_cursor:
            params["start_cursor"] = start_cursor
        return self._call(
            "list_block_children",
            lambda: self._client.blocks.children.list(**params),
            block_id=block_id,
        )

    def create_page(
        self,
        *,
        database_id: str,
        properties: Mapping[str, Any],
        children: Sequence[Mapping[str, Any]],
    ) -> Mapping[str, Any]:
        return self._call(
            "create_page",
            lambda: self._client.pages.create(
                parent={"type": "database_id", "database_id": database_id},
                properties=dict(properties),
                children=list(children),
            ),
            database_id=database_id,
        )

    def _call(self, operation: str, func: Callable[[], T], **context: Any) -> T:
        try:
            return func()
        except (HTTPResponseError, RequestTimeoutError, httpx.HTTPError) as exc:
            logger.error(
                "notion_call_failed",
                extra={"operation": operation, "error": str(exc), **context},
            )
            raise RemoteError(
                f"Notion {operation} failed: {exc}", operation=operation
            ) from exc


class InMemoryDiaryGateway(DiaryGateway):
    """In-process diary database used by tests and local runs.

    Pages are stored as Notion-shaped dicts with an extra ``children`` list.
    Every call is appended to ``calls`` as ``(operation, kwargs)``.
    """

    def __init__(
        self,
        pages: Optional[Sequence[Mapping[str, Any]]] = None,
        *,
        block_page_size: int = 100,
    ) -> None:
        self.pages: List[Dict[str, Any]] = [
            {"object": "page", "children": [], **copy.deepcopy(dict(p))} for p in pages or ()
        ]
        self.block_page_size = block_page_size
        self.calls: List[tuple[str, Dict[str, Any]]] = []

    def add_page(
        self,
        *,
        properties: Mapping[str, Any],
        children: Sequence[Mapping[str, Any]] = (),
        page_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        page = {
            "object": "page",
            "id": page_id or str(uuid4()),
            "properties": copy.deepcopy(dict(properties)),
            "children": copy.deepcopy(list(children)),
        }
        self.pages.append(page)
        return page

    def created_pages(self) -> List[Dict[str, Any]]:
        return [kwargs for op, kwargs in self.calls if op == "create_page"]

    def query_database(
        self,
        database_id: str,
        *,
        sorts: Sequence[Mapping[str, str]],
        page_size: int,
    ) -> Mapping[str, Any]:
        self.calls.append(
            ("query_database", {"database_id": database_id, "sorts": list(sorts), "page_size": page_size})
        )
        ordered = list(self.pages)
        for sort in reversed(list(sorts)):
            prop = sort["property"]
            descending = sort.get("direction") == "descending"
            present = [p for p in ordered if _date_start(p, prop) is not None]
            missing = [p for p in ordered if _date_start(p, prop) is None]
            present.sort(key=lambda p: _date_start(p, prop) or "", reverse=descending)
            ordered = present + missing
        results = [_public_page(page) for page in ordered[:page_size]]
        return {
            "object": "list",
            "results": results,
            "has_more": len(ordered) > page_size,
            "next_cursor": None,
        }

    def list_block_children(
        self, block_id: str, *, start_cursor: Optional[str] = None
    ) -> Mapping[str, Any]:
        self.calls.append(
            ("list_block_children", {"block_id": block_id, "start_cursor": start_cursor})
        )
        page = self._find(block_id)
        offset = int(start_cursor) if start_cursor else 0
        chunk = page["children"][offset : offset + self.block_page_size]
        next_offset = offset + len(chunk)
        has_more = next_offset < len(page["children"])
        return {
            "object": "list",
            "results": copy.deepcopy(chunk),
            "has_more": has_more,
            "next_cursor": str(next_offset) if has_more else None,
        }

    def create_page(
        self,
        *,
        database_id: str,
        properties: Mapping[str, Any],
        children: Sequence[Mapping[str, Any]],
    ) -> Mapping[str, Any]:
        self.calls.append(
            (
                "create_page",
                {
                    "database_id": database_id,
                    "properties": copy.deepcopy(dict(properties)),
                    "children": copy.deepcopy(list(children)),
                },
            )
        )
        page = self.add_page(properties=properties, children=children)
        return _public_page(page)

    def _find(self, page_id: str) -> Dict[str, Any]:
        for page in self.pages:
            if page["id"] == page_id:
                return page
        raise RemoteError(f"Could not find block with ID: {page_id}", operation="list_block_children")


def build_diary_gateway(settings: Settings) -> DiaryGateway:
    """Return a Notion-backed gateway; fails fast when the API key is absent."""

    from ...infra.notion import build_notion_client

    return NotionDiaryGateway(build_notion_client(settings))


def _date_start(page: Mapping[str, Any], prop: str) -> Optional[str]:
    value = (page.get("properties") or {}).get(prop) or {}
    payload = value.get("date") if isinstance(value, Mapping) else None
    if isinstance(payload, Mapping):
        return payload.get("start")
    return None


def _public_page(page: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: copy.deepcopy(value) for key, value in page.items() if key != "children"}
