"""Remote steps of the duplication workflow: find, fetch and create."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from ...infra.logging import get_logger
from .errors import BLOCKS_UNAVAILABLE, NotFoundError, RemoteError
from .gateway import DiaryGateway
from .models import ENTRY_DATE_PROPERTY, ContentBlock, DiaryEntry

__all__ = [
    "LATEST_ENTRY_SORTS",
    "find_latest_entry",
    "fetch_entry_blocks",
    "create_todays_diary",
]

logger = get_logger(__name__)

LATEST_ENTRY_SORTS = ({"property": ENTRY_DATE_PROPERTY, "direction": "descending"},)


def find_latest_entry(
    gateway: DiaryGateway, database_id: str, *, page_size: int = 5
) -> DiaryEntry:
    """Return the diary entry with the most recent ``Entry date``."""

    try:
        response = gateway.query_database(
            database_id, sorts=LATEST_ENTRY_SORTS, page_size=page_size
        )
    except RemoteError:
        logger.error("diary_query_failed", extra={"database_id": database_id})
        raise

    results = response.get("results") if isinstance(response, Mapping) else None
    if not results:
        logger.error("diary_query_empty", extra={"database_id": database_id})
        raise NotFoundError("No diary pages found.")

    entry = DiaryEntry.from_page(results[0])
    logger.info(
        "diary_latest_entry_found",
        extra={"database_id": database_id, "page_id": entry.entry_id},
    )
    return entry


def fetch_entry_blocks(
    gateway: DiaryGateway, entry_id: str, *, paginate: bool = False
) -> List[ContentBlock]:
    """Return the entry's child blocks in order.

    Only the first listing page is read unless ``paginate`` is set, in which
    case ``next_cursor`` is followed until Notion reports no more results.
    """

    blocks: List[ContentBlock] = []
    cursor = None
    while True:
        try:
            response = gateway.list_block_children(entry_id, start_cursor=cursor)
        except RemoteError:
            logger.error("diary_blocks_fetch_failed", extra={"page_id": entry_id})
            raise

        results = response.get("results") if isinstance(response, Mapping) else None
        if results is None:
            logger.error("diary_blocks_missing", extra={"page_id": entry_id})
            raise RemoteError(
                f"Failed to fetch blocks for page ID {entry_id}",
                code=BLOCKS_UNAVAILABLE,
                operation="list_block_children",
            )
        blocks.extend(results)

        cursor = response.get("next_cursor")
        if not (paginate and response.get("has_more") and cursor):
            break

    logger.info(
        "diary_blocks_fetched",
        extra={"page_id": entry_id, "block_count": len(blocks)},
    )
    return blocks


def create_todays_diary(
    gateway: DiaryGateway,
    database_id: str,
    *,
    properties: Mapping[str, Any],
    children: Sequence[ContentBlock],
) -> str:
    """Create the new diary page and return its id."""

    try:
        page = gateway.create_page(
            database_id=database_id, properties=properties, children=children
        )
    except RemoteError:
        logger.error("diary_create_failed", extra={"database_id": database_id})
        raise

    if not isinstance(page, Mapping) or not page.get("object") or not page.get("id"):
        logger.error("diary_create_empty_response", extra={"database_id": database_id})
        raise RemoteError(
            f"Failed to create a new page in database {database_id}",
            operation="create_page",
        )

    logger.info(
        "diary_created",
        extra={"database_id": database_id, "page_id": page["id"]},
    )
    return str(page["id"])
