"""Tests for the finder, block fetcher and creator steps."""

from __future__ import annotations

import pytest

from backend.app.domain.diary import queries
from backend.app.domain.diary.errors import BLOCKS_UNAVAILABLE, NotFoundError, RemoteError
from backend.app.domain.diary.gateway import InMemoryDiaryGateway
from tests.helpers.diary_pages import DATABASE_ID, diary_page, paragraph, todo
from tests.helpers.logging import DiaryEventRecorder

pytestmark = [pytest.mark.diary]


class StubGateway:
    """Gateway returning canned responses or raising a canned error."""

    def __init__(self, *, query=None, blocks=None, created=None, error=None):
        self.query = query
        self.blocks = blocks
        self.created = created
        self.error = error

    def query_database(self, database_id, *, sorts, page_size):
        if self.error:
            raise self.error
        return self.query

    def list_block_children(self, block_id, *, start_cursor=None):
        if self.error:
            raise self.error
        return self.blocks

    def create_page(self, *, database_id, properties, children):
        if self.error:
            raise self.error
        return self.created


def test_find_latest_entry_sorts_by_entry_date_descending():
    gateway = InMemoryDiaryGateway(
        [
            diary_page("older", start="2024-05-30"),
            diary_page("newest", start="2024-06-02"),
            diary_page("middle", start="2024-06-01"),
        ]
    )

    entry = queries.find_latest_entry(gateway, DATABASE_ID)

    assert entry.entry_id == "newest"
    op, kwargs = gateway.calls[0]
    assert op == "query_database"
    assert kwargs == {
        "database_id": DATABASE_ID,
        "sorts": [{"property": "Entry date", "direction": "descending"}],
        "page_size": 5,
    }


def test_find_latest_entry_raises_not_found_for_empty_database(monkeypatch):
    recorder = DiaryEventRecorder()
    monkeypatch.setattr(queries, "logger", recorder)

    with pytest.raises(NotFoundError, match="No diary pages found."):
        queries.find_latest_entry(InMemoryDiaryGateway(), DATABASE_ID)

    assert recorder.context_of("error", "diary_query_empty") == {"database_id": DATABASE_ID}


def test_find_latest_entry_propagates_remote_errors_unchanged():
    error = RemoteError("Notion query_database failed: 401", operation="query_database")

    with pytest.raises(RemoteError) as excinfo:
        queries.find_latest_entry(StubGateway(error=error), DATABASE_ID)

    assert excinfo.value is error


def test_fetch_entry_blocks_returns_blocks_in_order():
    blocks = [paragraph("one"), todo("two"), paragraph("three")]
    gateway = InMemoryDiaryGateway([diary_page("p1", children=blocks)])

    assert queries.fetch_entry_blocks(gateway, "p1") == blocks


def test_fetch_entry_blocks_returns_empty_list_for_empty_body():
    gateway = InMemoryDiaryGateway([diary_page("p1", children=[])])

    assert queries.fetch_entry_blocks(gateway, "p1") == []


def test_fetch_entry_blocks_reads_single_page_by_default():
    blocks = [paragraph(str(n)) for n in range(5)]
    gateway = InMemoryDiaryGateway([diary_page("p1", children=blocks)], block_page_size=2)

    assert queries.fetch_entry_blocks(gateway, "p1") == blocks[:2]


def test_fetch_entry_blocks_follows_cursor_when_paginating():
    blocks = [paragraph(str(n)) for n in range(5)]
    gateway = InMemoryDiaryGateway([diary_page("p1", children=blocks)], block_page_size=2)

    assert queries.fetch_entry_blocks(gateway, "p1", paginate=True) == blocks
    cursors = [kw["start_cursor"] for op, kw in gateway.calls if op == "list_block_children"]
    assert cursors == [None, "2", "4"]


def test_fetch_entry_blocks_without_container_is_blocks_unavailable():
    with pytest.raises(RemoteError) as excinfo:
        queries.fetch_entry_blocks(StubGateway(blocks={"object": "list"}), "p1")

    assert excinfo.value.code == BLOCKS_UNAVAILABLE
    assert "p1" in str(excinfo.value)


def test_create_todays_diary_returns_new_page_id():
    gateway = InMemoryDiaryGateway()
    children = [paragraph("a"), todo("b")]

    page_id = queries.create_todays_diary(
        gateway, DATABASE_ID, properties={"Name": {"title": []}}, children=children
    )

    created = gateway.created_pages()
    assert len(created) == 1
    assert created[0]["database_id"] == DATABASE_ID
    assert created[0]["children"] == children
    assert any(page["id"] == page_id for page in gateway.pages)


@pytest.mark.parametrize("response", [{}, {"id": "x"}, {"object": "page"}, None])
def test_create_todays_diary_rejects_empty_response(response):
    with pytest.raises(RemoteError, match=DATABASE_ID):
        queries.create_todays_diary(
            StubGateway(created=response), DATABASE_ID, properties={}, children=[]
        )
