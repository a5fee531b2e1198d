"""Notion API access."""

from .client import build_notion_client

__all__ = ["build_notion_client"]
