"""Authenticated Notion SDK client factory."""

from __future__ import annotations

from typing import Any, Dict

from notion_client import Client

from ...config import Settings
from ...domain.diary.errors import ConfigurationError
from ..logging import get_logger

__all__ = ["build_notion_client"]

logger = get_logger(__name__)


def build_notion_client(settings: Settings) -> Client:
    """Return a Notion client authenticated with the configured integration key."""

    api_key = (settings.notion.api_key or "").strip()
    if not api_key:
        logger.error("notion_api_key_missing")
        raise ConfigurationError("NOTION_API_KEY environment variable is missing")

    options: Dict[str, Any] = {
        "auth": api_key,
        "notion_version": settings.notion.notion_version,
        "timeout_ms": settings.notion.timeout_ms,
        "logger": get_logger("backend.notion_client"),
    }
    if settings.notion.base_url:
        options["base_url"] = settings.notion.base_url
    return Client(**options)
