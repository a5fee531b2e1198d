"""Shared API dependencies."""

from __future__ import annotations

from fastapi import Request

from ..config import Settings
from ..domain.diary.gateway import GatewayFactory, build_diary_gateway
from ..domain.diary.models import today_in
from ..domain.diary.service import Clock
from ..infra.metrics import MetricsClient, get_metrics_client

__all__ = [
    "get_settings",
    "get_gateway_factory",
    "get_clock",
    "get_metrics",
]


def get_settings(request: Request) -> Settings:
    """Return the settings loaded once when the app was created."""

    return request.app.state.settings


def get_gateway_factory() -> GatewayFactory:
    """Return the callable that builds a diary gateway from settings.

    The gateway is built lazily so configuration checks run before any
    Notion client exists.
    """

    return build_diary_gateway


def get_clock() -> Clock:
    """Return the "today in timezone" clock."""

    return today_in


def get_metrics() -> MetricsClient:
    """Return the shared metrics client."""

    return get_metrics_client()
