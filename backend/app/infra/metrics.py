"""In-process counters for the duplication workflow."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict

from .logging import get_logger

logger = get_logger(__name__)

DIARY_CREATED = "diary.duplicate.created"
DIARY_SKIPPED_EXISTING = "diary.duplicate.skipped_existing"
DIARY_FAILED = "diary.duplicate.failed"


class MetricsClient:  # pragma: no cover - simple helper
    """Basic counter interface."""

    def increment(self, metric: str, value: int = 1) -> None:
        raise NotImplementedError


@dataclass
class InMemoryMetricsClient(MetricsClient):
    """Counter sink that keeps totals for the life of the process."""

    counters: DefaultDict[str, int] = field(default_factory=lambda: defaultdict(int))

    def increment(self, metric: str, value: int = 1) -> None:
        self.counters[metric] += value
        logger.info("metrics_increment", extra={"metric": metric, "value": value})


_metrics_singleton: InMemoryMetricsClient | None = None


def get_metrics_client() -> MetricsClient:
    """Return the shared metrics client."""

    global _metrics_singleton
    if _metrics_singleton is None:
        _metrics_singleton = InMemoryMetricsClient()
    return _metrics_singleton
