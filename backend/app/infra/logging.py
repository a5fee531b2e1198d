"""Structured logging helpers shared by the API, workflow and scripts."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict

__all__ = ["configure_logging", "get_logger", "StructuredFormatter"]

ROOT_LOGGER_NAME = "backend"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger; kept as a seam so call sites stay uniform."""

    return logging.getLogger(name)


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Render the event key followed by its ``extra`` context."""

    def __init__(self, *, as_json: bool = False) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")
        self.as_json = as_json

    def format(self, record: logging.LogRecord) -> str:
        extra = _extra_fields(record)
        if self.as_json:
            payload: Dict[str, Any] = {
                "ts": self.formatTime(record),
                "level": record.levelname,
                "logger": record.name,
                "event": record.getMessage(),
                **extra,
            }
            if record.exc_info:
                payload["exc_info"] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        line = super().format(record)
        if extra:
            context = " ".join(f"{key}={value!r}" for key, value in extra.items())
            # exception text is appended after the first line by the base class
            head, sep, tail = line.partition("\n")
            line = f"{head} {context}{sep}{tail}"
        return line


def configure_logging(settings: Any) -> logging.Logger:
    """Install a single stream handler on the package logger.

    Safe to call repeatedly; the previous handler installed here is replaced.
    """

    logging_cfg = settings.logging
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_diarydup_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(as_json=logging_cfg.json))
    handler._diarydup_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging_cfg.level)
    return logger
