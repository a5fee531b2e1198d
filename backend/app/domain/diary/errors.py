"""Error taxonomy for the diary duplication workflow."""

from __future__ import annotations

__all__ = [
    "DiaryDuplicationError",
    "ConfigurationError",
    "RemoteError",
    "NotFoundError",
    "MalformedEntryError",
    "BLOCKS_UNAVAILABLE",
]

BLOCKS_UNAVAILABLE = "blocks_unavailable"


class DiaryDuplicationError(RuntimeError):
    """Base class; every failure in the workflow is one of these."""

    default_code = "diary_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code or self.default_code


class ConfigurationError(DiaryDuplicationError):
    """A required setting is missing or blank."""

    default_code = "configuration_missing"


class RemoteError(DiaryDuplicationError):
    """A Notion call failed or answered with an unusable shape."""

    default_code = "remote_call_failed"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.operation = operation


class NotFoundError(DiaryDuplicationError):
    """The diary database holds no entries to duplicate."""

    default_code = "no_entries"


class MalformedEntryError(DiaryDuplicationError):
    """The source entry's properties do not have the expected shape."""

    default_code = "malformed_entry"
