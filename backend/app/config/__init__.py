"""Config package exporting loader helpers."""

from .loader import DiaryConfig, LoggingConfig, NotionConfig, Settings, load_settings

__all__ = ["Settings", "NotionConfig", "DiaryConfig", "LoggingConfig", "load_settings"]
