"""Configuration loader for the diary duplicator with profile support."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_NOTION_TIMEOUT_MS = 60_000
DEFAULT_QUERY_PAGE_SIZE = 5
DEFAULT_TIMEZONE = "UTC"
DEFAULT_TITLE_FORMAT = "%A, %d %B"
DEFAULT_READ_ONLY_PROPERTIES = ("Created", "Updated")
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PROFILE_DICT: dict[str, Any] = {
    "environment": DEFAULT_ENVIRONMENT,
    "notion": {
        "notion_version": DEFAULT_NOTION_VERSION,
        "timeout_ms": DEFAULT_NOTION_TIMEOUT_MS,
    },
    "diary": {
        "query_page_size": DEFAULT_QUERY_PAGE_SIZE,
        "timezone": DEFAULT_TIMEZONE,
        "title_format": DEFAULT_TITLE_FORMAT,
        "paginate_blocks": False,
        "read_only_properties": list(DEFAULT_READ_ONLY_PROPERTIES),
    },
    "logging": {"level": DEFAULT_LOG_LEVEL, "json": False},
}
CONFIG_PROFILE_ENV = "DIARYDUP_CONFIG_PROFILE"
CONFIG_DIR_ENV = "DIARYDUP_CONFIG_DIR"
NOTION_API_KEY_ENV = "NOTION_API_KEY"
DIARY_DATABASE_ID_ENV = "WORK_DIARIES_DATABASE_ID"
LOG_LEVEL_ENV = "DIARYDUP_LOG_LEVEL"
DEFAULT_PROFILE = "dev"
DEFAULT_CONFIG_ROOT = Path(__file__).resolve().parents[3] / "config" / "profiles"
CONFIG_EXTENSIONS = (".yaml", ".yml")


@dataclass
class NotionConfig:
    api_key: Optional[str] = None
    diary_database_id: Optional[str] = None
    notion_version: str = DEFAULT_NOTION_VERSION
    timeout_ms: int = DEFAULT_NOTION_TIMEOUT_MS
    base_url: Optional[str] = None


@dataclass
class DiaryConfig:
    query_page_size: int = DEFAULT_QUERY_PAGE_SIZE
    timezone: str = DEFAULT_TIMEZONE
    title_format: str = DEFAULT_TITLE_FORMAT
    paginate_blocks: bool = False
    read_only_properties: List[str] = field(
        default_factory=lambda: list(DEFAULT_READ_ONLY_PROPERTIES)
    )


@dataclass
class LoggingConfig:
    level: str = DEFAULT_LOG_LEVEL
    json: bool = False


@dataclass
class Settings:
    environment: str = DEFAULT_ENVIRONMENT
    notion: NotionConfig = field(default_factory=NotionConfig)
    diary: DiaryConfig = field(default_factory=DiaryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def diary_database_id(self) -> Optional[str]:
        """Return the configured diary database id, or None when blank."""

        value = (self.notion.diary_database_id or "").strip()
        return value or None


def load_settings(
    profile: str | None = None, config_dir: str | Path | None = None
) -> Settings:
    """Load settings from the requested profile or fall back to defaults.

    Secrets and the database id are read from the environment last so a
    checked-in profile never has to carry them.
    """

    profile_name = profile or os.getenv(CONFIG_PROFILE_ENV, DEFAULT_PROFILE)
    config_root = Path(
        config_dir or os.getenv(CONFIG_DIR_ENV, DEFAULT_CONFIG_ROOT)
    ).expanduser()
    config_data = _load_profile_dict(profile_name, config_root)
    if not config_data:
        config_data = copy.deepcopy(DEFAULT_PROFILE_DICT)

    return Settings(
        environment=str(config_data.get("environment", DEFAULT_ENVIRONMENT)),
        notion=_build_notion_config(config_data.get("notion")),
        diary=_build_diary_config(config_data.get("diary")),
        logging=_build_logging_config(config_data.get("logging")),
        raw=config_data,
    )


def _load_profile_dict(profile_name: str, config_root: Path) -> dict[str, Any]:
    """Load the YAML profile if available, otherwise return an empty dict."""

    if not config_root.exists():
        return {}

    for extension in CONFIG_EXTENSIONS:
        candidate = config_root / f"{profile_name}{extension}"
        if not candidate.exists():
            continue
        try:
            with candidate.open("r", encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise RuntimeError(
                f"Failed to parse config profile {candidate}: {exc}"
            ) from exc
        if not isinstance(loaded, dict):
            raise RuntimeError(
                f"Config profile {candidate} must be a mapping at the root"
            )
        return loaded

    return {}


def _build_notion_config(notion_cfg: dict[str, Any] | None) -> NotionConfig:
    notion_cfg = notion_cfg or {}
    base_url = notion_cfg.get("base_url")
    return NotionConfig(
        api_key=os.getenv(NOTION_API_KEY_ENV, notion_cfg.get("api_key")),
        diary_database_id=os.getenv(
            DIARY_DATABASE_ID_ENV, notion_cfg.get("diary_database_id")
        ),
        notion_version=str(
            notion_cfg.get("notion_version", DEFAULT_NOTION_VERSION)
        ),
        timeout_ms=int(notion_cfg.get("timeout_ms", DEFAULT_NOTION_TIMEOUT_MS)),
        base_url=str(base_url) if base_url else None,
    )


def _build_diary_config(diary_cfg: dict[str, Any] | None) -> DiaryConfig:
    diary_cfg = diary_cfg or {}
    read_only = diary_cfg.get("read_only_properties")
    if read_only is None:
        read_only = list(DEFAULT_READ_ONLY_PROPERTIES)
    return DiaryConfig(
        query_page_size=int(
            diary_cfg.get("query_page_size", DEFAULT_QUERY_PAGE_SIZE)
        ),
        timezone=str(diary_cfg.get("timezone", DEFAULT_TIMEZONE)),
        title_format=str(diary_cfg.get("title_format", DEFAULT_TITLE_FORMAT)),
        paginate_blocks=bool(diary_cfg.get("paginate_blocks", False)),
        read_only_properties=[str(name) for name in read_only],
    )


def _build_logging_config(logging_cfg: dict[str, Any] | None) -> LoggingConfig:
    logging_cfg = logging_cfg or {}
    return LoggingConfig(
        level=str(
            os.getenv(LOG_LEVEL_ENV, logging_cfg.get("level", DEFAULT_LOG_LEVEL))
        ).upper(),
        json=bool(logging_cfg.get("json", False)),
    )
