"""Tests for config loader behavior."""

from __future__ import annotations

import pytest

from backend.app.config import load_settings

pytestmark = [pytest.mark.config]


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for name in (
        "NOTION_API_KEY",
        "WORK_DIARIES_DATABASE_ID",
        "DIARYDUP_LOG_LEVEL",
        "DIARYDUP_CONFIG_PROFILE",
        "DIARYDUP_CONFIG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_falls_back_to_defaults(monkeypatch, tmp_path):
    """Missing profiles should default to the built-in dev configuration."""

    monkeypatch.setenv("DIARYDUP_CONFIG_PROFILE", "missing")
    monkeypatch.setenv("DIARYDUP_CONFIG_DIR", str(tmp_path))
    settings = load_settings()

    assert settings.environment == "dev"
    assert settings.notion.api_key is None
    assert settings.diary_database_id is None
    assert settings.notion.notion_version == "2022-06-28"
    assert settings.diary.query_page_size == 5
    assert settings.diary.timezone == "UTC"
    assert settings.diary.title_format == "%A, %d %B"
    assert settings.diary.paginate_blocks is False
    assert settings.diary.read_only_properties == ["Created", "Updated"]
    assert settings.logging.level == "INFO"


def test_load_settings_reads_yaml_profile(monkeypatch, tmp_path):
    """Config loader should parse YAML profiles and expose diary settings."""

    profiles_dir = tmp_path / "profiles"
    profiles_dir.mkdir()
    (profiles_dir / "prod.yaml").write_text(
        """
environment: prod

notion:
  diary_database_id: db-from-profile
  notion_version: "2025-01-01"
  timeout_ms: 15000
  base_url: "https://notion.example.test"

diary:
  query_page_size: 3
  timezone: Europe/Lisbon
  title_format: "%d/%m %A"
  paginate_blocks: true
  read_only_properties: [Created, Updated, Last edited by]

logging:
  level: debug
  json: true
""",
        encoding="utf-8",
    )

    settings = load_settings(profile="prod", config_dir=profiles_dir)

    assert settings.environment == "prod"
    assert settings.diary_database_id == "db-from-profile"
    assert settings.notion.notion_version == "2025-01-01"
    assert settings.notion.timeout_ms == 15000
    assert settings.notion.base_url == "https://notion.example.test"
    assert settings.diary.query_page_size == 3
    assert settings.diary.timezone == "Europe/Lisbon"
    assert settings.diary.paginate_blocks is True
    assert settings.diary.read_only_properties == ["Created", "Updated", "Last edited by"]
    assert settings.logging.level == "DEBUG"
    assert settings.logging.json is True


def test_environment_overrides_secrets_and_database_id(monkeypatch, tmp_path):
    profiles_dir = tmp_path / "profiles"
    profiles_dir.mkdir()
    (profiles_dir / "dev.yml").write_text(
        "notion:\n  diary_database_id: from-profile\n", encoding="utf-8"
    )
    monkeypatch.setenv("NOTION_API_KEY", "secret_xyz")
    monkeypatch.setenv("WORK_DIARIES_DATABASE_ID", "from-env")
    monkeypatch.setenv("DIARYDUP_LOG_LEVEL", "warning")

    settings = load_settings(config_dir=profiles_dir)

    assert settings.notion.api_key == "secret_xyz"
    assert settings.diary_database_id == "from-env"
    assert settings.logging.level == "WARNING"


def test_blank_database_id_is_treated_as_missing(monkeypatch, tmp_path):
    monkeypatch.setenv("WORK_DIARIES_DATABASE_ID", "   ")

    settings = load_settings(config_dir=tmp_path)

    assert settings.diary_database_id is None


def test_invalid_profile_root_raises(tmp_path):
    (tmp_path / "dev.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="must be a mapping"):
        load_settings(config_dir=tmp_path)


def test_unparseable_profile_raises(tmp_path):
    (tmp_path / "dev.yaml").write_text("notion: [unclosed\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Failed to parse config profile"):
        load_settings(config_dir=tmp_path)
