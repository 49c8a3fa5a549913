"""Tests for settings loading from YAML and the environment."""

from __future__ import annotations

import pytest

from wa_sticker.config import Settings, get_settings, reload_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    reload_settings()
    yield
    reload_settings()


def test_defaults():
    settings = Settings()

    assert settings.default_type == "default"
    assert settings.transcode.target_size_bytes == 500 * 1024
    assert settings.transcode.timeout_sec == 120
    assert settings.transcode.fast_path is False
    assert settings.static.default_quality == 100
    assert settings.api.base_url == "/api/v1"


def test_yaml_file_is_loaded(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text(
        "default_type: circle\n"
        "transcode:\n"
        "  fast_path: true\n"
        "  ladder:\n"
        "    - {quality: 70, frame_rate: 15, max_duration_seconds: 6}\n",
        encoding="utf-8",
    )

    settings = Settings.from_source(config_file=str(config), service_name="override")

    assert settings.default_type == "circle"
    assert settings.service_name == "override"
    assert settings.transcode.fast_path is True
    assert settings.transcode.ladder[0].quality == 70


def test_missing_yaml_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Settings.load_yaml_config_file(tmp_path / "absent.yaml")


def test_yaml_must_be_a_mapping(tmp_path):
    config = tmp_path / "list.yaml"
    config.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        Settings.load_yaml_config_file(config)


def test_environment_overrides_nested_values(monkeypatch):
    monkeypatch.setenv("STICKER_TRANSCODE__FAST_PATH", "true")
    monkeypatch.setenv("STICKER_TRANSCODE__FFMPEG_BINARY", "/opt/ffmpeg")
    monkeypatch.setenv("STICKER_DEFAULT_TYPE", "rounded")

    settings = Settings()

    assert settings.transcode.fast_path is True
    assert settings.transcode.ffmpeg_binary == "/opt/ffmpeg"
    assert settings.default_type == "rounded"


def test_get_settings_reads_config_file_env(monkeypatch, tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("environment: staging\n", encoding="utf-8")
    monkeypatch.setenv("STICKER_CONFIG_FILE", str(config))

    settings = get_settings()

    assert settings.environment == "staging"
    assert get_settings() is settings


def test_get_settings_without_file_uses_defaults(monkeypatch, tmp_path):
    monkeypatch.delenv("STICKER_CONFIG_FILE", raising=False)
    monkeypatch.chdir(tmp_path)

    assert get_settings().environment == "dev"
