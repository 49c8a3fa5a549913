"""Centralized settings and configuration loading utilities."""

from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseModel):
    level: str = "INFO"
    log_dir: str = "./logs"
    max_log_file_size_mb: int = 20
    backup_count: int = 5


class MonitoringSettings(BaseModel):
    enabled: bool = False
    prometheus_port: int = 9102


class PresetSettings(BaseModel):
    quality: int = Field(..., ge=0, le=100)
    frame_rate: float = Field(..., gt=0)
    max_duration_seconds: float = Field(..., gt=0)
    compression_effort: int = Field(6, ge=0, le=6)
    decimate_duplicate_frames: bool = False


class TranscodeSettings(BaseModel):
    ffmpeg_binary: str = "ffmpeg"
    timeout_sec: Optional[float] = Field(120.0, gt=0)
    target_size_bytes: int = Field(500 * 1024, ge=1)
    fast_path: bool = False
    ladder: list[PresetSettings] = Field(default_factory=list)


class StaticSettings(BaseModel):
    default_quality: int = Field(100, ge=0, le=100)
    inkscape_binary: str = "inkscape"


class FetchSettings(BaseModel):
    timeout_sec: float = 30.0
    max_size_mb: int = Field(50, ge=1)


class APISettings(BaseModel):
    base_url: str = "/api/v1"
    max_upload_size_mb: int = Field(20, ge=1)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STICKER_", env_nested_delimiter="__", extra="allow")

    service_name: str = "wa-sticker"
    environment: str = "dev"
    api_version: str = "v1"
    default_type: Literal["default", "crop", "full", "circle", "rounded"] = "default"
    scratch_dir: str = str(Path(tempfile.gettempdir()) / "wa_sticker")

    logging: LoggingSettings = LoggingSettings()
    monitoring: MonitoringSettings = MonitoringSettings()
    transcode: TranscodeSettings = TranscodeSettings()
    static: StaticSettings = StaticSettings()
    fetch: FetchSettings = FetchSettings()
    api: APISettings = APISettings()
    converter_modules: list[str] = Field(default_factory=list)

    @staticmethod
    def load_yaml_config_file(file_path: str | Path | None) -> Dict[str, Any]:
        if not file_path:
            return {}
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        import yaml  # lazy import for optional dependency

        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration YAML must produce a mapping")
        return data

    @classmethod
    def from_source(cls, *, config_file: str | None = None, **overrides: Any) -> "Settings":
        base_data = cls.load_yaml_config_file(config_file)
        base_data.update(overrides)
        return cls(**base_data)


@lru_cache
def get_settings() -> Settings:
    cfg_file = os.getenv("STICKER_CONFIG_FILE")
    if cfg_file:
        return Settings.from_source(config_file=cfg_file)

    default_path = Path.cwd() / "config" / "settings.yaml"
    if default_path.exists():
        return Settings.from_source(config_file=str(default_path))

    return Settings()


def reload_settings() -> None:
    get_settings.cache_clear()


def settings_dependency() -> Settings:
    return get_settings()
