from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_cache_path, user_config_path
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "jumper"
APP_AUTHOR = "jumper"
SETTINGS_FILENAME = "settings.json"
LASTDIR_FILENAME = "lastdir"


class RuntimeConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="JUMPER_", case_sensitive=False)

    log_level: str = "info"
    log_format: str = "json"
    log_dir: Path | None = None
    config_dir: Path | None = None


@lru_cache
def get_runtime_config() -> RuntimeConfig:
    return RuntimeConfig()


def resolve_config_dir(config: RuntimeConfig | None = None) -> Path:
    config = config or get_runtime_config()
    if config.config_dir is not None:
        return config.config_dir.expanduser()
    return Path(user_config_path(APP_NAME, APP_AUTHOR))


def resolve_settings_path(config: RuntimeConfig | None = None) -> Path:
    return resolve_config_dir(config) / SETTINGS_FILENAME


def resolve_lastdir_path() -> Path:
    return Path(user_cache_path(APP_NAME, APP_AUTHOR)) / LASTDIR_FILENAME
