"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "POSTDRAFT_"


class Settings(BaseModel):
    app_name:            str = "postdraft"
    db_url:              str = "sqlite:///postdraft.db"
    title_debounce_ms:   int = Field(default=300,   ge=0, description="Quiet period before the title re-derives the slug")
    content_debounce_ms: int = Field(default=500,   ge=0, description="Quiet period before the content re-derives the excerpt")
    form_debounce_ms:    int = Field(default=1000,  ge=0, description="Quiet period before a form snapshot reaches the autosave")
    autosave_enabled:    bool = Field(default=True, description="Arm the autosave timer on dirty drafts")
    autosave_interval_ms: int = Field(default=30_000, ge=1, description="Autosave delay after the last watched change")
    excerpt_max_length:  int = Field(default=160,   ge=4, description="Max excerpt length, ellipsis included")
    title_max_length:    int = Field(default=100,   ge=1, description="Plain-text first lines at or above this length are not titles")
    max_import_bytes:    int = Field(default=10 * 1024 * 1024, ge=1, description="Largest accepted import file")
    log_level:           str = Field(default="INFO", description="Console log level")
    log_file:            Optional[str] = Field(default=None, description="Optional JSON log file path")

    @property
    def title_debounce(self) -> float:
        return self.title_debounce_ms / 1000

    @property
    def content_debounce(self) -> float:
        return self.content_debounce_ms / 1000

    @property
    def form_debounce(self) -> float:
        return self.form_debounce_ms / 1000

    @property
    def autosave_interval(self) -> float:
        return self.autosave_interval_ms / 1000


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")
    return data


def _read_env() -> dict[str, str]:
    env = {name: os.getenv(f"{ENV_PREFIX}{name.upper()}") for name in Settings.model_fields}
    return {name: value for name, value in env.items() if value}


def load_config(overrides: dict[str, Any] = None, path: Path = None) -> Settings:
    """Build Settings from layered sources.

    Later layers win: the YAML file (config.yaml in the working directory unless
    path is given), then POSTDRAFT_<FIELD> env vars, then non-None overrides.
    """
    data = _read_yaml(Path(path or CONFIG_FILE))
    data.update(_read_env())
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return Settings(**data)
