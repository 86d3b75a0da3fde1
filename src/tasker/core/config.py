"""Settings for the task list service.

Values come from an optional YAML file (``TASKER_CONFIG``) and are then
overridden by ``TASKER_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from tasker.core.tasks.schemas import TITLE_MAX_LENGTH

ReplyMode = Literal["optimistic", "reconcile"]

_ENV_FIELDS: dict[str, str] = {
    "TASKER_STATE_DIR": "state_dir",
    "TASKER_LOG_LEVEL": "log_level",
    "TASKER_LOG_TO_FILE": "log_to_file",
    "TASKER_LOG_DIR": "log_dir",
    "TASKER_LOG_MAX_BYTES": "log_max_bytes",
    "TASKER_LOG_BACKUP_COUNT": "log_backup_count",
    "TASKER_REPLY_MODE": "reply_mode",
    "TASKER_TITLE_MAX_LENGTH": "title_max_length",
}


def _default_state_dir() -> Path:
    return Path.home() / ".tasker"


class Settings(BaseModel):
    state_dir: Path = Field(default_factory=_default_state_dir)
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: Optional[Path] = None
    log_max_bytes: int = 5_000_000
    log_backup_count: int = 5
    reply_mode: ReplyMode = "optimistic"
    title_max_length: int = Field(default=TITLE_MAX_LENGTH, ge=1, le=TITLE_MAX_LENGTH)

    @field_validator("state_dir", "log_dir", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Any:
        if isinstance(value, (str, Path)) and str(value).strip():
            return Path(value).expanduser()
        return value

    @field_validator("log_to_file", mode="before")
    @classmethod
    def _on_off(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().casefold() in {"on", "true", "1", "yes"}
        return value

    @field_validator("reply_mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().casefold()
        return value


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML (when given or configured) and the environment."""
    data: dict[str, Any] = {}
    cfg_path = path or os.getenv("TASKER_CONFIG")
    if cfg_path:
        data.update(_read_yaml(Path(cfg_path).expanduser()))
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            data[field_name] = raw.strip()
    return Settings.model_validate(data)
