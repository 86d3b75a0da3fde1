from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from tasker.core.config import Settings, load_settings


def test_defaults_without_environment(monkeypatch) -> None:
    monkeypatch.delenv("TASKER_STATE_DIR", raising=False)
    monkeypatch.delenv("TASKER_LOG_TO_FILE", raising=False)

    settings = load_settings()

    assert settings.state_dir == Path.home() / ".tasker"
    assert settings.log_to_file is True
    assert settings.reply_mode == "optimistic"
    assert settings.title_max_length == 200


def test_environment_overrides_yaml(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "tasker.yaml"
    config_path.write_text("reply_mode: reconcile\nlog_level: DEBUG\ntitle_max_length: 80\n", encoding="utf-8")
    monkeypatch.setenv("TASKER_CONFIG", str(config_path))
    monkeypatch.setenv("TASKER_LOG_LEVEL", "warning")

    settings = load_settings()

    assert settings.reply_mode == "reconcile"
    assert settings.title_max_length == 80
    assert settings.log_level == "warning"
    assert settings.log_to_file is False


def test_reply_mode_is_normalized(monkeypatch) -> None:
    monkeypatch.setenv("TASKER_REPLY_MODE", " Reconcile ")

    assert load_settings().reply_mode == "reconcile"


def test_invalid_values_are_rejected(monkeypatch) -> None:
    monkeypatch.setenv("TASKER_REPLY_MODE", "pessimistic")
    with pytest.raises(ValidationError):
        load_settings()

    with pytest.raises(ValidationError):
        Settings(title_max_length=0)


def test_yaml_must_be_a_mapping(tmp_path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(config_path)
