"""Tests for tauria.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from tauria.config import (
    KEEP_ALL,
    LAST_WRITE_WINS,
    ConfigError,
    ExtractorConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ExtractorConfig)
    assert config.root == tmp_path.resolve()
    assert config.types.foreign_namespace == "T"
    assert config.commands.markers == ["command", "tauri::command"]
    assert config.commands.context_type_prefixes == ["tauri::State"]
    assert config.commands.opaque_return_types == ["tauri::ipc::Response"]
    assert config.events.receivers == ["app", "window"]
    assert config.events.policy == KEEP_ALL
    assert config.logging.level is None
    assert config.logging.file is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".tauria.yml"
    config_file.write_text(
        """
types:
  foreign_namespace: Api
commands:
  markers: [command]
  context_types:
    - tauri::AppHandle
  context_type_prefixes: tauri::State
events:
  broadcast_method: broadcast
  receivers: [app, handle]
  policy: Last-Write-Wins
logging:
  level: debug
  file: logs/tauria.log
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.types.foreign_namespace == "Api"
    assert config.commands.markers == ["command"]
    assert config.commands.context_types == ["tauri::AppHandle"]
    assert config.commands.context_type_prefixes == ["tauri::State"]
    assert config.commands.opaque_return_types == ["tauri::ipc::Response"]
    assert config.events.broadcast_method == "broadcast"
    assert config.events.scoped_method == "emit_to"
    assert config.events.receivers == ["app", "handle"]
    assert config.events.policy == LAST_WRITE_WINS
    assert config.logging.level == "debug"
    assert config.logging.file == tmp_path.resolve() / "logs" / "tauria.log"


def test_load_config_accepts_empty_file(tmp_path: Path) -> None:
    (tmp_path / ".tauria.yml").write_text("", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.events.policy == KEEP_ALL


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".tauria.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".tauria.yml").write_text("types: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert ".tauria.yml" in str(excinfo.value)


def test_load_config_rejects_unknown_policy(tmp_path: Path) -> None:
    (tmp_path / ".tauria.yml").write_text("events:\n  policy: first_wins\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert "first_wins" in str(excinfo.value)
