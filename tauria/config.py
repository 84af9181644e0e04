"""Configuration loading for tauria (.tauria.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".tauria.yml"

KEEP_ALL = "keep_all"
LAST_WRITE_WINS = "last_write_wins"
EVENT_POLICIES = (KEEP_ALL, LAST_WRITE_WINS)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class TypesConfig:
    """How declared types are rendered."""

    foreign_namespace: str = "T"


@dataclass
class CommandsConfig:
    """Command detection and framework-injected parameter rules."""

    markers: List[str] = field(default_factory=lambda: ["command", "tauri::command"])
    context_types: List[str] = field(
        default_factory=lambda: ["tauri::WebviewWindow", "tauri::AppHandle", "tauri::Window"]
    )
    context_type_prefixes: List[str] = field(default_factory=lambda: ["tauri::State"])
    opaque_return_types: List[str] = field(default_factory=lambda: ["tauri::ipc::Response"])


@dataclass
class EventsConfig:
    """Emission call shapes and the deduplication policy."""

    broadcast_method: str = "emit"
    scoped_method: str = "emit_to"
    receivers: List[str] = field(default_factory=lambda: ["app", "window"])
    handle_types: List[str] = field(
        default_factory=lambda: ["tauri::AppHandle", "tauri::Window", "tauri::WebviewWindow"]
    )
    policy: str = KEEP_ALL


@dataclass
class LoggingConfig:
    level: Optional[str] = None
    file: Optional[Path] = None


@dataclass
class ExtractorConfig:
    """Represents the settings defined in .tauria.yml."""

    root: Optional[Path] = None
    types: TypesConfig = field(default_factory=TypesConfig)
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    events: EventsConfig = field(default_factory=EventsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path) -> ExtractorConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ExtractorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = ExtractorConfig(root=root)

    types_data = _as_dict(data.get("types"))
    namespace = _as_str(types_data.get("foreign_namespace"))
    if namespace:
        config.types.foreign_namespace = namespace

    commands_data = _as_dict(data.get("commands"))
    for key in ("markers", "context_types", "context_type_prefixes", "opaque_return_types"):
        if key in commands_data:
            setattr(config.commands, key, _as_str_list(commands_data.get(key)))

    events_data = _as_dict(data.get("events"))
    for key in ("broadcast_method", "scoped_method"):
        value = _as_str(events_data.get(key))
        if value:
            setattr(config.events, key, value)
    for key in ("receivers", "handle_types"):
        if key in events_data:
            setattr(config.events, key, _as_str_list(events_data.get(key)))
    policy = _as_str(events_data.get("policy"))
    if policy is not None:
        normalized = policy.strip().lower().replace("-", "_")
        if normalized not in EVENT_POLICIES:
            allowed = ", ".join(EVENT_POLICIES)
            raise ConfigError(f"Unknown event policy '{policy}' (expected one of: {allowed})")
        config.events.policy = normalized

    logging_data = _as_dict(data.get("logging"))
    config.logging.level = _as_str(logging_data.get("level"))
    log_file = _as_str(logging_data.get("file"))
    config.logging.file = root / log_file if log_file else None

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CommandsConfig",
    "ConfigError",
    "EVENT_POLICIES",
    "EventsConfig",
    "ExtractorConfig",
    "KEEP_ALL",
    "LAST_WRITE_WINS",
    "LoggingConfig",
    "TypesConfig",
    "load_config",
]
