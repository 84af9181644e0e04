"""Model Tauri Rust modules for TypeScript binding generation."""

from __future__ import annotations

from .config import ConfigError, ExtractorConfig, load_config
from .extractor import Extractor, extract_module
from .models import (
    CommandDescriptor,
    EnumShape,
    ExtractedType,
    FieldShape,
    GlobalEvent,
    InterfaceShape,
    ModuleModel,
    ProjectModel,
    VariantShape,
    WindowEvent,
)
from .syntax.parser import ModuleParseError

__all__ = [
    "CommandDescriptor",
    "ConfigError",
    "EnumShape",
    "ExtractedType",
    "Extractor",
    "ExtractorConfig",
    "FieldShape",
    "GlobalEvent",
    "InterfaceShape",
    "ModuleParseError",
    "ModuleModel",
    "ProjectModel",
    "VariantShape",
    "WindowEvent",
    "extract_module",
    "load_config",
]
