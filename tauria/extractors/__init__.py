"""Extractors turning the parsed module IR into renderer-facing models."""

from __future__ import annotations

from .aliases import AliasMap, ContextTypeMatcher, resolve_aliases
from .commands import CommandExtractor, model_commands
from .docs import extract_doc
from .events import EventExtractor, dedupe_events, find_emissions, model_events
from .type_mapper import ANY, UNKNOWN, VOID, collect_type_names, map_type, map_type_text
from .types import has_derive, index_types, model_types

__all__ = [
    "ANY",
    "AliasMap",
    "CommandExtractor",
    "ContextTypeMatcher",
    "EventExtractor",
    "UNKNOWN",
    "VOID",
    "collect_type_names",
    "dedupe_events",
    "extract_doc",
    "find_emissions",
    "has_derive",
    "index_types",
    "map_type",
    "map_type_text",
    "model_commands",
    "model_events",
    "model_types",
    "resolve_aliases",
]
