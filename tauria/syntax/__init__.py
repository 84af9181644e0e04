"""Rust syntax layer: tree-sitter parsing and the immutable IR it produces."""

from __future__ import annotations

from .nodes import SourceModule, TypeRef
from .parser import ModuleParseError, RustParser

__all__ = ["ModuleParseError", "RustParser", "SourceModule", "TypeRef"]
