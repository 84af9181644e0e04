"""Import alias resolution and framework context type detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..logging import get_logger
from ..syntax.nodes import (
    PathType,
    ReferenceType,
    TypeRef,
    UseDecl,
    UseGlob,
    UseGroup,
    UseName,
    UsePath,
    UseRename,
    UseTree,
)

_LOGGER = get_logger("extractors.aliases")


@dataclass(frozen=True)
class AliasMap:
    """Local name to fully qualified path, built from ``use`` declarations."""

    entries: Dict[str, str] = field(default_factory=dict)

    def canonical(self, segments: Sequence[str]) -> str:
        """Fully qualified path for ``segments``.

        Single-segment names are looked up in the alias table; longer paths
        are taken as written.
        """
        path = "::".join(segments)
        if len(segments) == 1:
            return self.get(path) or path
        return path

    def canonical_type(self, ty: TypeRef) -> Optional[str]:
        """Canonical head path of ``ty`` with one reference level stripped."""
        if isinstance(ty, ReferenceType):
            ty = ty.inner
        if isinstance(ty, PathType) and ty.segments:
            return self.canonical(ty.segments)
        return None

    def get(self, name: str) -> Optional[str]:
        return self.entries.get(name)

    def __len__(self) -> int:
        return len(self.entries)


def resolve_aliases(uses: Iterable[UseDecl]) -> AliasMap:
    """Expand every ``use`` tree into alias entries; later imports win."""
    entries: Dict[str, str] = {}
    for declaration in uses:
        _expand(declaration.tree, (), entries)
    return AliasMap(entries=entries)


def _expand(tree: UseTree, prefix: Tuple[str, ...], entries: Dict[str, str]) -> None:
    if isinstance(tree, UsePath):
        _expand(tree.tree, prefix + tree.prefix, entries)
    elif isinstance(tree, UseGroup):
        for item in tree.items:
            _expand(item, prefix, entries)
    elif isinstance(tree, UseName):
        full = _join_self(prefix, tree.path)
        if full:
            entries[full[-1]] = "::".join(full)
    elif isinstance(tree, UseRename):
        full = _join_self(prefix, tree.path)
        if full:
            entries[tree.alias] = "::".join(full)
    elif isinstance(tree, UseGlob):
        # Names introduced through `*` stay unresolved.
        _LOGGER.debug("Ignoring wildcard import %s::*", "::".join(prefix + tree.path))
    else:
        raise TypeError(f"Unsupported use tree: {tree!r}")


def _join_self(prefix: Tuple[str, ...], path: Tuple[str, ...]) -> Tuple[str, ...]:
    # `use a::{self, B}` imports `a` itself.
    if path == ("self",):
        return prefix
    return prefix + path


class ContextTypeMatcher:
    """Recognizes framework-injected parameter types and opaque return types."""

    def __init__(
        self,
        context_types: Iterable[str],
        context_type_prefixes: Iterable[str],
        opaque_types: Iterable[str],
    ) -> None:
        self._exact = frozenset(context_types)
        self._prefixes = tuple(context_type_prefixes)
        self._opaque = frozenset(opaque_types)

    def is_context_type(self, ty: TypeRef, aliases: AliasMap) -> bool:
        path = aliases.canonical_type(ty)
        if path is None:
            return False
        if any(path.startswith(prefix) for prefix in self._prefixes):
            return True
        return path in self._exact

    def is_opaque_response(self, ty: TypeRef, aliases: AliasMap) -> bool:
        path = aliases.canonical_type(ty)
        return path is not None and path in self._opaque


__all__ = ["AliasMap", "ContextTypeMatcher", "resolve_aliases"]
