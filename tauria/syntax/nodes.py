"""Immutable intermediate representation of the Rust items tauria models.

The parser lowers the tree-sitter concrete syntax tree into these records so
the extractors never touch tree-sitter nodes directly. Each family is a closed
union; consumers dispatch with ``isinstance`` over the listed members.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


# Attributes -----------------------------------------------------------------


@dataclass(frozen=True)
class Attribute:
    """An outer attribute such as ``#[derive(Serialize)]``.

    ``path`` is the attribute path with whitespace removed (``tauri::command``).
    ``arguments`` holds the raw delimited token tree including its brackets,
    ``value`` the unquoted string of ``#[name = "..."]`` forms. Doc comments
    are lowered to ``Attribute(path="doc", value=<text>)``.
    """

    path: str
    arguments: Optional[str] = None
    value: Optional[str] = None


# Types ----------------------------------------------------------------------


@dataclass(frozen=True)
class PathType:
    segments: Tuple[str, ...]
    args: Tuple["TypeRef", ...] = ()

    @property
    def name(self) -> str:
        return self.segments[-1] if self.segments else ""


@dataclass(frozen=True)
class ReferenceType:
    inner: "TypeRef"
    mutable: bool = False


@dataclass(frozen=True)
class TupleType:
    elements: Tuple["TypeRef", ...] = ()

    @property
    def is_unit(self) -> bool:
        return not self.elements


@dataclass(frozen=True)
class ArrayType:
    element: "TypeRef"


@dataclass(frozen=True)
class OpaqueType:
    """Any type form tauria does not model (``dyn Trait``, ``fn()``, ...)."""

    kind: str
    text: str


TypeRef = Union[PathType, ReferenceType, TupleType, ArrayType, OpaqueType]


# Use trees ------------------------------------------------------------------


@dataclass(frozen=True)
class UsePath:
    """``prefix::<tree>``"""

    prefix: Tuple[str, ...]
    tree: "UseTree"


@dataclass(frozen=True)
class UseName:
    path: Tuple[str, ...]


@dataclass(frozen=True)
class UseRename:
    path: Tuple[str, ...]
    alias: str


@dataclass(frozen=True)
class UseGroup:
    items: Tuple["UseTree", ...] = ()


@dataclass(frozen=True)
class UseGlob:
    path: Tuple[str, ...] = ()


UseTree = Union[UsePath, UseName, UseRename, UseGroup, UseGlob]


# Expressions ----------------------------------------------------------------


@dataclass(frozen=True)
class PathExpr:
    segments: Tuple[str, ...]

    @property
    def ident(self) -> Optional[str]:
        """The identifier when the path is a single segment."""
        return self.segments[0] if len(self.segments) == 1 else None


@dataclass(frozen=True)
class Literal:
    """A literal; ``kind`` is one of string, char, number, boolean, other."""

    kind: str
    value: str


@dataclass(frozen=True)
class MethodCall:
    receiver: "Expr"
    method: str
    args: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class StructLiteral:
    segments: Tuple[str, ...]
    children: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class Compound:
    """Any other expression; only its sub-expressions are kept."""

    kind: str
    children: Tuple["Expr", ...] = ()


Expr = Union[PathExpr, Literal, MethodCall, StructLiteral, Compound]


def expr_children(expr: Expr) -> Tuple[Expr, ...]:
    """Direct sub-expressions of ``expr`` in source order."""
    if isinstance(expr, MethodCall):
        return (expr.receiver,) + expr.args
    if isinstance(expr, (StructLiteral, Compound)):
        return expr.children
    if isinstance(expr, (PathExpr, Literal)):
        return ()
    raise TypeError(f"Unsupported expression node: {expr!r}")


# Declarations ---------------------------------------------------------------


@dataclass(frozen=True)
class FieldDecl:
    """A struct field or variant member; ``name`` is None for tuple members."""

    name: Optional[str]
    type: TypeRef
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class StructDecl:
    name: str
    attributes: Tuple[Attribute, ...] = ()
    fields: Tuple[FieldDecl, ...] = ()
    kind: str = "named"  # named, tuple or unit


@dataclass(frozen=True)
class VariantDecl:
    name: str
    kind: str  # unit, tuple or struct
    fields: Tuple[FieldDecl, ...] = ()
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class EnumDecl:
    name: str
    attributes: Tuple[Attribute, ...] = ()
    variants: Tuple[VariantDecl, ...] = ()


@dataclass(frozen=True)
class ParamDecl:
    """A typed function parameter; ``name`` is None for destructuring patterns."""

    name: Optional[str]
    type: TypeRef


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    attributes: Tuple[Attribute, ...] = ()
    params: Tuple[ParamDecl, ...] = ()
    return_type: Optional[TypeRef] = None
    body: Optional[Expr] = None


@dataclass(frozen=True)
class UseDecl:
    tree: UseTree


Declaration = Union[StructDecl, EnumDecl, FunctionDecl, UseDecl]


@dataclass(frozen=True)
class SourceModule:
    """Top-level declarations of one parsed Rust module, in source order."""

    module_id: str
    declarations: Tuple[Declaration, ...] = ()

    @property
    def structs(self) -> Tuple[StructDecl, ...]:
        return tuple(item for item in self.declarations if isinstance(item, StructDecl))

    @property
    def enums(self) -> Tuple[EnumDecl, ...]:
        return tuple(item for item in self.declarations if isinstance(item, EnumDecl))

    @property
    def functions(self) -> Tuple[FunctionDecl, ...]:
        return tuple(item for item in self.declarations if isinstance(item, FunctionDecl))

    @property
    def uses(self) -> Tuple[UseDecl, ...]:
        return tuple(item for item in self.declarations if isinstance(item, UseDecl))


__all__ = [
    "ArrayType",
    "Attribute",
    "Compound",
    "Declaration",
    "EnumDecl",
    "Expr",
    "FieldDecl",
    "FunctionDecl",
    "Literal",
    "MethodCall",
    "OpaqueType",
    "ParamDecl",
    "PathExpr",
    "PathType",
    "ReferenceType",
    "SourceModule",
    "StructDecl",
    "StructLiteral",
    "TupleType",
    "TypeRef",
    "UseDecl",
    "UseGlob",
    "UseGroup",
    "UseName",
    "UsePath",
    "UseRename",
    "UseTree",
    "VariantDecl",
    "expr_children",
]
