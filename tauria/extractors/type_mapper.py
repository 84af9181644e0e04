"""Mapping of declared Rust types onto TypeScript type expressions.

The mapper is a pure function of the type, the set of user-defined type names
known in the module and the ``strict`` flag. ``strict`` is set at command
boundaries, where user types are referenced through the foreign-type
namespace because the rendered command file imports them from the shared
types index.
"""

from __future__ import annotations

from typing import AbstractSet, List, Optional

from ..syntax.nodes import ArrayType, OpaqueType, PathType, ReferenceType, TupleType, TypeRef
from ..syntax.parser import RustParser

ANY = "any"
VOID = "void"
UNKNOWN = "unknown"
DEFAULT_NAMESPACE = "T"

_STRING_TYPES = {"String", "str", "char"}
_NUMBER_TYPES = {
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "usize",
    "i8",
    "i16",
    "i32",
    "i64",
    "i128",
    "isize",
    "f32",
    "f64",
}
_LIST_TYPES = {"Vec", "VecDeque", "LinkedList", "HashSet", "BTreeSet"}
_MAP_TYPES = {"HashMap", "BTreeMap"}
_TRANSPARENT_TYPES = {"Box", "Rc", "Arc"}
_BRACKETS = {"(": ")", "[": "]", "<": ">", "{": "}"}


def map_type(
    ty: TypeRef,
    known: AbstractSet[str],
    strict: bool,
    namespace: str = DEFAULT_NAMESPACE,
) -> str:
    """Return the TypeScript expression for ``ty``; never raises."""
    if isinstance(ty, PathType):
        return _map_path(ty, known, strict, namespace)
    if isinstance(ty, ReferenceType):
        inner = ty.inner
        if isinstance(inner, PathType) and inner.segments == ("str",):
            return "string"
        return map_type(inner, known, strict, namespace)
    if isinstance(ty, TupleType):
        if ty.is_unit:
            return VOID
        elements = [map_type(element, known, strict, namespace) for element in ty.elements]
        return f"[{', '.join(elements)}]"
    if isinstance(ty, ArrayType):
        return _list_of(map_type(ty.element, known, strict, namespace))
    if isinstance(ty, OpaqueType):
        return ANY
    raise TypeError(f"Unsupported type node: {ty!r}")


def _map_path(ty: PathType, known: AbstractSet[str], strict: bool, namespace: str) -> str:
    name = ty.name
    if not name:
        return ANY
    if name in _STRING_TYPES:
        return "string"
    if name == "bool":
        return "boolean"
    if name in _NUMBER_TYPES:
        return "number"

    first = ty.args[0] if ty.args else None
    if name == "Option":
        if first is None:
            return ANY
        inner = map_type(first, known, strict, namespace)
        return f"{_group(inner)} | undefined"
    if name in _LIST_TYPES:
        if first is None:
            return "any[]"
        return _list_of(map_type(first, known, strict, namespace))
    if name in _MAP_TYPES:
        if len(ty.args) != 2:
            return "Record<any, any>"
        key = map_type(ty.args[0], known, strict, namespace)
        value = map_type(ty.args[1], known, strict, namespace)
        return f"Record<{key}, {value}>"
    if name == "Result":
        # The error arm travels through the IPC error channel, not the payload.
        return map_type(first, known, strict, namespace) if first is not None else ANY
    if name in _TRANSPARENT_TYPES and first is not None:
        return map_type(first, known, strict, namespace)

    if strict or name not in known:
        return f"{namespace}.{name}"
    return name


def _list_of(element: str) -> str:
    # Any union inside the element, even a nested one, is wrapped.
    if " | " in element:
        return f"({element})[]"
    return f"{element}[]"


def _group(expression: str) -> str:
    return f"({expression})" if is_union(expression) else expression


def is_union(expression: str) -> bool:
    """True when ``expression`` is a union at its outermost level."""
    depth = 0
    closers = set(_BRACKETS.values())
    for index, char in enumerate(expression):
        if char in _BRACKETS:
            depth += 1
        elif char in closers:
            depth -= 1
        elif char == "|" and depth == 0 and expression[index - 1 : index + 2] == " | ":
            return True
    return False


def map_type_text(
    text: str,
    known: AbstractSet[str],
    strict: bool,
    parser: RustParser,
    namespace: str = DEFAULT_NAMESPACE,
) -> str:
    """Map a synthesized type string, degrading to ``any`` when unparseable."""
    parsed: Optional[TypeRef] = parser.parse_type(text)
    if parsed is None:
        return ANY
    return map_type(parsed, known, strict, namespace)


def collect_type_names(ty: TypeRef, known: AbstractSet[str]) -> List[str]:
    """Known user-defined type names reachable from ``ty``, depth first."""
    found: List[str] = []
    stack: List[TypeRef] = [ty]
    while stack:
        current = stack.pop()
        children: List[TypeRef] = []
        if isinstance(current, PathType):
            if current.name in known:
                found.append(current.name)
            children = list(current.args)
        elif isinstance(current, ReferenceType):
            children = [current.inner]
        elif isinstance(current, TupleType):
            children = list(current.elements)
        elif isinstance(current, ArrayType):
            children = [current.element]
        stack.extend(reversed(children))
    return found


__all__ = [
    "ANY",
    "DEFAULT_NAMESPACE",
    "UNKNOWN",
    "VOID",
    "collect_type_names",
    "is_union",
    "map_type",
    "map_type_text",
]
