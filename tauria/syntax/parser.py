"""Tree-sitter powered Rust parser lowering source text into the tauria IR."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

import tree_sitter
import tree_sitter_rust

from ..logging import get_logger
from .nodes import (
    ArrayType,
    Attribute,
    Compound,
    Declaration,
    EnumDecl,
    Expr,
    FieldDecl,
    FunctionDecl,
    Literal,
    MethodCall,
    OpaqueType,
    ParamDecl,
    PathExpr,
    PathType,
    ReferenceType,
    SourceModule,
    StructDecl,
    StructLiteral,
    TupleType,
    TypeRef,
    UseDecl,
    UseGlob,
    UseGroup,
    UseName,
    UsePath,
    UseRename,
    UseTree,
    VariantDecl,
)

_LOGGER = get_logger("syntax")

_TRIVIA = {"attribute_item", "line_comment", "block_comment"}

_TYPE_KINDS = {
    "primitive_type",
    "type_identifier",
    "scoped_type_identifier",
    "generic_type",
    "reference_type",
    "tuple_type",
    "unit_type",
    "array_type",
    "pointer_type",
    "function_type",
    "abstract_type",
    "dynamic_type",
    "bounded_type",
    "never_type",
    "macro_invocation",
    "metavariable",
}

_PATH_KINDS = {"identifier", "type_identifier", "field_identifier", "self", "crate", "super"}

_LITERAL_KINDS = {
    "string_literal": "string",
    "raw_string_literal": "string",
    "char_literal": "char",
    "integer_literal": "number",
    "float_literal": "number",
    "boolean_literal": "boolean",
}

_RAW_STRING = re.compile(r'^b?r(#*)"(.*)"\1$', re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}
_SYNTHETIC_ALIAS = "__TauriaSynthesized"


class ModuleParseError(RuntimeError):
    """Raised when a module is not well-formed Rust.

    Carries the module id and the 1-based position of the first syntax error
    so callers can report it without inspecting tree-sitter internals.
    """

    def __init__(self, module_id: str, line: int, column: int, detail: str) -> None:
        self.module_id = module_id
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(f"{module_id}:{line}:{column}: {detail}")


class RustParser:
    """Parses Rust modules and standalone type expressions.

    One instance wraps one ``tree_sitter.Parser`` and is not thread-safe; give
    each worker its own parser.
    """

    def __init__(self) -> None:
        self._language = tree_sitter.Language(tree_sitter_rust.language())
        self._parser = tree_sitter.Parser()
        self._parser.language = self._language

    def parse_module(self, source: str, module_id: str) -> SourceModule:
        """Parse ``source`` and lower its top-level items.

        Raises :class:`ModuleParseError` when the source contains any syntax
        error; no partial module is produced.
        """
        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            line, column, detail = _describe_error(root, source_bytes)
            raise ModuleParseError(module_id, line, column, detail)

        lowering = _Lowering(source_bytes)
        declarations: List[Declaration] = []
        for child in root.named_children:
            declaration = lowering.declaration(child)
            if declaration is not None:
                declarations.append(declaration)
        _LOGGER.debug("Parsed %s: %d declarations", module_id, len(declarations))
        return SourceModule(module_id=module_id, declarations=tuple(declarations))

    def parse_type(self, text: str) -> Optional[TypeRef]:
        """Parse a synthesized type expression; None when it is malformed."""
        if not text.strip():
            return None
        source_bytes = f"type {_SYNTHETIC_ALIAS} = {text};".encode("utf-8")
        tree = self._parser.parse(source_bytes)
        root = tree.root_node
        if root.has_error or root.named_child_count != 1:
            return None
        item = root.named_children[0]
        if item.type != "type_item":
            return None
        type_node = item.child_by_field_name("type")
        if type_node is None:
            return None
        return _Lowering(source_bytes).type_ref(type_node)


def _describe_error(root, source_bytes: bytes) -> Tuple[int, int, str]:  # type: ignore[no-untyped-def]
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point[0], node.start_point[1]
            if node.is_missing:
                detail = f"missing {node.type}"
            else:
                snippet = _text(node, source_bytes).strip().splitlines()
                detail = f"unexpected `{snippet[0][:40]}`" if snippet else "syntax error"
            return row + 1, column + 1, detail
        if node.has_error:
            stack.extend(reversed(node.children))
    return 1, 1, "syntax error"


def _text(node, source_bytes: bytes) -> str:  # type: ignore[no-untyped-def]
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _unquote(literal: str) -> str:
    raw = _RAW_STRING.match(literal)
    if raw:
        return raw.group(2)
    body = literal[1:-1] if len(literal) >= 2 else literal
    if literal.startswith("b"):
        body = literal[2:-1]
    out: List[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            out.append(_SIMPLE_ESCAPES.get(body[index + 1], body[index + 1]))
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def _doc_from_comment(text: str) -> Optional[str]:
    text = text.rstrip("\r\n")
    if text.startswith("///") and not text.startswith("////"):
        return text[3:].strip()
    if (
        text.startswith("/**")
        and not text.startswith("/***")
        and text.endswith("*/")
        and len(text) > 4
    ):
        lines = [re.sub(r"^\s*\*?", "", line).strip() for line in text[3:-2].splitlines()]
        return "\n".join(lines).strip()
    return None


class _Lowering:
    """Converts tree-sitter nodes of one source buffer into IR records."""

    def __init__(self, source_bytes: bytes) -> None:
        self._source = source_bytes

    def text(self, node) -> str:  # type: ignore[no-untyped-def]
        return _text(node, self._source)

    # declarations -----------------------------------------------------------

    def declaration(self, node) -> Optional[Declaration]:  # type: ignore[no-untyped-def]
        kind = node.type
        if kind == "struct_item":
            return self.struct(node)
        if kind == "enum_item":
            return self.enum(node)
        if kind == "function_item":
            return self.function(node)
        if kind == "use_declaration":
            argument = node.child_by_field_name("argument")
            if argument is None:
                return None
            return UseDecl(tree=self.use_tree(argument))
        return None

    def leading_attributes(self, node) -> Tuple[Attribute, ...]:  # type: ignore[no-untyped-def]
        """Attributes and doc comments directly preceding ``node``."""
        collected = []
        sibling = node.prev_sibling
        while sibling is not None and sibling.type in _TRIVIA:
            collected.append(sibling)
            sibling = sibling.prev_sibling
        attributes: List[Attribute] = []
        for item in reversed(collected):
            if item.type == "attribute_item":
                attribute = self.attribute(item)
                if attribute is not None:
                    attributes.append(attribute)
                continue
            doc = _doc_from_comment(self.text(item))
            if doc is not None:
                attributes.append(Attribute(path="doc", value=doc))
        return tuple(attributes)

    def attribute(self, item) -> Optional[Attribute]:  # type: ignore[no-untyped-def]
        attribute_node = next((c for c in item.named_children if c.type == "attribute"), None)
        if attribute_node is None or not attribute_node.named_children:
            return None
        path = "".join(self.text(attribute_node.named_children[0]).split())
        arguments_node = attribute_node.child_by_field_name("arguments")
        value_node = attribute_node.child_by_field_name("value")
        value = None
        if value_node is not None:
            raw = self.text(value_node)
            value = _unquote(raw) if value_node.type in _LITERAL_KINDS else raw
        return Attribute(
            path=path,
            arguments=self.text(arguments_node) if arguments_node is not None else None,
            value=value,
        )

    def struct(self, node) -> StructDecl:  # type: ignore[no-untyped-def]
        name = self.text(node.child_by_field_name("name"))
        body = node.child_by_field_name("body")
        if body is None:
            kind, fields = "unit", ()
        elif body.type == "field_declaration_list":
            kind, fields = "named", self.named_fields(body)
        else:
            kind, fields = "tuple", self.ordered_fields(body)
        return StructDecl(
            name=name,
            attributes=self.leading_attributes(node),
            fields=fields,
            kind=kind,
        )

    def enum(self, node) -> EnumDecl:  # type: ignore[no-untyped-def]
        name = self.text(node.child_by_field_name("name"))
        variants: List[VariantDecl] = []
        body = node.child_by_field_name("body")
        for child in body.named_children if body is not None else ():
            if child.type != "enum_variant":
                continue
            variant_body = child.child_by_field_name("body")
            if variant_body is None:
                kind, fields = "unit", ()
            elif variant_body.type == "field_declaration_list":
                kind, fields = "struct", self.named_fields(variant_body)
            else:
                kind, fields = "tuple", self.ordered_fields(variant_body)
            variants.append(
                VariantDecl(
                    name=self.text(child.child_by_field_name("name")),
                    kind=kind,
                    fields=fields,
                    attributes=self.leading_attributes(child),
                )
            )
        return EnumDecl(
            name=name,
            attributes=self.leading_attributes(node),
            variants=tuple(variants),
        )

    def named_fields(self, body) -> Tuple[FieldDecl, ...]:  # type: ignore[no-untyped-def]
        fields: List[FieldDecl] = []
        for child in body.named_children:
            if child.type != "field_declaration":
                continue
            fields.append(
                FieldDecl(
                    name=self.text(child.child_by_field_name("name")),
                    type=self.type_ref(child.child_by_field_name("type")),
                    attributes=self.leading_attributes(child),
                )
            )
        return tuple(fields)

    def ordered_fields(self, body) -> Tuple[FieldDecl, ...]:  # type: ignore[no-untyped-def]
        return tuple(
            FieldDecl(name=None, type=self.type_ref(type_node))
            for type_node in body.children_by_field_name("type")
        )

    def function(self, node) -> FunctionDecl:  # type: ignore[no-untyped-def]
        params: List[ParamDecl] = []
        parameters = node.child_by_field_name("parameters")
        for child in parameters.named_children if parameters is not None else ():
            # self receivers, variadics and bare types carry no client-visible name
            if child.type != "parameter":
                continue
            params.append(
                ParamDecl(
                    name=self.binding_name(child.child_by_field_name("pattern")),
                    type=self.type_ref(child.child_by_field_name("type")),
                )
            )
        return_node = node.child_by_field_name("return_type")
        body = node.child_by_field_name("body")
        return FunctionDecl(
            name=self.text(node.child_by_field_name("name")),
            attributes=self.leading_attributes(node),
            params=tuple(params),
            return_type=self.type_ref(return_node) if return_node is not None else None,
            body=self.expr(body) if body is not None else None,
        )

    def binding_name(self, pattern) -> Optional[str]:  # type: ignore[no-untyped-def]
        if pattern is None:
            return None
        if pattern.type == "identifier":
            return self.text(pattern)
        if pattern.type == "mut_pattern":
            inner = [c for c in pattern.named_children if c.type != "mutable_specifier"]
            return self.binding_name(inner[0]) if inner else None
        return None

    # use trees --------------------------------------------------------------

    def use_tree(self, node) -> UseTree:  # type: ignore[no-untyped-def]
        kind = node.type
        if kind == "use_as_clause":
            return UseRename(
                path=self.segments(node.child_by_field_name("path")),
                alias=self.text(node.child_by_field_name("alias")),
            )
        if kind == "use_list":
            return UseGroup(items=tuple(self.use_tree(child) for child in self._use_items(node)))
        if kind == "scoped_use_list":
            path = node.child_by_field_name("path")
            prefix = self.segments(path) if path is not None else ()
            return UsePath(prefix=prefix, tree=self.use_tree(node.child_by_field_name("list")))
        if kind == "use_wildcard":
            scope = next((c for c in node.named_children), None)
            return UseGlob(path=self.segments(scope) if scope is not None else ())
        return UseName(path=self.segments(node))

    def _use_items(self, node) -> Iterable:  # type: ignore[no-untyped-def]
        return (c for c in node.named_children if c.type not in {"line_comment", "block_comment"})

    def segments(self, node) -> Tuple[str, ...]:  # type: ignore[no-untyped-def]
        """Path segments of an identifier-like node, generics dropped."""
        if node is None:
            return ()
        kind = node.type
        if kind in _PATH_KINDS or kind == "primitive_type":
            return (self.text(node),)
        if kind in {"scoped_identifier", "scoped_type_identifier"}:
            path = node.child_by_field_name("path")
            name = node.child_by_field_name("name")
            prefix = self.segments(path) if path is not None else ()
            return prefix + ((self.text(name),) if name is not None else ())
        if kind == "generic_type":
            return self.segments(node.child_by_field_name("type"))
        compact = re.sub(r"<.*>", "", "".join(self.text(node).split()))
        return tuple(part for part in compact.split("::") if part)

    # types ------------------------------------------------------------------

    def type_ref(self, node) -> TypeRef:  # type: ignore[no-untyped-def]
        if node is None:
            return OpaqueType(kind="missing", text="")
        kind = node.type
        if kind in {"primitive_type", "type_identifier", "scoped_type_identifier"}:
            return PathType(segments=self.segments(node))
        if kind == "generic_type":
            arguments = node.child_by_field_name("type_arguments")
            args = tuple(
                self.type_ref(child)
                for child in (arguments.named_children if arguments is not None else ())
                if child.type in _TYPE_KINDS
            )
            return PathType(segments=self.segments(node), args=args)
        if kind == "reference_type":
            mutable = any(c.type == "mutable_specifier" for c in node.named_children)
            return ReferenceType(inner=self.type_ref(node.child_by_field_name("type")), mutable=mutable)
        if kind == "unit_type":
            return TupleType()
        if kind == "tuple_type":
            return TupleType(
                elements=tuple(
                    self.type_ref(child) for child in node.named_children if child.type in _TYPE_KINDS
                )
            )
        if kind == "array_type":
            return ArrayType(element=self.type_ref(node.child_by_field_name("element")))
        return OpaqueType(kind=kind, text=self.text(node))

    # expressions ------------------------------------------------------------

    def expr(self, node) -> Expr:  # type: ignore[no-untyped-def]
        kind = node.type
        if kind in _LITERAL_KINDS:
            raw = self.text(node)
            literal_kind = _LITERAL_KINDS[kind]
            value = _unquote(raw) if literal_kind in {"string", "char"} else raw
            return Literal(kind=literal_kind, value=value)
        if kind in {"identifier", "self", "scoped_identifier"}:
            return PathExpr(segments=self.segments(node))
        if kind == "struct_expression":
            body = node.child_by_field_name("body")
            return StructLiteral(
                segments=self.segments(node.child_by_field_name("name")),
                children=self.sub_exprs(body) if body is not None else (),
            )
        if kind == "call_expression":
            call = self.method_call(node)
            if call is not None:
                return call
        return Compound(kind=kind, children=self.sub_exprs(node))

    def method_call(self, node) -> Optional[MethodCall]:  # type: ignore[no-untyped-def]
        function = node.child_by_field_name("function")
        if function is not None and function.type == "generic_function":
            function = function.child_by_field_name("function")
        if function is None or function.type != "field_expression":
            return None
        receiver = function.child_by_field_name("value")
        method = function.child_by_field_name("field")
        arguments = node.child_by_field_name("arguments")
        if receiver is None or method is None:
            return None
        return MethodCall(
            receiver=self.expr(receiver),
            method=self.text(method),
            args=self.sub_exprs(arguments) if arguments is not None else (),
        )

    def sub_exprs(self, node) -> Tuple[Expr, ...]:  # type: ignore[no-untyped-def]
        return tuple(
            self.expr(child)
            for child in node.named_children
            if child.type not in _TRIVIA
        )


__all__ = ["ModuleParseError", "RustParser"]
