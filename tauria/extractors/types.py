"""Struct and enum modeling."""

from __future__ import annotations

from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Sequence, Tuple, Union

from ..logging import get_logger
from ..models import (
    STRUCT,
    TUPLE,
    UNIT,
    EnumShape,
    ExtractedType,
    FieldShape,
    InterfaceShape,
    VariantShape,
)
from ..syntax.nodes import Attribute, EnumDecl, FieldDecl, SourceModule, StructDecl
from .docs import extract_doc
from .type_mapper import DEFAULT_NAMESPACE, map_type

_LOGGER = get_logger("extractors.types")

SERIALIZE = "Serialize"
DESERIALIZE = "Deserialize"


def declared_type_names(module: SourceModule) -> FrozenSet[str]:
    """Names of every struct and enum declared at the top of ``module``."""
    return frozenset(item.name for item in module.structs + module.enums)


def model_types(
    module: SourceModule,
    module_id: str,
    namespace: str = DEFAULT_NAMESPACE,
) -> List[ExtractedType]:
    """Model every struct and enum of ``module`` in declaration order.

    All names are collected before any field is mapped, so a field may refer
    to a type declared further down without being treated as foreign.
    """
    known = declared_type_names(module)
    extracted: List[ExtractedType] = []
    for declaration in module.declarations:
        if isinstance(declaration, StructDecl):
            shape = InterfaceShape(
                name=declaration.name,
                doc=extract_doc(declaration.attributes),
                fields=_field_shapes(declaration.fields, known, namespace),
            )
        elif isinstance(declaration, EnumDecl):
            shape = _enum_shape(declaration, known, namespace)
        else:
            continue
        extracted.append(
            ExtractedType(
                name=declaration.name,
                shape=shape,
                serializable=has_derive(declaration.attributes, SERIALIZE),
                deserializable=has_derive(declaration.attributes, DESERIALIZE),
                origin_module=module_id,
            )
        )
    _LOGGER.debug("Modeled %d types in %s", len(extracted), module_id)
    return extracted


def index_types(types: Iterable[ExtractedType]) -> Dict[str, ExtractedType]:
    """Name lookup over modeled types."""
    return {item.name: item for item in types}


def has_derive(attributes: Sequence[Attribute], trait: str) -> bool:
    """True when a ``#[derive(...)]`` attribute lists ``trait``.

    Paths are compared by their last segment so ``serde::Serialize`` counts.
    """
    for attribute in attributes:
        if attribute.path != "derive" or not attribute.arguments:
            continue
        if trait in derived_traits(attribute.arguments):
            return True
    return False


def derived_traits(arguments: str) -> List[str]:
    inner = arguments.strip()
    if inner[:1] in "([{" and inner[-1:] in ")]}":
        inner = inner[1:-1]
    traits: List[str] = []
    for part in inner.split(","):
        name = "".join(part.split()).split("::")[-1]
        if name:
            traits.append(name)
    return traits


def _field_shapes(
    fields: Sequence[FieldDecl], known: AbstractSet[str], namespace: str
) -> Tuple[FieldShape, ...]:
    shapes: List[FieldShape] = []
    for item in fields:
        if item.name is None:
            continue
        shapes.append(
            FieldShape(
                name=item.name,
                type=map_type(item.type, known, False, namespace),
                doc=extract_doc(item.attributes),
            )
        )
    return tuple(shapes)


def _enum_shape(declaration: EnumDecl, known: AbstractSet[str], namespace: str) -> EnumShape:
    variants: List[VariantShape] = []
    for variant in declaration.variants:
        doc = extract_doc(variant.attributes)
        members: Tuple[Union[str, FieldShape], ...] = ()
        if variant.kind == "tuple":
            kind = TUPLE
            members = tuple(map_type(item.type, known, False, namespace) for item in variant.fields)
        elif variant.kind == "struct":
            kind = STRUCT
            members = _field_shapes(variant.fields, known, namespace)
        else:
            kind = UNIT
        variants.append(VariantShape(name=variant.name, kind=kind, members=members, doc=doc))
    return EnumShape(
        name=declaration.name,
        doc=extract_doc(declaration.attributes),
        variants=tuple(variants),
    )


__all__ = [
    "DESERIALIZE",
    "SERIALIZE",
    "declared_type_names",
    "derived_traits",
    "has_derive",
    "index_types",
    "model_types",
]
