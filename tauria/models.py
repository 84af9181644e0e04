"""Core data models produced by the extraction pipeline.

Every record is frozen and holds tuples so a finished model can be shared
between threads or concatenated across modules without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

UNIT = "unit"
TUPLE = "tuple"
STRUCT = "struct"


@dataclass(frozen=True)
class FieldShape:
    """A named member of a struct or of a struct-like enum variant."""

    name: str
    type: str
    doc: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "doc_comment": self.doc}


@dataclass(frozen=True)
class InterfaceShape:
    """Shape of a struct, rendered as a TypeScript interface."""

    name: str
    doc: str = ""
    fields: Tuple[FieldShape, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "interface",
            "name": self.name,
            "doc_comment": self.doc,
            "fields": [item.to_dict() for item in self.fields],
        }


@dataclass(frozen=True)
class VariantShape:
    """One enum variant.

    ``members`` is empty for unit variants, a tuple of type strings for tuple
    variants and a tuple of :class:`FieldShape` for struct variants.
    """

    name: str
    kind: str
    members: Tuple[Union[str, FieldShape], ...] = ()
    doc: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.kind, "doc_comment": self.doc}
        if self.kind == TUPLE:
            data["members"] = list(self.members)
        elif self.kind == STRUCT:
            data["members"] = [
                member.to_dict() for member in self.members if isinstance(member, FieldShape)
            ]
        return data


@dataclass(frozen=True)
class EnumShape:
    """Shape of an enum with its classified variants."""

    name: str
    doc: str = ""
    variants: Tuple[VariantShape, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "enum",
            "name": self.name,
            "doc_comment": self.doc,
            "variants": [variant.to_dict() for variant in self.variants],
        }


Shape = Union[InterfaceShape, EnumShape]


@dataclass(frozen=True)
class ExtractedType:
    """A user-defined struct or enum with its serde direction flags."""

    name: str
    shape: Shape
    serializable: bool
    deserializable: bool
    origin_module: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ts_interface": self.shape.to_dict(),
            "is_serializable": self.serializable,
            "is_deserializable": self.deserializable,
            "original_file_name": self.origin_module,
        }


@dataclass(frozen=True)
class CommandDescriptor:
    """Client-visible signature of one command.

    ``args`` and ``invocation_args`` always have the same length and are
    aligned by index.
    """

    name: str
    doc: str
    args: Tuple[Tuple[str, str], ...]
    invocation_args: Tuple[Tuple[str, str], ...]
    return_type: str

    @property
    def display_args(self) -> List[str]:
        return [f"{name}: {type_}" for name, type_ in self.args]

    @property
    def invoke_args(self) -> List[str]:
        return [f"{key}: {value}" for key, value in self.invocation_args]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "doc_comment": self.doc,
            "args": self.display_args,
            "invoke_args": self.invoke_args,
            "return_type": self.return_type,
        }


@dataclass(frozen=True)
class GlobalEvent:
    """An event broadcast to every window."""

    event_name: str
    payload_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"event_name": self.event_name, "payload_type": self.payload_type}


@dataclass(frozen=True)
class WindowEvent:
    """An event addressed to one named window."""

    window_name: str
    event_name: str
    payload_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window_name": self.window_name,
            "event_name": self.event_name,
            "payload_type": self.payload_type,
        }


@dataclass(frozen=True)
class ModuleModel:
    """Everything extracted from one Rust module."""

    module_id: str
    types: Tuple[ExtractedType, ...] = ()
    commands: Tuple[CommandDescriptor, ...] = ()
    global_events: Tuple[GlobalEvent, ...] = ()
    window_events: Tuple[WindowEvent, ...] = ()

    @property
    def has_commands(self) -> bool:
        return bool(self.commands)

    def find_type(self, name: str) -> Optional[ExtractedType]:
        for extracted in self.types:
            if extracted.name == name:
                return extracted
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_id": self.module_id,
            "types": [item.to_dict() for item in self.types],
            "commands": [item.to_dict() for item in self.commands],
            "global_events": [item.to_dict() for item in self.global_events],
            "window_events": [item.to_dict() for item in self.window_events],
        }


@dataclass(frozen=True)
class ProjectModel:
    """Concatenation of several module models from one generation run."""

    modules: Tuple[ModuleModel, ...] = ()
    types: Tuple[ExtractedType, ...] = ()
    global_events: Tuple[GlobalEvent, ...] = ()
    window_events: Tuple[WindowEvent, ...] = ()

    @classmethod
    def from_modules(cls, modules: Tuple[ModuleModel, ...]) -> "ProjectModel":
        types = sorted(
            (item for module in modules for item in module.types),
            key=lambda item: (item.name, item.origin_module),
        )
        return cls(
            modules=modules,
            types=tuple(types),
            global_events=tuple(event for module in modules for event in module.global_events),
            window_events=tuple(event for module in modules for event in module.window_events),
        )

    @property
    def command_modules(self) -> List[str]:
        """Sorted ids of modules that expose at least one command."""
        return sorted(module.module_id for module in self.modules if module.has_commands)

    @property
    def window_names(self) -> List[str]:
        return sorted({event.window_name for event in self.window_events})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modules": [module.to_dict() for module in self.modules],
            "types": [item.to_dict() for item in self.types],
            "command_modules": self.command_modules,
            "global_events": [item.to_dict() for item in self.global_events],
            "window_events": [item.to_dict() for item in self.window_events],
        }


__all__ = [
    "CommandDescriptor",
    "EnumShape",
    "ExtractedType",
    "FieldShape",
    "GlobalEvent",
    "InterfaceShape",
    "ModuleModel",
    "ProjectModel",
    "Shape",
    "STRUCT",
    "TUPLE",
    "UNIT",
    "VariantShape",
    "WindowEvent",
]
