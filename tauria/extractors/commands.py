"""Command modeling: client-visible signatures of ``#[tauri::command]`` functions."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..config import CommandsConfig
from ..logging import get_logger
from ..models import CommandDescriptor, ExtractedType
from ..syntax.nodes import Attribute, FunctionDecl, ParamDecl, PathType, SourceModule, TupleType, TypeRef
from .aliases import AliasMap, ContextTypeMatcher
from .docs import extract_doc
from .type_mapper import DEFAULT_NAMESPACE, UNKNOWN, VOID, collect_type_names, map_type

_LOGGER = get_logger("extractors.commands")

FALLBACK_ARG_NAME = "arg"


def is_command(attributes: Sequence[Attribute], markers: Iterable[str]) -> bool:
    """True when one of ``attributes`` is a command marker."""
    accepted = set(markers)
    return any(attribute.path in accepted for attribute in attributes)


def is_unit_result(ty: TypeRef) -> bool:
    """``Result<(), E>``: a two-armed result whose success arm is the unit tuple."""
    if not isinstance(ty, PathType) or ty.name != "Result" or not ty.args:
        return False
    success = ty.args[0]
    return isinstance(success, TupleType) and success.is_unit


class CommandExtractor:
    """Builds :class:`CommandDescriptor` records for one module at a time."""

    def __init__(
        self,
        config: Optional[CommandsConfig] = None,
        namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        self.config = config or CommandsConfig()
        self.namespace = namespace
        self.matcher = ContextTypeMatcher(
            self.config.context_types,
            self.config.context_type_prefixes,
            self.config.opaque_return_types,
        )

    def extract(
        self,
        module: SourceModule,
        types: Mapping[str, ExtractedType],
        aliases: AliasMap,
    ) -> List[CommandDescriptor]:
        """Descriptors for every marked function in declaration order.

        ``types`` must be the complete type index of the module; an empty
        result is valid when no function carries a marker.
        """
        commands: List[CommandDescriptor] = []
        for function in module.functions:
            if not is_command(function.attributes, self.config.markers):
                continue
            commands.append(self.describe(function, types, aliases))
        _LOGGER.debug("Found %d commands in %s", len(commands), module.module_id)
        return commands

    def describe(
        self,
        function: FunctionDecl,
        types: Mapping[str, ExtractedType],
        aliases: AliasMap,
    ) -> CommandDescriptor:
        args: List[Tuple[str, str]] = []
        invocation: List[Tuple[str, str]] = []
        for param in function.params:
            kept = self._argument(function.name, param, types, aliases)
            if kept is None:
                continue
            name, type_expression = kept
            args.append((name, type_expression))
            invocation.append((name, name))
        return CommandDescriptor(
            name=function.name,
            doc=extract_doc(function.attributes),
            args=tuple(args),
            invocation_args=tuple(invocation),
            return_type=self._return_type(function, types, aliases),
        )

    def _argument(
        self,
        command: str,
        param: ParamDecl,
        types: Mapping[str, ExtractedType],
        aliases: AliasMap,
    ) -> Optional[Tuple[str, str]]:
        name = param.name or FALLBACK_ARG_NAME
        if self.matcher.is_context_type(param.type, aliases):
            _LOGGER.debug("Dropping framework parameter %s of %s", name, command)
            return None
        type_expression = map_type(param.type, types.keys(), True, self.namespace)
        for type_name in collect_type_names(param.type, types.keys()):
            if not types[type_name].deserializable:
                _LOGGER.debug(
                    "Skipping argument %s of %s because nested type %s is not Deserialize",
                    name,
                    command,
                    type_name,
                )
                return None
        return name, type_expression

    def _return_type(
        self,
        function: FunctionDecl,
        types: Mapping[str, ExtractedType],
        aliases: AliasMap,
    ) -> str:
        declared = function.return_type
        if declared is None or is_unit_result(declared):
            return VOID
        if self.matcher.is_opaque_response(declared, aliases):
            return UNKNOWN
        type_expression = map_type(declared, types.keys(), True, self.namespace)
        for type_name in collect_type_names(declared, types.keys()):
            if not types[type_name].serializable:
                _LOGGER.debug(
                    "Return type of %s degraded to unknown because nested type %s is not Serialize",
                    function.name,
                    type_name,
                )
                return UNKNOWN
        return type_expression


def model_commands(
    module: SourceModule,
    types: Mapping[str, ExtractedType],
    aliases: AliasMap,
    config: Optional[CommandsConfig] = None,
    namespace: str = DEFAULT_NAMESPACE,
) -> List[CommandDescriptor]:
    """Shorthand for a one-off :class:`CommandExtractor` run."""
    return CommandExtractor(config, namespace).extract(module, types, aliases)


__all__ = ["CommandExtractor", "FALLBACK_ARG_NAME", "is_command", "is_unit_result", "model_commands"]
