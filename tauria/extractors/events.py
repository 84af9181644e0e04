"""Event modeling: ``emit`` / ``emit_to`` calls found in function bodies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from ..config import KEEP_ALL, LAST_WRITE_WINS, EventsConfig
from ..logging import get_logger
from ..models import ExtractedType, GlobalEvent, WindowEvent
from ..syntax.nodes import (
    Expr,
    FunctionDecl,
    Literal,
    MethodCall,
    PathExpr,
    SourceModule,
    StructLiteral,
    TypeRef,
    expr_children,
)
from ..syntax.parser import RustParser
from .aliases import AliasMap
from .type_mapper import ANY, DEFAULT_NAMESPACE, VOID, map_type, map_type_text

_LOGGER = get_logger("extractors.events")

_LITERAL_TYPES = {"string": "string", "number": "number", "boolean": "boolean"}

Event = Union[GlobalEvent, WindowEvent]
_E = TypeVar("_E", GlobalEvent, WindowEvent)


@dataclass(frozen=True)
class EmissionScope:
    """What the traversal of one function body needs to know."""

    params: Mapping[str, TypeRef]
    receivers: AbstractSet[str]
    known: AbstractSet[str]
    broadcast_method: str
    scoped_method: str
    namespace: str = DEFAULT_NAMESPACE


def find_emissions(
    body: Expr, scope: EmissionScope, parser: RustParser
) -> Tuple[List[GlobalEvent], List[WindowEvent]]:
    """Depth-first, pre-order walk of ``body`` collecting emissions in source order.

    Pure function of its inputs: the result only depends on the body and the
    scope, never on previous calls.
    """
    global_events: List[GlobalEvent] = []
    window_events: List[WindowEvent] = []
    stack: List[Expr] = [body]
    while stack:
        node = stack.pop()
        if isinstance(node, MethodCall) and _is_handle(node.receiver, scope):
            if node.method == scope.broadcast_method:
                event = _global_event(node, scope, parser)
                if event is not None:
                    global_events.append(event)
            elif node.method == scope.scoped_method:
                window_event = _window_event(node, scope, parser)
                if window_event is not None:
                    window_events.append(window_event)
        stack.extend(reversed(expr_children(node)))
    return global_events, window_events


def _is_handle(receiver: Expr, scope: EmissionScope) -> bool:
    return isinstance(receiver, PathExpr) and receiver.ident in scope.receivers


def _string_literal(expr: Optional[Expr]) -> Optional[str]:
    if isinstance(expr, Literal) and expr.kind == "string":
        return expr.value
    return None


def _global_event(call: MethodCall, scope: EmissionScope, parser: RustParser) -> Optional[GlobalEvent]:
    event_name = _string_literal(call.args[0] if call.args else None)
    if event_name is None:
        _LOGGER.debug("Skipping %s call with a non-literal event name", call.method)
        return None
    payload = infer_payload_type(call.args[1] if len(call.args) > 1 else None, scope, parser)
    return GlobalEvent(event_name=event_name, payload_type=payload)


def _window_event(call: MethodCall, scope: EmissionScope, parser: RustParser) -> Optional[WindowEvent]:
    window_name = _string_literal(call.args[0] if call.args else None)
    event_name = _string_literal(call.args[1] if len(call.args) > 1 else None)
    if window_name is None or event_name is None:
        _LOGGER.debug("Skipping %s call with a non-literal window or event name", call.method)
        return None
    payload = infer_payload_type(call.args[2] if len(call.args) > 2 else None, scope, parser)
    return WindowEvent(window_name=window_name, event_name=event_name, payload_type=payload)


def infer_payload_type(expr: Optional[Expr], scope: EmissionScope, parser: RustParser) -> str:
    """Best-effort TypeScript type of an emitted payload expression."""
    if expr is None:
        return VOID
    if isinstance(expr, PathExpr):
        declared = scope.params.get(expr.ident) if expr.ident else None
        if declared is None:
            return ANY
        return map_type(declared, scope.known, True, scope.namespace)
    if isinstance(expr, StructLiteral):
        if not expr.segments:
            return ANY
        return map_type_text(expr.segments[-1], scope.known, True, parser, scope.namespace)
    if isinstance(expr, Literal):
        return _LITERAL_TYPES.get(expr.kind, ANY)
    return ANY


def dedupe_events(events: Sequence[_E], policy: str) -> List[_E]:
    """Apply the event deduplication policy.

    ``keep_all`` returns every emission in source order. ``last_write_wins``
    keeps one entry per event key at the position of its first emission with
    the payload of its last one.
    """
    if policy == KEEP_ALL:
        return list(events)
    if policy != LAST_WRITE_WINS:
        raise ValueError(f"Unknown event policy: {policy}")
    merged: Dict[Tuple[str, ...], _E] = {}
    for event in events:
        merged[_event_key(event)] = event
    return list(merged.values())


def _event_key(event: Event) -> Tuple[str, ...]:
    if isinstance(event, WindowEvent):
        return (event.window_name, event.event_name)
    return (event.event_name,)


class EventExtractor:
    """Collects global and window events across a module's functions."""

    def __init__(
        self,
        parser: RustParser,
        config: Optional[EventsConfig] = None,
        namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        self.parser = parser
        self.config = config or EventsConfig()
        self.namespace = namespace
        self._handle_types = frozenset(self.config.handle_types)

    def extract(
        self,
        module: SourceModule,
        types: Mapping[str, ExtractedType],
        aliases: AliasMap,
    ) -> Tuple[List[GlobalEvent], List[WindowEvent]]:
        global_events: List[GlobalEvent] = []
        window_events: List[WindowEvent] = []
        for function in module.functions:
            if function.body is None:
                continue
            found_global, found_window = find_emissions(
                function.body, self.scope_for(function, types, aliases), self.parser
            )
            global_events.extend(found_global)
            window_events.extend(found_window)
        policy = self.config.policy
        global_events = dedupe_events(global_events, policy)
        window_events = dedupe_events(window_events, policy)
        _LOGGER.debug(
            "Found %d global and %d window events in %s",
            len(global_events),
            len(window_events),
            module.module_id,
        )
        return global_events, window_events

    def scope_for(
        self,
        function: FunctionDecl,
        types: Mapping[str, ExtractedType],
        aliases: AliasMap,
    ) -> EmissionScope:
        """Emission scope for ``function``.

        Receivers are the conventional handle names plus every parameter whose
        declared type resolves to a handle type.
        """
        params: Dict[str, TypeRef] = {}
        receivers = set(self.config.receivers)
        for param in function.params:
            if param.name is None:
                continue
            params[param.name] = param.type
            if aliases.canonical_type(param.type) in self._handle_types:
                receivers.add(param.name)
        return EmissionScope(
            params=params,
            receivers=frozenset(receivers),
            known=frozenset(types.keys()),
            broadcast_method=self.config.broadcast_method,
            scoped_method=self.config.scoped_method,
            namespace=self.namespace,
        )


def model_events(
    module: SourceModule,
    types: Mapping[str, ExtractedType],
    aliases: AliasMap,
    parser: RustParser,
    config: Optional[EventsConfig] = None,
    namespace: str = DEFAULT_NAMESPACE,
) -> Tuple[List[GlobalEvent], List[WindowEvent]]:
    """Global and window events of ``module`` after deduplication."""
    return EventExtractor(parser, config, namespace).extract(module, types, aliases)


__all__ = [
    "EmissionScope",
    "EventExtractor",
    "dedupe_events",
    "find_emissions",
    "infer_payload_type",
    "model_events",
]
