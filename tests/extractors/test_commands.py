"""Tests for tauria.extractors.commands."""

from __future__ import annotations

from typing import List, Optional

from tauria.config import CommandsConfig
from tauria.extractors.aliases import resolve_aliases
from tauria.extractors.commands import is_command, is_unit_result, model_commands
from tauria.extractors.types import index_types, model_types
from tauria.models import CommandDescriptor
from tauria.syntax.nodes import Attribute, PathType, TupleType
from tauria.syntax.parser import RustParser
from tests._fixtures.rust_sources import (
    APP_HANDLE,
    BASIC,
    NESTED,
    RESPONSE,
    STATE,
    STRUCTS,
    WINDOW,
    rust,
)


def _commands(
    rust_parser: RustParser,
    source: str,
    config: Optional[CommandsConfig] = None,
    namespace: str = "T",
) -> List[CommandDescriptor]:
    module = rust_parser.parse_module(source, "commands")
    types = index_types(model_types(module, "commands", namespace))
    return model_commands(module, types, resolve_aliases(module.uses), config, namespace)


def test_only_marked_functions_become_commands(rust_parser: RustParser) -> None:
    commands = _commands(rust_parser, BASIC)

    assert [item.name for item in commands] == ["greet", "add"]
    greet, add = commands
    assert greet.doc == "Greets the user."
    assert greet.args == (("name", "string"),)
    assert greet.invocation_args == (("name", "name"),)
    assert greet.return_type == "string"
    assert add.display_args == ["a: number", "b: number"]
    assert add.invoke_args == ["a: a", "b: b"]
    assert add.return_type == "number"


def test_user_types_use_foreign_namespace(rust_parser: RustParser) -> None:
    commands = _commands(rust_parser, STRUCTS)

    assert [(item.name, item.return_type) for item in commands] == [
        ("get_user_data", "T.User"),
        ("get_product_data", "T.Product"),
    ]
    assert commands[0].doc == "Fetch a user.\n\nReturns dummy data."


def test_context_handles_are_dropped(rust_parser: RustParser) -> None:
    commands = _commands(rust_parser, APP_HANDLE)

    assert [item.args for item in commands] == [
        (),
        (("name", "string"),),
        (("name", "string"),),
        (("name", "string"),),
    ]
    assert {item.return_type for item in commands} == {"string"}


def test_state_parameters_are_dropped_through_aliases(rust_parser: RustParser) -> None:
    commands = _commands(rust_parser, STATE)

    assert [(item.name, item.args, item.return_type) for item in commands] == [
        ("test_state", (), "void"),
        ("test_state3", (("name", "string"),), "void"),
    ]


def test_unit_result_returns_void(rust_parser: RustParser) -> None:
    (command,) = _commands(rust_parser, WINDOW)

    assert command.args == ()
    assert command.return_type == "void"


def test_raw_response_returns_unknown(rust_parser: RustParser) -> None:
    commands = _commands(rust_parser, RESPONSE)

    assert [item.return_type for item in commands] == ["unknown", "unknown"]


def test_non_deserializable_argument_is_dropped(rust_parser: RustParser) -> None:
    (process, store, latest) = _commands(rust_parser, NESTED)

    # Reachability follows type arguments, not the fields of Data.
    assert process.args == (("data", "T.Data"),)
    # AppendEx only derives Serialize.
    assert store.args == (("count", "number"),)
    assert store.invocation_args == (("count", "count"),)
    assert latest.return_type == "T.Data | undefined"


def test_plain_struct_argument_is_dropped_and_unit_return_is_void(rust_parser: RustParser) -> None:
    commands = _commands(
        rust_parser,
        rust(
            """
            struct Point { x: i32, y: i32 }

            #[tauri::command]
            fn plot(point: Point, label: String) -> () {}
            """
        ),
    )

    (plot,) = commands
    assert plot.args == (("label", "string"),)
    assert plot.invocation_args == (("label", "label"),)
    assert plot.return_type == "void"


def test_non_serializable_return_degrades_to_unknown(rust_parser: RustParser) -> None:
    (command,) = _commands(
        rust_parser,
        rust(
            """
            #[derive(Deserialize)]
            struct Query { term: String }

            #[tauri::command]
            fn echo(query: Query) -> Vec<Query> {
                vec![query]
            }
            """
        ),
    )

    assert command.args == (("query", "T.Query"),)
    assert command.return_type == "unknown"


def test_custom_markers_and_namespace(rust_parser: RustParser) -> None:
    commands = _commands(
        rust_parser,
        rust(
            """
            #[derive(Serialize, Deserialize)]
            struct Item { id: u32 }

            #[ipc::handler]
            fn first(item: Item) -> Item { item }

            #[tauri::command]
            fn ignored() {}
            """
        ),
        CommandsConfig(markers=["ipc::handler"]),
        namespace="Api",
    )

    (first,) = commands
    assert first.args == (("item", "Api.Item"),)
    assert first.return_type == "Api.Item"


def test_is_command_and_is_unit_result() -> None:
    assert is_command((Attribute(path="command"),), ["command"])
    assert not is_command((Attribute(path="doc", value="x"),), ["command"])
    assert is_unit_result(PathType(("Result",), (TupleType(), PathType(("String",)))))
    assert not is_unit_result(PathType(("Result",), (PathType(("String",)), PathType(("String",)))))
    assert not is_unit_result(TupleType())
