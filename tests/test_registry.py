from __future__ import annotations

import pytest

from mcp_paperless.arguments import NoArgs
from mcp_paperless.errors import DuplicateToolError, ToolNotFoundError
from mcp_paperless.registry import Tool, ToolRegistry

RESOURCE_TOOLS = [
    f"{verb}_{name}"
    for name in ("correspondent", "document_type", "tag", "storage_path", "custom_field")
    for verb in ("get", "create", "update", "delete")
] + [
    f"list_{name}"
    for name in ("correspondents", "document_types", "tags", "storage_paths", "custom_fields")
]
DOCUMENT_TOOLS = [
    "list_documents",
    "search_documents",
    "find_similar_documents",
    "get_document",
    "get_document_content",
    "upload_document",
    "update_document",
    "delete_document",
    "bulk_edit_documents",
    "list_document_notes",
    "add_document_note",
]


async def _noop(_: NoArgs) -> dict:
    return {}


def _tool(name: str) -> Tool:
    return Tool(name=name, description="d", arguments=NoArgs, handler=_noop)


def test_register_and_lookup() -> None:
    registry = ToolRegistry()
    tool = _tool("a")
    registry.register(tool)
    assert registry.lookup("a") is tool
    assert "a" in registry
    assert len(registry) == 1
    assert registry.list() == [tool]


def test_lookup_unknown_raises() -> None:
    with pytest.raises(ToolNotFoundError, match="tool not found: missing"):
        ToolRegistry().lookup("missing")


def test_duplicate_registration_is_an_error() -> None:
    registry = ToolRegistry()
    first = _tool("a")
    registry.register(first)
    with pytest.raises(DuplicateToolError):
        registry.register(_tool("a"))
    assert registry.lookup("a") is first


def test_sealed_registry_rejects_registration() -> None:
    registry = ToolRegistry()
    registry.seal()
    with pytest.raises(RuntimeError):
        registry.register(_tool("late"))


def test_server_registers_every_tool(server) -> None:
    names = set(server.registry.names())
    assert {"ping", "server_info", *DOCUMENT_TOOLS, *RESOURCE_TOOLS} == names
    assert server.registry.sealed


def test_input_schemas_are_objects(server) -> None:
    for tool in server.registry.list():
        schema = tool.input_schema
        assert schema["type"] == "object", tool.name
        assert isinstance(schema["properties"], dict)
        assert isinstance(schema["required"], list)
        assert tool.description


def test_input_schema_required_fields(server) -> None:
    assert server.registry.lookup("search_documents").input_schema["required"] == ["query"]
    assert server.registry.lookup("get_tag").input_schema["required"] == ["tag_id"]
    assert sorted(server.registry.lookup("create_storage_path").input_schema["required"]) == [
        "name",
        "path",
    ]
    bulk = server.registry.lookup("bulk_edit_documents").input_schema
    assert bulk["required"] == ["document_ids"]
    assert bulk["properties"]["document_ids"]["type"] == "array"
