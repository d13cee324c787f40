"""MCP server definition: exposes the tool registry over the MCP protocol."""

from __future__ import annotations

import json
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import BaseModel

from .dispatcher import ToolDispatcher
from .paperless_client import PaperlessClient
from .settings import Settings
from .tools import SERVER_NAME, SERVER_VERSION, build_registry

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Access and manage a Paperless-ngx document archive. Use the tools to search "
    "documents and to manage correspondents, tags, document types, storage paths "
    "and custom fields."
)


def to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    return result


def format_tool_result(result: Any) -> str:
    return json.dumps(to_jsonable(result), default=str)


class PaperlessMcpServer:
    """Owns the Paperless client, the tool registry and the protocol server."""

    def __init__(self, settings: Settings, *, client: PaperlessClient | None = None) -> None:
        logger.debug(
            "Creating MCP server paperless_url=%s transport=%s",
            settings.paperless_base_url,
            settings.mcp_transport,
        )
        self.settings = settings
        self.paperless = client or PaperlessClient(
            base_url=settings.paperless_base_url,
            token=settings.paperless_token,
            timeout_seconds=settings.http_timeout_seconds,
        )
        self.registry = build_registry(self.paperless, settings)
        self.dispatcher = ToolDispatcher(self.registry)
        self.server = self._create_protocol_server()
        logger.info(
            "MCP server created server_name=%s server_version=%s tool_count=%s",
            SERVER_NAME,
            SERVER_VERSION,
            len(self.registry),
        )

    def _create_protocol_server(self) -> Server:
        server: Server = Server(SERVER_NAME, version=SERVER_VERSION, instructions=INSTRUCTIONS)

        @server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [
                types.Tool(
                    name=tool.name,
                    description=tool.description,
                    inputSchema=tool.input_schema,
                )
                for tool in self.registry.list()
            ]

        # Arguments are validated by each tool's input record, not the JSON schema.
        @server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
            result = await self.dispatcher.execute(name, arguments or {})
            return [types.TextContent(type="text", text=format_tool_result(result))]

        return server

    async def run_stdio(self) -> None:
        logger.info("Starting MCP server with stdio transport")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self.paperless.aclose()
