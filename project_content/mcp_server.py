"""Model Context Protocol transport for the project content gateway."""

from __future__ import annotations

from typing import List

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .errors import ProtocolMisuseError
from .gateway import ToolGateway
from .logging import get_logger

SERVER_NAME = "project-content-server"

logger = get_logger("mcp")


class ProjectContentServer:
    """Binds a ``ToolGateway`` to an MCP server and runs it over stdio."""

    def __init__(self, gateway: ToolGateway) -> None:
        self.gateway = gateway
        self.server: Server = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    def _register_handlers(self) -> None:
        gateway = self.gateway

        @self.server.list_resources()
        async def list_resources() -> List[types.Resource]:
            return list(gateway.list_resources())

        @self.server.list_tools()
        async def list_tools() -> List[types.Tool]:
            return [
                types.Tool(
                    name=tool.name,
                    description=tool.description,
                    inputSchema=tool.input_schema,
                )
                for tool in gateway.list_tools()
            ]

        self.server.request_handlers[types.ReadResourceRequest] = self.handle_read_resource

        # Bypasses the SDK call_tool wrapper; the gateway owns validation.
        self.server.request_handlers[types.CallToolRequest] = self.handle_call_tool

    async def handle_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        logger.info("call_tool: %s", name)
        try:
            response = await self.gateway.call(name, request.params.arguments)
        except ProtocolMisuseError as exc:
            logger.error("%s", exc)
            raise McpError(
                types.ErrorData(code=types.METHOD_NOT_FOUND, message=str(exc))
            ) from exc

        return types.ServerResult(
            types.CallToolResult(
                content=[types.TextContent(type="text", text=response.text)],
                isError=response.is_error,
            )
        )

    async def handle_read_resource(
        self, request: types.ReadResourceRequest
    ) -> types.ServerResult:
        logger.debug("read_resource: %s", request.params.uri)
        return types.ServerResult(types.ReadResourceResult(contents=[]))

    async def run(self) -> None:
        """Serve requests over stdio until the client disconnects."""
        logger.info("%s running on stdio", SERVER_NAME)
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            logger.info("%s stopped", SERVER_NAME)


__all__ = ["ProjectContentServer", "SERVER_NAME"]
