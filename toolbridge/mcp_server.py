"""MCP adapter — exposes the tool registry to external MCP clients over SSE.

GET /sse opens the event stream; clients POST JSON-RPC messages to
/messages/?session_id=... . Tool calls go through the same argument
validation and executor as the chat endpoint. MCP clients pass social
credentials as the createPost ``credentials`` argument.
"""
import logging
from typing import Any, Dict, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from starlette.requests import Request
from starlette.responses import Response

from .errors import BridgeError
from .tools import ToolRegistry, execute_tool, validate_args

logger = logging.getLogger(__name__)

SERVER_NAME = "toolbridge"
MESSAGES_PATH = "/messages/"


def list_tool_specs(registry: ToolRegistry) -> List[types.Tool]:
    return [
        types.Tool(name=d["name"], description=d["description"], inputSchema=d["parameters"])
        for d in registry.list()
    ]


async def call_registered_tool(registry: ToolRegistry, name: str, arguments: Dict[str, Any],
                               timeout: float = 15.0) -> List[types.TextContent]:
    """Validate and run one tool; bridge errors surface as MCP tool errors."""
    tool = registry.require(name)
    args = validate_args(tool, arguments)
    logger.info(f"MCP call: {name}")
    result = await execute_tool(tool, args, timeout=timeout)
    return [types.TextContent(type="text", text=result.text)]


def build_mcp_server(registry: ToolRegistry, tool_timeout: float = 15.0) -> Server:
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return list_tool_specs(registry)

    @server.call_tool()
    async def _call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        try:
            return await call_registered_tool(registry, name, arguments, timeout=tool_timeout)
        except BridgeError as e:
            logger.warning(f"MCP call {name} rejected: {e.category}: {e.detail}")
            raise

    return server


def mount_mcp(app, registry: ToolRegistry, tool_timeout: float = 15.0) -> Server:
    """Attach the SSE endpoints to a Starlette/FastAPI app."""
    server = build_mcp_server(registry, tool_timeout)
    transport = SseServerTransport(MESSAGES_PATH)

    async def handle_sse(request: Request):
        async with transport.connect_sse(request.scope, request.receive, request._send) as (read, write):
            logger.info("MCP client connected")
            await server.run(read, write, server.create_initialization_options())
        logger.info("MCP client disconnected")
        return Response()

    app.add_route("/sse", handle_sse, methods=["GET"])
    app.mount(MESSAGES_PATH, app=transport.handle_post_message)
    return server
