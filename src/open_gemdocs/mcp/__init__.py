"""MCP tool server — JSON-RPC handling, tool catalog and dispatch over HTTP."""

from open_gemdocs.mcp.catalog import ToolName, list_tools
from open_gemdocs.mcp.dispatcher import ToolDispatcher
from open_gemdocs.mcp.handlers import RpcHandler, RpcMethod
from open_gemdocs.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolDefinition,
    ToolResultEnvelope,
)
from open_gemdocs.mcp.server import build_dispatcher, build_projector, build_server
from open_gemdocs.mcp.transport import MCPHttpServer

__all__ = [
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPHttpServer",
    "RpcHandler",
    "RpcMethod",
    "TextContent",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolName",
    "ToolResultEnvelope",
    "build_dispatcher",
    "build_projector",
    "build_server",
    "list_tools",
]
