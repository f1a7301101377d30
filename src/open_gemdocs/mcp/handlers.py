"""RpcHandler — the JSON-RPC 2.0 method contract of the tool server."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from open_gemdocs import __version__
from open_gemdocs.mcp.models import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    JsonRpcRequest,
    JsonRpcResponse,
)
from open_gemdocs.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from open_gemdocs.mcp.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "open_gemdocs_mcp"


class RpcMethod(str, Enum):
    INITIALIZE = "initialize"
    INITIALIZED = "initialized"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    PING = "ping"


def _is_notification(method: str) -> bool:
    return method == RpcMethod.INITIALIZED.value or method.startswith("notifications/")


class RpcHandler:
    """Maps one decoded JSON-RPC message to at most one response.

    Notifications (``initialized`` and ``notifications/*``) produce ``None``;
    every other message produces a response echoing the request ``id``.
    """

    def __init__(self, dispatcher: ToolDispatcher) -> None:
        self._dispatcher = dispatcher
        self._methods: dict[RpcMethod, Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse]]] = {
            RpcMethod.INITIALIZE: self._initialize,
            RpcMethod.TOOLS_LIST: self._tools_list,
            RpcMethod.TOOLS_CALL: self._tools_call,
            RpcMethod.PING: self._ping,
        }

    async def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Handle a decoded JSON-RPC message and return the wire response."""
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError as exc:
            raw_id = message.get("id") if isinstance(message, dict) else None
            logger.warning("Invalid request: %s", exc)
            return JsonRpcResponse.failure(
                raw_id, INTERNAL_ERROR, "Invalid request", str(exc)
            ).to_wire()

        with _tracer.start_as_current_span("gemdocs.rpc.handle") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)

            if _is_notification(request.method):
                logger.debug("Notification %s", request.method)
                return None

            try:
                method = RpcMethod(request.method)
            except ValueError:
                response = JsonRpcResponse.failure(
                    request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
                )
            else:
                response = await self._methods[method](request)

            return response.to_wire()

    async def _initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(
            request.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {
                    "tools": {},
                    "resources": {},
                },
                "serverInfo": {
                    "name": SERVER_NAME,
                    "version": __version__,
                },
            },
        )

    async def _tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        tools = [tool.to_wire() for tool in self._dispatcher.all_tools()]
        return JsonRpcResponse.success(request.id, {"tools": tools})

    async def _tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        params = request.params or {}
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        try:
            envelope = await self._dispatcher.call(tool_name, arguments)
        except Exception as exc:
            logger.exception("Tool dispatch failed for %s", tool_name)
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, f"Tool execution error: {exc}")

        return JsonRpcResponse.success(request.id, envelope.to_wire())

    async def _ping(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, {})
