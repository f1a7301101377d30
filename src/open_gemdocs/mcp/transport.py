"""HTTP transport for the tool server — one JSON-RPC message per POST.

Protocol-level failures are reported inside a JSON-RPC envelope with HTTP
200; only non-POST requests get a transport-level answer (405, plain text).
On shutdown (SIGINT/SIGTERM handled by uvicorn) the YARD documentation
server is stopped before the process exits.
"""

from __future__ import annotations

import contextlib
import json
import logging
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from open_gemdocs.errors import DocServerError
from open_gemdocs.mcp.models import INTERNAL_ERROR, PARSE_ERROR, JsonRpcResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request

    from open_gemdocs.config.models import McpSettings
    from open_gemdocs.mcp.handlers import RpcHandler
    from open_gemdocs.yard.server import DocServer

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _reject_constant(token: str) -> Any:
    msg = f"Invalid JSON token: {token}"
    raise ValueError(msg)


def _error_body(code: int, message: str, data: Any) -> dict[str, Any]:
    return JsonRpcResponse.failure(None, code, message, data).to_wire()


class MCPHttpServer:
    """Serves an :class:`RpcHandler` over HTTP.

    Example:
        server = MCPHttpServer(handler, settings, doc_server=YardServer())
        server.run()  # Blocks until interrupted
    """

    def __init__(
        self,
        handler: RpcHandler,
        settings: McpSettings,
        *,
        doc_server: DocServer | None = None,
    ) -> None:
        self.handler = handler
        self.settings = settings
        self.doc_server = doc_server
        self.app = self._create_app()

    def _create_app(self) -> Starlette:
        return Starlette(
            routes=[Route("/", endpoint=self._endpoint, methods=_ALL_METHODS)],
            lifespan=self._lifespan,
        )

    @contextlib.asynccontextmanager
    async def _lifespan(self, _app: Starlette) -> AsyncIterator[None]:
        logger.info("MCP server started on port %d", self.settings.port)
        try:
            yield
        finally:
            logger.info("Shutting down MCP server...")
            await self._stop_doc_server()

    async def _stop_doc_server(self) -> None:
        if self.doc_server is None:
            return
        pids = self.doc_server.owning_pids()
        if not pids:
            return
        try:
            await self.doc_server.stop(pids)
        except DocServerError as exc:
            logger.warning("Could not stop Yard server: %s", exc)

    async def _endpoint(self, request: Request) -> Response:
        if request.method != "POST":
            return PlainTextResponse("Method not allowed", status_code=405)

        body = await request.body()
        try:
            message = json.loads(body, parse_constant=_reject_constant)
        except ValueError as exc:
            return JSONResponse(_error_body(PARSE_ERROR, "Parse error", str(exc)))

        try:
            response = await self.handler.handle(message)
            return JSONResponse(response)
        except Exception as exc:
            logger.exception("Internal error while handling request")
            return JSONResponse(_error_body(INTERNAL_ERROR, "Internal error", str(exc)))

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Run the HTTP server (blocks)."""
        import uvicorn

        bind_host = host or self.settings.host
        bind_port = port or self.settings.port

        logger.info("Starting MCP server on %s:%d", bind_host, bind_port)
        uvicorn.run(
            self.app,
            host=bind_host,
            port=bind_port,
            log_level=self.settings.log_level,
        )
