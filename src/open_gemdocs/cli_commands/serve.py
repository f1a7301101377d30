"""``open-gemdocs serve`` — run the MCP tool server over HTTP."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from open_gemdocs.cli_commands._output import console

if TYPE_CHECKING:
    from open_gemdocs.config.models import GemdocsConfig


@click.command()
@click.option("--host", default=None, help="Interface to bind (default from config: 127.0.0.1).")
@click.option("--port", "-p", type=int, default=None, help="Port to listen on (default from config: 6789).")
@click.pass_obj
def serve(config: GemdocsConfig, host: str | None, port: int | None) -> None:
    """Serve gem documentation tools to MCP clients via JSON-RPC over HTTP."""
    from open_gemdocs.mcp.server import build_server

    if host:
        config.mcp.host = host
    if port:
        config.mcp.port = port

    server = build_server(config)
    console.print(f"MCP server listening on http://{config.mcp.host}:{config.mcp.port}/")
    server.run()
