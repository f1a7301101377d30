"""``open-gemdocs yard`` — manage the local YARD documentation server."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from open_gemdocs.cli_commands._output import print_envelope
from open_gemdocs.mcp.catalog import ToolName

if TYPE_CHECKING:
    from open_gemdocs.config.models import GemdocsConfig


def _run_tool(config: GemdocsConfig, tool: ToolName) -> None:
    from open_gemdocs.mcp.server import build_dispatcher

    dispatcher = build_dispatcher(config)
    print_envelope(asyncio.run(dispatcher.call(tool.value, {})))


@click.group()
def yard() -> None:
    """Start, stop and inspect the YARD server."""


@yard.command("start")
@click.pass_obj
def start(config: GemdocsConfig) -> None:
    """Start the YARD server for the current directory."""
    _run_tool(config, ToolName.START_YARD_SERVER)


@yard.command("stop")
@click.pass_obj
def stop(config: GemdocsConfig) -> None:
    """Stop the YARD server."""
    _run_tool(config, ToolName.STOP_YARD_SERVER)


@yard.command("status")
@click.pass_obj
def status(config: GemdocsConfig) -> None:
    """Show whether the YARD server is running and where from."""
    _run_tool(config, ToolName.GET_YARD_SERVER_STATUS)
