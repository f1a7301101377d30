"""``open-gemdocs search`` and ``open-gemdocs info`` — installed gem queries."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from open_gemdocs.cli_commands._output import print_envelope
from open_gemdocs.mcp.catalog import ToolName

if TYPE_CHECKING:
    from open_gemdocs.config.models import GemdocsConfig


@click.command()
@click.argument("query")
@click.pass_obj
def search(config: GemdocsConfig, query: str) -> None:
    """List installed gems whose name contains QUERY."""
    from open_gemdocs.mcp.server import build_dispatcher

    dispatcher = build_dispatcher(config)
    print_envelope(asyncio.run(dispatcher.call(ToolName.SEARCH_GEMS.value, {"query": query})))


@click.command()
@click.argument("gem_name")
@click.pass_obj
def info(config: GemdocsConfig, gem_name: str) -> None:
    """Show the specification of the installed gem GEM_NAME."""
    from open_gemdocs.mcp.server import build_dispatcher

    dispatcher = build_dispatcher(config)
    print_envelope(
        asyncio.run(dispatcher.call(ToolName.GET_GEM_INFO.value, {"gem_name": gem_name})),
        markdown=True,
    )
