"""``open-gemdocs tools`` — inspect the MCP tool catalog."""

from __future__ import annotations

import json

import click

from open_gemdocs.cli_commands._output import console, print_tools_table
from open_gemdocs.mcp.catalog import list_tools


@click.group()
def tools() -> None:
    """Inspect the tools served to MCP clients."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output the tools/list payload as JSON.")
def list_cmd(as_json: bool) -> None:
    """List every tool with its arguments (optional ones end with '?')."""
    catalog = list_tools()
    if as_json:
        console.print_json(json.dumps({"tools": [tool.to_wire() for tool in catalog]}))
        return
    print_tools_table(catalog)
