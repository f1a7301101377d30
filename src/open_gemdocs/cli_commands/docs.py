"""``open-gemdocs docs`` — print structured documentation for a gem."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING

import click
from rich.markdown import Markdown
from rich.markup import escape

from open_gemdocs.cli_commands._output import console
from open_gemdocs.errors import GemdocsError
from open_gemdocs.yard.models import GemOverview, dump_projection
from open_gemdocs.yard.render import render_object, render_overview

if TYPE_CHECKING:
    from open_gemdocs.config.models import GemdocsConfig
    from open_gemdocs.yard.models import ObjectProjection


@click.command()
@click.argument("gem_name")
@click.argument("path", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output the raw projection as JSON.")
@click.pass_obj
def docs(config: GemdocsConfig, gem_name: str, path: str | None, as_json: bool) -> None:
    """Show documentation for GEM_NAME, or for the class/module/method PATH in it."""
    from open_gemdocs.mcp.server import build_projector

    projector = build_projector(config)

    async def _project() -> GemOverview | ObjectProjection:
        if path:
            return await projector.project_object(gem_name, path)
        return await projector.project_overview(gem_name)

    try:
        projection = asyncio.run(_project())
    except GemdocsError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if as_json:
        console.print_json(json.dumps(dump_projection(projection)))
        return

    if isinstance(projection, GemOverview):
        console.print(Markdown(render_overview(projection)))
    else:
        console.print(Markdown(render_object(projection)))
