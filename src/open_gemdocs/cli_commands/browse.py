"""``open-gemdocs open`` — open gem documentation in the browser."""

from __future__ import annotations

import asyncio
import sys
import webbrowser
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.markup import escape

from open_gemdocs.cli_commands._output import console
from open_gemdocs.errors import DocServerError, GemdocsError

if TYPE_CHECKING:
    from open_gemdocs.config.models import GemdocsConfig


@click.command("open")
@click.argument("gem_name")
@click.option("--version", "version", default=None, help="Open the docs of this gem version.")
@click.option("--latest", is_flag=True, help="Open the latest version, ignoring Gemfile.lock.")
@click.option("--local", is_flag=True, help="Use the local YARD server instead of gemdocs.org.")
@click.pass_obj
def open_cmd(config: GemdocsConfig, gem_name: str, version: str | None, latest: bool, local: bool) -> None:
    """Open the documentation of GEM_NAME in the default browser.

    Without --version the version comes from Gemfile.lock (when present),
    otherwise the latest published version is used.
    """
    if version and latest:
        raise click.UsageError("--version and --latest are mutually exclusive")

    try:
        url = asyncio.run(_open_local(config, gem_name) if local else _open_hosted(gem_name, version, latest))
    except GemdocsError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    console.print(f"Opened {url}", markup=False, highlight=False, soft_wrap=True)


async def _open_hosted(gem_name: str, version: str | None, latest: bool) -> str:
    from open_gemdocs.browser import GemdocsBrowser

    return await GemdocsBrowser(gem_name, version=version, use_latest=latest).open()


async def _open_local(config: GemdocsConfig, gem_name: str) -> str:
    from open_gemdocs.yard.server import YardServer

    server = YardServer(config.yard)
    if not await server.is_listening():
        await server.start(Path.cwd())
        if not await server.wait_until_listening():
            raise DocServerError("Failed to start Yard server")

    url = server.docs_url(gem_name)
    webbrowser.open(url)
    return url
