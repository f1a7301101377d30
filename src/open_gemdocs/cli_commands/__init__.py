"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from open_gemdocs.cli_commands.docs import docs
    from open_gemdocs.cli_commands.gems import info, search
    from open_gemdocs.cli_commands.browse import open_cmd
    from open_gemdocs.cli_commands.serve import serve
    from open_gemdocs.cli_commands.tools import tools
    from open_gemdocs.cli_commands.yard import yard

    cli.add_command(serve)
    cli.add_command(yard)
    cli.add_command(docs)
    cli.add_command(search)
    cli.add_command(info)
    cli.add_command(tools)
    cli.add_command(open_cmd)
