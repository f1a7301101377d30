"""open-gemdocs CLI entrypoint."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from open_gemdocs import __version__
from open_gemdocs.cli_commands._output import console, err_console
from open_gemdocs.config import load_config
from open_gemdocs.errors import ConfigError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="open-gemdocs")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (defaults to $OPEN_GEMDOCS_CONFIG or ~/.config/open_gemdocs/config.yaml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """open-gemdocs — browse and serve Ruby gem documentation."""
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    if config.telemetry.enabled:
        from open_gemdocs.utils.telemetry import configure_telemetry

        configure_telemetry(config.telemetry)

    ctx.obj = config


# Register subcommands
from open_gemdocs.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
