"""Shared CLI output formatters."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from open_gemdocs.mcp.models import ToolDefinition, ToolResultEnvelope

console = Console()
err_console = Console(stderr=True)


def print_envelope(envelope: ToolResultEnvelope, *, markdown: bool = False) -> None:
    """Print a tool result; an error result exits with status 1."""
    if envelope.is_error:
        console.print(f"[red]Error:[/red] {escape(envelope.text)}")
        sys.exit(1)

    if markdown:
        console.print(Markdown(envelope.text))
    else:
        console.print(envelope.text, markup=False, highlight=False, soft_wrap=True)


def print_tools_table(tools: list[ToolDefinition]) -> None:
    """Pretty-print the tool catalog as a table."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Arguments")
    table.add_column("Description")

    for tool in tools:
        required = set(tool.required)
        arguments = [
            name if name in required else f"{name}?"
            for name in tool.input_schema.get("properties", {})
        ]
        table.add_row(
            tool.name,
            ", ".join(arguments) or "-",
            _truncate(tool.description),
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
