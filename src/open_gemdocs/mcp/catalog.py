"""The fixed tool catalog served by ``tools/list``."""

from __future__ import annotations

from enum import Enum
from typing import Any

from open_gemdocs.mcp.models import ToolDefinition


class ToolName(str, Enum):
    """Every tool the server can execute."""

    SEARCH_GEMS = "search_gems"
    GET_GEM_INFO = "get_gem_info"
    START_YARD_SERVER = "start_yard_server"
    STOP_YARD_SERVER = "stop_yard_server"
    GET_YARD_SERVER_STATUS = "get_yard_server_status"
    GET_GEM_DOCUMENTATION_URL = "get_gem_documentation_url"
    FETCH_GEM_DOCS = "fetch_gem_docs"


def _schema(properties: dict[str, dict[str, str]] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name=ToolName.SEARCH_GEMS.value,
        description="Search for installed Ruby gems",
        input_schema=_schema(
            {"query": _string("Search query for gem names (partial match supported)")},
            ["query"],
        ),
    ),
    ToolDefinition(
        name=ToolName.GET_GEM_INFO.value,
        description="Get information about a specific gem including version and summary",
        input_schema=_schema({"gem_name": _string("Exact name of the gem")}, ["gem_name"]),
    ),
    ToolDefinition(
        name=ToolName.START_YARD_SERVER.value,
        description="Start the Yard documentation server",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name=ToolName.STOP_YARD_SERVER.value,
        description="Stop the Yard documentation server",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name=ToolName.GET_YARD_SERVER_STATUS.value,
        description="Check if the Yard documentation server is running",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name=ToolName.GET_GEM_DOCUMENTATION_URL.value,
        description=(
            "Get the local documentation URL for a gem "
            "(Note: Use fetch_gem_docs instead to get actual documentation content)"
        ),
        input_schema=_schema(
            {
                "gem_name": _string("Name of the gem"),
                "class_name": _string("Optional: specific class or module name"),
            },
            ["gem_name"],
        ),
    ),
    ToolDefinition(
        name=ToolName.FETCH_GEM_DOCS.value,
        description=(
            "Fetch structured documentation content for a gem or specific class/module. "
            "Returns formatted documentation with methods, attributes, parameters, and examples. "
            "Use this instead of fetching URLs directly."
        ),
        input_schema=_schema(
            {
                "gem_name": _string("Name of the gem"),
                "path": _string(
                    'Optional: specific class or module path (e.g., "FactoryBot::Trait" or "ActiveRecord::Base")'
                ),
            },
            ["gem_name"],
        ),
    ),
)


def list_tools() -> list[ToolDefinition]:
    """Return the tool definitions in their stable catalog order."""
    return list(_TOOLS)


def get_tool(name: str) -> ToolDefinition | None:
    for tool in _TOOLS:
        if tool.name == name:
            return tool
    return None
