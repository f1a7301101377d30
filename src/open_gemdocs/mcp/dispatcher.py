"""ToolDispatcher — routes ``tools/call`` requests to their operations.

Every outcome, including unknown tools, bad arguments and collaborator
failures, comes back as a :class:`ToolResultEnvelope`; nothing raises to the
caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from open_gemdocs.errors import DocServerError, GemdocsError
from open_gemdocs.mcp.catalog import ToolName, get_tool, list_tools
from open_gemdocs.mcp.models import ToolDefinition, ToolResultEnvelope
from open_gemdocs.utils.telemetry import ATTR_GEM_NAME, ATTR_TOOL_IS_ERROR, ATTR_TOOL_NAME, get_tracer
from open_gemdocs.yard.render import render_object, render_overview

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from open_gemdocs.gems.provider import PackageManager
    from open_gemdocs.yard.projector import RegistryProjector
    from open_gemdocs.yard.server import DocServer

    ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResultEnvelope]]

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

_EMPTY_ARGUMENT_MESSAGES = {
    ToolName.SEARCH_GEMS: "Query cannot be empty",
}


class _ArgumentError(GemdocsError):
    """A tool argument is missing or has the wrong type."""


class ToolDispatcher:
    """Maps each :class:`ToolName` to its handler and normalizes results.

    Usage::

        dispatcher = ToolDispatcher(RubyGems(), projector, YardServer())
        envelope = await dispatcher.call("search_gems", {"query": "rack"})
        envelope.to_wire()  # {"content": [{"type": "text", "text": "Found ..."}]}
    """

    def __init__(
        self,
        packages: PackageManager,
        projector: RegistryProjector,
        doc_server: DocServer,
        *,
        working_dir: Path | None = None,
    ) -> None:
        self._packages = packages
        self._projector = projector
        self._doc_server = doc_server
        self._working_dir = working_dir or Path.cwd()
        self._handlers: dict[ToolName, ToolHandler] = {
            ToolName.SEARCH_GEMS: self._search_gems,
            ToolName.GET_GEM_INFO: self._get_gem_info,
            ToolName.START_YARD_SERVER: self._start_yard_server,
            ToolName.STOP_YARD_SERVER: self._stop_yard_server,
            ToolName.GET_YARD_SERVER_STATUS: self._get_yard_server_status,
            ToolName.GET_GEM_DOCUMENTATION_URL: self._get_gem_documentation_url,
            ToolName.FETCH_GEM_DOCS: self._fetch_gem_docs,
        }

    def all_tools(self) -> list[ToolDefinition]:
        """Return the tool catalog in its stable order."""
        return list_tools()

    async def call(self, tool_name: Any, arguments: Mapping[str, Any] | None = None) -> ToolResultEnvelope:
        """Execute *tool_name* with *arguments* and wrap the outcome."""
        with _tracer.start_as_current_span("gemdocs.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, str(tool_name))
            envelope = await self._call(tool_name, arguments)
            span.set_attribute(ATTR_TOOL_IS_ERROR, envelope.is_error)
            return envelope

    async def _call(self, tool_name: Any, arguments: Mapping[str, Any] | None) -> ToolResultEnvelope:
        try:
            tool = ToolName(tool_name)
        except (ValueError, TypeError):
            return ToolResultEnvelope.error(f"Unknown tool: {tool_name}")

        logger.debug("Calling tool %s with %s", tool.value, arguments)
        try:
            args = dict(arguments or {})
            self._validate(tool, args)
            return await self._handlers[tool](args)
        except GemdocsError as exc:
            return ToolResultEnvelope.error(str(exc))
        except Exception as exc:
            logger.exception("Tool %s failed", tool.value)
            return ToolResultEnvelope.error(f"Error executing {tool.value}: {exc}")

    @staticmethod
    def _validate(tool: ToolName, args: dict[str, Any]) -> None:
        definition = get_tool(tool.value)
        if definition is None:
            return
        for name, schema in definition.input_schema.get("properties", {}).items():
            value = args.get(name)
            if value is not None and schema.get("type") == "string" and not isinstance(value, str):
                raise _ArgumentError(f"Argument '{name}' must be a string")
        for name in definition.required:
            value = args.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise _ArgumentError(
                    _EMPTY_ARGUMENT_MESSAGES.get(tool, f"Missing required argument: {name}")
                )

    # ------------------------------------------------------------------
    # Package manager tools
    # ------------------------------------------------------------------

    async def _search_gems(self, args: dict[str, Any]) -> ToolResultEnvelope:
        query: str = args["query"]
        needle = query.lower()
        gems = [gem for gem in await self._packages.list_installed() if needle in gem.name.lower()]

        if not gems:
            return ToolResultEnvelope.from_text(f"No gems found matching '{query}'")

        listing = "\n".join(f"• {gem.name} ({gem.versions})" for gem in gems)
        return ToolResultEnvelope.from_text(f"Found {len(gems)} gem(s):\n{listing}")

    async def _get_gem_info(self, args: dict[str, Any]) -> ToolResultEnvelope:
        spec = await self._packages.find(args["gem_name"])

        info = [f"**{spec.name}** v{spec.version}", ""]
        if spec.summary:
            info.append(f"**Summary:** {spec.summary}")
        if spec.description and spec.description != spec.summary:
            info.append(f"**Description:** {spec.description}")
        if spec.homepage:
            info.append(f"**Homepage:** {spec.homepage}")
        if spec.license:
            info.append(f"**License:** {spec.license}")
        if spec.authors:
            info.append(f"**Authors:** {', '.join(spec.authors)}")
        return ToolResultEnvelope.from_text("\n".join(info))

    # ------------------------------------------------------------------
    # Documentation server tools
    # ------------------------------------------------------------------

    async def _start_yard_server(self, _args: dict[str, Any]) -> ToolResultEnvelope:
        port = self._doc_server.port
        if await self._doc_server.is_listening():
            serving = self._serving_directory()
            if serving is not None and not self._is_working_dir(serving):
                return ToolResultEnvelope.from_text(
                    "Yard server is running in a different directory:\n"
                    f"Running in: {serving}\n"
                    f"Current dir: {self._working_dir}\n\n"
                    f"The server is serving gems from '{serving}'.\n"
                    "To serve gems from the current directory, "
                    "stop the server first with 'stop_yard_server' tool."
                )
            return ToolResultEnvelope.from_text(f"Yard server is already running on port {port}")

        try:
            await self._doc_server.start(self._working_dir)
        except DocServerError as exc:
            return ToolResultEnvelope.error(f"Failed to start Yard server: {exc}")

        if await self._doc_server.wait_until_listening():
            return ToolResultEnvelope.from_text(f"Yard server started successfully on port {port}")
        return ToolResultEnvelope.error("Failed to start Yard server")

    async def _stop_yard_server(self, _args: dict[str, Any]) -> ToolResultEnvelope:
        pids = self._doc_server.owning_pids()
        if pids:
            await self._doc_server.stop(pids)
            return ToolResultEnvelope.from_text("Yard server stopped successfully")
        if await self._doc_server.is_listening():
            return ToolResultEnvelope.from_text(
                f"Something is listening on port {self._doc_server.port}, "
                "but its process could not be identified"
            )
        return ToolResultEnvelope.from_text("Yard server is not running")

    async def _get_yard_server_status(self, _args: dict[str, Any]) -> ToolResultEnvelope:
        if not await self._doc_server.is_listening():
            return ToolResultEnvelope.from_text("Yard server is not running")

        pids = self._doc_server.owning_pids()
        pid_text = ", ".join(str(pid) for pid in pids) if pids else "unknown"
        lines = [f"Yard server is running (PID: {pid_text}) on port {self._doc_server.port}"]

        serving = self._serving_directory()
        if serving is not None:
            lines.append(f"Serving from: {serving}")
            if not self._is_working_dir(serving):
                lines.append(f"Current directory: {self._working_dir}")
                lines.append("")
                lines.append("Note: The server is serving gems from a different directory.")
        return ToolResultEnvelope.from_text("\n".join(lines))

    async def _get_gem_documentation_url(self, args: dict[str, Any]) -> ToolResultEnvelope:
        gem_name: str = args["gem_name"]
        class_name: str | None = args.get("class_name") or None

        if not await self._doc_server.is_listening():
            try:
                await self._doc_server.start(self._working_dir)
                await self._doc_server.wait_until_listening()
            except DocServerError as exc:
                logger.warning("Could not start Yard server: %s", exc)

        url = self._doc_server.docs_url(gem_name, class_name)
        lines = [
            f"Documentation URL: {url}",
            "",
            "**Tip:** Instead of fetching this URL directly, use the `fetch_gem_docs` tool with:",
            f'- gem_name: "{gem_name}"',
        ]
        if class_name:
            lines.append(f'- path: "{class_name}" (if you want specific class documentation)')
        lines.append("")
        lines.append(f"This will give you structured documentation for {class_name or 'the gem overview'}.")
        return ToolResultEnvelope.from_text("\n".join(lines))

    # ------------------------------------------------------------------
    # Documentation content
    # ------------------------------------------------------------------

    async def _fetch_gem_docs(self, args: dict[str, Any]) -> ToolResultEnvelope:
        gem_name: str = args["gem_name"]
        path: str | None = (args.get("path") or "").strip() or None

        with _tracer.start_as_current_span("gemdocs.tool.fetch_gem_docs") as span:
            span.set_attribute(ATTR_GEM_NAME, gem_name)
            if path is None:
                overview = await self._projector.project_overview(gem_name)
                return ToolResultEnvelope.from_text(render_overview(overview))

            projection = await self._projector.project_object(gem_name, path)
            return ToolResultEnvelope.from_text(render_object(projection))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _serving_directory(self) -> Path | None:
        for pid in self._doc_server.owning_pids():
            directory = self._doc_server.working_directory(pid)
            if directory is not None:
                return directory
        return None

    def _is_working_dir(self, directory: Path) -> bool:
        return directory.resolve() == self._working_dir.resolve()
