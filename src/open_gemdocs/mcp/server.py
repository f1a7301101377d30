"""Wiring — builds the tool server from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from open_gemdocs.gems.rubygems import RubyGems
from open_gemdocs.mcp.dispatcher import ToolDispatcher
from open_gemdocs.mcp.handlers import RpcHandler
from open_gemdocs.mcp.transport import MCPHttpServer
from open_gemdocs.yard.projector import RegistryProjector
from open_gemdocs.yard.registry import YardGenerator
from open_gemdocs.yard.server import YardServer

if TYPE_CHECKING:
    from pathlib import Path

    from open_gemdocs.config.models import GemdocsConfig
    from open_gemdocs.gems.provider import PackageManager
    from open_gemdocs.yard.server import DocServer


def build_projector(config: GemdocsConfig, packages: PackageManager | None = None) -> RegistryProjector:
    """Create a :class:`RegistryProjector` that generates databases with YARD."""
    return RegistryProjector(
        packages or RubyGems(config.gem),
        YardGenerator(config.yard, config.ruby),
        db_patterns=config.yard.db_patterns,
    )


def build_dispatcher(
    config: GemdocsConfig,
    *,
    doc_server: DocServer | None = None,
    working_dir: Path | None = None,
) -> ToolDispatcher:
    """Create a :class:`ToolDispatcher` backed by the real gem, YARD and server adapters."""
    packages = RubyGems(config.gem)
    return ToolDispatcher(
        packages,
        build_projector(config, packages),
        doc_server or YardServer(config.yard),
        working_dir=working_dir,
    )


def build_server(config: GemdocsConfig, *, working_dir: Path | None = None) -> MCPHttpServer:
    """Create the HTTP tool server described by *config*."""
    doc_server = YardServer(config.yard)
    dispatcher = build_dispatcher(config, doc_server=doc_server, working_dir=working_dir)
    return MCPHttpServer(RpcHandler(dispatcher), config.mcp, doc_server=doc_server)
