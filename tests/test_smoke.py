"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import open_gemdocs

    assert open_gemdocs.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from open_gemdocs.cli import main

    assert callable(main)


def test_public_imports() -> None:
    from open_gemdocs.config import GemdocsConfig, load_config
    from open_gemdocs.gems import RubyGems
    from open_gemdocs.mcp import MCPHttpServer, RpcHandler, ToolDispatcher, build_server
    from open_gemdocs.yard import RegistryProjector, YardServer

    assert GemdocsConfig is not None
    assert load_config is not None
    assert RubyGems is not None
    assert MCPHttpServer is not None
    assert RpcHandler is not None
    assert ToolDispatcher is not None
    assert build_server is not None
    assert RegistryProjector is not None
    assert YardServer is not None


def test_build_server_wiring() -> None:
    from open_gemdocs.config import GemdocsConfig
    from open_gemdocs.mcp import build_server

    server = build_server(GemdocsConfig())

    assert server.doc_server is not None
    assert server.settings.port == 6789
