"""RubyGems — a :class:`PackageManager` backed by the ``gem`` executable."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from open_gemdocs.config.models import GemSettings
from open_gemdocs.errors import PackageNotFoundError
from open_gemdocs.gems.models import GemSpec, InstalledGem
from open_gemdocs.utils.process import run_command

logger = logging.getLogger(__name__)

_LIST_LINE = re.compile(r"^(\S+)\s+\(([^)]+)\)")


class _RubyObjectLoader(yaml.SafeLoader):
    """SafeLoader that reads ``!ruby/object:...`` tagged nodes as plain data."""


def _construct_ruby_node(loader: yaml.SafeLoader, _suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node, deep=True)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_scalar(node)  # type: ignore[arg-type]


_RubyObjectLoader.add_multi_constructor("!ruby/", _construct_ruby_node)


def parse_gem_list(output: str) -> list[InstalledGem]:
    """Parse ``gem list --local`` output, skipping headers and blank lines."""
    gems: list[InstalledGem] = []
    for line in output.splitlines():
        match = _LIST_LINE.match(line.strip())
        if match:
            gems.append(InstalledGem(name=match.group(1), versions=match.group(2)))
    return gems


def parse_gem_specification(name: str, output: str) -> GemSpec:
    """Parse the YAML printed by ``gem specification NAME``."""
    try:
        data: Any = yaml.load(output, Loader=_RubyObjectLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        raise PackageNotFoundError(name, f"unreadable specification: {exc}") from exc

    if not isinstance(data, dict):
        raise PackageNotFoundError(name, "no specification returned")

    version = data.get("version")
    if isinstance(version, dict):
        version = version.get("version")

    licenses = data.get("licenses") or []
    if not licenses and data.get("license"):
        licenses = [data["license"]]

    return GemSpec(
        name=str(data.get("name") or name),
        version=str(version or ""),
        summary=data.get("summary") or None,
        description=data.get("description") or None,
        homepage=data.get("homepage") or None,
        licenses=[str(item) for item in licenses],
        authors=[str(item) for item in data.get("authors") or []],
    )


def _error_detail(stderr: str) -> str:
    text = stderr.strip()
    if text.startswith("ERROR:"):
        text = text[len("ERROR:"):].strip()
    return text or "not installed"


class RubyGems:
    """Queries the local RubyGems installation through the ``gem`` CLI.

    Satisfies the :class:`~open_gemdocs.gems.provider.PackageManager` protocol.
    """

    def __init__(self, settings: GemSettings | None = None) -> None:
        self._settings = settings or GemSettings()

    async def list_installed(self) -> list[InstalledGem]:
        result = await run_command(
            [self._settings.command, "list", "--local"],
            timeout=self._settings.timeout,
            check=True,
        )
        return parse_gem_list(result.stdout)

    async def find(self, name: str) -> GemSpec:
        result = await run_command(
            [self._settings.command, "specification", name],
            timeout=self._settings.timeout,
        )
        if not result.ok or not result.stdout.strip():
            raise PackageNotFoundError(name, _error_detail(result.stderr))
        return parse_gem_specification(name, result.stdout)

    async def locate_source(self, name: str) -> Path:
        result = await run_command(
            [self._settings.command, "contents", "--show-install-dir", name],
            timeout=self._settings.timeout,
        )
        lines = result.stdout.strip().splitlines()
        if not result.ok or not lines:
            raise PackageNotFoundError(name, _error_detail(result.stderr))
        return Path(lines[-1].strip())

    async def gem_dir(self) -> Path | None:
        result = await run_command(
            [self._settings.command, "environment", "gemdir"],
            timeout=self._settings.timeout,
        )
        path = result.stdout.strip()
        if not result.ok or not path:
            logger.debug("Could not determine gem dir: %s", result.stderr.strip())
            return None
        return Path(path)
