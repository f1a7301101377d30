"""PackageManager protocol — what the tool layer needs from the host's gem registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from open_gemdocs.gems.models import GemSpec, InstalledGem


@runtime_checkable
class PackageManager(Protocol):
    """Source of installed-gem records."""

    async def list_installed(self) -> list[InstalledGem]:
        """Return every locally installed gem."""
        ...

    async def find(self, name: str) -> GemSpec:
        """Return metadata for *name*.

        Raises :class:`~open_gemdocs.errors.PackageNotFoundError` when the
        gem is not installed.
        """
        ...

    async def locate_source(self, name: str) -> Path:
        """Return the installed source tree of *name*.

        Raises :class:`~open_gemdocs.errors.PackageNotFoundError` when the
        gem is not installed.
        """
        ...

    async def gem_dir(self) -> Path | None:
        """Return the RubyGems installation directory, if known."""
        ...
