"""Installed-gem records returned by the package manager."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InstalledGem(BaseModel):
    """One line of ``gem list --local``."""

    name: str
    versions: str = Field(..., description="Comma-separated versions, as printed by RubyGems.")


class GemSpec(BaseModel):
    """Metadata for one installed gem."""

    name: str
    version: str
    summary: str | None = None
    description: str | None = None
    homepage: str | None = None
    licenses: list[str] = []
    authors: list[str] = []

    @property
    def license(self) -> str | None:
        return ", ".join(self.licenses) if self.licenses else None
