"""Open gem documentation in the default browser.

Hosted docs come from gemdocs.org, whose ``versions.json`` maps every
published version to its documentation URL.  The version is either given
explicitly, taken from the project's ``Gemfile.lock`` (via ``bundle show``),
or the latest published one.
"""

from __future__ import annotations

import logging
import re
import webbrowser
from pathlib import Path
from typing import Any

import httpx

from open_gemdocs.errors import CommandError, VersionResolutionError
from open_gemdocs.utils.process import run_command

logger = logging.getLogger(__name__)

GEMDOCS_BASE_URL = "https://gemdocs.org"


class GemdocsBrowser:
    """Resolves a gem version to its gemdocs.org URL and opens it."""

    def __init__(
        self,
        gem_name: str,
        *,
        version: str | None = None,
        use_latest: bool = False,
        working_dir: Path | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not gem_name:
            msg = "Gem name is required"
            raise ValueError(msg)
        self.gem_name = gem_name
        self.version = version
        self.use_latest = use_latest
        self._working_dir = working_dir or Path.cwd()
        self._client = client
        self._versions: list[dict[str, Any]] | None = None

    async def resolve_version(self) -> str | None:
        """Pick the version to show; ``None`` means the latest one."""
        if self.version:
            return self.version

        if not self.use_latest and (self._working_dir / "Gemfile.lock").exists():
            self.version = await self.bundled_version()
            if self.version:
                logger.info("Using version from Gemfile.lock: %s", self.version)
                return self.version

        self.use_latest = True
        logger.info("No version specified, using latest version")
        return None

    async def bundled_version(self) -> str | None:
        """Version of the gem in the current bundle, if any."""
        try:
            result = await run_command(["bundle", "show", self.gem_name], cwd=self._working_dir)
        except CommandError as exc:
            logger.debug("bundle show failed: %s", exc)
            return None
        match = re.search(rf"{re.escape(self.gem_name)}-([0-9.]+)", result.stdout.strip())
        return match.group(1) if match else None

    async def versions(self) -> list[dict[str, Any]]:
        """Published versions with their documentation URLs, oldest first."""
        if self._versions is None:
            url = f"{GEMDOCS_BASE_URL}/gems/{self.gem_name}/versions.json"
            try:
                if self._client is not None:
                    response = await self._client.get(url)
                else:
                    async with httpx.AsyncClient(follow_redirects=True) as client:
                        response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                msg = f"HTTP request failed to uri: {url} -- {exc}"
                raise VersionResolutionError(msg) from exc
            try:
                payload = response.json()
            except ValueError as exc:
                msg = f"Invalid versions.json from {url}: {exc}"
                raise VersionResolutionError(msg) from exc
            if not isinstance(payload, dict) or not isinstance(payload.get("versions", []), list):
                msg = f"Unexpected versions.json layout from {url}"
                raise VersionResolutionError(msg)
            self._versions = list(payload.get("versions", []))
        return self._versions

    async def version_url(self) -> str:
        """Documentation URL for the resolved version."""
        await self.resolve_version()
        versions = await self.versions()

        row: dict[str, Any] | None
        if self.use_latest:
            row = versions[-1] if versions else None
        else:
            row = next((v for v in versions if v.get("version") == self.version), None)

        if row is None or not row.get("url"):
            label = self.version or "latest"
            msg = f"No documentation URL found for {self.gem_name} ({label})"
            raise VersionResolutionError(msg)
        return str(row["url"]).replace("production.", "")

    async def open(self) -> str:
        """Open the documentation in the default browser and return the URL."""
        url = await self.version_url()
        logger.info("Opening %s", url)
        webbrowser.open(url)
        return url
