"""Configuration file discovery and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from open_gemdocs.config.models import GemdocsConfig
from open_gemdocs.errors import ConfigError

CONFIG_ENV_VAR = "OPEN_GEMDOCS_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/open_gemdocs/config.yaml")


class ConfigLoader:
    """Load and validate a YAML configuration file into a :class:`GemdocsConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> GemdocsConfig:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  An empty file
        yields the default configuration.

        Raises:
            ConfigError: On read errors, YAML parse errors or schema validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            return GemdocsConfig()
        if not isinstance(data, dict):
            raise ConfigError("Configuration YAML must be a mapping")

        try:
            return GemdocsConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(path: Path | None = None) -> GemdocsConfig:
    """Resolve the configuration file and load it.

    An explicit *path* or ``$OPEN_GEMDOCS_CONFIG`` must exist; the default
    location is optional and falls back to built-in defaults.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)

    if path is not None:
        return ConfigLoader(path.expanduser()).load()

    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.is_file():
        return ConfigLoader(default).load()
    return GemdocsConfig()
