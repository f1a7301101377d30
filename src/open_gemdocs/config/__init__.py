"""Configuration — YAML file loading and settings models."""

from open_gemdocs.config.loader import ConfigLoader, load_config
from open_gemdocs.config.models import (
    GemdocsConfig,
    GemSettings,
    McpSettings,
    RubySettings,
    TelemetrySettings,
    YardSettings,
)

__all__ = [
    "ConfigLoader",
    "GemSettings",
    "GemdocsConfig",
    "McpSettings",
    "RubySettings",
    "TelemetrySettings",
    "YardSettings",
    "load_config",
]
