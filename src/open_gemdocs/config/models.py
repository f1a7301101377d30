"""Pydantic models for the open-gemdocs YAML configuration file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class McpSettings(BaseModel):
    """Where the JSON-RPC tool server listens."""

    host: str = "127.0.0.1"
    port: int = Field(default=6789, ge=1, le=65535)
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"


class YardSettings(BaseModel):
    """How the YARD executable and its documentation server are driven."""

    command: str = "yard"
    host: str = "localhost"
    port: int = Field(default=8808, ge=1, le=65535)
    startup_timeout: float = Field(default=10.0, gt=0, description="Max seconds to wait for the server to listen.")
    poll_interval: float = Field(default=0.25, gt=0, description="Seconds between readiness checks.")
    timeout: float = Field(default=300.0, gt=0, description="Timeout for building a .yardoc database.")
    db_patterns: list[str] = Field(
        default_factory=list,
        description="Extra glob patterns for .yardoc databases; '{name}' is replaced by the gem name.",
    )

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class GemSettings(BaseModel):
    """The RubyGems executable."""

    command: str = "gem"
    timeout: float = Field(default=60.0, gt=0)


class RubySettings(BaseModel):
    """The Ruby interpreter used to read YARD registries."""

    command: str = "ruby"
    timeout: float = Field(default=120.0, gt=0)


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class GemdocsConfig(BaseModel):
    """Top-level configuration parsed from YAML."""

    mcp: McpSettings = Field(default_factory=McpSettings)
    yard: YardSettings = Field(default_factory=YardSettings)
    gem: GemSettings = Field(default_factory=GemSettings)
    ruby: RubySettings = Field(default_factory=RubySettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
