"""Pydantic schema for gboxrun configuration.

Example config.json:
    {
        "server": {"port": 8765},
        "backend": {"api_url": "http://localhost:8765", "rerun_grace_period": 1.0}
    }
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from gboxrun.core.constants import DEFAULT_HOST, DEFAULT_PORT


class ServerConfig(BaseModel):
    """Configuration for the HTTP control plane."""

    model_config = ConfigDict(extra="forbid")

    host: str = DEFAULT_HOST
    """Host address to bind to. Only loopback addresses are accepted at bind time."""

    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    """Port number for the HTTP server (0 picks an ephemeral port)."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    """Logging level for server operations."""


class McpConfig(BaseModel):
    """Identity advertised by the stdio JSON-RPC server on ``initialize``."""

    model_config = ConfigDict(extra="forbid")

    server_name: str = "gbox-android-studio-plugin"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"


class BackendConfig(BaseModel):
    """Configuration for the app controller behind both front ends."""

    model_config = ConfigDict(extra="forbid")

    api_url: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
    """Base URL of the control plane, used when the stdio server forwards over HTTP."""

    timeout: float = Field(default=30.0, gt=0)
    """Request timeout in seconds for the HTTP-backed controller."""

    rerun_grace_period: float = Field(default=1.0, ge=0)
    """Seconds to wait between stop and start during a rerun."""

    project_path: str | None = None
    """Project the simulated controller answers for (None accepts any path)."""

    simulated_configurations: list[str] = Field(default_factory=lambda: ["app"])
    """Run configurations seeded into the simulated controller."""


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    server: ServerConfig = Field(default_factory=ServerConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
