"""Configuration loading and validation."""

from gboxrun.config.loader import apply_env_overrides, load_config
from gboxrun.config.schema import BackendConfig, Config, McpConfig, ServerConfig

__all__ = [
    "BackendConfig",
    "Config",
    "McpConfig",
    "ServerConfig",
    "apply_env_overrides",
    "load_config",
]
