"""Core constants and paths for gboxrun."""

from pathlib import Path

GBOX_DIR_NAME = ".gboxrun"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8765


def get_gbox_dir() -> Path:
    """Get ~/.gboxrun (global config directory)."""
    return Path.home() / GBOX_DIR_NAME


def get_default_log_dir() -> Path:
    """Get the default directory for server.log."""
    return get_gbox_dir() / "logs"
