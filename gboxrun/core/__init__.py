"""Core types, errors, and helpers shared across gboxrun."""

from gboxrun.core.errors import (
    BackendError,
    BindError,
    ClientError,
    ConfigError,
    GboxError,
)
from gboxrun.core.types import ApiResponse, ExecutionResult

__all__ = [
    "ApiResponse",
    "BackendError",
    "BindError",
    "ClientError",
    "ConfigError",
    "ExecutionResult",
    "GboxError",
]
