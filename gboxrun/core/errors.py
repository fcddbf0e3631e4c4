"""Typed exception hierarchy for gboxrun."""

from __future__ import annotations


class GboxError(Exception):
    """Base class for all gboxrun errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(GboxError):
    """Raised for unreadable or invalid config files and bad env overrides."""


class BindError(GboxError):
    """Raised when the HTTP control plane cannot bind its listening socket."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Cannot bind {host}:{port}: {reason}")


class BackendError(GboxError):
    """Raised when an app controller fails outside its normal result channel."""


class ClientError(GboxError):
    """Raised for HTTP client failures talking to the control plane."""
