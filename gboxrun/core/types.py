"""Result and response shapes shared by both front ends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a backend lifecycle operation.

    Attributes:
        success: Whether the operation succeeded.
        message: Human-readable outcome.
        configuration_name: Run configuration involved, when one applies.
    """

    success: bool
    message: str
    configuration_name: str | None = None


@dataclass(frozen=True)
class ApiResponse:
    """Body of every HTTP control-plane response.

    ``data`` is omitted from the serialized form when it is None.
    """

    success: bool
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ApiResponse:
        return cls(
            success=bool(payload.get("success", False)),
            message=str(payload.get("message", "")),
            data=payload.get("data"),
        )
