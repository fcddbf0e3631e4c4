"""Dispatch table for the control plane's ``/api/*`` endpoints.

Routes match on the exact ``(method, path)`` pair. Every handler returns an
ApiResponse and never raises: backend failures and undecodable bodies
become ``success: false`` responses.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from gboxrun import __version__
from gboxrun.control.controller import AppController
from gboxrun.control.rerun import DEFAULT_GRACE_PERIOD, rerun_app
from gboxrun.core.constants import DEFAULT_PORT
from gboxrun.core.types import ApiResponse, ExecutionResult

logger = logging.getLogger(__name__)

RouteHandler = Callable[[str | None], Awaitable[ApiResponse]]

ENDPOINT_DESCRIPTIONS = [
    "POST /api/start - Start Android app",
    "POST /api/stop - Stop Android app",
    "POST /api/rerun - Rerun Android app",
    "POST /api/debug - Debug Android app",
    "GET /api/configurations - Get run configurations",
    "POST /api/select-configuration - Select run configuration",
    "GET /api/status - Get server status",
]


class ApiRequest(BaseModel):
    """JSON body accepted by the ``/api/*`` endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: str | None = None
    project_path: str | None = Field(default=None, alias="projectPath")
    configuration_name: str | None = Field(default=None, alias="configurationName")


def decode_body(body: str | None) -> ApiRequest | None:
    """Decode a request body; None, empty or a JSON null means "no request object".

    Raises:
        pydantic.ValidationError: If the body is not a JSON object of the
            expected shape.
    """
    if not body or body.strip() == "null":
        return None
    return ApiRequest.model_validate_json(body)


def _project_path(request: ApiRequest | None) -> str | None:
    return request.project_path if request is not None else None


def _with_configuration(result: ExecutionResult) -> ApiResponse:
    return ApiResponse(
        result.success,
        result.message,
        {"configurationName": result.configuration_name},
    )


class ApiRouter:
    """Maps ``(method, path)`` to a handler bound to one app controller.

    Args:
        controller: Backend for all lifecycle operations.
        port: Port reported by ``GET /api/status``.
        version: Version reported by ``GET /api/status``.
        rerun_grace_period: Seconds between the stop and start of a rerun.
    """

    def __init__(
        self,
        controller: AppController,
        port: int = DEFAULT_PORT,
        version: str = __version__,
        rerun_grace_period: float = DEFAULT_GRACE_PERIOD,
    ) -> None:
        self._controller = controller
        self.port = port
        self._version = version
        self._rerun_grace_period = rerun_grace_period
        self._routes: dict[tuple[str, str], RouteHandler] = {
            ("POST", "/api/start"): self.handle_start,
            ("POST", "/api/stop"): self.handle_stop,
            ("POST", "/api/rerun"): self.handle_rerun,
            ("POST", "/api/debug"): self.handle_debug,
            ("GET", "/api/configurations"): self.handle_get_configurations,
            ("POST", "/api/select-configuration"): self.handle_select_configuration,
            ("GET", "/api/status"): self.handle_get_status,
        }

    @property
    def routes(self) -> list[tuple[str, str]]:
        return list(self._routes)

    async def dispatch(self, method: str, path: str, body: str | None = None) -> ApiResponse:
        """Route one request to its handler."""
        handler = self._routes.get((method, path))
        if handler is None:
            logger.debug("No route for %s %s", method, path)
            return ApiResponse(False, "Endpoint not found")
        return await handler(body)

    async def handle_start(self, body: str | None) -> ApiResponse:
        try:
            request = decode_body(body)
            result = await self._controller.start(_project_path(request))
            return _with_configuration(result)
        except Exception as e:
            logger.error("Error starting app", exc_info=True)
            return ApiResponse(False, f"Error starting app: {e}")

    async def handle_stop(self, body: str | None) -> ApiResponse:
        try:
            request = decode_body(body)
            result = await self._controller.stop(_project_path(request))
            return ApiResponse(result.success, result.message)
        except Exception as e:
            logger.error("Error stopping app", exc_info=True)
            return ApiResponse(False, f"Error stopping app: {e}")

    async def handle_rerun(self, body: str | None) -> ApiResponse:
        try:
            request = decode_body(body)
            result = await rerun_app(
                self._controller, _project_path(request), self._rerun_grace_period
            )
            return _with_configuration(result)
        except Exception as e:
            logger.error("Error rerunning app", exc_info=True)
            return ApiResponse(False, f"Error rerunning app: {e}")

    async def handle_debug(self, body: str | None) -> ApiResponse:
        try:
            request = decode_body(body)
            result = await self._controller.debug(_project_path(request))
            return _with_configuration(result)
        except Exception as e:
            logger.error("Error debugging app", exc_info=True)
            return ApiResponse(False, f"Error debugging app: {e}")

    async def handle_get_configurations(self, body: str | None) -> ApiResponse:
        try:
            request = decode_body(body)
            configurations = await asyncio.to_thread(
                self._controller.list_configurations, _project_path(request)
            )
            return ApiResponse(
                True,
                f"Retrieved {len(configurations)} Android configurations",
                {"configurations": configurations},
            )
        except Exception as e:
            logger.error("Error getting configurations", exc_info=True)
            return ApiResponse(False, f"Error getting configurations: {e}")

    async def handle_select_configuration(self, body: str | None) -> ApiResponse:
        try:
            request = decode_body(body)
            if request is None:
                return ApiResponse(False, "Configuration name is required")
            if not request.configuration_name:
                return ApiResponse(False, "Configuration name cannot be empty")

            result = await asyncio.to_thread(
                self._controller.select_configuration,
                request.configuration_name,
                request.project_path,
            )
            return ApiResponse(result.success, result.message)
        except Exception as e:
            logger.error("Error selecting configuration", exc_info=True)
            return ApiResponse(False, f"Error selecting configuration: {e}")

    async def handle_get_status(self, body: str | None) -> ApiResponse:
        return ApiResponse(
            True,
            "Run-API-Server is running",
            {
                "port": self.port,
                "version": self._version,
                "endpoints": list(ENDPOINT_DESCRIPTIONS),
            },
        )
