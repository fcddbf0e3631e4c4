"""App controller that forwards to a running HTTP control plane.

This is the agent-side bridge: the stdio JSON-RPC server runs as a separate
process and reaches the IDE through the control plane's ``/api/*``
endpoints on localhost.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from gboxrun.core.constants import DEFAULT_HOST, DEFAULT_PORT
from gboxrun.core.errors import BackendError, ClientError
from gboxrun.core.types import ApiResponse, ExecutionResult

logger = logging.getLogger(__name__)

SERVER_HINT = (
    "Hint: Ensure the Gbox API server is running in Android Studio "
    "(Tools -> Gbox -> Start API Server)."
)


class PluginApiController:
    """Implements the app-controller contract over HTTP.

    Args:
        base_url: Control plane base URL (without the ``/api`` suffix).
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used for both the async and the
            blocking client), mainly for tests.
    """

    def __init__(
        self,
        base_url: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}",
        timeout: float = 30.0,
        transport: httpx.MockTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}/api/{endpoint}"

    @staticmethod
    def _body(project_path: str | None, **extra: Any) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if project_path is not None:
            body["projectPath"] = project_path
        body.update({k: v for k, v in extra.items() if v is not None})
        return body

    def _decode(self, response: httpx.Response) -> ApiResponse:
        if response.status_code != 200:
            raise ClientError(f"HTTP {response.status_code}: {response.reason_phrase}")
        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise ClientError(f"Invalid JSON from control plane: {e}") from e
        if not isinstance(payload, dict):
            raise ClientError("Control plane response must be a JSON object")
        return ApiResponse.from_dict(payload)

    @staticmethod
    def _to_result(api: ApiResponse) -> ExecutionResult:
        configuration_name = None
        if isinstance(api.data, dict):
            configuration_name = api.data.get("configurationName")
        return ExecutionResult(api.success, api.message, configuration_name)

    async def _request(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> ApiResponse:
        url = self._url(endpoint)
        logger.debug("%s %s %s", method, url, body)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(method, url, json=body)
        except httpx.ConnectError as e:
            raise ClientError(f"API request failed: {e}\n{SERVER_HINT}") from e
        except httpx.TimeoutException as e:
            raise ClientError(f"API request timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise ClientError(f"API request failed: {e}") from e
        return self._decode(response)

    def _request_sync(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> ApiResponse:
        url = self._url(endpoint)
        logger.debug("%s %s %s", method, url, body)
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.request(method, url, json=body)
        except httpx.ConnectError as e:
            raise ClientError(f"API request failed: {e}\n{SERVER_HINT}") from e
        except httpx.TimeoutException as e:
            raise ClientError(f"API request timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise ClientError(f"API request failed: {e}") from e
        return self._decode(response)

    async def start(self, project_path: str | None = None) -> ExecutionResult:
        return self._to_result(await self._request("POST", "start", self._body(project_path)))

    async def stop(self, project_path: str | None = None) -> ExecutionResult:
        return self._to_result(await self._request("POST", "stop", self._body(project_path)))

    async def debug(self, project_path: str | None = None) -> ExecutionResult:
        return self._to_result(await self._request("POST", "debug", self._body(project_path)))

    def list_configurations(self, project_path: str | None = None) -> list[str]:
        # GET bodies are not read by the control plane, so the project
        # selector cannot be forwarded here.
        if project_path is not None:
            logger.debug("projectPath is not forwarded on GET /api/configurations")
        api = self._request_sync("GET", "configurations")
        if not api.success:
            raise BackendError(api.message)
        data = api.data if isinstance(api.data, dict) else {}
        return [str(name) for name in data.get("configurations", [])]

    def select_configuration(
        self, name: str, project_path: str | None = None
    ) -> ExecutionResult:
        api = self._request_sync(
            "POST",
            "select-configuration",
            self._body(project_path, configurationName=name),
        )
        return self._to_result(api)

    async def status(self) -> ApiResponse:
        """Fetch ``GET /api/status`` from the control plane."""
        return await self._request("GET", "status")
