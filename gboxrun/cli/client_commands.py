"""One-shot client commands against a running control plane.

Each command prints the JSON response to stdout and returns an exit code:
0 when the response reports success, 1 otherwise.
"""

import json
import sys
from typing import Any

import httpx

from gboxrun.core.constants import DEFAULT_HOST
from gboxrun.core.errors import ClientError

# Endpoint name -> HTTP method
ACTIONS = {
    "start": "POST",
    "stop": "POST",
    "rerun": "POST",
    "debug": "POST",
    "configurations": "GET",
    "select-configuration": "POST",
    "status": "GET",
}


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def resolve_base_url(api_url: str, port: int | None) -> str:
    """Use ``port`` on localhost when given, otherwise the configured URL."""
    if port is not None:
        return f"http://{DEFAULT_HOST}:{port}"
    return api_url.rstrip("/")


def call_endpoint(
    base_url: str,
    action: str,
    body: dict[str, Any] | None = None,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, Any]:
    """Call ``/api/<action>`` and return the decoded JSON object.

    Raises:
        ValueError: If ``action`` is not a known endpoint.
        ClientError: On connection failure or a non-JSON response.
    """
    method = ACTIONS.get(action)
    if method is None:
        raise ValueError(f"Unknown action: {action}")

    url = f"{base_url}/api/{action}"
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            if method == "POST":
                response = client.post(url, json=body or {})
            else:
                response = client.get(url)
    except httpx.ConnectError as e:
        raise ClientError(f"Connection failed to {base_url}: {e}") from e
    except httpx.HTTPError as e:
        raise ClientError(f"Request failed: {e}") from e

    try:
        payload = response.json()
    except json.JSONDecodeError as e:
        raise ClientError(f"Invalid JSON response: {e}") from e
    if not isinstance(payload, dict):
        raise ClientError("Response must be a JSON object")
    return payload


def cmd_call(
    base_url: str,
    action: str,
    project_path: str | None = None,
    configuration_name: str | None = None,
    timeout: float = 30.0,
) -> int:
    body: dict[str, Any] = {}
    if project_path is not None:
        body["projectPath"] = project_path
    if configuration_name is not None:
        body["configurationName"] = configuration_name

    try:
        payload = call_endpoint(base_url, action, body, timeout=timeout)
    except ClientError as e:
        _print_error(e.message)
        return 1

    _print_json(payload)
    return 0 if payload.get("success") else 1


def cmd_status(base_url: str, timeout: float = 30.0) -> int:
    """Print ``GET /api/status``."""
    return cmd_call(base_url, "status", timeout=timeout)
