"""JSON-RPC 2.0 message types, parsing, and serialization for the stdio server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from gboxrun.core.errors import GboxError

# JSON-RPC 2.0 error codes
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Echoed verbatim, whatever JSON value the request carried
RequestId = Any


@dataclass
class Request:
    """JSON-RPC 2.0 request.

    Attributes:
        jsonrpc: Protocol version, normally "2.0".
        method: Name of the method to invoke.
        params: Named parameters (empty when omitted).
        id: Request identifier, echoed in the response.
    """

    jsonrpc: str
    method: str
    params: dict[str, Any]
    id: RequestId = None


@dataclass
class Response:
    """JSON-RPC 2.0 response. Exactly one of result/error is set on the wire."""

    jsonrpc: str
    id: RequestId
    result: Any | None = None
    error: dict[str, Any] | None = None


class ParseError(GboxError):
    """Raised when a line is not a usable JSON-RPC request.

    ``request_id`` is kept when the line was a JSON object carrying an id, so
    the error reply can still be correlated.
    """

    def __init__(self, message: str, request_id: RequestId = None) -> None:
        super().__init__(message)
        self.request_id = request_id


class InvalidParamsError(GboxError):
    """Raised when method or tool parameters are invalid."""


def parse_request(line: str) -> Request:
    """Parse a JSON line into a Request.

    The ``jsonrpc`` member is not enforced; a missing value defaults to "2.0".
    The ``id`` is kept as sent (number, string, object, array or null).

    Raises:
        ParseError: If the JSON is invalid or the object lacks a string method.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Request must be a JSON object")

    request_id = data.get("id")

    method = data.get("method")
    if not isinstance(method, str):
        raise ParseError(
            f"method must be a string, got: {type(method).__name__}", request_id
        )

    params = data.get("params")
    if params is None:
        params = {}
    elif not isinstance(params, dict):
        raise ParseError(
            f"params must be an object, got: {type(params).__name__}", request_id
        )

    return Request(
        jsonrpc=str(data.get("jsonrpc", "2.0")),
        method=method,
        params=params,
        id=request_id,
    )


def serialize_response(response: Response) -> str:
    """Serialize a Response to a single JSON line (no trailing newline)."""
    data: dict[str, Any] = {
        "jsonrpc": response.jsonrpc,
        "id": response.id,
    }
    if response.error is not None:
        data["error"] = response.error
    else:
        data["result"] = response.result
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def make_error_response(
    request_id: RequestId,
    code: int,
    message: str,
    data: Any = None,
) -> Response:
    """Create an error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return Response(jsonrpc="2.0", id=request_id, error=error)


def make_success_response(request_id: RequestId, result: Any) -> Response:
    """Create a success response."""
    return Response(jsonrpc="2.0", id=request_id, result=result)
