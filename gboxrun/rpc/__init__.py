"""Embedded HTTP control plane for app lifecycle operations."""

from gboxrun.rpc.http import (
    HttpParseError,
    HttpRequest,
    build_http_response,
    read_http_request,
    send_http_response,
    serialize_api_response,
)
from gboxrun.rpc.routes import ApiRequest, ApiRouter, decode_body
from gboxrun.rpc.server import ApiServer, ServerState

__all__ = [
    "ApiRequest",
    "ApiRouter",
    "ApiServer",
    "HttpParseError",
    "HttpRequest",
    "ServerState",
    "build_http_response",
    "decode_body",
    "read_http_request",
    "send_http_response",
    "serialize_api_response",
]
