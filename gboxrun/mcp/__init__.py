"""MCP (JSON-RPC 2.0 over stdio) front end for the Android tools."""

from gboxrun.mcp.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    InvalidParamsError,
    ParseError,
    Request,
    Response,
    parse_request,
    serialize_response,
)
from gboxrun.mcp.server import McpServer
from gboxrun.mcp.tools import ToolDescriptor, ToolRegistry, build_android_tools

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "InvalidParamsError",
    "McpServer",
    "ParseError",
    "Request",
    "Response",
    "ToolDescriptor",
    "ToolRegistry",
    "build_android_tools",
    "parse_request",
    "serialize_response",
]
