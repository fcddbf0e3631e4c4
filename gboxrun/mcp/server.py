"""MCP server over stdio.

Reads newline-delimited JSON-RPC 2.0 requests from an input stream and
writes exactly one response line per request to an output stream, flushing
after each. Requests are handled strictly in order.

Error mapping:
    - Line is not a usable request: -32603, id null unless one was readable
    - Unknown method: -32602 naming the method
    - Handler raised: -32602 carrying the exception text
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TextIO

from gboxrun.config.schema import McpConfig
from gboxrun.control.controller import AppController
from gboxrun.control.rerun import DEFAULT_GRACE_PERIOD
from gboxrun.mcp.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    InvalidParamsError,
    ParseError,
    Request,
    Response,
    make_error_response,
    make_success_response,
    parse_request,
    serialize_response,
)
from gboxrun.mcp.tools import ToolRegistry, build_android_tools

logger = logging.getLogger(__name__)

MethodHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class McpServer:
    """JSON-RPC 2.0 server exposing the Android tools.

    Args:
        controller: Backend the tools drive.
        input_stream: Line source. Defaults to sys.stdin.
        output_stream: Line sink. Defaults to sys.stdout.
        config: Identity reported on ``initialize``.
        rerun_grace_period: Seconds between stop and start for the rerun tool.
    """

    def __init__(
        self,
        controller: AppController,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        config: McpConfig | None = None,
        rerun_grace_period: float = DEFAULT_GRACE_PERIOD,
    ) -> None:
        self._input = input_stream if input_stream is not None else sys.stdin
        self._output = output_stream if output_stream is not None else sys.stdout
        self._config = config or McpConfig()
        self._tools: ToolRegistry = build_android_tools(controller, rerun_grace_period)
        self._running = False
        self._handlers: dict[str, MethodHandler] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    async def run(self) -> None:
        """Serve until end of input or until stop() is observed."""
        self._running = True
        logger.info("Starting MCP server in stdio mode")
        try:
            while self._running:
                line = await asyncio.to_thread(self._input.readline)
                if not line:
                    break
                if not line.strip():
                    continue
                self._write(await self._respond(line))
        finally:
            self._running = False
            logger.info("MCP server stopped")

    def stop(self) -> None:
        """Ask the loop to exit before its next read.

        A read already blocked on the input stream only returns once the
        stream yields a line or is closed.
        """
        self._running = False

    async def _respond(self, line: str) -> str:
        try:
            return serialize_response(await self.handle_line(line))
        except Exception as e:
            logger.error("Error processing MCP request", exc_info=True)
            return serialize_response(
                make_error_response(None, INTERNAL_ERROR, f"Internal error: {e}")
            )

    def _write(self, payload: str) -> None:
        self._output.write(payload)
        self._output.write("\n")
        self._output.flush()

    async def handle_line(self, line: str) -> Response:
        """Parse and handle one input line."""
        try:
            request = parse_request(line)
        except ParseError as e:
            logger.error("Error parsing MCP request: %s", e.message)
            return make_error_response(
                e.request_id, INTERNAL_ERROR, f"Internal error: {e.message}"
            )
        return await self.handle_request(request)

    async def handle_request(self, request: Request) -> Response:
        """Dispatch a parsed request to its method handler."""
        handler = self._handlers.get(request.method)
        if handler is None:
            return make_error_response(
                request.id, INVALID_PARAMS, f"Unknown method: {request.method}"
            )

        try:
            result = await handler(request.params)
        except Exception as e:
            logger.error("Error handling MCP request %s", request.method, exc_info=True)
            return make_error_response(request.id, INVALID_PARAMS, str(e) or "Unknown error")

        return make_success_response(request.id, result)

    async def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        return {
            "protocolVersion": self._config.protocol_version,
            "capabilities": {
                "logging": {},
                "tools": {"listChanged": True},
            },
            "serverInfo": {
                "name": self._config.server_name,
                "version": self._config.server_version,
            },
        }

    async def _handle_ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": self._tools.list_tools()}

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise InvalidParamsError("Tool name is required")
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}
        return await self._tools.call(name, arguments)
