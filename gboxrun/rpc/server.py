"""Lifecycle of the HTTP control plane.

ApiServer owns one listening socket between ``start()`` and ``stop()``.
Each accepted connection is served by its own task: one request is read,
dispatched through ApiRouter, answered, and the connection is closed. A
slow backend call stalls only the task that made it.

Example usage:
    server = ApiServer(SimulatedController())
    result = await server.start()
    ...
    await server.stop()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

from gboxrun import __version__
from gboxrun.control.controller import AppController
from gboxrun.control.rerun import DEFAULT_GRACE_PERIOD
from gboxrun.core.constants import DEFAULT_HOST, DEFAULT_PORT
from gboxrun.core.errors import BindError
from gboxrun.core.types import ApiResponse
from gboxrun.rpc.bootstrap import SERVER_LOGGER_NAME
from gboxrun.rpc.http import HttpParseError, read_http_request, send_http_response
from gboxrun.rpc.routes import ApiRouter

logger = logging.getLogger(__name__)
server_logger = logging.getLogger(SERVER_LOGGER_NAME)

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class ServerState(Enum):
    """Lifecycle state of an ApiServer."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class ApiServer:
    """HTTP control plane bound to localhost.

    Args:
        controller: Backend for the ``/api/*`` handlers.
        host: Loopback host to bind. Anything else is rejected.
        port: Port to bind (0 picks an ephemeral port).
        version: Version reported by ``GET /api/status``.
        rerun_grace_period: Seconds between stop and start during a rerun.

    Raises:
        ValueError: If ``host`` is not a loopback address.
    """

    def __init__(
        self,
        controller: AppController,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        version: str = __version__,
        rerun_grace_period: float = DEFAULT_GRACE_PERIOD,
    ) -> None:
        if host not in LOOPBACK_HOSTS:
            raise ValueError(f"API server must bind to localhost only, not {host!r}")

        self._host = host
        self._requested_port = port
        self._port = port
        self._state = ServerState.STOPPED
        self._server: asyncio.Server | None = None
        self._connections: set[asyncio.Task[None]] = set()
        # start() and stop() run one at a time
        self._lifecycle_lock = asyncio.Lock()
        self._router = ApiRouter(
            controller,
            port=port,
            version=version,
            rerun_grace_period=rerun_grace_period,
        )

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ServerState.RUNNING

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        """Bound port while running, otherwise the requested port."""
        return self._port

    @property
    def router(self) -> ApiRouter:
        return self._router

    async def start(self) -> ApiResponse:
        """Bind the listening socket and begin accepting in the background.

        Returns once the socket is bound. Bind failures and a start while
        already started come back as a failed ApiResponse.
        """
        async with self._lifecycle_lock:
            if self._state is not ServerState.STOPPED:
                return ApiResponse(False, f"API server is already running on port {self._port}")

            self._state = ServerState.STARTING
            try:
                server = await self._bind()
            except BindError as e:
                self._state = ServerState.STOPPED
                server_logger.error("Failed to start API server: %s", e.message)
                return ApiResponse(False, f"Failed to start API server: {e.reason}")

            self._server = server
            sockets = server.sockets
            if sockets:
                self._port = sockets[0].getsockname()[1]
            self._router.port = self._port
            self._state = ServerState.RUNNING

        server_logger.info("Run-API-Server started on http://%s:%s/api/", self._host, self._port)
        return ApiResponse(True, f"API server started successfully on port {self._port}")

    async def _bind(self) -> asyncio.Server:
        try:
            return await asyncio.start_server(
                self._handle_client,
                host=self._host,
                port=self._requested_port,
            )
        except OSError as e:
            raise BindError(self._host, self._requested_port, e.strerror or str(e)) from e

    async def stop(self) -> ApiResponse:
        """Close the listening socket and abandon in-flight connections.

        Calling stop when not running is a successful no-op. A stop issued
        while a start is still binding waits for it and then stops.
        """
        async with self._lifecycle_lock:
            server = self._server
            if server is None:
                return ApiResponse(True, "API server is not running")

            self._server = None
            server.close()
            for task in list(self._connections):
                task.cancel()
            await server.wait_closed()

            self._state = ServerState.STOPPED
            self._port = self._requested_port
        server_logger.info("API server stopped")
        return ApiResponse(True, "API server stopped successfully")

    def status(self) -> ApiResponse:
        """Report whether the server is accepting connections."""
        if self.is_running:
            return ApiResponse(True, f"Server is running on port {self._port}")
        return ApiResponse(False, "Server is not running")

    @asynccontextmanager
    async def _connection_scope(self, writer: asyncio.StreamWriter) -> AsyncIterator[None]:
        """Track the serving task and close the connection on every exit path."""
        task = asyncio.current_task()
        if task is not None:
            self._connections.add(task)
        try:
            yield
        finally:
            if task is not None:
                self._connections.discard(task)
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as e:
                logger.debug("Error closing connection: %s", e)

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        async with self._connection_scope(writer):
            try:
                request = await read_http_request(reader)
            except HttpParseError as e:
                logger.debug("Dropping malformed HTTP request: %s", e.message)
                return
            except (ConnectionError, OSError) as e:
                logger.error("Error reading HTTP request: %s", e)
                return

            logger.debug("%s %s", request.method, request.path)
            response = await self._router.dispatch(request.method, request.path, request.body)

            try:
                await send_http_response(writer, response)
            except (ConnectionError, OSError) as e:
                logger.error("Error writing HTTP response: %s", e)

