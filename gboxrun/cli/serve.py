"""Long-running front ends: the HTTP control plane and the stdio MCP server."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path

from gboxrun.config.schema import Config
from gboxrun.control.controller import AppController
from gboxrun.control.remote import PluginApiController
from gboxrun.control.simulated import SimulatedController
from gboxrun.core.constants import get_default_log_dir
from gboxrun.core.encoding import configure_stdio
from gboxrun.mcp.server import McpServer
from gboxrun.rpc.bootstrap import configure_logging
from gboxrun.rpc.server import ApiServer

logger = logging.getLogger(__name__)


def _simulated_controller(config: Config) -> SimulatedController:
    return SimulatedController(
        config.backend.simulated_configurations,
        project_path=config.backend.project_path,
    )


def _install_stop_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            logger.debug("Signal handler for %s not installed", sig)


async def run_serve(
    config: Config,
    *,
    host: str | None = None,
    port: int | None = None,
    verbose: bool = False,
    log_dir: Path | None = None,
) -> int:
    """Run the HTTP control plane until SIGINT/SIGTERM.

    Returns:
        Process exit code (1 if the socket could not be bound).
    """
    configure_logging(
        log_dir or get_default_log_dir(),
        level=getattr(logging, config.server.log_level),
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )

    try:
        server = ApiServer(
            _simulated_controller(config),
            host=host or config.server.host,
            port=port if port is not None else config.server.port,
            rerun_grace_period=config.backend.rerun_grace_period,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = await server.start()
    if not result.success:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    print(result.message, file=sys.stderr)
    print(f"API endpoints available at http://{server.host}:{server.port}/api/", file=sys.stderr)

    stop_event = asyncio.Event()
    _install_stop_handlers(stop_event)
    try:
        await stop_event.wait()
    finally:
        await server.stop()
    return 0


async def run_mcp(
    config: Config,
    *,
    api_url: str | None = None,
    simulate: bool = False,
    verbose: bool = False,
    log_dir: Path | None = None,
) -> int:
    """Run the stdio MCP server until its input closes."""
    configure_stdio()
    configure_logging(
        log_dir,
        level=logging.INFO,
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )

    controller: AppController
    if simulate:
        controller = _simulated_controller(config)
    else:
        controller = PluginApiController(
            api_url or config.backend.api_url,
            timeout=config.backend.timeout,
        )

    server = McpServer(
        controller,
        config=config.mcp,
        rerun_grace_period=config.backend.rerun_grace_period,
    )
    await server.run()
    return 0
