"""Argument parsing for the gboxrun CLI."""

import argparse
from pathlib import Path

from gboxrun import __version__
from gboxrun.cli.client_commands import ACTIONS


def add_port_arg(parser: argparse.ArgumentParser, help_text: str) -> None:
    """Add --port argument to a parser."""
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help=help_text,
    )


def add_logging_args(parser: argparse.ArgumentParser) -> None:
    """Add --verbose/--log-dir arguments to a parser."""
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log DEBUG output to stderr",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for server.log (default: ~/.gboxrun/logs)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gboxrun",
        description="Control an Android app's run lifecycle from AI agents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Explicit config file (skips ~/.gboxrun and ./.gboxrun layering)",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP control plane with the simulated controller",
        description=(
            "Serve the /api/* control plane on localhost. Outside an IDE host "
            "the backend is an in-memory simulated controller."
        ),
    )
    add_port_arg(serve_parser, "Port to listen on (default: config server.port, 8765)")
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Loopback host to bind (default: config server.host, localhost)",
    )
    add_logging_args(serve_parser)

    mcp_parser = subparsers.add_parser(
        "mcp",
        help="Run the MCP server over stdin/stdout",
        description=(
            "Serve JSON-RPC 2.0 on stdio. Tools forward to the HTTP control plane "
            "unless --simulate is given."
        ),
    )
    mcp_parser.add_argument(
        "--api-url",
        default=None,
        help="Control plane base URL (default: config backend.api_url)",
    )
    mcp_parser.add_argument(
        "--simulate",
        action="store_true",
        help="Use the in-process simulated controller instead of HTTP",
    )
    add_logging_args(mcp_parser)

    status_parser = subparsers.add_parser(
        "status",
        help="Query GET /api/status on a running control plane",
    )
    add_port_arg(status_parser, "Control plane port (default: from backend.api_url)")

    call_parser = subparsers.add_parser(
        "call",
        help="Call one control plane endpoint and print the JSON response",
    )
    call_parser.add_argument("action", choices=sorted(ACTIONS), help="Endpoint under /api/")
    call_parser.add_argument("--project-path", default=None, help="Android project path")
    call_parser.add_argument(
        "--configuration-name",
        default=None,
        help="Run configuration name (select-configuration)",
    )
    add_port_arg(call_parser, "Control plane port (default: from backend.api_url)")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)
