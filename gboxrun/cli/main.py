"""gboxrun CLI entry point."""

import asyncio
import sys

from dotenv import load_dotenv

from gboxrun.cli.arg_parser import build_parser
from gboxrun.cli.client_commands import cmd_call, cmd_status, resolve_base_url
from gboxrun.cli.serve import run_mcp, run_serve
from gboxrun.config.loader import load_config
from gboxrun.core.errors import ConfigError


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    load_dotenv()

    try:
        config = load_config(path=args.config)
    except ConfigError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        sys.exit(1)

    if args.command == "serve":
        code = asyncio.run(run_serve(
            config,
            host=args.host,
            port=args.port,
            verbose=args.verbose,
            log_dir=args.log_dir,
        ))
    elif args.command == "mcp":
        code = asyncio.run(run_mcp(
            config,
            api_url=args.api_url,
            simulate=args.simulate,
            verbose=args.verbose,
            log_dir=args.log_dir,
        ))
    elif args.command == "status":
        code = cmd_status(
            resolve_base_url(config.backend.api_url, args.port),
            timeout=config.backend.timeout,
        )
    else:
        code = cmd_call(
            resolve_base_url(config.backend.api_url, args.port),
            args.action,
            project_path=args.project_path,
            configuration_name=args.configuration_name,
            timeout=config.backend.timeout,
        )
    sys.exit(code)
