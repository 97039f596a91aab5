from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import orjson

from .config import get_settings
from .dates.date_tools import execute_date_tool
from .logging import configure_logging


def _parse_arguments(pairs: List[str]) -> Dict[str, Any]:
    arguments: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair!r}")
        try:
            arguments[key] = orjson.loads(raw)
        except orjson.JSONDecodeError:
            arguments[key] = raw
    return arguments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prompt Planner command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the HTTP API server.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    mcp_parser = subparsers.add_parser("mcp", help="Start the FastMCP server exposing the date tools.")
    mcp_parser.add_argument("--host", default="127.0.0.1")
    mcp_parser.add_argument("--port", type=int, default=8765)

    tool_parser = subparsers.add_parser("tool", help="Run one date tool, e.g. get_day_of_week date=2026-03-15.")
    tool_parser.add_argument("name")
    tool_parser.add_argument("arguments", nargs="*", metavar="key=value")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings)
    logging.getLogger(__name__).info("Prompt Planner CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command == "mcp":
        from .services.mcp import run_mcp_server

        run_mcp_server(host=args.host, port=args.port)
    elif args.command == "tool":
        try:
            arguments = _parse_arguments(args.arguments)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))
        result = execute_date_tool(args.name, arguments)
        sys.stdout.write(orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2).decode() + "\n")
        return 0 if result.success else 1
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
