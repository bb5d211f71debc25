"""CLI entrypoints for the project content server."""

from __future__ import annotations

import argparse
import asyncio
import functools
import sys
from pathlib import Path

from .config import DEFAULT_SERVER_NAME
from .errors import ProjectContentError
from .gateway import TOOL_NAME, build_gateway
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-content",
        description="Serve flattened project file contents to MCP clients.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to the settings document holding the directory mapping.",
    )
    parser.add_argument(
        "--server-name",
        default=DEFAULT_SERVER_NAME,
        help="Server entry to read the directory mapping from.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the MCP server over stdio (default).",
    )
    _add_verbose_option(serve_parser, suppress_default=True)

    http_parser = subparsers.add_parser(
        "http",
        help="Run the HTTP service.",
    )
    _add_verbose_option(http_parser, suppress_default=True)
    http_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    http_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    dump_parser = subparsers.add_parser(
        "dump",
        help=f"Run {TOOL_NAME} once and print its payload.",
    )
    _add_verbose_option(dump_parser, suppress_default=True)
    dump_parser.add_argument("project", help="Project identifier to resolve.")

    projects_parser = subparsers.add_parser(
        "projects",
        help="List project identifiers in the directory mapping.",
    )
    _add_verbose_option(projects_parser, suppress_default=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for the project content server."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    command = args.command or "serve"
    # Console shows errors only in stdio mode.
    configure_logging(
        verbose=bool(args.verbose),
        quiet=command == "serve",
        log_file=args.log_file,
    )

    gateway_factory = functools.partial(build_gateway, args.settings, args.server_name)

    if command == "serve":
        from .mcp_server import ProjectContentServer

        server = ProjectContentServer(gateway_factory())
        try:
            asyncio.run(server.run())
        except KeyboardInterrupt:
            parser.exit(130)
    elif command == "http":
        from .service import run_service

        run_service(gateway_factory, host=args.host, port=args.port)
    elif command == "dump":
        gateway = gateway_factory()
        response = asyncio.run(gateway.call(TOOL_NAME, {"projectPath": args.project}))
        if response.is_error:
            parser.exit(1, f"{response.text}\n")
        print(response.text)
    elif command == "projects":
        try:
            project_ids = gateway_factory().resolver.project_ids()
        except ProjectContentError as exc:
            parser.exit(1, f"{exc}\n")
        for project_id in project_ids:
            print(project_id)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
