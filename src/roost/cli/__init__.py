"""Roost CLI: route listing and development server.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="Roost: a method and pattern request router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- roost routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )

    # -- roost run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the development server")
    run_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level for roost loggers",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from roost.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from roost.cli._run import run_server

        run_server(args)
