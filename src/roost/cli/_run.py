"""``roost run``: development server command."""

import argparse
import logging
import sys

from roost.cli._resolve import resolve_router


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.router`` and serve it with pounce.

    CLI flags override the router's config.
    """
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    level = (args.log_level or router.config.log_level).upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    host = args.host or router.config.host
    port = args.port or router.config.port

    from roost.server.dev import run_dev_server

    run_dev_server(
        router,
        host,
        port,
        reload=router.config.debug,
        app_path=args.router if router.config.debug else None,
    )
