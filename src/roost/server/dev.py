"""Development server.

Starts a pounce ASGI server with the live roost Router.
"""

from __future__ import annotations

from typing import Any


def run_dev_server(
    app: Any,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a single-worker pounce server for *app*.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:router"``),
    but we hold a live router, so ``pounce.Server`` is used directly.

    Args:
        app: ASGI callable (a ``Router`` or ``Router.asgi()``).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        app_path: Optional ``"module:attribute"`` import string that
            pounce re-imports on each reload cycle so code changes on
            disk take effect.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
