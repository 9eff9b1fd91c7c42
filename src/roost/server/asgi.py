"""ASGI adapter: serves a roost Router to any ASGI 3 server.

The router's pipeline is synchronous, so each request is dispatched in
a worker thread via anyio and the final response is sent back through
``send()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import anyio.to_thread

from roost._internal.asgi import Receive, Scope, Send
from roost.http.request import RequestContext
from roost.server.sender import send_response

if TYPE_CHECKING:
    from roost.router import Router

logger = logging.getLogger("roost.server")


class ASGIAdapter:
    """ASGI 3.0 application wrapping a ``Router``.

    Usage::

        app = router.asgi()   # hand ``app`` to pounce, uvicorn, ...
    """

    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        request = RequestContext.from_asgi(scope)
        result = await anyio.to_thread.run_sync(self.router.dispatch, request)
        await send_response(result.response, send, suppress_body=result.suppress_body)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze the router at startup so resolution errors fail fast."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self.router.freeze()
                except Exception as exc:
                    logger.exception("Router failed to start")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
