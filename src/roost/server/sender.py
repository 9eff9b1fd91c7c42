"""ASGI response sending. Translates a finished response to ASGI messages."""

import logging
from typing import Any

from roost._internal.asgi import Send
from roost.server.emitter import body_allowed, body_bytes, header_pairs

logger = logging.getLogger("roost.server")


async def send_response(response: Any, send: Send, *, suppress_body: bool = False) -> None:
    """Translate a response into ASGI ``send()`` calls.

    With *suppress_body* (HEAD requests) the ``content-length`` still
    describes the full body, but no body bytes are sent.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (name.lower().encode("latin-1"), str(value).encode("latin-1"))
        for name, value in header_pairs(response)
    ]

    body = body_bytes(response) if body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if suppress_body else body,
        }
    )
