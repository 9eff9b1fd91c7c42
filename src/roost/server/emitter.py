"""Emission collaborators.

The router finishes a request by handing the final response to an
emitter exactly once. ``suppress_body`` is set for HEAD requests: the
status line and headers go out, the body does not.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, BinaryIO, Protocol

logger = logging.getLogger("roost.server")


class Emitter(Protocol):
    """Anything that can put a finished response on the wire.

    Accepts both classes and plain callables wrapped in a class::

        class LogEmitter:
            def emit(self, response, *, suppress_body=False) -> None:
                print(response.status)
    """

    def emit(self, response: Any, *, suppress_body: bool = False) -> None: ...


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def body_bytes(response: Any) -> bytes:
    """The response body as bytes, whatever type the handler used."""
    body = response.body
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    return str(body).encode("utf-8")


def header_pairs(response: Any) -> list[tuple[str, str]]:
    """Headers of any contract-conforming response as ``(name, value)`` pairs.

    ``Response`` keeps headers as a tuple of pairs; host objects may
    use a mapping instead. A ``content_type`` attribute, when present,
    becomes the ``Content-Type`` header.
    """
    headers = response.headers
    pairs = list(headers.items()) if hasattr(headers, "items") else list(headers or ())
    content_type = getattr(response, "content_type", None)
    if content_type and not any(name.lower() == "content-type" for name, _ in pairs):
        pairs.insert(0, ("Content-Type", content_type))
    return pairs


def status_line(status: int) -> str:
    """``"404 Not Found"`` for 404; bare code for unknown statuses."""
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


@dataclass(frozen=True, slots=True)
class Emission:
    """One recorded emission."""

    response: Any
    suppress_body: bool = False

    @property
    def status(self) -> int:
        return self.response.status

    @property
    def body(self) -> bytes:
        """Body as it went on the wire (empty when suppressed)."""
        if self.suppress_body or not body_allowed(self.response.status):
            return b""
        return body_bytes(self.response)


class RecordingEmitter:
    """Keeps every emitted response in memory.

    Used by the test client and by hosts that translate the final
    response themselves (the ASGI adapter).
    """

    __slots__ = ("emissions",)

    def __init__(self) -> None:
        self.emissions: list[Emission] = []

    def emit(self, response: Any, *, suppress_body: bool = False) -> None:
        self.emissions.append(Emission(response, suppress_body))

    @property
    def last(self) -> Emission | None:
        return self.emissions[-1] if self.emissions else None


class CGIEmitter:
    """Writes a CGI response (``Status:`` line, headers, body) to a stream.

    The default emitter of ``Router.run()``: a CGI entry script builds
    its router, calls ``run()`` and the response lands on stdout.
    """

    __slots__ = ("_stream",)

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream

    def emit(self, response: Any, *, suppress_body: bool = False) -> None:
        stream = self._stream if self._stream is not None else sys.stdout.buffer
        lines = [f"Status: {status_line(response.status)}"]
        lines.extend(f"{name}: {value}" for name, value in header_pairs(response))
        head = ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")

        body = b""
        if not suppress_body and body_allowed(response.status):
            body = body_bytes(response)

        stream.write(head + body)
        stream.flush()
        logger.debug("Emitted %s (%d body bytes)", response.status, len(body))
