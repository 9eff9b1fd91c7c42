"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Handlers receive the
current response and hand back the next one; nothing is mutated in
place.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResponseContract(Protocol):
    """What every handler return value must provide.

    Structural: ``Response`` satisfies it, and so does any host object
    exposing ``status``, ``headers`` and ``body``.
    """

    status: int
    headers: Any
    body: Any


def is_response(value: object) -> bool:
    """Whether *value* satisfies the response contract."""
    return isinstance(value, ResponseContract)


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def without_header(self, name: str) -> Response:
        """Return a new Response with every *name* header removed."""
        lower = name.lower()
        return replace(self, headers=tuple(h for h in self.headers if h[0].lower() != lower))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class Redirect(Response):
    """A redirect response.

    Returning one from any handler ends the pipeline: the router emits
    it straight away instead of running the remaining handlers.
    """

    url: str = ""
    status: int = 302

    def __post_init__(self) -> None:
        if self.url and not any(k.lower() == "location" for k, _ in self.headers):
            object.__setattr__(self, "headers", (*self.headers, ("Location", self.url)))


def redirect(url: str, status: int = 302) -> Redirect:
    """Shorthand for ``Redirect(url=url, status=status)``."""
    return Redirect(url=url, status=status)
