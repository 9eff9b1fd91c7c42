"""Immutable request context.

The router never reads process globals while dispatching. Everything it
needs about the inbound request (raw method, raw URI, the entry script's
path, and headers) is captured once in a ``RequestContext`` and passed
through the pipeline.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from roost.http.headers import Headers


@dataclass(frozen=True, slots=True)
class RequestContext:
    """The inputs the router consumes for one request.

    ``uri`` is the raw request target and may still carry a query string;
    ``script_name`` is the path of the entry script (``/blog/index.py``)
    used to derive the base path when none is set explicitly.
    """

    method: str
    uri: str
    script_name: str = ""
    headers: Headers = field(default_factory=Headers)

    @classmethod
    def build(
        cls,
        method: str,
        uri: str,
        *,
        headers: Mapping[str, str] | None = None,
        script_name: str = "",
    ) -> RequestContext:
        """Create a context from plain values (tests, embedding hosts)."""
        return cls(
            method=method.upper(),
            uri=uri,
            script_name=script_name,
            headers=Headers.from_mapping(headers),
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> RequestContext:
        """Create a context from CGI/WSGI environ variables.

        Defaults to ``os.environ`` so a CGI entry script can call
        ``router.run()`` with no arguments.
        """
        env = os.environ if environ is None else environ
        uri = env.get("REQUEST_URI")
        if uri is None:
            uri = env.get("PATH_INFO", "") or "/"
            query = env.get("QUERY_STRING", "")
            if query:
                uri = f"{uri}?{query}"
        return cls(
            method=env.get("REQUEST_METHOD", "GET").upper(),
            uri=uri,
            script_name=env.get("SCRIPT_NAME", ""),
            headers=Headers.from_environ(env),
        )

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> RequestContext:
        """Create a context from an ASGI HTTP scope.

        ``root_path`` plays the role of the entry script's directory.
        The URI is kept percent-encoded, like a CGI ``REQUEST_URI``:
        ``raw_path`` when the server provides it, else ``path`` re-quoted.
        """
        raw_path = scope.get("raw_path")
        if raw_path:
            uri = quote(raw_path, safe="/%")
        else:
            uri = quote(scope.get("path", "/"))
        query = scope.get("query_string", b"")
        if query:
            uri = f"{uri}?{query.decode('latin-1')}"
        root_path = scope.get("root_path", "")
        return cls(
            method=scope["method"].upper(),
            uri=uri,
            script_name=f"{root_path.rstrip('/')}/",
            headers=Headers.from_raw(scope.get("headers", ())),
        )
