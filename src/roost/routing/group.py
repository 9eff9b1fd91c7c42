"""Route prefixing and mountable route groups.

``Router.mount("/api", block)`` hands *block* a ``RouteGroup`` bound to
the ``/api`` prefix. Groups are plain values: nesting composes prefixes
without touching any shared state::

    def api(group: RouteGroup) -> None:
        group.get("/users", list_users)          # GET /api/users
        group.mount("/admin", admin_routes)      # /api/admin/...

    router.mount("/api", api)
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roost._internal.types import HandlerRef
from roost.errors import ConfigurationError
from roost.routing.route import RouteKind

if TYPE_CHECKING:
    from roost.router import Router


def join_prefix(prefix: str, child: str) -> str:
    """Compose two mount prefixes into one.

    The result has a single leading slash and no trailing slash, or is
    empty when both parts are empty.
    """
    parts = [p for p in (prefix.strip("/"), child.strip("/")) if p]
    if not parts:
        return ""
    return "/" + "/".join(parts)


def prefix_pattern(prefix: str, pattern: str) -> str:
    """Apply a mount prefix to a route pattern.

    ``("", "/about/")`` -> ``"/about"``; ``("/api", "/")`` -> ``"/api"``;
    ``("", "/")`` -> ``"/"``.
    """
    joined = prefix + "/" + pattern.strip("/")
    return joined.rstrip("/") if prefix else joined


def accepts_group(block: Callable[..., Any]) -> bool:
    """Whether a mount block takes the group as a positional argument."""
    try:
        params = inspect.signature(block).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
        inspect.Parameter.VAR_POSITIONAL,
    )
    return any(p.kind in positional for p in params)


@dataclass(frozen=True, slots=True)
class RouteGroup:
    """Registration surface scoped to a prefix.

    Mirrors the router's registration methods; every pattern passed in
    is prefixed with ``prefix`` before it reaches the route tables.
    """

    router: Router
    prefix: str = ""

    # -- Middleware --

    def before(self, methods: str, pattern: str, handler: HandlerRef) -> None:
        """Register a before-middleware handler under this prefix."""
        self.router._register(RouteKind.BEFORE, methods, pattern, handler, prefix=self.prefix)

    def after(self, methods: str, pattern: str, handler: HandlerRef) -> None:
        """Register an after-middleware handler under this prefix."""
        self.router._register(RouteKind.AFTER, methods, pattern, handler, prefix=self.prefix)

    # -- Routes --

    def match(self, methods: str, pattern: str, handler: HandlerRef) -> None:
        """Register a route for ``|``-delimited *methods* under this prefix."""
        self.router._register(RouteKind.MAIN, methods, pattern, handler, prefix=self.prefix)

    def all(self, pattern: str, handler: HandlerRef) -> None:
        self.match("|".join(self.router.config.all_methods), pattern, handler)

    def get(self, pattern: str, handler: HandlerRef) -> None:
        self.match("GET", pattern, handler)

    def post(self, pattern: str, handler: HandlerRef) -> None:
        self.match("POST", pattern, handler)

    def put(self, pattern: str, handler: HandlerRef) -> None:
        self.match("PUT", pattern, handler)

    def patch(self, pattern: str, handler: HandlerRef) -> None:
        self.match("PATCH", pattern, handler)

    def delete(self, pattern: str, handler: HandlerRef) -> None:
        self.match("DELETE", pattern, handler)

    def options(self, pattern: str, handler: HandlerRef) -> None:
        self.match("OPTIONS", pattern, handler)

    # -- Nesting --

    def mount(self, prefix: str, block: Callable[..., Any]) -> None:
        """Mount *block* on ``self.prefix + prefix``."""
        self.router._mount(join_prefix(self.prefix, prefix), block)

    def set_404(self, pattern: str | HandlerRef, handler: HandlerRef | None = None) -> None:
        """Register a fallback; a pattern given here is prefixed too."""
        if handler is None:
            self.router.set_404(pattern)
            return
        if not isinstance(pattern, str):
            msg = f"Fallback pattern must be a string, got {pattern!r}."
            raise ConfigurationError(msg)
        if pattern.strip("/") == "" and not self.prefix:
            self.router.set_404(handler)
            return
        self.router._set_fallback(prefix_pattern(self.prefix, pattern), handler)
