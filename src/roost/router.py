"""The roost router: registration and the per-request run loop.

Mutable during setup (route registration, controllers, namespace).
Frozen on the first dispatch, when every ``"Controller@method"``
reference is resolved; after that the route tables are read-only.

One request runs through::

    method normalization -> BEFORE -> MAIN -> (AFTER | NOT FOUND) -> emit

Before and after middleware run every matching entry in registration
order. Exactly one main route runs: the first whose pattern matches.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from roost._internal.types import HandlerRef
from roost.config import RouterConfig
from roost.dispatch.controllers import ControllerRegistry
from roost.dispatch.invoker import Invoker, split_reference
from roost.dispatch.result import DispatchResult
from roost.errors import ConfigurationError, NotFound
from roost.http.basepath import derive_base_path, normalize_path
from roost.http.request import RequestContext
from roost.http.response import Redirect, Response
from roost.routing.group import RouteGroup, accepts_group, join_prefix, prefix_pattern
from roost.routing.pattern import match_pattern
from roost.routing.route import RouteEntry, RouteKind
from roost.routing.table import RouteTable
from roost.server.emitter import CGIEmitter, Emitter

if TYPE_CHECKING:
    from roost._internal.asgi import Receive, Scope, Send
    from roost.server.asgi import ASGIAdapter

logger = logging.getLogger("roost.router")


class _Halt(Exception):  # noqa: N818
    """A handler returned a redirect; stop running handlers."""


class _Dispatch:
    """Per-request state: the current response and how far we got."""

    __slots__ = ("invoker", "main_handled", "response")

    def __init__(self, invoker: Invoker) -> None:
        self.invoker = invoker
        self.response: Any = Response()
        self.main_handled = False

    def call(self, handler: HandlerRef, params: list[str | None]) -> None:
        self.response = self.invoker.invoke(handler, self.response, params)
        if isinstance(self.response, Redirect):
            logger.debug("Redirect to %s, skipping remaining handlers", self.response.url)
            raise _Halt

    def run_all(self, matches: Iterator[tuple[RouteEntry, list[str | None]]]) -> int:
        count = 0
        for entry, params in matches:
            self.call(entry.handler, params)
            count += 1
        return count

    def run_first(self, matches: Iterator[tuple[RouteEntry, list[str | None]]]) -> bool:
        for entry, params in matches:
            logger.debug("Matched %s -> %s", entry.pattern, entry.handler_name)
            self.main_handled = True
            self.call(entry.handler, params)
            return True
        return False


class Router:
    """Method + pattern request router.

    Usage::

        router = Router()
        router.before("GET|POST", "/admin/.*", require_login)
        router.get("/users/{id}", show_user)
        router.mount("/api", api_routes)
        router.set_404(not_found)
        router.run()  # reads the CGI environment, writes to stdout

    Thread safety:
        Registration is single-threaded (module import time). The freeze
        transition uses a Lock + double-check so exactly one thread
        resolves handlers, even when ASGI worker threads dispatch the
        first requests concurrently.
    """

    __slots__ = (
        "_base_path",
        "_catch_all",
        "_controllers",
        "_emitter",
        "_fallbacks",
        "_freeze_lock",
        "_frozen",
        "_invoker",
        "_prefix",
        "_tables",
        "after_routes",
        "before_routes",
        "config",
        "routes",
    )

    def __init__(self, config: RouterConfig | None = None, *, emitter: Emitter | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.before_routes = RouteTable()
        self.routes = RouteTable()
        self.after_routes = RouteTable()
        self._tables: dict[RouteKind, RouteTable] = {
            RouteKind.BEFORE: self.before_routes,
            RouteKind.MAIN: self.routes,
            RouteKind.AFTER: self.after_routes,
        }
        self._fallbacks: dict[str, HandlerRef] = {}
        self._catch_all: HandlerRef | None = None
        self._prefix = ""
        self._base_path: str | None = self.config.base_path
        self._controllers = ControllerRegistry()
        self._invoker = Invoker(self._controllers, self.config.namespace)
        self._emitter = emitter
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Middleware registration --

    def before(self, methods: str, pattern: str, handler: HandlerRef) -> None:
        """Register before middleware for ``|``-delimited *methods*.

        Every matching before handler runs ahead of the main route.
        """
        self._register(RouteKind.BEFORE, methods, pattern, handler)

    def after(self, methods: str, pattern: str, handler: HandlerRef) -> None:
        """Register after middleware for ``|``-delimited *methods*.

        Runs only when a main route handled the request.
        """
        self._register(RouteKind.AFTER, methods, pattern, handler)

    # -- Route registration --

    def match(self, methods: str, pattern: str, handler: HandlerRef) -> None:
        """Register a route for ``|``-delimited *methods*.

        Args:
            methods: HTTP methods, e.g. ``"GET|POST"``.
            pattern: Route pattern. Use ``{name}`` for positional parameters.
            handler: A callable ``handler(response, *params)`` or a
                ``"Controller@method"`` string.
        """
        self._register(RouteKind.MAIN, methods, pattern, handler)

    def all(self, pattern: str, handler: HandlerRef) -> None:
        """Register a route for every method in ``config.all_methods``."""
        self.match("|".join(self.config.all_methods), pattern, handler)

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

    def mount(self, prefix: str, block: Callable[..., Any] | None = None) -> RouteGroup:
        """Mount a group of routes on *prefix*.

        A *block* that takes one argument receives the ``RouteGroup``.
        A zero-argument block may register through the router directly;
        the prefix applies for the duration of the block only. Either
        way the group is returned for further registration.
        """
        full = join_prefix(self._prefix, prefix)
        if block is not None:
            self._mount(full, block)
        return RouteGroup(self, full)

    def _mount(self, prefix: str, block: Callable[..., Any]) -> None:
        self._check_not_frozen()
        if accepts_group(block):
            block(RouteGroup(self, prefix))
            return
        previous = self._prefix
        self._prefix = prefix
        try:
            block()
        finally:
            self._prefix = previous

    def _register(
        self,
        kind: RouteKind,
        methods: str,
        pattern: str,
        handler: HandlerRef,
        *,
        prefix: str | None = None,
    ) -> None:
        self._check_not_frozen()
        if isinstance(handler, str):
            split_reference(handler)
        elif not callable(handler):
            msg = f"Handler for {pattern!r} must be callable or 'Controller@method', got {handler!r}."
            raise ConfigurationError(msg)

        entry = RouteEntry(prefix_pattern(self._prefix if prefix is None else prefix, pattern), handler)
        table = self._tables[kind]
        for token in methods.split("|"):
            method = token.strip().upper()
            if not method:
                msg = f"Empty method in {methods!r} for {entry.pattern!r}."
                raise ConfigurationError(msg)
            table.add(method, entry)

    # -- Fallbacks --

    def set_404(self, pattern: str | HandlerRef, handler: HandlerRef | None = None) -> None:
        """Register a not-found handler.

        ``set_404(handler)`` sets the catch-all. ``set_404(pattern,
        handler)`` adds a fallback that only runs when *pattern*
        matches. Outside a mount the ``"/"`` pattern means the catch-all;
        inside one it scopes the fallback to the mount prefix.
        """
        if handler is None:
            self._check_not_frozen()
            if not (callable(pattern) or isinstance(pattern, str)):
                msg = f"Not-found handler must be callable or 'Controller@method', got {pattern!r}."
                raise ConfigurationError(msg)
            if isinstance(pattern, str):
                split_reference(pattern)
            self._catch_all = pattern
            return
        if not isinstance(pattern, str):
            msg = f"Fallback pattern must be a string, got {pattern!r}."
            raise ConfigurationError(msg)
        if pattern.strip("/") == "" and not self._prefix:
            self.set_404(handler)
            return
        self._set_fallback(prefix_pattern(self._prefix, pattern), handler)

    def _set_fallback(self, pattern: str, handler: HandlerRef) -> None:
        self._check_not_frozen()
        if isinstance(handler, str):
            split_reference(handler)
        elif not callable(handler):
            msg = f"Not-found handler for {pattern!r} must be callable or 'Controller@method', got {handler!r}."
            raise ConfigurationError(msg)
        self._fallbacks[pattern] = handler

    @property
    def fallbacks(self) -> dict[str, HandlerRef]:
        """Pattern-scoped not-found handlers (catch-all excluded)."""
        return dict(self._fallbacks)

    @property
    def catch_all(self) -> HandlerRef | None:
        return self._catch_all

    # -- Controllers & namespace --

    def register_controller(self, controller: type | None = None, *, name: str | None = None) -> Any:
        """Make a controller class available to ``"Controller@method"`` strings.

        Usable directly or as a decorator::

            router.register_controller(UserController)

            @router.register_controller(name="Pages")
            class PageController: ...
        """
        self._check_not_frozen()
        if controller is None:

            def decorator(cls: type) -> type:
                return self._controllers.register(cls, name)

            return decorator
        return self._controllers.register(controller, name)

    def set_namespace(self, namespace: str) -> None:
        """Set the default namespace prepended to controller names."""
        self._check_not_frozen()
        self._invoker.namespace = namespace

    def get_namespace(self) -> str:
        return self._invoker.namespace

    # -- Request environment --

    def set_base_path(self, base_path: str | None) -> None:
        """Explicitly set the path prefix stripped from request URIs.

        Use when the entry script's location differs from the public
        URLs (URL rewriting). ``None`` restores auto-detection.
        """
        self._base_path = base_path

    def get_base_path(self, request: RequestContext | None = None) -> str:
        """The explicit base path, or one derived from the script name."""
        if self._base_path is not None:
            return self._base_path
        if request is None:
            return "/"
        return derive_base_path(request.script_name)

    def get_current_uri(self, request: RequestContext) -> str:
        """The request path routes are matched against."""
        return normalize_path(request.uri, self.get_base_path(request))

    def get_request_method(self, request: RequestContext) -> str:
        """The method used for matching, with HEAD and overrides applied.

        HEAD matches as GET. A POST carrying the override header with
        one of the override methods is treated as that method.
        """
        method = request.method.upper()
        if method == "HEAD":
            return "GET"
        if method == "POST":
            override = request.headers.get(self.config.method_override_header)
            if override is not None and override in self.config.override_methods:
                return override
        return method

    # -- Freeze --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Resolve every handler reference and lock the route tables.

        Called automatically by the first dispatch. Raises
        ``HandlerResolutionError`` if a ``"Controller@method"`` string
        does not name a registered controller's public method.
        """
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._invoker.prepare(self._handler_refs())
            self._frozen = True
            logger.debug(
                "Router frozen: %d before, %d routes, %d after, %d fallbacks",
                len(self.before_routes),
                len(self.routes),
                len(self.after_routes),
                len(self._fallbacks) + (self._catch_all is not None),
            )

    def _handler_refs(self) -> Iterator[HandlerRef]:
        for table in self._tables.values():
            for _, entry in table.items():
                yield entry.handler
        yield from self._fallbacks.values()
        if self._catch_all is not None:
            yield self._catch_all

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the router after it has been frozen. Register routes before the first request."
            raise ConfigurationError(msg)

    # -- Run loop --

    def dispatch(self, request: RequestContext | None = None) -> DispatchResult:
        """Run one request through the pipeline without emitting it.

        Reads the CGI environment when *request* is omitted.
        """
        self.freeze()
        if request is None:
            request = RequestContext.from_environ()

        method = self.get_request_method(request)
        path = self.get_current_uri(request)
        suppress_body = request.method.upper() == "HEAD"
        state = _Dispatch(self._invoker)

        try:
            state.run_all(self.before_routes.matches(method, path))
            try:
                state.run_first(self.routes.matches(method, path))
            except NotFound as exc:
                logger.debug("Handler declined %s %s: %s", method, path, exc)
                state.main_handled = False

            if state.main_handled:
                state.run_all(self.after_routes.matches(method, path))
            else:
                state.response = Response()
                self._run_fallbacks(state, path)
        except _Halt:
            pass

        return DispatchResult(
            handled=state.main_handled,
            response=state.response,
            suppress_body=suppress_body,
            method=method,
            path=path,
        )

    def run(self, request: RequestContext | None = None, *, emitter: Emitter | None = None) -> bool:
        """Dispatch and emit one request.

        Returns True if a main route handled the request.
        """
        result = self.dispatch(request)
        target = emitter or self._emitter or CGIEmitter()
        target.emit(result.response, suppress_body=result.suppress_body)
        return result.handled

    def trigger_404(self, request: RequestContext | None = None) -> Any:
        """Run only the not-found path for *request* and return the response."""
        self.freeze()
        if request is None:
            request = RequestContext.from_environ()
        state = _Dispatch(self._invoker)
        try:
            self._run_fallbacks(state, self.get_current_uri(request))
        except _Halt:
            pass
        return state.response

    def _run_fallbacks(self, state: _Dispatch, path: str) -> None:
        handled = 0
        for pattern, handler in self._fallbacks.items():
            params = match_pattern(pattern, path)
            if params is None:
                continue
            state.call(handler, params)
            handled += 1

        if handled:
            return
        if self._catch_all is not None:
            state.call(self._catch_all, [])
            return
        logger.info("No route matches %s", path)
        state.response = Response(status=404)

    # -- Introspection --

    def routes_for(self, kind: RouteKind) -> RouteTable:
        """The route table for *kind*."""
        return self._tables[kind]

    def iter_routes(self) -> Iterator[tuple[RouteKind, str, RouteEntry]]:
        """Yield ``(kind, method, entry)`` for every registered entry."""
        for kind, table in self._tables.items():
            for method, entry in table.items():
                yield kind, method, entry

    # -- Serving --

    def asgi(self) -> ASGIAdapter:
        """An ASGI 3 application that dispatches through this router."""
        from roost.server.asgi import ASGIAdapter

        return ASGIAdapter(self)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point, so ``"myapp:router"`` can be served directly."""
        await self.asgi()(scope, receive, send)

    def serve(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the router over HTTP with pounce (development use)."""
        from roost.server.dev import run_dev_server

        run_dev_server(self, host or self.config.host, port or self.config.port)
