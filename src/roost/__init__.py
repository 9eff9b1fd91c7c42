"""Roost: a method and pattern request router.

Before middleware, one main route, after middleware, and a not-found
fallback, with a response value threaded through every handler.

Basic usage::

    from roost import Router

    router = Router()

    def hello(response, name):
        return response.with_body(f"Hello, {name}!")

    router.get("/hello/{name}", hello)
    router.run()  # CGI: reads os.environ, writes to stdout

Served over HTTP (``pip install roost[serve]``)::

    router.serve(port=8000)
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DispatchResult",
    "HTTPError",
    "HandlerResolutionError",
    "NotFound",
    "Redirect",
    "RequestContext",
    "Response",
    "ResponseContractError",
    "RoostError",
    "RouteGroup",
    "Router",
    "RouterConfig",
    "redirect",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from roost.router import Router

        return Router

    if name == "RouterConfig":
        from roost.config import RouterConfig

        return RouterConfig

    if name == "RouteGroup":
        from roost.routing.group import RouteGroup

        return RouteGroup

    if name == "RequestContext":
        from roost.http.request import RequestContext

        return RequestContext

    if name == "DispatchResult":
        from roost.dispatch.result import DispatchResult

        return DispatchResult

    if name in ("Response", "Redirect", "redirect"):
        from roost.http import response as _resp

        return getattr(_resp, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "HandlerResolutionError",
        "NotFound",
        "ResponseContractError",
        "RoostError",
    ):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
