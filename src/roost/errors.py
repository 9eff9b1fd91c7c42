"""Roost exception hierarchy.

Shared across the router, registrar, invoker, and emitters so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when router setup is invalid.

    Typically surfaces during registration or ``Router.freeze()``.
    """


class HandlerResolutionError(ConfigurationError):
    """A ``"Controller@method"`` reference could not be resolved.

    Raised once, when the router freezes, never at request time.
    """

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot resolve handler {reference!r}: {reason}")


class ResponseContractError(RoostError):
    """A handler returned a value that is not a response.

    Fatal for the current request; the router never catches it.
    """

    def __init__(self, handler: object, result: object) -> None:
        self.handler = handler
        self.result = result
        name = getattr(handler, "__qualname__", None) or repr(handler)
        super().__init__(
            f"Route handler {name} must return a response "
            f"(an object with status, headers and body), got {type(result).__name__}."
        )


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404, raised by a main route handler to decline the request.

    The run loop treats it as "no main route matched" and continues
    with the fallback handlers.
    """

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
