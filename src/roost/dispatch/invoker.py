"""Handler resolution and invocation.

Handlers are either callables or ``"Controller@method"`` strings. Both
are called the same way::

    next_response = handler(current_response, *params)

and whatever comes back must satisfy the response contract. String
references are resolved against the ``ControllerRegistry`` once, when
the router freezes; a reference that cannot be resolved is a setup
error, not a silent no-op.
"""

import inspect
import logging
from collections.abc import Iterable
from typing import Any

from roost._internal.types import Handler, HandlerRef
from roost.dispatch.controllers import ControllerRegistry
from roost.errors import HandlerResolutionError, ResponseContractError
from roost.http.response import is_response

logger = logging.getLogger("roost.dispatch")


def split_reference(reference: str) -> tuple[str, str]:
    """Split ``"Controller@method"`` into its two halves.

    Raises ``HandlerResolutionError`` for anything else.
    """
    controller, sep, method = reference.partition("@")
    if not sep or not controller or not method or "@" in method:
        raise HandlerResolutionError(reference, "expected a callable or 'Controller@method'")
    return controller, method


class Invoker:
    """Resolves handler references and calls them.

    ``namespace`` is prepended (``namespace + "." + Controller``) to the
    controller half of string references before registry lookup.
    """

    __slots__ = ("_controllers", "_resolved", "namespace")

    def __init__(self, controllers: ControllerRegistry, namespace: str = "") -> None:
        self._controllers = controllers
        self._resolved: dict[str, Handler] = {}
        self.namespace = namespace

    def qualify(self, controller: str) -> str:
        """Apply the namespace to a controller name."""
        namespace = self.namespace.strip(".")
        if namespace:
            return f"{namespace}.{controller}"
        return controller

    def prepare(self, references: Iterable[HandlerRef]) -> None:
        """Resolve every string reference up front.

        Raises ``HandlerResolutionError`` on the first reference that
        cannot be resolved.
        """
        for reference in references:
            if isinstance(reference, str) and reference not in self._resolved:
                self._resolved[reference] = self._resolve_string(reference)

    def resolve(self, reference: HandlerRef) -> Handler:
        """Return the callable behind *reference*."""
        if isinstance(reference, str):
            handler = self._resolved.get(reference)
            if handler is None:
                handler = self._resolve_string(reference)
                self._resolved[reference] = handler
            return handler
        if callable(reference):
            return reference
        raise HandlerResolutionError(repr(reference), "handler is neither callable nor a string")

    def invoke(self, reference: HandlerRef, response: Any, params: Iterable[str | None] = ()) -> Any:
        """Call the handler with ``(response, *params)`` and check the result.

        Raises ``ResponseContractError`` when the handler returns
        something that is not a response.
        """
        handler = self.resolve(reference)
        result = handler(response, *params)
        if not is_response(result):
            raise ResponseContractError(handler, result)
        return result

    def _resolve_string(self, reference: str) -> Handler:
        controller_name, method_name = split_reference(reference)
        qualified = self.qualify(controller_name)
        controller = self._controllers.lookup(qualified)
        if controller is None:
            raise HandlerResolutionError(reference, f"no controller registered as {qualified!r}")

        if method_name.startswith("_"):
            raise HandlerResolutionError(reference, f"{method_name!r} is not public")

        try:
            attribute = inspect.getattr_static(controller, method_name)
        except AttributeError:
            msg = f"{controller.__qualname__} has no method {method_name!r}"
            raise HandlerResolutionError(reference, msg) from None

        if getattr(attribute, "__isabstractmethod__", False):
            raise HandlerResolutionError(reference, f"{method_name!r} is abstract")

        # Static and class methods are called on the class itself
        if isinstance(attribute, staticmethod | classmethod):
            return getattr(controller, method_name)

        if not callable(attribute):
            raise HandlerResolutionError(reference, f"{method_name!r} is not callable")

        if inspect.isabstract(controller):
            raise HandlerResolutionError(reference, f"{controller.__qualname__} is abstract")

        def call_on_instance(response: Any, *params: str | None) -> Any:
            # A fresh instance per call, built with the default constructor
            return getattr(controller(), method_name)(response, *params)

        call_on_instance.__qualname__ = f"{controller.__qualname__}.{method_name}"
        logger.debug("Resolved %s to %s", reference, call_on_instance.__qualname__)
        return call_on_instance
