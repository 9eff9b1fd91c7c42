"""Router import resolution. Resolves ``"module:attribute"`` strings to Routers.

Shared utility used by ``roost run`` and ``roost routes``.
"""

import importlib

from roost.router import Router


def resolve_router(import_string: str) -> Router:
    """Resolve an import string to a roost Router instance.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"router"`` (e.g. ``"myapp"`` resolves to
    ``myapp.router``).

    Supports factory functions: if the resolved object is callable and
    not a Router instance, it will be called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Router`` or a
            factory returning one.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Router):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Router):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a roost.Router instance"
        raise TypeError(msg)

    return obj
