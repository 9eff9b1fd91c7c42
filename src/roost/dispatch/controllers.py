"""Explicit controller registry.

``"Controller@method"`` handler strings are looked up here by name,
never by importing arbitrary modules at request time. Controllers are
registered during setup::

    @router.register_controller
    class UserController:
        def show(self, response, user_id):
            return response.with_body(f"user {user_id}")

    router.set_namespace("myapp.controllers")
    router.get("/users/{id}", "UserController@show")
"""

from roost.errors import ConfigurationError


def default_name(controller: type) -> str:
    """Registry key for *controller*: ``module.QualName``."""
    return f"{controller.__module__}.{controller.__qualname__}"


class ControllerRegistry:
    """Name -> controller class mapping, populated at setup."""

    __slots__ = ("_controllers",)

    def __init__(self) -> None:
        self._controllers: dict[str, type] = {}

    def register(self, controller: type, name: str | None = None) -> type:
        """Register *controller* under *name* (default ``module.QualName``).

        Returns the class so this can back a decorator. Registering a
        different class under a taken name raises ``ConfigurationError``.
        """
        if not isinstance(controller, type):
            msg = f"Controllers must be classes, got {type(controller).__name__}."
            raise ConfigurationError(msg)
        key = name or default_name(controller)
        existing = self._controllers.get(key)
        if existing is not None and existing is not controller:
            msg = f"Controller name {key!r} is already registered to {existing.__qualname__}."
            raise ConfigurationError(msg)
        self._controllers[key] = controller
        return controller

    def lookup(self, name: str) -> type | None:
        return self._controllers.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._controllers)

    def __contains__(self, name: object) -> bool:
        return name in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
