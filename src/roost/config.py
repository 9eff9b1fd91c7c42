"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

# Methods registered by ``Router.all()``
STANDARD_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH", "HEAD")


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(namespace="myapp.controllers", base_path="/blog/")
    """

    # Dispatch
    namespace: str = ""
    base_path: str | None = None  # None = derive from the request's script name

    # Method override (POST tunnelling for clients limited to GET/POST)
    method_override_header: str = "X-HTTP-Method-Override"
    override_methods: frozenset[str] = frozenset({"PUT", "DELETE", "PATCH"})

    # Registration
    all_methods: tuple[str, ...] = STANDARD_METHODS

    # Development server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"
