"""Shared type aliases used across roost modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler, called as handler(response, *params), returns a response
Handler: TypeAlias = Callable[..., Any]

# What users register: a callable or a "Controller@method" string
HandlerRef: TypeAlias = Handler | str
