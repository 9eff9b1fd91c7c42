"""RouteEntry and RouteKind."""

from dataclasses import dataclass
from enum import StrEnum

from roost._internal.types import HandlerRef


class RouteKind(StrEnum):
    """Which of the three route tables an entry belongs to."""

    BEFORE = "before"
    MAIN = "main"
    AFTER = "after"


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A registered pattern and the handler it dispatches to.

    ``pattern`` is already prefixed with the mount path and normalized:
    it starts with ``/`` and has no trailing slash unless it is ``/``.
    """

    pattern: str
    handler: HandlerRef

    @property
    def handler_name(self) -> str:
        """Readable handler name for listings and log records."""
        if isinstance(self.handler, str):
            return self.handler
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)
