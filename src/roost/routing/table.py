"""Method-keyed route tables.

A router owns three of these (before middleware, main routes, after
middleware). Each maps an HTTP method token to the entries registered
for it, in registration order.
"""

from collections.abc import Iterator

from roost.routing.pattern import match_pattern
from roost.routing.route import RouteEntry


class RouteTable:
    """Ordered ``method -> [RouteEntry, ...]`` mapping.

    Usage::

        table = RouteTable()
        table.add("GET", RouteEntry("/users/{id}", show_user))
        for entry, params in table.matches("GET", "/users/42"):
            ...
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, list[RouteEntry]] = {}

    def add(self, method: str, entry: RouteEntry) -> None:
        """Append *entry* to the sequence for *method*."""
        self._entries.setdefault(method, []).append(entry)

    def entries(self, method: str) -> tuple[RouteEntry, ...]:
        """Entries registered for *method*, in registration order."""
        return tuple(self._entries.get(method, ()))

    def methods(self) -> tuple[str, ...]:
        """Methods with at least one entry, in first-registration order."""
        return tuple(self._entries)

    def items(self) -> Iterator[tuple[str, RouteEntry]]:
        """Yield every ``(method, entry)`` pair."""
        for method, entries in self._entries.items():
            for entry in entries:
                yield method, entry

    def matches(self, method: str, path: str) -> Iterator[tuple[RouteEntry, list[str | None]]]:
        """Yield each entry for *method* whose pattern matches *path*.

        Lazy: callers that only want the first match stop iterating and
        later patterns are never compiled.
        """
        for entry in self._entries.get(method, ()):
            params = match_pattern(entry.pattern, path)
            if params is not None:
                yield entry, params

    def __contains__(self, method: object) -> bool:
        return method in self._entries

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"RouteTable({len(self)} entries)"
