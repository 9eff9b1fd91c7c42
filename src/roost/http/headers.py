"""Immutable, case-insensitive request headers.

Implements ``Mapping[str, str]``. Built from CGI/WSGI environ variables,
ASGI byte pairs, or plain mappings; every source ends up as the same
tuple of ``(name, value)`` string pairs.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(self, "_pairs", tuple(pairs))

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Build headers from ASGI ``(name, value)`` byte pairs."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str] | None) -> Headers:
        """Build headers from a plain ``{name: value}`` mapping."""
        if headers is None:
            return cls()
        if isinstance(headers, Headers):
            return headers
        return cls(headers.items())

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> Headers:
        """Extract headers from CGI/WSGI environ variables.

        ``HTTP_X_HTTP_METHOD_OVERRIDE`` becomes ``X-Http-Method-Override``;
        ``CONTENT_TYPE`` and ``CONTENT_LENGTH`` are included without the
        ``HTTP_`` prefix.
        """
        pairs: list[tuple[str, str]] = []
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                name = key[5:]
            elif key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
                name = key
            else:
                continue
            pairs.append(("-".join(part.capitalize() for part in name.split("_")), value))
        return cls(pairs)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._pairs:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._pairs:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower()
        return [value for name, value in self._pairs if name.lower() == key_lower]

    @property
    def pairs(self) -> tuple[tuple[str, str], ...]:
        """The header pairs in arrival order, original casing preserved."""
        return self._pairs
