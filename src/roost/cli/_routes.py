"""``roost routes``: list registered routes.

Resolves an import string to a Router and prints every before, main,
after and not-found entry.
"""

import argparse
import sys

from roost.cli._resolve import resolve_router
from roost.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """Print a METHOD / KIND / PATTERN / HANDLER table for ``args.router``.

    The router is frozen first, so unresolvable ``"Controller@method"``
    references are reported here rather than on the first request.
    """
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        router.freeze()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str, str]] = [
        (method, str(kind), entry.pattern, entry.handler_name)
        for kind, method, entry in router.iter_routes()
    ]
    rows.extend(("*", "404", pattern, _name(handler)) for pattern, handler in router.fallbacks.items())
    if router.catch_all is not None:
        rows.append(("*", "404", "(catch-all)", _name(router.catch_all)))

    if not rows:
        print("No routes registered.")
        return

    widths = [max(len(row[i]) for row in rows) for i in range(3)]
    widths = [max(w, len(h)) for w, h in zip(widths, ("METHOD", "KIND", "PATTERN"), strict=True)]

    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format("METHOD", "KIND", "PATTERN", "HANDLER"))
    sep_len = sum(widths) + 6 + max(len(row[3]) for row in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))


def _name(handler: object) -> str:
    if isinstance(handler, str):
        return handler
    return getattr(handler, "__qualname__", None) or repr(handler)
