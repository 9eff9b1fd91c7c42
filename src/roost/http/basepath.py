"""Base path resolution and request path normalization.

A router mounted below the web root (``/blog/index.py``) sees request
URIs such as ``/blog/posts/7?page=2``. Before matching, the query string
is dropped, the base path is stripped and the result is collapsed to a
single leading slash with no trailing slash.
"""

from urllib.parse import unquote


def derive_base_path(script_name: str) -> str:
    """Derive the base path from the entry script's path.

    Every segment except the last, joined back together, plus a
    trailing slash::

        "/blog/index.py" -> "/blog/"
        "/index.py"      -> "/"
        ""               -> "/"
    """
    return "/".join(script_name.split("/")[:-1]) + "/"


def strip_query(uri: str) -> str:
    """Drop everything from the first ``?`` on."""
    path, _, _ = uri.partition("?")
    return path


def normalize_path(uri: str, base_path: str = "/") -> str:
    """Turn a raw request URI into the path routes are matched against.

    >>> normalize_path("/blog/posts/7/?page=2", "/blog/")
    '/posts/7'
    """
    path = unquote(strip_query(uri))
    base = base_path.rstrip("/")
    # "/blog" and "/blog/..." both sit under a "/blog/" base
    if base and (path == base or path.startswith(base + "/")):
        path = path[len(base) :]
    return "/" + path.strip("/")
