"""Route pattern compilation and positional parameter extraction.

A pattern such as ``/user/{id}/post/{postId}`` compiles to a regular
expression where every ``/{...}`` placeholder becomes a lazy wildcard
group ``/(.*?)``. Placeholder names are discarded; only position counts.

Literal text is passed through to the regular expression untouched, so
hand-written groups work too::

    /movies/(\\d+)/photos/(\\d+)

Each capturing group, placeholder or hand-written, yields one parameter.
"""

import re

_PLACEHOLDER = re.compile(r"/\{(.*?)\}")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a route pattern into a matcher for whole request paths.

    Compiled fresh on every call; the ``re`` module's own cache is the
    only reuse between requests.
    """
    return re.compile(_PLACEHOLDER.sub("/(.*?)", pattern))


def extract_params(match: re.Match[str]) -> list[str | None]:
    """Recover positional parameters from a successful match.

    Lazy groups can under- or over-match relative to each other, so the
    boundary of parameter *i* is taken from where group *i + 1* starts:
    the captured text is cut there, then stripped of slashes. The last
    parameter keeps its whole capture. A group that did not take part
    in the match yields ``None``.
    """
    params: list[str | None] = []
    count = len(match.groups())
    for index in range(1, count + 1):
        start = match.start(index)
        text = match.group(index)
        if start == -1 or text is None:
            params.append(None)
            continue
        if index < count:
            next_start = match.start(index + 1)
            if next_start > -1:
                params.append(text[: next_start - start].strip("/"))
                continue
        params.append(text.strip("/"))
    return params


def match_pattern(pattern: str, path: str) -> list[str | None] | None:
    """Match *path* against *pattern*.

    Returns ``None`` when the path does not match, otherwise the list of
    positional parameters (empty for purely literal patterns)::

        >>> match_pattern("/user/{id}/post/{postId}", "/user/42/post/7")
        ['42', '7']
        >>> match_pattern("/about", "/about")
        []
        >>> match_pattern("/about", "/contact") is None
        True
    """
    match = compile_pattern(pattern).fullmatch(path)
    if match is None:
        return None
    return extract_params(match)
