# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Path pattern compiler and process-wide compiled-pattern cache.

Pattern syntax
--------------
- ``:name``: named capture of one segment (``[^/]+?``)
- ``:name(\\d+)``: named capture with a custom pattern
- ``(.*)``: unnamed capture; keys get integer names 0, 1, ...
- modifiers after a capture: ``?`` optional, ``*`` zero or more,
  ``+`` one or more (``*``/``+`` mark the key as ``repeat``)
- ``\\:`` escapes a special character; anything else is literal

A ``/`` or ``.`` right before a capture becomes its prefix and delimiter,
so ``/:id?`` also matches an empty pathname and ``/:path*`` splits on ``/``.

Match modes
-----------
``end=True`` (terminal) requires the pattern to consume the whole pathname,
allowing one trailing delimiter unless ``strict``. ``end=False`` (prefix)
requires the match to stop at a delimiter boundary or at end of string.

Example::

    compiled = compile_pattern("/users/:id", end=True)
    m = compiled.regex.match("/users/42")
    m.group(1)  # "42"
    compiled.keys[0].name  # "id"
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass

__all__ = [
    "CompiledPattern",
    "ParamKey",
    "PatternCache",
    "compile_pattern",
    "default_cache",
    "parse_pattern",
]

DEFAULT_DELIMITER = "/"
DEFAULT_DELIMITERS = "./"

_TOKEN_RE = re.compile(
    r"(\\.)"
    r"|(?:\:(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?"
)
_GROUP_ESCAPE_RE = re.compile(r"([=!:$/()])")


@dataclass(frozen=True)
class ParamKey:
    """One capture group of a compiled pattern, left to right."""

    name: str | int
    prefix: str = ""
    delimiter: str = DEFAULT_DELIMITER
    optional: bool = False
    repeat: bool = False
    partial: bool = False
    pattern: str = "[^/]+?"


@dataclass(frozen=True)
class CompiledPattern:
    """Compiled matcher plus its ordered parameter keys."""

    source: str
    end: bool
    regex: re.Pattern[str]
    keys: tuple[ParamKey, ...]


def parse_pattern(source: str, delimiter: str = DEFAULT_DELIMITER) -> list[str | ParamKey]:
    """Split a pattern into literal strings and ParamKey tokens."""
    tokens: list[str | ParamKey] = []
    key_index = 0
    index = 0
    path = ""
    path_escaped = False
    for match in _TOKEN_RE.finditer(source):
        escaped, name, capture, group, modifier = match.groups()
        path += source[index : match.start()]
        index = match.end()

        if escaped:
            path += escaped[1]
            path_escaped = True
            continue

        prev = ""
        following = source[index] if index < len(source) else None
        if not path_escaped and path and path[-1] in DEFAULT_DELIMITERS:
            prev = path[-1]
            path = path[:-1]

        if path:
            tokens.append(path)
            path = ""
            path_escaped = False

        if name is None:
            key_name: str | int = key_index
            key_index += 1
        else:
            key_name = name
        pattern = capture or group
        key_delimiter = prev or delimiter
        tokens.append(
            ParamKey(
                name=key_name,
                prefix=prev,
                delimiter=key_delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prev != "" and following is not None and following != prev,
                pattern=(
                    _GROUP_ESCAPE_RE.sub(r"\\\1", pattern)
                    if pattern
                    else f"[^{re.escape(key_delimiter)}]+?"
                ),
            )
        )

    if path or index < len(source):
        tokens.append(path + source[index:])
    return tokens


def compile_pattern(
    source: str,
    *,
    end: bool = True,
    sensitive: bool = False,
    strict: bool = False,
    delimiter: str = DEFAULT_DELIMITER,
) -> CompiledPattern:
    """Compile ``source`` into a regex anchored at the start of the pathname.

    Args:
        source: Pattern string (may be empty).
        end: True for terminal match (whole pathname), False for prefix match.
        sensitive: Case-sensitive matching.
        strict: Disallow the optional trailing delimiter.
        delimiter: Segment delimiter.
    """
    tokens = parse_pattern(source, delimiter)
    escaped_delimiter = re.escape(delimiter)
    route = "^"
    keys: list[ParamKey] = []
    end_delimited = not tokens

    for position, token in enumerate(tokens):
        if isinstance(token, str):
            route += re.escape(token)
            end_delimited = position == len(tokens) - 1 and token[-1] in DEFAULT_DELIMITERS
            continue
        end_delimited = False
        if token.repeat:
            capture = (
                f"(?:{token.pattern})"
                f"(?:{re.escape(token.delimiter)}(?:{token.pattern}))*"
            )
        else:
            capture = token.pattern
        keys.append(token)
        prefix = re.escape(token.prefix)
        if token.optional:
            if token.partial:
                route += f"{prefix}({capture})?"
            else:
                route += f"(?:{prefix}({capture}))?"
        else:
            route += f"{prefix}({capture})"

    if end:
        if not strict:
            route += f"(?:{escaped_delimiter})?"
        route += r"\Z"
    else:
        if not strict:
            route += f"(?:{escaped_delimiter}(?=\\Z))?"
        if not end_delimited:
            route += f"(?={escaped_delimiter}|\\Z)"

    flags = 0 if sensitive else re.IGNORECASE
    return CompiledPattern(source=source, end=end, regex=re.compile(route, flags), keys=tuple(keys))


class PatternCache:
    """Memo of ``(source, end) -> CompiledPattern``, never evicted.

    Population is guarded by a lock so routers on different threads can
    share one cache.
    """

    __slots__ = ("_patterns", "_lock")

    def __init__(self) -> None:
        self._patterns: dict[tuple[str, bool], CompiledPattern] = {}
        self._lock = threading.Lock()

    def get(self, source: str, end: bool) -> CompiledPattern:
        """Return the compiled pattern, compiling it on first use."""
        cache_key = (source, end)
        compiled = self._patterns.get(cache_key)
        if compiled is not None:
            return compiled
        with self._lock:
            compiled = self._patterns.get(cache_key)
            if compiled is None:
                compiled = compile_pattern(source, end=end)
                self._patterns[cache_key] = compiled
        return compiled

    def clear(self) -> None:
        with self._lock:
            self._patterns.clear()

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, cache_key: object) -> bool:
        return cache_key in self._patterns


default_cache = PatternCache()
