# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Path matcher: one route pattern against one pathname remainder."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

from .patterns import ParamKey, PatternCache, default_cache
from .route_node import Route

__all__ = ["MatchResult", "decode_param", "match_path"]


@dataclass
class MatchResult:
    """Outcome of a successful match.

    Attributes:
        path: Matched pathname segment (trailing ``/`` stripped in prefix mode).
        keys: Parent keys followed by this route's keys.
        params: Inherited params merged with this route's captures.
    """

    path: str
    keys: tuple[ParamKey, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)


def decode_param(value: str) -> str:
    """Percent-decode ``value``; malformed input is returned unchanged."""
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def match_path(
    route: Route,
    pathname: str,
    parent_keys: Sequence[ParamKey] = (),
    parent_params: Mapping[str, Any] | None = None,
    *,
    end: bool | None = None,
    cache: PatternCache | None = None,
) -> MatchResult | None:
    """Match ``route.path`` against the start of ``pathname``.

    Args:
        route: Route whose pattern is tested.
        pathname: Remaining pathname.
        parent_keys: Keys accumulated by ancestors.
        parent_params: Params accumulated by ancestors.
        end: Terminal mode; defaults to "route has no children".
        cache: Compiled pattern cache (defaults to the shared one).

    Returns:
        MatchResult, or None when the pattern does not match.
    """
    if end is None:
        end = not route.children
    compiled = (cache if cache is not None else default_cache).get(route.path, end)
    found = compiled.regex.match(pathname)
    if found is None:
        return None

    path = found.group(0)
    params: dict[str, Any] = dict(parent_params or {})
    for position, key in enumerate(compiled.keys, start=1):
        value = found.group(position)
        if value is None and key.name in params:
            continue
        if key.repeat:
            params[key.name] = [decode_param(piece) for piece in value.split(key.delimiter)] if value else []
        else:
            params[key.name] = decode_param(value) if value else value

    if not end and path.endswith("/"):
        path = path[:-1]
    return MatchResult(path=path, keys=(*parent_keys, *compiled.keys), params=params)
