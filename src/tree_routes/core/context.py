# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ResolveContext - per-candidate execution context.

A plain dict with attribute access. Built fresh for every candidate the
driver tries, by merging (later wins):

1. ``router`` and the router's ``context`` option,
2. the partial context passed to ``resolve()`` (always has ``pathname``),
3. ``next``: the continuation,
4. the candidate fields ``route``, ``route_key``, ``base_url``, ``path``,
   ``keys``, ``params``.

Fields shadowed by dict methods (``keys``) are read by subscription:
``context["keys"]``.

Example::

    def action(context, params):
        if context.user is None:
            return None  # fall through
        return context.next()  # resolve a more specific child first
"""

from __future__ import annotations

from typing import Any

__all__ = ["ResolveContext"]


class ResolveContext(dict):
    """Mapping of context fields, readable as attributes."""

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={self[key]!r}" for key in ("pathname", "path") if key in self)
        return f"ResolveContext({fields})"
