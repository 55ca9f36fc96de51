# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Lazy pre-order enumeration of the routes matching a pathname.

``RouteMatches`` is an explicit iterator object: it keeps its own cursor
(matched state of its node, current child position, nested child iterator)
and yields one ``MatchCandidate`` per ``next()`` call.

Order
-----
A node is yielded before its descendants; children are explored in
declared order, depth-first. Children of a node that did not match are
never explored.

Skipping
--------
``next(skip)`` with ``skip`` equal to the index of an enumerator's node
makes that enumerator report exhaustion immediately. Since ``skip`` is
forwarded down to nested iterators, passing the index of the last yielded
candidate prunes its remaining subtree.

The sequence is finite and not restartable.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .matching import MatchResult, match_path
from .patterns import ParamKey, PatternCache
from .route_node import Route
from .tree import RouteTree

__all__ = ["MatchCandidate", "RouteMatches"]

_UNTRIED = object()


@dataclass
class MatchCandidate:
    """A matched route with the accumulated match state."""

    route: Route
    index: int
    base_url: str
    path: str
    keys: tuple[ParamKey, ...] = ()
    params: dict[str, Any] = field(default_factory=dict)
    route_key: str = ""

    def as_context(self) -> dict[str, Any]:
        """Fields merged into the resolution context."""
        return {
            "route": self.route,
            "route_key": self.route_key,
            "base_url": self.base_url,
            "path": self.path,
            "keys": self.keys,
            "params": self.params,
        }


class RouteMatches:
    """Resumable depth-first match iterator over one subtree."""

    __slots__ = (
        "_tree",
        "index",
        "_base_url",
        "_pathname",
        "_parent_keys",
        "_parent_params",
        "_cache",
        "_match",
        "_child_cursor",
        "_child_matches",
    )

    def __init__(
        self,
        tree: RouteTree,
        index: int,
        base_url: str,
        pathname: str,
        parent_keys: Sequence[ParamKey] = (),
        parent_params: Mapping[str, Any] | None = None,
        cache: PatternCache | None = None,
    ) -> None:
        self._tree = tree
        self.index = index
        self._base_url = base_url
        self._pathname = pathname
        self._parent_keys = tuple(parent_keys)
        self._parent_params = parent_params
        self._cache = cache
        self._match: Any = _UNTRIED
        self._child_cursor = 0
        self._child_matches: RouteMatches | None = None

    def next(self, skip: int | None = None) -> MatchCandidate | None:
        """Return the next candidate, or None when the subtree is exhausted."""
        if skip is not None and skip == self.index:
            return None

        if self._match is _UNTRIED:
            self._match = match_path(
                self._tree.routes[self.index],
                self._pathname,
                self._parent_keys,
                self._parent_params,
                end=self._tree.ends[self.index],
                cache=self._cache,
            )
            if self._match is not None:
                return self._candidate(self._match)

        match: MatchResult | None = self._match
        if match is None:
            return None

        children = self._tree.children[self.index]
        while self._child_cursor < len(children):
            if self._child_matches is None:
                self._child_matches = RouteMatches(
                    self._tree,
                    children[self._child_cursor],
                    self._base_url + match.path,
                    self._pathname[len(match.path) :],
                    match.keys,
                    match.params,
                    self._cache,
                )
            candidate = self._child_matches.next(skip)
            if candidate is not None:
                return candidate
            self._child_matches = None
            self._child_cursor += 1
        return None

    def _candidate(self, match: MatchResult) -> MatchCandidate:
        return MatchCandidate(
            route=self._tree.routes[self.index],
            index=self.index,
            base_url=self._base_url,
            path=match.path,
            keys=match.keys,
            params=match.params,
            route_key=self._tree.keys[self.index],
        )

    def __iter__(self) -> RouteMatches:
        return self

    def __next__(self) -> MatchCandidate:
        candidate = self.next()
        if candidate is None:
            raise StopIteration
        return candidate
