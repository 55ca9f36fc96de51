# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""RouteTree - flat, read-only index of a route tree.

The tree is walked once, in pre-order, when a router is built. Each node
occurrence gets a stable integer index; parent links live in a flat list
instead of on the route objects, so the same tree can be shared by
concurrent resolutions.

Index layout
------------
- ``routes[i]``: the Route at index ``i``.
- ``parents[i]``: index of the parent occurrence, ``-1`` for the root.
- ``children[i]``: child indices in declared order.
- ``ends[i]``: True when the node is a leaf (terminal match mode).
- ``patterns[i]``: full pattern from the root (ancestor paths joined).
- ``keys[i]``: route key for per-route plugin settings: the route name,
  else the full pattern. A key already taken by an earlier node gets a
  ``#2``, ``#3``... suffix, so every node has its own key.

The same Route object may appear at several places of the tree; every
occurrence has its own index. A route that contains itself raises
``InvalidRoutes``.
"""

from __future__ import annotations

from tree_routes.exceptions import InvalidRoutes

from .route_node import Route

__all__ = ["RouteTree"]

ROOT = 0


class RouteTree:
    """Pre-order index with parent array for ancestor checks."""

    __slots__ = ("routes", "parents", "children", "ends", "patterns", "keys")

    def __init__(self, root: Route) -> None:
        self.routes: list[Route] = []
        self.parents: list[int] = []
        self.children: list[tuple[int, ...]] = []
        self.ends: list[bool] = []
        self.patterns: list[str] = []
        self.keys: list[str] = []
        self._index(root)

    def _index(self, root: Route) -> None:
        # explicit stack: (route, parent index, ids of the ancestor chain)
        pending: list[tuple[Route, int, frozenset[int]]] = [(root, -1, frozenset())]
        child_lists: list[list[int]] = []
        while pending:
            route, parent, chain = pending.pop()
            if id(route) in chain:
                raise InvalidRoutes(f"Route {route!r} contains itself")
            index = len(self.routes)
            self.routes.append(route)
            self.parents.append(parent)
            self.ends.append(not route.children)
            self.patterns.append((self.patterns[parent] if parent >= 0 else "") + route.path)
            child_lists.append([])
            if parent >= 0:
                child_lists[parent].append(index)
            chain = chain | {id(route)}
            for child in reversed(route.children):
                pending.append((child, index, chain))
        self.children = [tuple(items) for items in child_lists]
        self._assign_keys()

    def _assign_keys(self) -> None:
        taken: dict[str, int] = {}
        for route, pattern in zip(self.routes, self.patterns):
            base = route.name or pattern
            count = taken.get(base, 0) + 1
            taken[base] = count
            self.keys.append(base if count == 1 else f"{base}#{count}")

    def __len__(self) -> int:
        return len(self.routes)

    @property
    def root(self) -> Route:
        return self.routes[ROOT]

    def parent_of(self, index: int) -> int | None:
        """Return the parent index, or None for the root."""
        parent = self.parents[index]
        return None if parent < 0 else parent

    def is_descendant(self, index: int, ancestor: int | Route | None) -> bool:
        """True if node ``index`` lies strictly below ``ancestor``.

        Args:
            index: Tree index of the candidate node.
            ancestor: Tree index, Route object (matched by identity anywhere
                in the ancestor chain), or None (never an ancestor).
        """
        if ancestor is None:
            return False
        current = self.parents[index]
        while current >= 0:
            if isinstance(ancestor, Route):
                if self.routes[current] is ancestor:
                    return True
            elif current == ancestor:
                return True
            current = self.parents[current]
        return False

    def iter_nodes(self):
        """Yield ``(index, route, key)`` in pre-order."""
        for index, route in enumerate(self.routes):
            yield index, route, self.keys[index]
