# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route - a single node of the route tree.

A route couples a path pattern with an optional action and an ordered list
of child routes. Children order is the resolution priority.

Routes can be built directly or from plain mappings::

    Route("/users", children=[
        Route("/:id", lambda context, params: params),
    ])

    {"path": "/users", "children": [{"path": "/:id", "action": show_user}]}

Keyword arguments
-----------------
- ``meta_*`` kwargs are grouped under ``metadata`` (prefix stripped).
- Any other kwarg is kept in ``options``; plugin-prefixed options
  (e.g. ``logging_after=False``) are read by plugin-enabled routers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from genro_toolbox import dictExtract

from tree_routes.exceptions import InvalidRoutes

__all__ = ["Route", "normalize_route"]

_MAPPING_FIELDS = ("path", "action", "children", "name", "metadata")


class Route:
    """Node of the route tree.

    Attributes:
        path: Pattern source (may be empty).
        action: Callable ``action(context, params)`` or None.
        children: Ordered child routes.
        name: Optional logical name, used as key for per-route plugin config.
        metadata: Free metadata (from ``metadata`` and ``meta_*`` kwargs).
        options: Remaining keyword options (plugin-scoped settings).
    """

    __slots__ = ("path", "action", "children", "name", "metadata", "options")

    def __init__(
        self,
        path: str | None = "",
        action: Callable | None = None,
        children: Sequence[Any] | None = None,
        *,
        name: str | None = None,
        metadata: dict[str, Any] | None = None,
        **options: Any,
    ) -> None:
        if path is None:
            path = ""
        if not isinstance(path, str):
            raise InvalidRoutes(f"Route path must be a string, got {type(path).__name__}")
        if action is not None and not callable(action):
            raise InvalidRoutes(f"Route action for {path!r} is not callable")
        if children is None:
            children = ()
        elif isinstance(children, (str, bytes, Mapping)) or not isinstance(children, Sequence):
            raise InvalidRoutes(f"Route children for {path!r} must be a list of routes")
        self.path = path
        self.action = action
        self.children: tuple[Route, ...] = tuple(normalize_route(child) for child in children)
        self.name = name
        meta = dict(metadata or {})
        meta.update(dictExtract(options, "meta_", pop=True, slice_prefix=True))
        self.metadata: dict[str, Any] = meta
        self.options: dict[str, Any] = options

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Route:
        """Build a Route from a mapping with ``path``/``action``/``children`` keys."""
        fields = {key: data[key] for key in _MAPPING_FIELDS if key in data}
        extra = {str(key): value for key, value in data.items() if key not in _MAPPING_FIELDS}
        return cls(**fields, **extra)

    def __repr__(self) -> str:
        label = f", name={self.name!r}" if self.name else ""
        return f"Route(path={self.path!r}{label}, children={len(self.children)})"


def normalize_route(value: Any) -> Route:
    """Return ``value`` as a Route, converting mappings.

    Raises:
        InvalidRoutes: if ``value`` is neither a Route nor a mapping.
    """
    if isinstance(value, Route):
        return value
    if isinstance(value, Mapping):
        return Route.from_mapping(value)
    raise InvalidRoutes(f"Invalid route: {value!r}")
