"""Decorator helpers for declaring routes from functions.

``route(path="", *, name=None, children=None, **kwargs)``
    Returns a decorator that turns the decorated function into a ``Route``
    whose action is that function. Extra ``**kwargs`` are passed to ``Route``
    verbatim (``meta_*`` metadata, plugin options such as
    ``logging_before=False``).

The decorated name is bound to the ``Route``; the original function stays
reachable as ``.action``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from .route_node import Route

__all__ = ["route"]


def route(
    path: str = "",
    *,
    name: str | None = None,
    children: Sequence[Any] | None = None,
    **kwargs: Any,
) -> Callable[[Callable], Route]:
    """Declare a route whose action is the decorated function.

    Args:
        path: Pattern source for the route.
        name: Optional logical name (defaults to the function name).
        children: Child routes.
        **kwargs: Extra Route options (``meta_*``, plugin-prefixed options).

    Returns:
        Decorator returning a ``Route``.

    Example::

        @route("/:id", meta_title="User")
        def user(context, params):
            return params["id"]

        router = Router([Route("/users", children=[user])])
    """

    def decorator(func: Callable) -> Route:
        return Route(path, func, children, name=name or func.__name__, **kwargs)

    return decorator
