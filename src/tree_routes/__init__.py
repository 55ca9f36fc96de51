"""Tree Routes - pathname resolution over a tree of routes.

Resolves a URL pathname against nested route definitions and dispatches to
the first handler, in tree pre-order, that produces a result. Handlers may
fall through to the next candidate or resolve a more specific child first
via ``context.next()``.

Public exports:
    - ``Router``: Router with plugin support
    - ``BaseRouter``: Plugin-free router
    - ``Route``: Route tree node
    - ``route``: Decorator building a Route from a function
    - ``Produced``, ``CONTINUE``, ``SKIP_BRANCH``: handler outcomes
    - ``NotFound``, ``InvalidRoutes``: exceptions

Plugin registration happens lazily via ``import_module`` to avoid cycles.
Built-in plugins (logging, pydantic) are auto-registered on first import.

Example::

    from tree_routes import Route, Router

    router = Router([
        Route("/users", children=[
            Route("/:id", lambda context, params: params),
        ]),
    ])
    router.resolve("/users/42")  # {"id": "42"}
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import (
    CONTINUE,
    SKIP_BRANCH,
    BaseRouter,
    Produced,
    ResolveContext,
    Route,
    Router,
    RouterInterface,
    compile_pattern,
    route,
)
from .exceptions import InvalidRoutes, NotFound

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging", "pydantic"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "BaseRouter",
    "CONTINUE",
    "InvalidRoutes",
    "NotFound",
    "Produced",
    "ResolveContext",
    "Route",
    "Router",
    "RouterInterface",
    "SKIP_BRANCH",
    "compile_pattern",
    "route",
]
