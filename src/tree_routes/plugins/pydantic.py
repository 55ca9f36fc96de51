"""Pydantic validation plugin for Tree Routes.

Validates route params using the type hint of the action's ``params``
argument.

When attached (``on_route``), inspects each route action and, if its
``params`` argument is annotated, builds a ``pydantic.TypeAdapter`` for the
annotation. At resolve time (``wrap_resolve``), validates the matched params
before the hook runs and passes the validated object on.

Example::

    from typing import TypedDict

    from tree_routes import Route, Router

    class UserParams(TypedDict):
        id: int

    def show_user(context, params: UserParams):
        return params["id"]

    router = Router([Route("/users/:id", show_user)]).plug("pydantic")
    router.resolve("/users/42")  # 42 (int)
    router.resolve("/users/abc")  # ValidationError

Configuration::

    # Disable validation for a specific route
    Route("/raw/:id", raw_handler, pydantic_disabled=True)
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, get_type_hints

from pydantic import TypeAdapter

from tree_routes.core.router import Router
from tree_routes.plugins._base_plugin import BasePlugin

PARAMS_ARGUMENT = "params"


class PydanticPlugin(BasePlugin):
    """Validate matched params with Pydantic using the action's type hints."""

    plugin_code = "pydantic"
    plugin_description = "Validates route params using Pydantic type hints"

    __slots__ = ("_adapters",)

    def __init__(self, router, **config: Any):
        self._adapters: dict[int, TypeAdapter] = {}
        super().__init__(router, **config)

    def configure(self, disabled: bool = False):  # type: ignore[override]
        """Configure pydantic plugin options.

        Args:
            disabled: If True, skip validation for this route/router.
        """
        pass  # Storage is handled by the wrapper

    def on_route(self, router: Router, route: Any) -> None:
        """Build a TypeAdapter from the annotation of the action's params argument."""
        action = route.action
        if action is None or id(route) in self._adapters:
            return
        try:
            parameters = inspect.signature(action).parameters
        except (TypeError, ValueError):
            return
        if PARAMS_ARGUMENT not in parameters:
            return
        try:
            hints = get_type_hints(action, include_extras=True)
        except Exception:
            hints = {}
        hint = hints.get(PARAMS_ARGUMENT)
        if hint is None:
            return
        self._adapters[id(route)] = TypeAdapter(hint)

    def wrap_resolve(self, router: Router, call_next: Callable):
        """Validate params with the cached adapter before calling the hook."""

        def wrapper(context, params):
            route = context.route
            adapter = self._adapters.get(id(route))
            if adapter is None or self.configuration(context.route_key).get("disabled"):
                return call_next(context, params)
            validated = adapter.validate_python(params)
            context["params"] = validated
            return call_next(context, validated)

        return wrapper

    def get_adapter(self, route: Any, route_key: str | None = None) -> TypeAdapter | None:
        """Return the TypeAdapter for this route if validation applies at ``route_key``."""
        if self.configuration(route_key).get("disabled"):
            return None
        return self._adapters.get(id(route))


Router.register_plugin(PydanticPlugin)
