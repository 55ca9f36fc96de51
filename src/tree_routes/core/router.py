"""Router with plugin pipeline for Tree Routes.

``Router`` extends ``BaseRouter`` with a global plugin registry, per-router
plugin instances, middleware wrapping of the resolve hook, and plugin state
stored on the router.

Internal state
--------------
- ``_plugins``: instantiated plugins in the order they were attached.
- ``_plugins_by_name``: name → plugin instance.
- ``_plugin_info``: per-plugin state store on the router.

Global registry
---------------
``Router.register_plugin(plugin_class, name=None)`` validates that
``plugin_class`` is a subclass of ``BasePlugin`` with a ``plugin_code``.

Attaching plugins
-----------------
``plug(plugin_name, **config)`` looks up the plugin class by name in the
global registry, instantiates it, writes per-route options taken from the
routes (``<plugin>_<key>`` kwargs, e.g. ``logging_after=False``), calls
``plugin.on_route`` for every route, rebuilds the resolver and returns
``self``.

Wrapping pipeline
-----------------
``_wrap_resolver(call_next)`` builds middleware layers from the current
``_plugins`` in reverse order (last attached closest to the hook). Each
layer is bypassed at runtime when the plugin is disabled for the
candidate's route key.

Route keys
----------
Each tree node has its own key (``RouteTree.keys``): the route name, else
the full pattern from the root (``"/users/:id"``). Repeated keys get a
``#2``, ``#3``... suffix in pre-order.

Example::

    from tree_routes import Route, Router

    router = Router([Route("/hello", lambda context, params: "Hello!")]).plug("logging")
    router.resolve("/hello")
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from genro_toolbox import dictExtract

from tree_routes.core.base_router import BaseRouter
from tree_routes.plugins._base_plugin import ALL_ROUTES, BasePlugin

__all__ = ["Router"]

_PLUGIN_REGISTRY: dict[str, type[BasePlugin]] = {}


class Router(BaseRouter):
    """Router with plugin registry and pipeline support.

    Extends BaseRouter with:
        - Global plugin registry for registering plugin classes
        - Per-router plugin instances wrapping the resolve hook
        - Plugin state management and per-route configuration
    """

    __slots__ = BaseRouter.__slots__ + (
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(self, *args, **kwargs):
        self._plugins: list[BasePlugin] = []
        self._plugins_by_name: dict[str, BasePlugin] = {}
        self._plugin_info: dict[str, dict[str, Any]] = {}
        super().__init__(*args, **kwargs)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: type[BasePlugin], name: str | None = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined.
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses plugin_code and raises
                  if already registered with a different class.

        Raises:
            TypeError: If plugin_class is not a BasePlugin subclass.
            ValueError: If plugin_code is missing or name collision occurs.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> dict[str, type[BasePlugin]]:
        """Return a copy of the global plugin registry."""
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> Router:
        """Attach a plugin by name (previously registered globally).

        Args:
            plugin: Name of the plugin to attach.
            **config: Configuration options passed to the plugin.

        Returns:
            self (for method chaining).

        Raises:
            TypeError: If plugin is not a string.
            ValueError: If plugin is not registered or already attached.
        """
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin in self._plugins_by_name:
            raise ValueError(
                f"Plugin '{plugin}' is already attached to this router. "
                "Use configure() to update settings."
            )
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        self._apply_plugin_to_routes(instance)
        self._resolver = self._wrap_resolver(self.resolve_route)
        return self

    def iter_plugins(self) -> list[BasePlugin]:
        """Return attached plugin instances in application order."""
        return list(self._plugins)

    def get_config(self, plugin_name: str, route_key: str | None = None) -> dict[str, Any]:
        """Return plugin config (global + per-route overrides) for an attached plugin."""
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        return plugin.configuration(route_key)

    def __getattr__(self, name: str) -> Any:
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to router")
        return plugin

    def _get_plugin_bucket(self, plugin_name: str) -> dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        return bucket

    # ------------------------------------------------------------------
    # Runtime helpers (state stored on plugin_info)
    # ------------------------------------------------------------------
    def set_plugin_enabled(self, route_key: str, plugin_name: str, enabled: bool = True) -> None:
        """Enable or disable a plugin for a specific route key ("_all_" for every route)."""
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(route_key, {"config": {}, "locals": {}})
        entry.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, route_key: str, plugin_name: str) -> bool:
        """Check if a plugin is enabled for a specific route key.

        Resolution order (first found wins):
        1. route locals (runtime override via set_plugin_enabled)
        2. route config (static via configure(_target=route_key, enabled=...))
        3. global locals (runtime override via set_plugin_enabled for _all_)
        4. global config (static via configure(enabled=...))
        5. default: True
        """
        bucket = self._get_plugin_bucket(plugin_name)
        for target in (route_key, ALL_ROUTES):
            data = bucket.get(target, {})
            if "enabled" in data.get("locals", {}):
                return bool(data["locals"]["enabled"])
            if "enabled" in data.get("config", {}):
                return bool(data["config"]["enabled"])
        return True

    def set_runtime_data(self, route_key: str, plugin_name: str, key: str, value: Any) -> None:
        """Set runtime data for a plugin/route combination."""
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(route_key, {"config": {}, "locals": {}})
        entry.setdefault("locals", {})[key] = value

    def get_runtime_data(
        self, route_key: str, plugin_name: str, key: str, default: Any = None
    ) -> Any:
        """Get runtime data for a plugin/route combination."""
        bucket = self._get_plugin_bucket(plugin_name)
        return bucket.get(route_key, {}).get("locals", {}).get(key, default)

    # ------------------------------------------------------------------
    # Overrides/hooks
    # ------------------------------------------------------------------
    def _wrap_resolver(self, call_next: Callable) -> Callable:  # type: ignore[override]
        wrapped = call_next
        for plugin in reversed(self._plugins):
            plugin_call = plugin.wrap_resolve(self, wrapped)
            wrapped = self._create_wrapper(plugin, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        plugin_call: Callable,
        next_handler: Callable,
    ) -> Callable:
        @wraps(next_handler)
        def wrapper(context, params):
            if not self.is_plugin_enabled(context.route_key, plugin.name):
                return next_handler(context, params)
            return plugin_call(context, params)

        return wrapper

    def _apply_plugin_to_routes(self, plugin: BasePlugin) -> None:
        prefix = f"{plugin.plugin_code}_"
        for _, route, route_key in self.tree.iter_nodes():
            route_cfg = dictExtract(route.options, prefix, slice_prefix=True, pop=False)
            if route_cfg:
                plugin.configure(_target=route_key, **route_cfg)
            plugin.on_route(self, route)
