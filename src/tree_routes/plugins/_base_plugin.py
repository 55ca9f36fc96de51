"""Plugin contract definitions for Tree Routes.

This module defines the base class used by the Router plugin system.

``BasePlugin``
    Abstract base class that every plugin must subclass. Provides:
        - Configuration helpers that delegate to the router's ``plugin_info`` store
        - Optional hooks ``on_route`` and ``wrap_resolve`` for the Router pipeline

    Required class attributes:
        - ``plugin_code``: unique identifier used for registration (e.g. "logging")
        - ``plugin_description``: human-readable description of the plugin

    Constructor signature: ``BasePlugin(router, **config)``

    Key methods:
        - ``configure(**config)``: Define accepted configuration parameters
        - ``configuration(route_key=None)``: Read merged configuration
        - ``on_route(router, route)``: Called once per route when attached
        - ``wrap_resolve(router, call_next)``: Build middleware chain

Configuration store
-------------------
Config lives on the router, ``router._plugin_info[plugin][target]``, where
``target`` is ``"_all_"`` for router-level settings or a route key
(``context.route_key``: the route name, else its full pattern from the root)
for per-route overrides.

Example::

    from tree_routes.plugins._base_plugin import BasePlugin

    class MyPlugin(BasePlugin):
        plugin_code = "myplugin"
        plugin_description = "My custom plugin"

        def configure(self, enabled: bool = True, threshold: int = 10):
            pass  # Storage handled by wrapper

        def wrap_resolve(self, router, call_next):
            def wrapper(context, params):
                print(f"Before {context.route_key}")
                return call_next(context, params)
            return wrapper
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from pydantic import validate_call

__all__ = ["ALL_ROUTES", "BasePlugin", "parse_flags", "split_route_keys"]

ALL_ROUTES = "_all_"


def parse_flags(flags: str) -> dict[str, bool]:
    """Turn ``"enabled,before:off"`` into ``{"enabled": True, "before": False}``."""
    mapping: dict[str, bool] = {}
    for chunk in filter(None, (part.strip() for part in flags.split(","))):
        name, _, value = chunk.partition(":")
        mapping[name.strip()] = value.strip().lower() != "off"
    return mapping


def split_route_keys(target: str) -> list[str]:
    """Route keys named by ``target``; commas separate several keys.

    A target without commas is taken verbatim, so the root key ``""`` is valid.
    """
    if "," not in target:
        return [target]
    return [key for key in (part.strip() for part in target.split(",")) if key]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Validate ``configure()`` arguments and store them under each route key."""
    validated = validate_call(original_configure)

    @wraps(original_configure)
    def wrapper(
        self: BasePlugin, *, _target: str = ALL_ROUTES, flags: str | None = None, **kwargs: Any
    ) -> None:
        if flags:
            kwargs.update(parse_flags(flags))
        validated(self, **kwargs)
        for route_key in split_route_keys(_target):
            self._write_config(route_key, kwargs)

    return wrapper


class BasePlugin:
    """Hook interface and configuration helpers for router plugins.

    Subclass this to create custom plugins. Override the hooks you need
    and define your configuration schema in ``configure()``.
    """

    __slots__ = ("name", "_router")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, router: Any, **config: Any):
        self.name = self.plugin_code
        self._router = router
        self._route_entry(ALL_ROUTES)["config"].setdefault("enabled", True)
        self.configure(**config)

    def _route_entry(self, route_key: str) -> dict[str, dict[str, Any]]:
        """Return the ``{"config", "locals"}`` entry of ``route_key``, creating it."""
        plugin_bucket = self._get_store().setdefault(self.name, {})
        return plugin_bucket.setdefault(route_key, {"config": {}, "locals": {}})

    def _write_config(self, route_key: str, config: dict[str, Any]) -> None:
        if config:
            self._route_entry(route_key)["config"].update(config)

    def configuration(self, route_key: str | None = None) -> dict[str, Any]:
        """Router-level settings overlaid with those stored for ``route_key``.

        Args:
            route_key: Key of a tree node (``context.route_key``). None reads
                the router-level settings only.
        """
        plugin_bucket = self._get_store().get(self.name, {})
        layers = (ALL_ROUTES,) if route_key is None else (ALL_ROUTES, route_key)
        merged: dict[str, Any] = {}
        for layer in layers:
            merged.update(plugin_bucket.get(layer, {}).get("config", {}))
        return merged

    def _get_store(self) -> dict[str, Any]:
        return self._router._plugin_info  # type: ignore[no-any-return]

    # =========================================================================
    # METHODS TO OVERRIDE IN CUSTOM PLUGINS
    # =========================================================================

    def configure(self, *, _target: str = ALL_ROUTES, flags: str | None = None) -> None:
        """Override to define accepted configuration parameters.

        The wrapper added by __init_subclass__ expands ``flags``, validates
        the arguments with pydantic and stores them under every route key
        named by ``_target`` (``"_all_"``, one key, or comma-separated keys).
        """
        if flags:
            for route_key in split_route_keys(_target):
                self._write_config(route_key, parse_flags(flags))

    def on_route(self, router: Any, route: Any) -> None:  # pragma: no cover - default no-op
        """Override to precompute per-route data when the plugin is attached.

        Called once per node of the tree, in pre-order.
        """

    def wrap_resolve(self, router: Any, call_next: Callable) -> Callable:
        """Override to wrap the resolve hook.

        Return a callable ``(context, params)`` that calls ``call_next``
        and returns its result (or its own outcome). Per-route settings are
        read with ``self.configuration(context.route_key)``.
        """
        return call_next
