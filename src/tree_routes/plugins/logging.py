"""Logging plugin for Tree Routes.

Wraps each resolve-hook call with configurable logging messages including
timing and the outcome (``produced`` or ``continue``).

Configuration
-------------
Accepted keys (router-level or per-route):
    - ``enabled``: Gate the plugin entirely (default True)
    - ``before``: Log "start" message (default True)
    - ``after``: Log "end" message with timing (default True)
    - ``log``: Use logger.info() when available (default True)
    - ``print``: Always use print() (default False)

Example::

    from tree_routes import Route, Router

    router = Router([
        Route("/users", list_users),
        Route("/health", health, logging_after=False),
    ]).plug("logging")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from tree_routes.core.outcome import Produced, as_outcome
from tree_routes.core.router import Router
from tree_routes.plugins._base_plugin import BasePlugin


class LoggingPlugin(BasePlugin):
    """Logging plugin with configurable start/end messages and timing."""

    plugin_code = "logging"
    plugin_description = "Logs resolve hook calls with timing"

    __slots__ = ("_logger",)

    def __init__(self, router, *, logger: logging.Logger | None = None, **cfg):
        self._logger = logger or logging.getLogger("tree_routes")
        super().__init__(router, **cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        Args:
            enabled: Enable/disable the plugin entirely.
            before: Log "{route} start" before the hook runs.
            after: Log "{route} produced|continue (X ms)" after it.
            log: Use logger.info() when handlers available.
            print: Always use print() instead of logger.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: dict | None = None):
        """Emit a log message via configured sink."""
        if cfg is None:
            return
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            if self._logger.hasHandlers():
                self._logger.info(message)
            else:
                print(message)

    def wrap_resolve(self, router, call_next: Callable):
        """Wrap the resolve hook with start/end logging and timing."""

        def logged(context, params):
            route_key = context.route_key
            cfg = self._effective_config(route_key)
            if not cfg["enabled"]:
                return call_next(context, params)
            label = route_key or "<root>"
            if cfg["before"]:
                self._emit(f"{label} start", cfg=cfg)
            t0 = time.perf_counter()
            result = call_next(context, params)
            elapsed = (time.perf_counter() - t0) * 1000
            if cfg["after"]:
                kind = "produced" if isinstance(as_outcome(result), Produced) else "continue"
                self._emit(f"{label} {kind} ({elapsed:.2f} ms)", cfg=cfg)
            return result

        return logged

    def _effective_config(self, route_key: str) -> dict:
        """Get effective configuration for a route, merging defaults."""
        defaults = {"enabled": True, "before": True, "after": True, "log": True, "print": False}
        cfg = defaults | self.configuration(route_key)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Router.register_plugin(LoggingPlugin)
