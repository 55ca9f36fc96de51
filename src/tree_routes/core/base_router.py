"""Plugin-free router runtime for Tree Routes.

This module exposes :class:`BaseRouter`, which resolves a pathname against
a tree of routes and dispatches to the first handler, in tree pre-order,
that produces a result. Subclasses add middleware but must preserve these
semantics.

Constructor
-----------
Constructor signature::

    BaseRouter(routes, *, base_url="", error_handler=None,
               resolve_route=None, context=None, pattern_cache=None)

- ``routes``: a ``Route``, a mapping, or a list/tuple of them. A sequence is
  wrapped in a synthetic root ``Route("")``. Anything else raises
  ``InvalidRoutes``.
- ``base_url``: prefix stripped from every pathname before matching and
  reported as the start of every candidate ``base_url``.
- ``error_handler``: ``error_handler(error, context)`` called with any
  exception raised during resolution and the last built context; its
  return value becomes the result. Without it errors propagate.
- ``resolve_route``: hook ``resolve_route(context, params)`` replacing the
  default "call the matched route's action".
- ``context``: base fields merged into every resolution context.
- ``pattern_cache``: ``PatternCache`` to use; defaults to the shared one.

Resolution
----------
``resolve(pathname_or_context, **extra)`` walks the candidates yielded by
``RouteMatches`` and calls the hook for each. A produced value ends the
walk; ``None``/``CONTINUE`` tries the next candidate (children of the
tried route included); ``SKIP_BRANCH`` tries the next candidate outside
the tried route's subtree. Exhaustion raises ``NotFound`` (status 404).

Continuation
------------
Handlers receive ``context.next(resume=False, parent=<current route>,
prev_result=CONTINUE)``:

- ``context.next()`` (peek mode) resolves the next candidate only if it is
  a descendant of ``parent``; otherwise the candidate is kept for the
  outer walk and None is returned.
- ``context.next(True)`` resumes the walk unrestricted and raises
  ``NotFound`` when nothing is left.

Hooks for subclasses
--------------------
- ``_wrap_resolver``: override to wrap the resolve hook (middleware stack).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from genro_toolbox.typeutils import safe_is_instance

from tree_routes.exceptions import InvalidRoutes, NotFound

from .context import ResolveContext
from .enumerator import MatchCandidate, RouteMatches
from .outcome import CONTINUE, Continue, Produced, as_outcome
from .patterns import PatternCache, default_cache
from .route_node import Route, normalize_route
from .router_interface import RouterInterface
from .tree import ROOT, RouteTree

__all__ = ["BaseRouter", "default_resolve_route"]

_CURRENT = object()
_EMPTY = object()


def default_resolve_route(context: ResolveContext, params: dict[str, Any]) -> Any:
    """Default resolve hook: call the matched route's action, if any."""
    action = context.route.action
    if action is None:
        return CONTINUE
    return action(context, params)


class _Resolution:
    """State of one ``resolve()`` call: enumerator, lookahead, current context."""

    __slots__ = ("_tree", "_matches", "_resolver", "_context", "_lookahead", "candidate", "current_context")

    def __init__(self, router: BaseRouter, context: ResolveContext) -> None:
        self._tree = router.tree
        self._resolver = router._resolver
        self._context = context
        self._lookahead: Any = _EMPTY
        self.candidate: MatchCandidate | None = None
        self.current_context: ResolveContext = context
        self._matches = router._route_matches(context["pathname"])

    def _pull(self, skip: int | None) -> MatchCandidate | None:
        if self._lookahead is not _EMPTY:
            candidate, self._lookahead = self._lookahead, _EMPTY
            return candidate
        if self._matches is None:
            return None
        return self._matches.next(skip)

    def next(
        self,
        resume: bool = False,
        parent: Any = _CURRENT,
        prev_result: Any = CONTINUE,
    ) -> Any:
        """Resolve the next candidate.

        Args:
            resume: False restricts the step to descendants of ``parent``
                (peek mode); True continues the walk unrestricted.
            parent: Route or tree index bounding peek mode. Defaults to the
                route of the current candidate.
            prev_result: Outcome of the previous step; ``SKIP_BRANCH``
                prunes the subtree of the current candidate.

        Returns:
            The produced value, or None in peek mode when no candidate is
            left in scope.

        Raises:
            NotFound: when the walk is exhausted outside peek mode.
        """
        if parent is _CURRENT:
            parent = self.candidate.index if self.candidate is not None else None
        while True:
            last = self.candidate.index if self.candidate is not None else None
            skip_branch = isinstance(prev_result, Continue) and prev_result.skip_branch
            candidate = self._pull(last if skip_branch else None)
            self.candidate = candidate

            if not resume and (candidate is None or not self._tree.is_descendant(candidate.index, parent)):
                self._lookahead = candidate
                return None
            if candidate is None:
                raise NotFound(self._context["pathname"])

            self.current_context = ResolveContext(self._context, **candidate.as_context())
            outcome = as_outcome(self._resolver(self.current_context, candidate.params))
            if isinstance(outcome, Produced):
                return outcome.value
            prev_result = outcome


class BaseRouter(RouterInterface):
    """Plugin-free router over an immutable route tree.

    Responsibilities:
        - Normalize route definitions and index the tree
        - Enumerate matching candidates lazily
        - Dispatch to handlers with fallthrough and scoped continuation
        - Expose introspection data
    """

    __slots__ = (
        "root",
        "tree",
        "base_url",
        "error_handler",
        "resolve_route",
        "context",
        "pattern_cache",
        "_resolver",
    )

    def __init__(
        self,
        routes: Any,
        *,
        base_url: str = "",
        error_handler: Callable[[Exception, ResolveContext], Any] | None = None,
        resolve_route: Callable[[ResolveContext, dict[str, Any]], Any] | None = None,
        context: Mapping[str, Any] | None = None,
        pattern_cache: PatternCache | None = None,
    ) -> None:
        if isinstance(routes, (list, tuple)):
            root = Route("", children=routes)
        elif safe_is_instance(routes, "tree_routes.core.route_node.Route") or isinstance(routes, Mapping):
            root = normalize_route(routes)
        else:
            raise InvalidRoutes("Invalid routes")
        self.root = root
        self.tree = RouteTree(root)
        self.base_url = base_url or ""
        self.error_handler = error_handler
        self.resolve_route = resolve_route or default_resolve_route
        self.context: dict[str, Any] = {"router": self, **(context or {})}
        self.pattern_cache = pattern_cache if pattern_cache is not None else default_cache
        self._resolver = self._wrap_resolver(self.resolve_route)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def resolve(self, pathname_or_context: str | Mapping[str, Any], **extra: Any) -> Any:
        """Resolve a pathname to the first produced handler result.

        Args:
            pathname_or_context: Pathname, or a mapping with ``pathname`` and
                extra context fields.
            **extra: Extra context fields (override the mapping).

        Returns:
            The first produced result, or the error handler's return value.

        Raises:
            NotFound: no handler produced a result (and no error_handler).
            Exception: anything raised by handlers (and no error_handler).
        """
        if isinstance(pathname_or_context, str):
            supplied: dict[str, Any] = {"pathname": pathname_or_context}
        elif isinstance(pathname_or_context, Mapping):
            supplied = dict(pathname_or_context)
        else:
            raise TypeError(f"resolve() expects a pathname or a mapping, got {type(pathname_or_context).__name__}")
        supplied.update(extra)
        if not isinstance(supplied.get("pathname"), str):
            raise TypeError("resolve() requires a string 'pathname'")

        context = ResolveContext(self.context)
        context.update(supplied)
        resolution = _Resolution(self, context)
        context["next"] = resolution.next
        try:
            return resolution.next(True, ROOT)
        except Exception as error:
            if self.error_handler is not None:
                return self.error_handler(error, resolution.current_context)
            raise

    def matches(self, pathname: str) -> Iterator[MatchCandidate]:
        """Yield the candidates for ``pathname`` in resolution order.

        No handler is invoked; useful for introspection and debugging.
        """
        matches = self._route_matches(pathname)
        if matches is not None:
            yield from matches

    def _route_matches(self, pathname: str) -> RouteMatches | None:
        if not pathname.startswith(self.base_url):
            return None
        return RouteMatches(
            self.tree,
            ROOT,
            self.base_url,
            pathname[len(self.base_url) :],
            cache=self.pattern_cache,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def nodes(self) -> dict[str, Any]:
        """Return a nested dict describing the route tree.

        Each node has ``path``, ``key``, ``name``, ``metadata``,
        ``has_action`` and, when not a leaf, ``children``.
        """
        return self._describe(ROOT)

    def _describe(self, index: int) -> dict[str, Any]:
        route = self.tree.routes[index]
        info: dict[str, Any] = {
            "path": route.path,
            "key": self.tree.keys[index],
            "name": route.name,
            "metadata": dict(route.metadata),
            "has_action": route.action is not None,
        }
        children = self.tree.children[index]
        if children:
            info["children"] = [self._describe(child) for child in children]
        return info

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------
    def _wrap_resolver(self, call_next: Callable) -> Callable:
        return call_next
