"""Core runtime aggregator for Tree Routes.

Exposes the runtime building blocks from a single module.

Public API:
    - ``BaseRouter``: Plugin-free resolution engine
    - ``Router``: Plugin-enabled router with middleware support
    - ``Route``: Route tree node
    - ``route``: Decorator building a Route from a function
    - ``ResolveContext``: Per-candidate context passed to handlers
    - ``Produced``, ``CONTINUE``, ``SKIP_BRANCH``: handler outcomes

Importing this module performs only imports; it does not register plugins
or instantiate routers.
"""

from .base_router import BaseRouter, default_resolve_route
from .context import ResolveContext
from .decorators import route
from .enumerator import MatchCandidate, RouteMatches
from .matching import MatchResult, decode_param, match_path
from .outcome import CONTINUE, SKIP_BRANCH, Continue, Produced, as_outcome
from .patterns import CompiledPattern, ParamKey, PatternCache, compile_pattern, default_cache
from .route_node import Route
from .router import Router
from .router_interface import RouterInterface
from .tree import RouteTree

__all__ = [
    "BaseRouter",
    "CONTINUE",
    "CompiledPattern",
    "Continue",
    "MatchCandidate",
    "MatchResult",
    "ParamKey",
    "PatternCache",
    "Produced",
    "ResolveContext",
    "Route",
    "RouteMatches",
    "RouteTree",
    "Router",
    "RouterInterface",
    "SKIP_BRANCH",
    "as_outcome",
    "compile_pattern",
    "decode_param",
    "default_cache",
    "default_resolve_route",
    "match_path",
    "route",
]
