# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""RouterInterface - Abstract base for router-like objects.

Defines the minimal interface that all routers must implement.
This allows embedding layers (navigation, HTTP adapters) to accept
router-compatible objects without depending on BaseRouter internals.

Required methods:
    - resolve(pathname_or_context) -> handler result
    - nodes() -> introspection data dict
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

__all__ = ["RouterInterface"]


class RouterInterface(ABC):
    """Minimal interface for router-like objects."""

    @abstractmethod
    def resolve(self, pathname_or_context: str | Mapping[str, Any], **extra: Any) -> Any:
        """Resolve a pathname to the first produced handler result.

        Args:
            pathname_or_context: Pathname string, or mapping with a
                ``pathname`` key and extra context fields.
            **extra: Extra context fields.

        Raises:
            NotFound: when no handler produced a result.
        """
        ...

    @abstractmethod
    def nodes(self) -> dict[str, Any]:
        """Return introspection data for the route tree."""
        ...
