# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Handler outcomes: a produced value or a request to continue.

Handlers and resolve hooks may return plain values; the driver normalizes
them with ``as_outcome``:

- ``None`` -> ``CONTINUE``: fall through; children of the tried route
  are still candidates.
- ``SKIP_BRANCH``: fall through and prune the rest of the tried route's
  subtree.
- ``Produced(value)``: final result, also when ``value`` is None.
- anything else -> ``Produced(value)``.
"""

from __future__ import annotations

from typing import Any

__all__ = ["CONTINUE", "SKIP_BRANCH", "Continue", "Produced", "as_outcome"]


class Produced:
    """Final value of a resolution."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Produced):
            return self.value == other.value
        return NotImplemented

    def __repr__(self) -> str:
        return f"Produced({self.value!r})"


class Continue:
    """Request to try the next candidate."""

    __slots__ = ("skip_branch",)

    def __init__(self, skip_branch: bool = False) -> None:
        self.skip_branch = skip_branch

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "SKIP_BRANCH" if self.skip_branch else "CONTINUE"


CONTINUE = Continue()
SKIP_BRANCH = Continue(skip_branch=True)


def as_outcome(value: Any) -> Produced | Continue:
    if value is None:
        return CONTINUE
    if isinstance(value, (Produced, Continue)):
        return value
    return Produced(value)
