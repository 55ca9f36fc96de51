# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Tree Routes.

This module defines custom exceptions used throughout the routing system.
"""

__all__ = [
    "InvalidRoutes",
    "NotFound",
]


class InvalidRoutes(TypeError):
    """Raised when route definitions passed to a router are malformed.

    Construction-time error: the router cannot be built from the given input.
    """


class NotFound(Exception):
    """Raised when no candidate route produced a result (404).

    This exception indicates that the route tree was fully explored for
    the pathname and every matching handler fell through.

    Attributes:
        pathname: The pathname that was being resolved.
        status: HTTP-like status code, always 404.
    """

    status = 404

    def __init__(self, pathname: str | None = None) -> None:
        self.pathname = pathname
        super().__init__("Route not found")
