"""Exception types raised by the numeric core."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a caller violates a shape or topology precondition."""


__all__ = ["InvalidArgumentError"]
