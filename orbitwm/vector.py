"""
2D Integer Vectors

Positions, sizes and drag deltas are all expressed as Vector2D.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2D:
    """Integer vector with componentwise arithmetic."""

    x: int = 0
    y: int = 0

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def max(self, other: "Vector2D") -> "Vector2D":
        """Componentwise maximum. Used to clamp a size to a floor."""
        return Vector2D(max(self.x, other.x), max(self.y, other.y))
