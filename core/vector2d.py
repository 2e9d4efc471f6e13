"""Immutable 2D point/vector value type."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2D:
    """2D vector used for positions, headings, and offsets.

    All arithmetic returns new instances; vectors are never mutated in place.
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vector2D":
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> "Vector2D":
        if scalar == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / scalar, self.y / scalar)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> "Vector2D":
        """Return the unit vector, or the zero vector when length is zero."""
        magnitude = self.length()
        if magnitude == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / magnitude, self.y / magnitude)

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    def sign(self, other: "Vector2D") -> int:
        """Return +1 if ``other`` is clockwise of this vector, otherwise -1."""
        return 1 if self.y * other.x > self.x * other.y else -1

    def distance_to(self, other: "Vector2D") -> float:
        return (self - other).length()

    def as_tuple(self) -> tuple[float, float]:
        return (float(self.x), float(self.y))
