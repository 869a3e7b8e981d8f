"""Minimal immutable 2D vector."""

import math
import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2D:
    """
    A 2D floating point vector.

    Every operation returns a new vector. Division by exactly zero follows
    IEEE float semantics (inf/nan components) instead of raising.
    """
    x: float = 0.0
    y: float = 0.0

    def add(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def sub(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def scale(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    def divide(self, scalar: float) -> "Vector2D":
        """Divide both components by a scalar."""
        with np.errstate(divide="ignore", invalid="ignore"):
            x = np.float64(self.x) / np.float64(scalar)
            y = np.float64(self.y) / np.float64(scalar)
        return Vector2D(float(x), float(y))

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> "Vector2D":
        """Unit vector in the same direction, or the zero vector."""
        length = self.length()
        if length > 0:
            return self.divide(length)
        return Vector2D(0.0, 0.0)

    def distance_to(self, other: "Vector2D") -> float:
        return self.sub(other).length()

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return self.add(other)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return self.sub(other)

    def __mul__(self, scalar: float) -> "Vector2D":
        return self.scale(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector2D":
        return self.divide(scalar)

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)
