"""Two-dimensional vectors and the small geometric helpers built on them."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

RVO_EPSILON = 0.00001
"""A sufficiently small positive number."""


@dataclass(frozen=True, slots=True)
class Vector2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __add__(self, other: Vector2) -> Vector2:
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        if isinstance(scalar, Vector2) or not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector2(scalar * self.x, scalar * self.y)

    def __truediv__(self, scalar: float) -> Vector2:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        inv = 1.0 / scalar
        return Vector2(self.x * inv, self.y * inv)

    def __matmul__(self, other: Vector2) -> float:
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.dot(other)

    def __str__(self) -> str:
        return f"({self.x:g},{self.y:g})"

    def dot(self, other: Vector2) -> float:
        """Return the dot product with another vector."""
        return self.x * other.x + self.y * other.y


def abs_sq(vector: Vector2) -> float:
    """Return the squared length of a vector."""
    return vector.dot(vector)


def mag(vector: Vector2) -> float:
    """Return the length of a vector."""
    return math.sqrt(vector.dot(vector))


def det(vector1: Vector2, vector2: Vector2) -> float:
    """Return the determinant of the 2x2 matrix with the given rows."""
    return vector1.x * vector2.y - vector1.y * vector2.x


def normalize(vector: Vector2) -> Vector2:
    """Return the unit vector in the direction of ``vector``.

    Raises ZeroDivisionError for the zero vector.
    """
    return vector / mag(vector)


def sqr(a: float) -> float:
    """Return the square of a number."""
    return a * a


def dist_sq_point_line_segment(a: Vector2, b: Vector2, c: Vector2) -> float:
    """Return the squared distance from point ``c`` to the segment ``ab``.

    Raises ZeroDivisionError when the segment is degenerate.
    """
    r = (c - a).dot(b - a) / abs_sq(b - a)
    if r < 0.0:
        return abs_sq(c - a)
    if r > 1.0:
        return abs_sq(c - b)
    return abs_sq(c - (a + r * (b - a)))


def left_of(a: Vector2, b: Vector2, c: Vector2) -> float:
    """Return a value that is positive when ``c`` lies left of the line ``ab``."""
    return det(a - c, b - a)