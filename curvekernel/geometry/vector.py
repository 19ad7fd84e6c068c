"""
2D points / vectors.

Points are plain (x, y) tuples everywhere else in the kernel, so Vector2 is a
NamedTuple: it unpacks like ``x, y = p`` and compares like a tuple, but carries
the handful of vector operations the segment code needs.
"""
from __future__ import annotations
from typing import NamedTuple
import math


class Vector2(NamedTuple):
    x: float
    y: float

    @staticmethod
    def create_polar(magnitude: float, angle: float) -> "Vector2":
        return Vector2(magnitude * math.cos(angle), magnitude * math.sin(angle))

    def plus(self, other) -> "Vector2":
        return Vector2(self.x + other[0], self.y + other[1])

    def minus(self, other) -> "Vector2":
        return Vector2(self.x - other[0], self.y - other[1])

    def times(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    def divided(self, scalar: float) -> "Vector2":
        return Vector2(self.x / scalar, self.y / scalar)

    def negated(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def dot(self, other) -> float:
        return self.x * other[0] + self.y * other[1]

    def cross(self, other) -> float:
        return self.x * other[1] - self.y * other[0]

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    @property
    def perpendicular(self) -> "Vector2":
        # rotated by -pi/2 (clockwise on screen, y-down)
        return Vector2(self.y, -self.x)

    def normalized(self) -> "Vector2":
        mag = self.magnitude
        if mag == 0:
            raise ValueError("cannot normalize a zero-length vector")
        return Vector2(self.x / mag, self.y / mag)

    def with_magnitude(self, magnitude: float) -> "Vector2":
        return self.normalized().times(magnitude)

    def distance(self, other) -> float:
        return math.hypot(self.x - other[0], self.y - other[1])

    def distance_squared(self, other) -> float:
        dx = self.x - other[0]
        dy = self.y - other[1]
        return dx * dx + dy * dy

    def blend(self, other, ratio: float) -> "Vector2":
        """Linear interpolation, ratio=0 is self and ratio=1 is other."""
        return Vector2(self.x + (other[0] - self.x) * ratio, self.y + (other[1] - self.y) * ratio)

    def average(self, other) -> "Vector2":
        return self.blend(other, 0.5)

    def equals_epsilon(self, other, epsilon: float) -> bool:
        return max(abs(self.x - other[0]), abs(self.y - other[1])) <= epsilon

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


ZERO = Vector2(0.0, 0.0)


def v2(p) -> Vector2:
    """Coerce an (x, y) pair (tuple, list, Vector2) into a Vector2."""
    if isinstance(p, Vector2):
        return p
    x, y = p
    return Vector2(float(x), float(y))
