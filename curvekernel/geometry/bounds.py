from __future__ import annotations
from dataclasses import dataclass
import math

from .vector import Vector2


@dataclass(frozen=True)
class Bounds2:
    """Axis-aligned bounding box. NOTHING (inverted infinities) is the empty box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @staticmethod
    def point(p) -> "Bounds2":
        return Bounds2(p[0], p[1], p[0], p[1])

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return (self.max_x + self.min_x) / 2

    @property
    def center_y(self) -> float:
        return (self.max_y + self.min_y) / 2

    @property
    def center(self) -> Vector2:
        return Vector2(self.center_x, self.center_y)

    def is_empty(self) -> bool:
        return self.width < 0 or self.height < 0

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.min_x, self.min_y, self.max_x, self.max_y))

    def with_point(self, p) -> "Bounds2":
        return Bounds2(min(self.min_x, p[0]), min(self.min_y, p[1]),
                       max(self.max_x, p[0]), max(self.max_y, p[1]))

    def union(self, other: "Bounds2") -> "Bounds2":
        return Bounds2(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                       max(self.max_x, other.max_x), max(self.max_y, other.max_y))

    def intersection(self, other: "Bounds2") -> "Bounds2":
        return Bounds2(max(self.min_x, other.min_x), max(self.min_y, other.min_y),
                       min(self.max_x, other.max_x), min(self.max_y, other.max_y))

    def intersects_bounds(self, other: "Bounds2") -> bool:
        return not self.intersection(other).is_empty()

    def contains_point(self, p) -> bool:
        return self.min_x <= p[0] <= self.max_x and self.min_y <= p[1] <= self.max_y

    def dilated(self, d: float) -> "Bounds2":
        return Bounds2(self.min_x - d, self.min_y - d, self.max_x + d, self.max_y + d)

    def minimum_distance_to_point_squared(self, p) -> float:
        """Squared distance from p to the closest point of the box (0 inside or on it)."""
        x, y = p[0], p[1]
        close_x = self.min_x if x < self.min_x else (self.max_x if x > self.max_x else None)
        close_y = self.min_y if y < self.min_y else (self.max_y if y > self.max_y else None)
        if close_x is None and close_y is None:
            return 0.0
        if close_x is None:
            d = close_y - y
            return d * d
        if close_y is None:
            d = close_x - x
            return d * d
        dx = close_x - x
        dy = close_y - y
        return dx * dx + dy * dy

    def maximum_distance_to_point_squared(self, p) -> float:
        """Squared distance from p to the farthest corner of the box."""
        x = (self.min_x if p[0] > self.center_x else self.max_x) - p[0]
        y = (self.min_y if p[1] > self.center_y else self.max_y) - p[1]
        return x * x + y * y

    def as_tuple(self):
        return (self.min_x, self.min_y, self.max_x, self.max_y)


NOTHING = Bounds2(math.inf, math.inf, -math.inf, -math.inf)
EVERYTHING = Bounds2(-math.inf, -math.inf, math.inf, math.inf)
