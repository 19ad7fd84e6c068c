"""
Plain value types handed back by the segment queries. All are created fresh per
query and owned by the caller.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Tuple

from ..geometry.vector import Vector2


@dataclass(frozen=True)
class Ray2:
    position: Vector2
    direction: Vector2  # unit length

    def point_at_distance(self, distance: float) -> Vector2:
        return self.position.plus(self.direction.times(distance))


@dataclass(frozen=True)
class RayIntersection:
    distance: float
    point: Vector2
    normal: Vector2
    wind: int
    t: float


@dataclass(frozen=True)
class SegmentIntersection:
    point: Vector2
    a_t: float
    b_t: float

    def swapped(self) -> "SegmentIntersection":
        return SegmentIntersection(self.point, self.b_t, self.a_t)


@dataclass(frozen=True)
class ClosestPoint:
    segment: Any
    t: float
    closest_point: Vector2
    distance_squared: float


@dataclass(frozen=True)
class DashValues:
    values: List[float]
    arc_length: float
    initially_inside: bool


@dataclass
class DashState:
    """Where we are inside the dash array while walking a segment."""
    line_dash: List[float]
    dash_index: int = 0
    dash_offset: float = 0.0
    is_inside: bool = True

    @property
    def current(self) -> float:
        return self.line_dash[self.dash_index]

    def next_dash(self) -> None:
        self.dash_index = (self.dash_index + 1) % len(self.line_dash)
        self.is_inside = not self.is_inside

    def burn_offset(self, offset: float) -> None:
        """Consume a (normalized, non-negative) line dash offset before walking."""
        while offset > 0:
            if offset >= self.current:
                offset -= self.current
                self.next_dash()
            else:
                self.dash_offset = offset
                offset = 0


@dataclass(frozen=True)
class Overlap:
    """
    A continuous overlap between two segments p and q, where p(t) == q(a*t + b)
    for every t in p's overlapping range.
    """
    a: float
    b: float

    @staticmethod
    def create_linear(p_t0: float, q_t0: float, p_t1: float, q_t1: float) -> "Overlap":
        """Overlap from two matched parameter pairs (p_t0 <-> q_t0, p_t1 <-> q_t1)."""
        a = (q_t1 - q_t0) / (p_t1 - p_t0)
        return Overlap(a, q_t0 - a * p_t0)

    def apply(self, t: float) -> float:
        return self.a * t + self.b

    def inverse(self, t: float) -> float:
        return (t - self.b) / self.a

    def get_overlap_ranges(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """((p_t0, p_t1), (q_t0, q_t1)): the matching sub-ranges of both segments."""
        lo, hi = sorted((self.inverse(0.0), self.inverse(1.0)))
        p_t0 = max(0.0, lo)
        p_t1 = min(1.0, hi)
        return (p_t0, p_t1), (self.apply(p_t0), self.apply(p_t1))
