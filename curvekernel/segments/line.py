from __future__ import annotations
from typing import List

from ..geometry.bounds import Bounds2
from ..geometry.numeric import clamp, line_segment_intersection
from ..geometry.vector import Vector2, v2
from .overlap import get_polynomial_overlaps
from .results import ClosestPoint, Overlap, Ray2, RayIntersection, SegmentIntersection
from .segment import Segment, SegmentKind, check_t


class Line(Segment):
    """Straight segment from start to end."""

    kind = SegmentKind.LINE
    degree = 1

    def __init__(self, start, end):
        super().__init__()
        self._start = v2(start)
        self._end = v2(end)
        if not (self._start.is_finite() and self._end.is_finite()):
            raise ValueError("line end points must be finite")

    def __repr__(self):
        return f"Line({tuple(self._start)}, {tuple(self._end)})"

    @property
    def start(self) -> Vector2:
        return self._start

    @start.setter
    def start(self, value):
        self._set_point("_start", value)

    @property
    def end(self) -> Vector2:
        return self._end

    @end.setter
    def end(self, value):
        self._set_point("_end", value)

    @property
    def control_points(self):
        return [self._start, self._end]

    @property
    def start_tangent(self) -> Vector2:
        return self._cached("tangent", lambda: self._end.minus(self._start).normalized())

    @property
    def end_tangent(self) -> Vector2:
        return self.start_tangent

    @property
    def bounds(self) -> Bounds2:
        return self._cached("bounds", lambda: Bounds2.point(self._start).with_point(self._end))

    def position_at(self, t: float) -> Vector2:
        check_t(t)
        return self._start.plus(self._end.minus(self._start).times(t))

    def tangent_at(self, t: float) -> Vector2:
        check_t(t)
        return self.start_tangent

    def curvature_at(self, t: float) -> float:
        check_t(t)
        return 0.0

    def subdivided(self, t: float) -> List[Segment]:
        check_t(t)
        if t == 0 or t == 1:
            return [self]
        pt = self.position_at(t)
        return [Line(self._start, pt), Line(pt, self._end)]

    def get_interior_extrema_ts(self) -> List[float]:
        return []

    def transformed(self, matrix) -> "Line":
        return Line(matrix.apply(self._start), matrix.apply(self._end))

    def reversed(self) -> "Line":
        return Line(self._end, self._start)

    def reparameterized(self, a: float, b: float) -> "Line":
        """The line p(t) = self(a*t + b)."""
        return Line(self._point_at_unchecked(b), self._point_at_unchecked(a + b))

    def _point_at_unchecked(self, t: float) -> Vector2:
        return self._start.plus(self._end.minus(self._start).times(t))

    def get_signed_area_fragment(self) -> float:
        return 0.5 * (self._start.x * self._end.y - self._start.y * self._end.x)

    def get_nondegenerate_segments(self) -> List[Segment]:
        return [] if self._start == self._end else [self]

    def get_arc_length(self, distance_epsilon=None, curve_epsilon=None, max_levels=None) -> float:
        return self._start.distance(self._end)

    def to_piecewise_linear_or_arc_segments(self, *args, **kwargs) -> list:
        return [self]

    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        start, end = self._start, self._end
        diff = end.minus(start)
        if diff.magnitude_squared == 0:
            return []
        denom = ray.direction.y * diff.x - ray.direction.x * diff.y
        if denom == 0:
            # parallel or coincident
            return []
        t = (ray.direction.x * (start.y - ray.position.y) - ray.direction.y * (start.x - ray.position.x)) / denom
        if t < 0 or t >= 1:
            return []
        s = (diff.x * (start.y - ray.position.y) - diff.y * (start.x - ray.position.x)) / denom
        if s < 1e-8:
            # behind the ray
            return []
        perp = diff.perpendicular
        point = start.plus(diff.times(t))
        normal = (perp.negated() if perp.dot(ray.direction) > 0 else perp).normalized()
        wind = 1 if ray.direction.perpendicular.dot(diff) < 0 else -1
        return [RayIntersection(s, point, normal, wind, t)]

    def explicit_closest_to_point(self, point) -> List[ClosestPoint]:
        """Closed-form projection onto the line, clamped to the segment."""
        point = v2(point)
        diff = self._end.minus(self._start)
        if diff.magnitude_squared == 0:
            t = 0.0
        else:
            t = clamp(point.minus(self._start).dot(diff) / diff.magnitude_squared, 0.0, 1.0)
        closest = self.position_at(t)
        return [ClosestPoint(self, t, closest, point.distance_squared(closest))]

    def get_closest_points(self, point) -> List[ClosestPoint]:
        return self.explicit_closest_to_point(point)

    def get_overlaps(self, other: Segment, epsilon: float = 1e-6) -> List[Overlap]:
        if isinstance(other, Line):
            return Line.get_overlaps_between(self, other, epsilon)
        return []

    @staticmethod
    def get_overlaps_between(line1: "Line", line2: "Line", epsilon: float = 1e-6) -> List[Overlap]:
        """
        Overlap (a, b) such that line1(t) == line2(a*t + b), as a one-element list,
        or [] when the lines don't share a continuous stretch.
        """
        if not (isinstance(line1, Line) and isinstance(line2, Line)):
            raise TypeError("get_overlaps_between expects two Line segments")
        return get_polynomial_overlaps(line1.control_points, line2.control_points, epsilon)

    @staticmethod
    def intersect_lines(a: "Line", b: "Line") -> List[SegmentIntersection]:
        point = line_segment_intersection(a.start.x, a.start.y, a.end.x, a.end.y,
                                          b.start.x, b.start.y, b.end.x, b.end.y)
        if point is None:
            return []
        a_t = a.explicit_closest_to_point(point)[0].t
        b_t = b.explicit_closest_to_point(point)[0].t
        return [SegmentIntersection(point, a_t, b_t)]

    @staticmethod
    def intersect_other(line: "Line", other: Segment) -> List[SegmentIntersection]:
        """
        Intersections of a line with any other segment, found by casting a ray
        along the line. Hits at (or numerically at) the line's end points are
        excluded.
        """
        delta = line.end.minus(line.start)
        length = delta.magnitude
        if length == 0:
            return []
        ray = Ray2(line.start, delta.normalized())
        results = []
        for hit in other.intersection(ray):
            line_t = hit.distance / length
            if 1e-8 < line_t < 1 - 1e-8:
                results.append(SegmentIntersection(hit.point, line_t, hit.t))
        return results
