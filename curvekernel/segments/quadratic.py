from __future__ import annotations
from typing import List
import math

from ..geometry.bounds import Bounds2
from ..geometry.numeric import are_points_collinear, solve_quadratic_roots_real
from ..geometry.vector import Vector2, v2
from .overlap import get_polynomial_overlaps
from .results import Overlap
from .segment import Segment, SegmentKind, bezier_end_curvature, check_t, ray_frame, ray_hits_at

# t within this of 0 or 1 uses the closed-form end point curvature
END_CURVATURE_EPSILON = 1e-7


def extrema_t(start: float, control: float, end: float) -> float:
    """t where the 1-dimensional quadratic has zero derivative (NaN when it is linear)."""
    divisor = 2 * (end - 2 * control + start)
    if divisor == 0:
        return math.nan
    return -2 * (control - start) / divisor


class Quadratic(Segment):
    """Quadratic bezier: start, one control point, end."""

    kind = SegmentKind.QUADRATIC
    degree = 2

    def __init__(self, start, control, end):
        super().__init__()
        self._start = v2(start)
        self._control = v2(control)
        self._end = v2(end)

    def __repr__(self):
        return f"Quadratic({tuple(self._start)}, {tuple(self._control)}, {tuple(self._end)})"

    @property
    def start(self) -> Vector2:
        return self._start

    @start.setter
    def start(self, value):
        self._set_point("_start", value)

    @property
    def control(self) -> Vector2:
        return self._control

    @control.setter
    def control(self, value):
        self._set_point("_control", value)

    @property
    def end(self) -> Vector2:
        return self._end

    @end.setter
    def end(self, value):
        self._set_point("_end", value)

    @property
    def control_points(self):
        return [self._start, self._control, self._end]

    @property
    def start_tangent(self) -> Vector2:
        def compute():
            if self._start == self._control:
                return self._end.minus(self._start).normalized()
            return self._control.minus(self._start).normalized()
        return self._cached("start_tangent", compute)

    @property
    def end_tangent(self) -> Vector2:
        def compute():
            if self._end == self._control:
                return self._end.minus(self._start).normalized()
            return self._end.minus(self._control).normalized()
        return self._cached("end_tangent", compute)

    @property
    def t_critical_x(self) -> float:
        return self._cached("t_critical_x", lambda: extrema_t(self._start.x, self._control.x, self._end.x))

    @property
    def t_critical_y(self) -> float:
        return self._cached("t_critical_y", lambda: extrema_t(self._start.y, self._control.y, self._end.y))

    @property
    def bounds(self) -> Bounds2:
        def compute():
            bounds = Bounds2.point(self._start).with_point(self._end)
            for t in (self.t_critical_x, self.t_critical_y):
                if not math.isnan(t) and 0 < t < 1:
                    bounds = bounds.with_point(self.position_at(t))
            return bounds
        return self._cached("bounds", compute)

    def position_at(self, t: float) -> Vector2:
        check_t(t)
        mt = 1 - t
        # (1-t)^2 start + 2(1-t)t control + t^2 end
        return self._start.times(mt * mt).plus(self._control.times(2 * mt * t)).plus(self._end.times(t * t))

    def tangent_at(self, t: float) -> Vector2:
        check_t(t)
        # 2(1-t)(control - start) + 2t(end - control)
        return self._control.minus(self._start).times(2 * (1 - t)).plus(
            self._end.minus(self._control).times(2 * t))

    def curvature_at(self, t: float) -> float:
        check_t(t)
        if abs(t - 0.5) > 0.5 - END_CURVATURE_EPSILON:
            if t < 0.5:
                return bezier_end_curvature(self, t, self._start, self._control, self._end)
            return bezier_end_curvature(self, t, self._end, self._control, self._start)
        return self.subdivided(t)[0].curvature_at(1)

    def subdivided(self, t: float) -> List[Segment]:
        check_t(t)
        if t == 0 or t == 1:
            return [self]
        # de Casteljau
        left_mid = self._start.blend(self._control, t)
        right_mid = self._control.blend(self._end, t)
        mid = left_mid.blend(right_mid, t)
        return [Quadratic(self._start, left_mid, mid), Quadratic(mid, right_mid, self._end)]

    def get_interior_extrema_ts(self) -> List[float]:
        epsilon = 1e-10
        result = []
        for t in (self.t_critical_x, self.t_critical_y):
            if not math.isnan(t) and epsilon < t < 1 - epsilon:
                if all(abs(t - other) > epsilon for other in result):
                    result.append(t)
        return sorted(result)

    def transformed(self, matrix) -> "Quadratic":
        return Quadratic(matrix.apply(self._start), matrix.apply(self._control), matrix.apply(self._end))

    def reversed(self) -> "Quadratic":
        return Quadratic(self._end, self._control, self._start)

    def degree_elevated(self):
        """The same curve as a Cubic."""
        from .cubic import Cubic

        return Cubic(self._start,
                     self._start.plus(self._control.times(2)).divided(3),
                     self._end.plus(self._control.times(2)).divided(3),
                     self._end)

    def reparameterized(self, a: float, b: float) -> "Quadratic":
        """The quadratic p(t) = self(a*t + b)."""
        # self(t) = p t^2 + q t + r
        p = self._start.plus(self._end.plus(self._control.times(-2)))
        q = self._control.minus(self._start).times(2)
        r = self._start
        alpha = p.times(a * a)
        beta = p.times(2 * a * b).plus(q.times(a))
        gamma = p.times(b * b).plus(q.times(b)).plus(r)
        return Quadratic(gamma, beta.times(0.5).plus(gamma), alpha.plus(beta).plus(gamma))

    def get_signed_area_fragment(self) -> float:
        s, c, e = self._start, self._control, self._end
        return 1 / 6 * (s.x * (2 * c.y + e.y) + c.x * (-2 * s.y + 2 * e.y) + e.x * (-s.y - 2 * c.y))

    def get_nondegenerate_segments(self) -> List[Segment]:
        from .line import Line

        start, control, end = self._start, self._control, self._end
        start_is_end = start == end
        start_is_control = start == control
        end_is_control = end == control
        if start_is_end and start_is_control:
            return []
        if start_is_end:
            # out to the farthest point and back
            half = self.position_at(0.5)
            return [Line(start, half), Line(half, end)]
        if are_points_collinear(start, control, end):
            if start_is_control or end_is_control:
                return [Line(start, end)]
            delta = end.minus(start)
            p1d = control.minus(start).dot(delta.normalized()) / delta.magnitude
            t = extrema_t(0, p1d, 1)
            if not math.isnan(t) and 0 < t < 1:
                # the curve overshoots start->end; go out to the extremum and back
                pt = self.position_at(t)
                return Line(start, pt).get_nondegenerate_segments() + Line(pt, end).get_nondegenerate_segments()
            return [Line(start, end)]
        return [self]

    def intersection(self, ray) -> list:
        frame = ray_frame(ray)
        p0 = frame.apply(self._start)
        p1 = frame.apply(self._control)
        p2 = frame.apply(self._end)
        a = p0.y - 2 * p1.y + p2.y
        b = -2 * p0.y + 2 * p1.y
        c = p0.y
        return ray_hits_at(self, ray, solve_quadratic_roots_real(a, b, c))

    def get_overlaps(self, other: Segment, epsilon: float = 1e-6) -> List[Overlap]:
        if isinstance(other, Quadratic):
            return Quadratic.get_overlaps_between(self, other, epsilon)
        return []

    @staticmethod
    def get_overlaps_between(quadratic1: "Quadratic", quadratic2: "Quadratic",
                             epsilon: float = 1e-6) -> List[Overlap]:
        """[Overlap(a, b)] where quadratic1(t) == quadratic2(a*t + b), else []."""
        if not (isinstance(quadratic1, Quadratic) and isinstance(quadratic2, Quadratic)):
            raise TypeError("get_overlaps_between expects two Quadratic segments")
        return get_polynomial_overlaps(quadratic1.control_points, quadratic2.control_points, epsilon)
