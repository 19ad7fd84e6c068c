from __future__ import annotations
from typing import List, Optional
import math

from ..geometry.bounds import Bounds2
from ..geometry.numeric import (
    are_points_collinear, is_between_0_and_1, solve_cubic_roots_real, solve_quadratic_roots_real,
)
from ..geometry.vector import Vector2, v2
from .overlap import get_polynomial_overlaps
from .quadratic import END_CURVATURE_EPSILON, Quadratic
from .results import Overlap, SegmentIntersection
from .segment import Segment, SegmentKind, bezier_end_curvature, check_t, ray_frame, ray_hits_at

CUSP_EPSILON = 1e-7


def extrema_t(v0: float, v1: float, v2_: float, v3: float) -> List[float]:
    """t values in [0, 1] where the 1-dimensional cubic has zero derivative."""
    if v0 == v1 == v2_ == v3:
        return []
    # coefficients of the derivative
    a = -3 * v0 + 9 * v1 - 9 * v2_ + 3 * v3
    b = 6 * v0 - 12 * v1 + 6 * v2_
    c = -3 * v0 + 3 * v1
    return [t for t in solve_quadratic_roots_real(a, b, c) or [] if is_between_0_and_1(t)]


class Cubic(Segment):
    """Cubic bezier: start, two control points, end."""

    kind = SegmentKind.CUBIC
    degree = 3

    def __init__(self, start, control1, control2, end):
        super().__init__()
        self._start = v2(start)
        self._control1 = v2(control1)
        self._control2 = v2(control2)
        self._end = v2(end)

    def __repr__(self):
        return (f"Cubic({tuple(self._start)}, {tuple(self._control1)}, "
                f"{tuple(self._control2)}, {tuple(self._end)})")

    @property
    def start(self) -> Vector2:
        return self._start

    @start.setter
    def start(self, value):
        self._set_point("_start", value)

    @property
    def control1(self) -> Vector2:
        return self._control1

    @control1.setter
    def control1(self, value):
        self._set_point("_control1", value)

    @property
    def control2(self) -> Vector2:
        return self._control2

    @control2.setter
    def control2(self, value):
        self._set_point("_control2", value)

    @property
    def end(self) -> Vector2:
        return self._end

    @end.setter
    def end(self, value):
        self._set_point("_end", value)

    @property
    def control_points(self):
        return [self._start, self._control1, self._control2, self._end]

    @property
    def start_tangent(self) -> Vector2:
        return self._cached("start_tangent", lambda: self.tangent_at(0).normalized())

    @property
    def end_tangent(self) -> Vector2:
        return self._cached("end_tangent", lambda: self.tangent_at(1).normalized())

    @property
    def x_extrema_t(self) -> List[float]:
        return self._cached("x_extrema_t", lambda: extrema_t(
            self._start.x, self._control1.x, self._control2.x, self._end.x))

    @property
    def y_extrema_t(self) -> List[float]:
        return self._cached("y_extrema_t", lambda: extrema_t(
            self._start.y, self._control1.y, self._control2.y, self._end.y))

    # ---------------------------
    # Cusp / inflection info
    # ---------------------------

    def _cusp_info(self):
        def compute():
            s, c1, c2, e = self._start, self._control1, self._control2, self._end
            a = s.times(-1).plus(c1.times(3)).plus(c2.times(-3)).plus(e)
            b = s.times(3).plus(c1.times(-6)).plus(c2.times(3))
            c = s.times(-3).plus(c1.times(3))
            a_perp_dot_b = a.perpendicular.dot(b)
            if a_perp_dot_b == 0:
                return math.nan, math.nan, math.nan, math.nan
            t_cusp = -0.5 * (a.perpendicular.dot(c) / a_perp_dot_b)
            t_determinant = t_cusp * t_cusp - 1 / 3 * (b.perpendicular.dot(c) / a_perp_dot_b)
            if t_determinant >= 0:
                root = math.sqrt(t_determinant)
                return t_cusp, t_determinant, t_cusp - root, t_cusp + root
            return t_cusp, t_determinant, math.nan, math.nan
        return self._cached("cusp", compute)

    @property
    def t_cusp(self) -> float:
        return self._cusp_info()[0]

    @property
    def t_determinant(self) -> float:
        return self._cusp_info()[1]

    @property
    def t_inflection1(self) -> float:
        return self._cusp_info()[2]

    @property
    def t_inflection2(self) -> float:
        return self._cusp_info()[3]

    def has_cusp(self) -> bool:
        t = self.t_cusp
        return 0 <= t <= 1 and self.tangent_at(t).magnitude < CUSP_EPSILON

    def get_quadratics(self) -> Optional[List[Quadratic]]:
        """The cubic split at its cusp into quadratics, or None when there is no cusp."""
        if not self.has_cusp():
            return None
        t = self.t_cusp
        if t == 0:
            return [Quadratic(self._start, self._control2, self._end)]
        if t == 1:
            return [Quadratic(self._start, self._control1, self._end)]
        left, right = self.subdivided(t)
        return [Quadratic(left.start, left.control1, left.end),
                Quadratic(right.start, right.control2, right.end)]

    # ---------------------------
    # Evaluation
    # ---------------------------

    @property
    def bounds(self) -> Bounds2:
        def compute():
            bounds = Bounds2.point(self._start).with_point(self._end)
            for t in self.x_extrema_t + self.y_extrema_t:
                bounds = bounds.with_point(self.position_at(t))
            if self.has_cusp():
                bounds = bounds.with_point(self.position_at(self.t_cusp))
            return bounds
        return self._cached("bounds", compute)

    def position_at(self, t: float) -> Vector2:
        check_t(t)
        mt = 1 - t
        mmm = mt * mt * mt
        mmt = 3 * mt * mt * t
        mtt = 3 * mt * t * t
        ttt = t * t * t
        s, c1, c2, e = self._start, self._control1, self._control2, self._end
        return Vector2(s.x * mmm + c1.x * mmt + c2.x * mtt + e.x * ttt,
                       s.y * mmm + c1.y * mmt + c2.y * mtt + e.y * ttt)

    def tangent_at(self, t: float) -> Vector2:
        check_t(t)
        mt = 1 - t
        return (self._start.times(-3 * mt * mt)
                .plus(self._control1.times(3 * mt * mt - 6 * mt * t))
                .plus(self._control2.times(6 * mt * t - 3 * t * t))
                .plus(self._end.times(3 * t * t)))

    def curvature_at(self, t: float) -> float:
        check_t(t)
        if abs(t - 0.5) > 0.5 - END_CURVATURE_EPSILON:
            if t < 0.5:
                return bezier_end_curvature(self, t, self._start, self._control1, self._control2)
            return bezier_end_curvature(self, t, self._end, self._control2, self._control1)
        return self.subdivided(t)[0].curvature_at(1)

    def subdivided(self, t: float) -> List[Segment]:
        check_t(t)
        if t == 0 or t == 1:
            return [self]
        # de Casteljau
        left = self._start.blend(self._control1, t)
        right = self._control2.blend(self._end, t)
        middle = self._control1.blend(self._control2, t)
        left_mid = left.blend(middle, t)
        right_mid = middle.blend(right, t)
        mid = left_mid.blend(right_mid, t)
        return [Cubic(self._start, left, left_mid, mid), Cubic(mid, right_mid, right, self._end)]

    def get_interior_extrema_ts(self) -> List[float]:
        epsilon = 1e-10
        result: List[float] = []
        for t in self.x_extrema_t + self.y_extrema_t:
            if epsilon < t < 1 - epsilon and all(abs(t - other) > epsilon for other in result):
                result.append(t)
        return sorted(result)

    def transformed(self, matrix) -> "Cubic":
        return Cubic(*(matrix.apply(p) for p in self.control_points))

    def reversed(self) -> "Cubic":
        return Cubic(self._end, self._control2, self._control1, self._start)

    def degree_reduced(self, epsilon: float = 0.0) -> Optional[Quadratic]:
        """The same curve as a Quadratic, if the control points allow it within epsilon."""
        control_a = self._control1.times(3).minus(self._start).divided(2)
        control_b = self._control2.times(3).minus(self._end).divided(2)
        if control_a.minus(control_b).magnitude <= epsilon:
            return Quadratic(self._start, control_a.average(control_b), self._end)
        return None

    def get_signed_area_fragment(self) -> float:
        s, c1, c2, e = self._start, self._control1, self._control2, self._end
        return 1 / 20 * (
            s.x * (6 * c1.y + 3 * c2.y + e.y)
            + c1.x * (-6 * s.y + 3 * c2.y + 3 * e.y)
            + c2.x * (-3 * s.y - 3 * c1.y + 6 * e.y)
            + e.x * (-s.y - 3 * c1.y - 6 * c2.y)
        )

    def get_nondegenerate_segments(self) -> List[Segment]:
        from .line import Line

        start, control1, control2, end = self.control_points
        if start == end == control1 == control2:
            return []
        if self.has_cusp():
            return [s for q in self.get_quadratics() for s in q.get_nondegenerate_segments()]
        reduced = self.degree_reduced(1e-9)
        if reduced is not None:
            return reduced.get_nondegenerate_segments()
        if (are_points_collinear(start, control1, end) and are_points_collinear(start, control2, end)
                and not start.equals_epsilon(end, 1e-7)):
            points = [self.position_at(t) for t in sorted(self.x_extrema_t + self.y_extrema_t)]
            points = [start] + points + [end]
            lines = [Line(a, b) for a, b in zip(points, points[1:])]
            return [s for line in lines for s in line.get_nondegenerate_segments()]
        return [self]

    def get_self_intersection(self) -> Optional[SegmentIntersection]:
        """The loop point of the cubic, if it crosses itself."""
        from .bounds_intersection import BoundsIntersection

        t_extremes = self.get_interior_extrema_ts()
        full = [0.0] + t_extremes + [1.0]
        segments = self.subdivisions(t_extremes)
        # monotone pieces can't self-intersect; a loop needs at least three of them
        if len(segments) < 3:
            return None
        for i in range(len(segments)):
            for j in range(i + 1, len(segments)):
                hits = BoundsIntersection.intersect(segments[i], segments[j])
                if not hits:
                    continue
                hit = hits[0]
                # shared end points of neighbouring pieces don't count
                if 1e-7 < hit.a_t < 1 - 1e-7 and 1e-7 < hit.b_t < 1 - 1e-7:
                    a_t = full[i] + hit.a_t * (full[i + 1] - full[i])
                    b_t = full[j] + hit.b_t * (full[j + 1] - full[j])
                    return SegmentIntersection(hit.point, a_t, b_t)
        return None

    def intersection(self, ray) -> list:
        frame = ray_frame(ray)
        p0, p1, p2, p3 = (frame.apply(p) for p in self.control_points)
        a = -p0.y + 3 * p1.y - 3 * p2.y + p3.y
        b = 3 * p0.y - 6 * p1.y + 3 * p2.y
        c = -3 * p0.y + 3 * p1.y
        d = p0.y
        return ray_hits_at(self, ray, solve_cubic_roots_real(a, b, c, d))

    def get_overlaps(self, other: Segment, epsilon: float = 1e-6) -> List[Overlap]:
        if isinstance(other, Cubic):
            return Cubic.get_overlaps_between(self, other, epsilon)
        return []

    @staticmethod
    def get_overlaps_between(cubic1: "Cubic", cubic2: "Cubic", epsilon: float = 1e-6) -> List[Overlap]:
        """[Overlap(a, b)] where cubic1(t) == cubic2(a*t + b), else []."""
        if not (isinstance(cubic1, Cubic) and isinstance(cubic2, Cubic)):
            raise TypeError("get_overlaps_between expects two Cubic segments")
        return get_polynomial_overlaps(cubic1.control_points, cubic2.control_points, epsilon)
