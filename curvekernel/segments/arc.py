"""
Circular arcs.

An arc is a center, a radius and a pair of angles, swept clockwise (increasing
angle, in a y-down frame) unless ``anticlockwise`` is set. Parameter t maps
linearly from start_angle to actual_end_angle.
"""
from __future__ import annotations
from typing import List
import math

from ..geometry.bounds import Bounds2
from ..geometry.numeric import circle_center_from_points, clamp, linear, modulo_between_down, modulo_between_up
from ..geometry.vector import Vector2, v2
from .results import Overlap, RayIntersection, SegmentIntersection
from .segment import Segment, SegmentKind, check_t

TWO_PI = 2 * math.pi
CARDINAL_ANGLES = (0.0, math.pi / 2, math.pi, 3 * math.pi / 2)


def compute_actual_end_angle(start_angle: float, end_angle: float, anticlockwise: bool) -> float:
    """End angle shifted by 2pi as needed so the sweep from start_angle has the right direction."""
    if anticlockwise:
        # -2pi <= end - start < 2pi
        if start_angle > end_angle:
            return end_angle
        if start_angle < end_angle:
            return end_angle - TWO_PI
        return start_angle
    # -2pi < end - start <= 2pi
    if start_angle < end_angle:
        return end_angle
    if start_angle > end_angle:
        return end_angle + TWO_PI
    return start_angle


class Arc(Segment):
    kind = SegmentKind.ARC

    def __init__(self, center, radius: float, start_angle: float, end_angle: float, anticlockwise: bool = False):
        super().__init__()
        self._center = v2(center)
        self._radius = float(radius)
        self._start_angle = float(start_angle)
        self._end_angle = float(end_angle)
        self._anticlockwise = bool(anticlockwise)
        self._remap_negative_radius()

    def __repr__(self):
        return (f"Arc({tuple(self._center)}, {self._radius}, {self._start_angle}, "
                f"{self._end_angle}, anticlockwise={self._anticlockwise})")

    def _remap_negative_radius(self) -> None:
        if self._radius < 0:
            self._radius = -self._radius
            self._start_angle += math.pi
            self._end_angle += math.pi

    def invalidate(self) -> None:
        self._remap_negative_radius()
        super().invalidate()

    def _set(self, attr: str, value) -> None:
        if getattr(self, attr) != value:
            setattr(self, attr, value)
            self.invalidate()

    # ---------------------------
    # Shape parameters
    # ---------------------------

    @property
    def center(self) -> Vector2:
        return self._center

    @center.setter
    def center(self, value):
        self._set_point("_center", value)

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float):
        self._set("_radius", float(value))

    @property
    def start_angle(self) -> float:
        return self._start_angle

    @start_angle.setter
    def start_angle(self, value: float):
        self._set("_start_angle", float(value))

    @property
    def end_angle(self) -> float:
        return self._end_angle

    @end_angle.setter
    def end_angle(self, value: float):
        self._set("_end_angle", float(value))

    @property
    def anticlockwise(self) -> bool:
        return self._anticlockwise

    @anticlockwise.setter
    def anticlockwise(self, value: bool):
        self._set("_anticlockwise", bool(value))

    # ---------------------------
    # Angle helpers
    # ---------------------------

    @property
    def actual_end_angle(self) -> float:
        return self._cached("actual_end_angle", lambda: compute_actual_end_angle(
            self._start_angle, self._end_angle, self._anticlockwise))

    @property
    def is_full_perimeter(self) -> bool:
        if self._anticlockwise:
            return self._start_angle - self._end_angle >= TWO_PI
        return self._end_angle - self._start_angle >= TWO_PI

    @property
    def angle_difference(self) -> float:
        """How much of the circle the arc sweeps, in [0, 2pi)."""
        def compute():
            if self._anticlockwise:
                difference = self._start_angle - self._end_angle
            else:
                difference = self._end_angle - self._start_angle
            if difference < 0:
                difference += TWO_PI
            return difference
        return self._cached("angle_difference", compute)

    def map_angle(self, angle: float) -> float:
        """An equivalent angle (mod 2pi) inside the range swept by the arc."""
        if abs(modulo_between_down(angle - self._start_angle, -math.pi, math.pi)) < 1e-8:
            return self._start_angle
        if abs(modulo_between_down(angle - self.actual_end_angle, -math.pi, math.pi)) < 1e-8:
            return self.actual_end_angle
        if self._start_angle > self.actual_end_angle:
            return modulo_between_up(angle, self._start_angle - TWO_PI, self._start_angle)
        return modulo_between_down(angle, self._start_angle, self._start_angle + TWO_PI)

    def t_at_angle(self, angle: float) -> float:
        return (self.map_angle(angle) - self._start_angle) / (self.actual_end_angle - self._start_angle)

    def angle_at(self, t: float) -> float:
        return self._start_angle + (self.actual_end_angle - self._start_angle) * t

    def position_at_angle(self, angle: float) -> Vector2:
        return self._center.plus(Vector2.create_polar(self._radius, angle))

    def tangent_at_angle(self, angle: float) -> Vector2:
        normal = Vector2.create_polar(1, angle)
        return normal.perpendicular if self._anticlockwise else normal.perpendicular.negated()

    def contains_angle(self, angle: float) -> bool:
        normalized = angle - self._end_angle if self._anticlockwise else angle - self._start_angle
        return modulo_between_down(normalized, 0, TWO_PI) <= self.angle_difference

    # ---------------------------
    # Capability set
    # ---------------------------

    @property
    def start(self) -> Vector2:
        return self._cached("start", lambda: self.position_at_angle(self._start_angle))

    @property
    def end(self) -> Vector2:
        return self._cached("end", lambda: self.position_at_angle(self._end_angle))

    @property
    def start_tangent(self) -> Vector2:
        return self._cached("start_tangent", lambda: self.tangent_at_angle(self._start_angle))

    @property
    def end_tangent(self) -> Vector2:
        return self._cached("end_tangent", lambda: self.tangent_at_angle(self._end_angle))

    @property
    def bounds(self) -> Bounds2:
        def compute():
            bounds = Bounds2.point(self.start).with_point(self.end)
            if self._start_angle != self._end_angle:
                for angle in CARDINAL_ANGLES:
                    if self.contains_angle(angle):
                        bounds = bounds.with_point(self.position_at_angle(angle))
            return bounds
        return self._cached("bounds", compute)

    def position_at(self, t: float) -> Vector2:
        check_t(t)
        return self.position_at_angle(self.angle_at(t))

    def tangent_at(self, t: float) -> Vector2:
        check_t(t)
        return self.tangent_at_angle(self.angle_at(t))

    def curvature_at(self, t: float) -> float:
        check_t(t)
        return (-1 if self._anticlockwise else 1) / self._radius

    def subdivided(self, t: float) -> List[Segment]:
        check_t(t)
        if t == 0 or t == 1:
            return [self]
        angle0, angle_t, angle1 = self.angle_at(0), self.angle_at(t), self.angle_at(1)
        return [Arc(self._center, self._radius, angle0, angle_t, self._anticlockwise),
                Arc(self._center, self._radius, angle_t, angle1, self._anticlockwise)]

    def get_interior_extrema_ts(self) -> List[float]:
        epsilon = 1e-10
        result = []
        if self._start_angle == self.actual_end_angle:
            return result
        for angle in CARDINAL_ANGLES:
            if self.contains_angle(angle):
                t = self.t_at_angle(angle)
                if epsilon < t < 1 - epsilon:
                    result.append(t)
        return sorted(result)

    def transformed(self, matrix) -> Segment:
        """
        The arc under an affine map. Non-uniform scaling turns it into an
        EllipticalArc; reflections flip the sweep direction.
        """
        from .elliptical_arc import EllipticalArc

        scale = matrix.scale_vector
        if scale.x != scale.y:
            # angles stay unit-circle parameters of the ellipse
            ellipse = EllipticalArc(self._center, self._radius, self._radius, 0.0,
                                    self._start_angle, self._end_angle, self._anticlockwise)
            return ellipse.transformed(matrix)

        start_angle = matrix.apply_vector(Vector2.create_polar(1, self._start_angle)).angle
        end_angle = matrix.apply_vector(Vector2.create_polar(1, self._end_angle)).angle
        anticlockwise = self._anticlockwise if matrix.determinant >= 0 else not self._anticlockwise
        if abs(self._end_angle - self._start_angle) == TWO_PI:
            end_angle = start_angle - TWO_PI if anticlockwise else start_angle + TWO_PI
        return Arc(matrix.apply(self._center), scale.x * self._radius, start_angle, end_angle, anticlockwise)

    def reversed(self) -> "Arc":
        return Arc(self._center, self._radius, self._end_angle, self._start_angle, not self._anticlockwise)

    def get_signed_area_fragment(self) -> float:
        t0 = self._start_angle
        t1 = self.actual_end_angle
        r = self._radius
        return 0.5 * r * (r * (t1 - t0) + self._center.x * (math.sin(t1) - math.sin(t0))
                          - self._center.y * (math.cos(t1) - math.cos(t0)))

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._radius <= 0 or self._start_angle == self._end_angle:
            return []
        return [self]

    def get_arc_length(self, distance_epsilon=None, curve_epsilon=None, max_levels=None) -> float:
        return self.angle_difference * self._radius

    def to_piecewise_linear_or_arc_segments(self, *args, **kwargs) -> list:
        return [self]

    def intersection(self, ray) -> List[RayIntersection]:
        result: List[RayIntersection] = []
        center_to_ray = ray.position.minus(self._center)
        tmp = ray.direction.dot(center_to_ray)
        discriminant = 4 * tmp * tmp - 4 * (center_to_ray.magnitude_squared - self._radius * self._radius)
        if discriminant < 0:
            # misses the circle
            return result
        base = ray.direction.dot(self._center) - ray.direction.dot(ray.position)
        sqt = math.sqrt(discriminant) / 2
        ta = base - sqt
        tb = base + sqt
        if tb < 0:
            # circle is behind the ray
            return result

        point_b = ray.point_at_distance(tb)
        normal_b = point_b.minus(self._center).normalized()
        angle_b = normal_b.angle
        if ta < 0:
            # ray starts inside the circle
            if self.contains_angle(angle_b):
                result.append(RayIntersection(tb, point_b, normal_b.negated(),
                                              -1 if self._anticlockwise else 1, self.t_at_angle(angle_b)))
            return result

        point_a = ray.point_at_distance(ta)
        normal_a = point_a.minus(self._center).normalized()
        angle_a = normal_a.angle
        if self.contains_angle(angle_a):
            result.append(RayIntersection(ta, point_a, normal_a,
                                          1 if self._anticlockwise else -1, self.t_at_angle(angle_a)))
        if self.contains_angle(angle_b):
            result.append(RayIntersection(tb, point_b, normal_b.negated(),
                                          -1 if self._anticlockwise else 1, self.t_at_angle(angle_b)))
        return result

    # ---------------------------
    # Overlaps & intersections
    # ---------------------------

    def get_overlaps(self, other: Segment, epsilon: float = 1e-6) -> List[Overlap]:
        if isinstance(other, Arc):
            return Arc.get_overlaps_between(self, other)
        return []

    @staticmethod
    def get_overlaps_between(arc1: "Arc", arc2: "Arc") -> List[Overlap]:
        if not (isinstance(arc1, Arc) and isinstance(arc2, Arc)):
            raise TypeError("get_overlaps_between expects two Arc segments")
        if arc1.center.distance(arc2.center) > 1e-4 or abs(arc1.radius - arc2.radius) > 1e-4:
            return []
        return Arc.get_angular_overlaps(arc1.start_angle, arc1.actual_end_angle,
                                        arc2.start_angle, arc2.actual_end_angle)

    @staticmethod
    def get_partial_overlap(end1: float, start2: float, end2: float,
                            t_start2: float, t_end2: float) -> List[Overlap]:
        """
        Overlap of [0, end1] with [start2, end2] (angles already remapped, arc 1
        starting at 0), where t_start2 and t_end2 are arc 2's t values at start2
        and end2.
        """
        min2, max2 = (end2, start2) if end2 < start2 else (start2, end2)
        overlap_min = min2
        overlap_max = min(end1, max2)
        if overlap_max < overlap_min + 1e-8:
            return []
        return [Overlap.create_linear(
            clamp(linear(0, end1, 0, 1, overlap_min), 0, 1),
            clamp(linear(start2, end2, t_start2, t_end2, overlap_min), 0, 1),
            clamp(linear(0, end1, 0, 1, overlap_max), 0, 1),
            clamp(linear(start2, end2, t_start2, t_end2, overlap_max), 0, 1),
        )]

    @staticmethod
    def get_angular_overlaps(start_angle1: float, end_angle1: float,
                             start_angle2: float, end_angle2: float) -> List[Overlap]:
        """Overlaps between two angle ranges of the same circle."""
        # arc 1 remapped to [0, end1] with a positive end
        end1 = end_angle1 - start_angle1
        sign1 = -1 if end1 < 0 else 1
        end1 *= sign1

        start2 = modulo_between_down(sign1 * (start_angle2 - start_angle1), 0, TWO_PI)
        end2 = sign1 * (end_angle2 - start_angle2) + start2

        if end2 < -1e-10:
            wrap_t = -start2 / (end2 - start2)
            return (Arc.get_partial_overlap(end1, start2, 0, 0, wrap_t)
                    + Arc.get_partial_overlap(end1, TWO_PI, end2 + TWO_PI, wrap_t, 1))
        if end2 > TWO_PI + 1e-10:
            wrap_t = (TWO_PI - start2) / (end2 - start2)
            return (Arc.get_partial_overlap(end1, start2, TWO_PI, 0, wrap_t)
                    + Arc.get_partial_overlap(end1, 0, end2 - TWO_PI, wrap_t, 1))
        return Arc.get_partial_overlap(end1, start2, end2, 0, 1)

    @staticmethod
    def get_circle_intersection_point(center1, radius1: float, center2, radius2: float) -> List[Vector2]:
        """Points where two circles meet (zero, one or two of them)."""
        center1, center2 = v2(center1), v2(center2)
        delta = center2.minus(center1)
        d = delta.magnitude
        if d < 1e-10 or d > radius1 + radius2 + 1e-10:
            return []
        if d > radius1 + radius2 - 1e-10:
            return [center1.blend(center2, radius1 / d)]
        x_prime = 0.5 * (d * d - radius2 * radius2 + radius1 * radius1) / d
        bit = d * d - radius2 * radius2 + radius1 * radius1
        discriminant = 4 * d * d * radius1 * radius1 - bit * bit
        base = center1.blend(center2, x_prime / d)
        if discriminant >= 1e-10:
            y_prime = math.sqrt(discriminant) / d / 2
            perpendicular = delta.perpendicular.with_magnitude(y_prime)
            return [base.plus(perpendicular), base.minus(perpendicular)]
        if discriminant > -1e-10:
            return [base]
        return []

    @staticmethod
    def intersect_arcs(a: "Arc", b: "Arc") -> List[SegmentIntersection]:
        epsilon = 1e-7
        results: List[SegmentIntersection] = []

        if a.center.equals_epsilon(b.center, epsilon) and abs(a.radius - b.radius) < epsilon:
            # same circle: only shared end points are isolated intersections
            return shared_endpoint_intersections(a, b, epsilon)

        for point in Arc.get_circle_intersection_point(a.center, a.radius, b.center, b.radius):
            angle_a = point.minus(a.center).angle
            angle_b = point.minus(b.center).angle
            if a.contains_angle(angle_a) and b.contains_angle(angle_b):
                results.append(SegmentIntersection(point, a.t_at_angle(angle_a), b.t_at_angle(angle_b)))
        return results

    @staticmethod
    def create_from_points(start_point, middle_point, end_point) -> Segment:
        """
        The arc through three points, or a Line from start to end when they are
        collinear.
        """
        from .line import Line

        start_point, middle_point, end_point = v2(start_point), v2(middle_point), v2(end_point)
        center = circle_center_from_points(start_point, middle_point, end_point)
        if center is None:
            return Line(start_point, end_point)

        start_diff = start_point.minus(center)
        middle_diff = middle_point.minus(center)
        end_diff = end_point.minus(center)
        radius = (start_diff.magnitude + middle_diff.magnitude + end_diff.magnitude) / 3
        arc = Arc(center, radius, start_diff.angle, end_diff.angle, False)
        if arc.contains_angle(middle_diff.angle):
            return arc
        return Arc(center, radius, start_diff.angle, end_diff.angle, True)


def shared_endpoint_intersections(a: Segment, b: Segment, epsilon: float) -> List[SegmentIntersection]:
    """Intersections at coinciding end points of two segments on the same curve."""
    a_start, a_end = a.position_at(0), a.position_at(1)
    b_start, b_end = b.position_at(0), b.position_at(1)
    results = []
    for a_point, a_t in ((a_start, 0.0), (a_end, 1.0)):
        for b_point, b_t in ((b_start, 0.0), (b_end, 1.0)):
            if a_point.equals_epsilon(b_point, epsilon):
                results.append(SegmentIntersection(a_point.average(b_point), a_t, b_t))
    return results
