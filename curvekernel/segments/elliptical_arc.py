"""
Elliptical arcs: a unit-circle arc seen through the affine map

    translate(center) * rotate(rotation) * scale(radius_x, radius_y)

Angles are unit-circle angles (before that map). radius_x >= radius_y is kept
internally by rotating a quarter turn and swapping the radii.
"""
from __future__ import annotations
from enum import Enum
from typing import List
import math

from ..geometry.bounds import Bounds2
from ..geometry.numeric import modulo_between_down
from ..geometry.vector import Vector2, v2
from ..transforms.affine import Affine
from .arc import TWO_PI, Arc, compute_actual_end_angle, shared_endpoint_intersections
from .results import Overlap, Ray2, RayIntersection, SegmentIntersection
from .segment import Segment, SegmentKind, check_t


class EllipticalArcOverlapType(Enum):
    # same radius_x and radius_y, equivalent centers and rotations
    MATCHING_OVERLAP = "matching"
    # radius_x of one is radius_y of the other, rotations a quarter turn apart
    OPPOSITE_OVERLAP = "opposite"
    NONE = "none"


def compute_unit_transform(center, radius_x: float, radius_y: float, rotation: float) -> Affine:
    return (Affine.translation(center[0], center[1])
            .times(Affine.rotation(rotation))
            .times(Affine.scaling(radius_x, radius_y)))


class EllipticalArc(Segment):
    kind = SegmentKind.ELLIPTICAL_ARC

    def __init__(self, center, radius_x: float, radius_y: float, rotation: float,
                 start_angle: float, end_angle: float, anticlockwise: bool = False):
        super().__init__()
        self._center = v2(center)
        self._radius_x = float(radius_x)
        self._radius_y = float(radius_y)
        self._rotation = float(rotation)
        self._start_angle = float(start_angle)
        self._end_angle = float(end_angle)
        self._anticlockwise = bool(anticlockwise)
        self._normalize_radii()

    def __repr__(self):
        return (f"EllipticalArc({tuple(self._center)}, {self._radius_x}, {self._radius_y}, {self._rotation}, "
                f"{self._start_angle}, {self._end_angle}, anticlockwise={self._anticlockwise})")

    def _normalize_radii(self) -> None:
        if self._radius_x < 0:
            self._radius_x = -self._radius_x
            self._start_angle = math.pi - self._start_angle
            self._end_angle = math.pi - self._end_angle
            self._anticlockwise = not self._anticlockwise
        if self._radius_y < 0:
            self._radius_y = -self._radius_y
            self._start_angle = -self._start_angle
            self._end_angle = -self._end_angle
            self._anticlockwise = not self._anticlockwise
        if self._radius_x < self._radius_y:
            self._rotation += math.pi / 2
            self._start_angle -= math.pi / 2
            self._end_angle -= math.pi / 2
            self._radius_x, self._radius_y = self._radius_y, self._radius_x

    def invalidate(self) -> None:
        self._normalize_radii()
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
    def radius_x(self) -> float:
        return self._radius_x

    @radius_x.setter
    def radius_x(self, value: float):
        self._set("_radius_x", float(value))

    @property
    def radius_y(self) -> float:
        return self._radius_y

    @radius_y.setter
    def radius_y(self, value: float):
        self._set("_radius_y", float(value))

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float):
        self._set("_rotation", float(value))

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
    # Derived values
    # ---------------------------

    @property
    def unit_transform(self) -> Affine:
        return self._cached("unit_transform", lambda: compute_unit_transform(
            self._center, self._radius_x, self._radius_y, self._rotation))

    @property
    def unit_arc_segment(self) -> Arc:
        """The same sweep on the unit circle at the origin."""
        return self._cached("unit_arc", lambda: Arc(
            Vector2(0.0, 0.0), 1, self._start_angle, self._end_angle, self._anticlockwise))

    @property
    def actual_end_angle(self) -> float:
        return self._cached("actual_end_angle", lambda: compute_actual_end_angle(
            self._start_angle, self._end_angle, self._anticlockwise))

    @property
    def angle_difference(self) -> float:
        return self.unit_arc_segment.angle_difference

    @property
    def possible_extrema_angles(self) -> List[float]:
        """Unit-circle angles where x or y of the ellipse is extremal."""
        def compute():
            rx, ry, rot = self._radius_x, self._radius_y, self._rotation
            x_angle = math.atan2(-ry * math.sin(rot), rx * math.cos(rot))
            y_angle = math.atan2(ry * math.cos(rot), rx * math.sin(rot))
            return [x_angle, x_angle + math.pi, y_angle, y_angle + math.pi]
        return self._cached("extrema_angles", compute)

    def map_angle(self, angle: float) -> float:
        return self.unit_arc_segment.map_angle(angle)

    def contains_angle(self, angle: float) -> bool:
        return self.unit_arc_segment.contains_angle(angle)

    def t_at_angle(self, angle: float) -> float:
        return (self.map_angle(angle) - self._start_angle) / (self.actual_end_angle - self._start_angle)

    def angle_at(self, t: float) -> float:
        return self._start_angle + (self.actual_end_angle - self._start_angle) * t

    def position_at_angle(self, angle: float) -> Vector2:
        return self.unit_transform.apply(Vector2.create_polar(1, angle))

    def tangent_at_angle(self, angle: float) -> Vector2:
        # derivative of the unit map with respect to the angle
        direction = self.unit_transform.apply_vector(Vector2(-math.sin(angle), math.cos(angle)))
        return direction.negated() if self._anticlockwise else direction

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
        return self._cached("start_tangent", lambda: self.tangent_at_angle(self._start_angle).normalized())

    @property
    def end_tangent(self) -> Vector2:
        return self._cached("end_tangent", lambda: self.tangent_at_angle(self._end_angle).normalized())

    @property
    def bounds(self) -> Bounds2:
        def compute():
            bounds = Bounds2.point(self.start).with_point(self.end)
            if self._start_angle != self._end_angle:
                for angle in self.possible_extrema_angles:
                    if self.unit_arc_segment.contains_angle(angle):
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
        angle = self.angle_at(t)
        aq = self._radius_x * math.sin(angle)
        bq = self._radius_y * math.cos(angle)
        denominator = (bq * bq + aq * aq) ** 1.5
        return (-1 if self._anticlockwise else 1) * self._radius_x * self._radius_y / denominator

    def subdivided(self, t: float) -> List[Segment]:
        check_t(t)
        if t == 0 or t == 1:
            return [self]
        angle0, angle_t, angle1 = self.angle_at(0), self.angle_at(t), self.angle_at(1)
        return [
            EllipticalArc(self._center, self._radius_x, self._radius_y, self._rotation,
                          angle0, angle_t, self._anticlockwise),
            EllipticalArc(self._center, self._radius_x, self._radius_y, self._rotation,
                          angle_t, angle1, self._anticlockwise),
        ]

    def get_interior_extrema_ts(self) -> List[float]:
        epsilon = 1e-10
        result: List[float] = []
        if self._start_angle == self.actual_end_angle:
            return result
        for angle in self.possible_extrema_angles:
            if self.unit_arc_segment.contains_angle(angle):
                t = self.t_at_angle(angle)
                if epsilon < t < 1 - epsilon and all(abs(t - other) > epsilon for other in result):
                    result.append(t)
        return sorted(result)

    def transformed(self, matrix) -> "EllipticalArc":
        semi_major = matrix.apply_vector(Vector2.create_polar(self._radius_x, self._rotation))
        semi_minor = matrix.apply_vector(Vector2.create_polar(self._radius_y, self._rotation + math.pi / 2))
        reflected = matrix.determinant < 0
        anticlockwise = not self._anticlockwise if reflected else self._anticlockwise
        start_angle = -self._start_angle if reflected else self._start_angle
        end_angle = -self._end_angle if reflected else self._end_angle
        if abs(self._end_angle - self._start_angle) == TWO_PI:
            end_angle = start_angle - TWO_PI if anticlockwise else start_angle + TWO_PI
        return EllipticalArc(matrix.apply(self._center), semi_major.magnitude, semi_minor.magnitude,
                             semi_major.angle, start_angle, end_angle, anticlockwise)

    def reversed(self) -> "EllipticalArc":
        return EllipticalArc(self._center, self._radius_x, self._radius_y, self._rotation,
                             self._end_angle, self._start_angle, not self._anticlockwise)

    def get_signed_area_fragment(self) -> float:
        t0 = self._start_angle
        t1 = self.actual_end_angle
        sin0, sin1 = math.sin(t0), math.sin(t1)
        cos0, cos1 = math.cos(t0), math.cos(t1)
        rx, ry = self._radius_x, self._radius_y
        cx, cy = self._center
        return 0.5 * (rx * ry * (t1 - t0)
                      + math.cos(self._rotation) * (rx * cy * (cos0 - cos1) + ry * cx * (sin1 - sin0))
                      + math.sin(self._rotation) * (rx * cx * (cos1 - cos0) + ry * cy * (sin1 - sin0)))

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._radius_x <= 0 or self._radius_y <= 0 or self._start_angle == self._end_angle:
            return []
        if self._radius_x == self._radius_y:
            # a circle after all
            start_angle = self._start_angle + self._rotation
            end_angle = self._end_angle + self._rotation
            if abs(self._end_angle - self._start_angle) == TWO_PI:
                end_angle = start_angle - TWO_PI if self._anticlockwise else start_angle + TWO_PI
            return [Arc(self._center, self._radius_x, start_angle, end_angle, self._anticlockwise)]
        return [self]

    def intersection(self, ray) -> List[RayIntersection]:
        """Ray hits, found on the unit arc after mapping the ray into unit-circle space."""
        unit = self.unit_transform
        inverse = unit.inverted()
        unit_ray = Ray2(inverse.apply(ray.position), inverse.apply_vector(ray.direction).normalized())
        result = []
        for hit in self.unit_arc_segment.intersection(unit_ray):
            point = unit.apply(hit.point)
            # normals map through the inverse transpose
            normal = Vector2(inverse.a * hit.normal.x + inverse.d * hit.normal.y,
                             inverse.b * hit.normal.x + inverse.e * hit.normal.y).normalized()
            result.append(RayIntersection(ray.position.distance(point), point, normal, hit.wind, hit.t))
        return result

    # ---------------------------
    # Overlaps & intersections
    # ---------------------------

    @staticmethod
    def get_overlap_type(a: "EllipticalArc", b: "EllipticalArc", epsilon: float = 1e-4) -> EllipticalArcOverlapType:
        """Whether two elliptical arcs lie on the same ellipse (and how their radii line up)."""
        if a.center.distance(b.center) < epsilon:
            matching_radii = abs(a.radius_x - b.radius_x) < epsilon and abs(a.radius_y - b.radius_y) < epsilon
            opposite_radii = abs(a.radius_x - b.radius_y) < epsilon and abs(a.radius_y - b.radius_x) < epsilon
            if matching_radii:
                # rotations must differ by a multiple of pi
                if abs(modulo_between_down(a.rotation - b.rotation + math.pi / 2, 0, math.pi) - math.pi / 2) < epsilon:
                    return EllipticalArcOverlapType.MATCHING_OVERLAP
            if opposite_radii:
                # rotations must differ by pi/2 plus a multiple of pi
                if abs(modulo_between_down(a.rotation - b.rotation, 0, math.pi) - math.pi / 2) < epsilon:
                    return EllipticalArcOverlapType.OPPOSITE_OVERLAP
        return EllipticalArcOverlapType.NONE

    def get_overlaps(self, other: Segment, epsilon: float = 1e-6) -> List[Overlap]:
        if isinstance(other, EllipticalArc):
            return EllipticalArc.get_overlaps_between(self, other)
        return []

    @staticmethod
    def get_overlaps_between(a: "EllipticalArc", b: "EllipticalArc") -> List[Overlap]:
        if not (isinstance(a, EllipticalArc) and isinstance(b, EllipticalArc)):
            raise TypeError("get_overlaps_between expects two EllipticalArc segments")
        if EllipticalArc.get_overlap_type(a, b) is EllipticalArcOverlapType.NONE:
            return []
        return Arc.get_angular_overlaps(a.start_angle + a.rotation, a.actual_end_angle + a.rotation,
                                        b.start_angle + b.rotation, b.actual_end_angle + b.rotation)

    @staticmethod
    def intersect_elliptical_arcs(a: "EllipticalArc", b: "EllipticalArc",
                                  epsilon: float = 1e-10) -> List[SegmentIntersection]:
        from .bounds_intersection import BoundsIntersection

        if EllipticalArc.get_overlap_type(a, b, epsilon) is EllipticalArcOverlapType.NONE:
            return BoundsIntersection.intersect(a, b)
        # same ellipse: only shared end points are isolated intersections
        return shared_endpoint_intersections(a, b, epsilon)
