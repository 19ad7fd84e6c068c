"""
Parametric curve segments.

Every segment is parameterized over t in [0, 1]: t=0 is the start point and
t=1 the end point. Concrete families (Line, Quadratic, Cubic, Arc,
EllipticalArc) implement the small capability set declared on ``Segment``;
everything else here (slicing, flatness, arc length, dashes, piecewise
approximations, closest points, intersections) is written only against that
capability set.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging
import math

from ..geometry.bounds import Bounds2
from ..geometry.numeric import clamp, dist_to_segment_squared, linear
from ..geometry.vector import Vector2, v2
from .results import ClosestPoint, DashState, DashValues, SegmentIntersection

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_EPSILON = 1e-10
DEFAULT_CURVE_EPSILON = 1e-8
DEFAULT_MAX_LEVELS = 15

# recursion cap for the dash walk; pieces deeper than this are taken as flat
DASH_MAX_DEPTH = 14

CLOSEST_POINT_EPSILON = 1e-11
INTERSECTION_DUPLICATE_EPSILON = 1e-10
BEZIER_REDUCE_EPSILON = 1e-9


class SegmentKind(Enum):
    LINE = "line"
    ARC = "arc"
    ELLIPTICAL_ARC = "elliptical_arc"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"


def check_t(t: float, name: str = "t") -> float:
    if not 0 <= t <= 1:
        raise ValueError(f"{name} must be within [0, 1], got {t!r}")
    return t


class Segment(ABC):
    """Base class for every curve family."""

    kind: SegmentKind
    degree: Optional[int] = None

    def __init__(self):
        self._cache: Dict[str, Any] = {}
        self._listeners: List[Callable[[], None]] = []

    # ---------------------------
    # Capability set
    # ---------------------------

    @property
    @abstractmethod
    def start(self) -> Vector2: ...

    @property
    @abstractmethod
    def end(self) -> Vector2: ...

    @property
    @abstractmethod
    def start_tangent(self) -> Vector2: ...

    @property
    @abstractmethod
    def end_tangent(self) -> Vector2: ...

    @property
    @abstractmethod
    def bounds(self) -> Bounds2: ...

    @abstractmethod
    def position_at(self, t: float) -> Vector2: ...

    @abstractmethod
    def tangent_at(self, t: float) -> Vector2:
        """Non-normalized derivative of position_at."""

    @abstractmethod
    def curvature_at(self, t: float) -> float:
        """Signed curvature; positive is visually clockwise in a y-down frame."""

    @abstractmethod
    def subdivided(self, t: float) -> List["Segment"]:
        """[left, right] split at t, or [self] when t is 0 or 1."""

    @abstractmethod
    def get_interior_extrema_ts(self) -> List[float]:
        """Sorted t values in (0, 1) where dx/dt or dy/dt vanishes."""

    @abstractmethod
    def transformed(self, matrix) -> "Segment": ...

    @abstractmethod
    def intersection(self, ray) -> list:
        """RayIntersection hits of a Ray2 with this segment."""

    @abstractmethod
    def reversed(self) -> "Segment": ...

    @abstractmethod
    def get_signed_area_fragment(self) -> float: ...

    @abstractmethod
    def get_nondegenerate_segments(self) -> List["Segment"]: ...

    def get_overlaps(self, other: "Segment", epsilon: float = 1e-6) -> list:
        """Continuous overlaps with a segment of the same family ([] otherwise)."""
        return []

    # ---------------------------
    # Cache / invalidation
    # ---------------------------

    def _cached(self, key: str, compute: Callable[[], Any]) -> Any:
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    def invalidate(self) -> None:
        self._cache.clear()
        for listener in list(self._listeners):
            listener()

    def add_invalidation_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_invalidation_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.remove(listener)

    def _set_point(self, attr: str, value) -> None:
        value = v2(value)
        if getattr(self, attr) != value:
            setattr(self, attr, value)
            self.invalidate()

    # ---------------------------
    # Subdivision & flatness
    # ---------------------------

    def slice(self, t0: float, t1: float) -> "Segment":
        """The portion of this segment between t0 and t1 (0 <= t0 < t1 <= 1)."""
        if not 0 <= t0 < t1 <= 1:
            raise ValueError(f"slice needs 0 <= t0 < t1 <= 1, got t0={t0!r} t1={t1!r}")
        segment: Segment = self
        if t1 < 1:
            segment = segment.subdivided(t1)[0]
        if t0 > 0:
            segment = segment.subdivided(linear(0, t1, 0, 1, t0))[-1]
        return segment

    def subdivisions(self, t_list: Sequence[float]) -> List["Segment"]:
        """Split at every t in t_list (in one pass), returning len(t_list)+1 pieces."""
        ts = sorted(t_list)
        for t in ts:
            check_t(t)
        result: List[Segment] = []
        right: Segment = self
        for i in range(len(ts)):
            t = ts[i]
            pieces = right.subdivided(t)
            if len(pieces) == 1:
                # cut at an end of the remaining piece, nothing to split off
                continue
            result.append(pieces[0])
            right = pieces[1]
            for j in range(i + 1, len(ts)):
                ts[j] = linear(t, 1, 0, 1, ts[j])
        result.append(right)
        return result

    def subdivided_into_monotone(self) -> List["Segment"]:
        return self.subdivisions(self.get_interior_extrema_ts())

    @staticmethod
    def is_sufficiently_flat_points(distance_epsilon: float, curve_epsilon: float,
                                    start, middle, end) -> bool:
        """
        Flatness of the sample (start, middle, end).

        Not flat when the squared deviation of middle from the chord, relative to
        the squared chord length, exceeds curve_epsilon, or when the squared
        deviation alone exceeds distance_epsilon.
        """
        deviation = dist_to_segment_squared(middle, start, end)
        chord = v2(start).distance_squared(end)
        if chord == 0:
            if deviation > 0:
                return False
        elif deviation / chord > curve_epsilon:
            return False
        return deviation <= distance_epsilon

    def is_sufficiently_flat(self, distance_epsilon: float, curve_epsilon: float) -> bool:
        return Segment.is_sufficiently_flat_points(distance_epsilon, curve_epsilon,
                                                   self.start, self.position_at(0.5), self.end)

    # ---------------------------
    # Arc length & dashes
    # ---------------------------

    def get_arc_length(self, distance_epsilon: float = DEFAULT_DISTANCE_EPSILON,
                       curve_epsilon: float = DEFAULT_CURVE_EPSILON,
                       max_levels: int = DEFAULT_MAX_LEVELS) -> float:
        """Approximate arc length by recursive halving until flat (or out of levels)."""
        if max_levels <= 0 or self.is_sufficiently_flat(distance_epsilon, curve_epsilon):
            if max_levels <= 0:
                logger.debug("arc length level cap reached on %r", self)
            return self.start.distance(self.end)
        left, right = self.subdivided(0.5)
        return (left.get_arc_length(distance_epsilon, curve_epsilon, max_levels - 1)
                + right.get_arc_length(distance_epsilon, curve_epsilon, max_levels - 1))

    def get_dash_values(self, line_dash: Sequence[float], line_dash_offset: float = 0.0,
                        distance_epsilon: float = DEFAULT_DISTANCE_EPSILON,
                        curve_epsilon: float = DEFAULT_CURVE_EPSILON) -> DashValues:
        """
        Parametric positions where a dash pattern toggles between drawn and
        skipped, plus the approximate arc length and whether t=0 starts drawn.
        """
        if not line_dash:
            raise ValueError("line_dash must not be empty")
        dash_sum = sum(line_dash)
        if dash_sum <= 0:
            raise ValueError("line_dash must have a positive sum")

        offset = math.fmod(line_dash_offset, dash_sum)
        if offset < 0:
            offset += dash_sum

        state = DashState(list(line_dash))
        state.burn_offset(offset)
        initially_inside = state.is_inside

        values: List[float] = []
        arc_length = 0.0

        # ranges are popped in increasing t order
        stack = [(0.0, 1.0, self.start, self.end, 0)]
        while stack:
            t0, t1, p0, p1, depth = stack.pop()
            t_mid = (t0 + t1) / 2
            p_mid = self.position_at(t_mid)
            if depth > DASH_MAX_DEPTH:
                logger.debug("dash depth cap reached on %r", self)
            if depth > DASH_MAX_DEPTH or Segment.is_sufficiently_flat_points(
                    distance_epsilon, curve_epsilon, p0, p_mid, p1):
                total_length = p0.distance(p_mid) + p_mid.distance(p1)
                arc_length += total_length
                length_left = total_length
                while state.dash_offset + length_left >= state.current:
                    if total_length == 0:
                        values.append(t0)
                    else:
                        values.append(linear(0, total_length, t0, t1,
                                             total_length - length_left + state.current - state.dash_offset))
                    length_left -= state.current - state.dash_offset
                    state.dash_offset = 0.0
                    state.next_dash()
                state.dash_offset += length_left
            else:
                stack.append((t_mid, t1, p_mid, p1, depth + 1))
                stack.append((t0, t_mid, p0, p_mid, depth + 1))

        return DashValues(values, arc_length, initially_inside)

    # ---------------------------
    # Piecewise approximations
    # ---------------------------

    def to_piecewise_linear_segments(self, min_levels: int, max_levels: int,
                                     distance_epsilon: Optional[float] = None,
                                     curve_epsilon: Optional[float] = None,
                                     point_map: Optional[Callable[[Vector2], Any]] = None) -> list:
        """
        Lines approximating this segment. Always subdivides min_levels times and
        never more than max_levels times; in between, stops once flat. A None
        epsilon does not constrain flatness. point_map is applied to every
        stored endpoint.
        """
        if min_levels > max_levels:
            raise ValueError("min_levels must not exceed max_levels")
        if point_map is None:
            def point_map(p):
                return p
        segments: list = []
        self._piecewise_linear(segments, min_levels, max_levels,
                               math.inf if distance_epsilon is None else distance_epsilon,
                               math.inf if curve_epsilon is None else curve_epsilon,
                               point_map, point_map(self.start), point_map(self.end))
        return segments

    def _piecewise_linear(self, segments, min_levels, max_levels,
                          distance_epsilon, curve_epsilon, point_map, start, end) -> None:
        from .line import Line

        finished = max_levels == 0
        if not finished and min_levels <= 0:
            finished = self.is_sufficiently_flat(distance_epsilon, curve_epsilon)
        if finished:
            segments.append(Line(start, end))
            return
        middle = point_map(self.position_at(0.5))
        left, right = self.subdivided(0.5)
        left._piecewise_linear(segments, min_levels - 1, max_levels - 1,
                               distance_epsilon, curve_epsilon, point_map, start, middle)
        right._piecewise_linear(segments, min_levels - 1, max_levels - 1,
                                distance_epsilon, curve_epsilon, point_map, middle, end)

    def to_piecewise_linear_or_arc_segments(self, min_levels: int = 2, max_levels: int = 7,
                                            curvature_threshold: float = 0.02,
                                            error_threshold: float = 10,
                                            error_points: Sequence[float] = (0.25, 0.75)) -> list:
        """Lines and circular arcs approximating this segment."""
        segments: list = []
        self._piecewise_linear_or_arc(segments, min_levels, max_levels,
                                      curvature_threshold, error_threshold, error_points,
                                      0.0, 1.0, self.position_at(0), self.position_at(1),
                                      self.curvature_at(0), self.curvature_at(1))
        return segments

    def _piecewise_linear_or_arc(self, segments, min_levels, max_levels,
                                 curvature_threshold, error_threshold, error_points,
                                 start_t, end_t, start_point, end_point,
                                 start_curvature, end_curvature) -> None:
        from .arc import Arc

        middle_t = (start_t + end_t) / 2
        middle_point = self.position_at(middle_t)
        middle_curvature = self.curvature_at(middle_t)

        curvature_change = abs(start_curvature - middle_curvature) + abs(middle_curvature - end_curvature)
        if max_levels <= 0 or (min_levels <= 0 and curvature_change < curvature_threshold * 2):
            fitted = Arc.create_from_points(start_point, middle_point, end_point)
            needs_split = False
            if isinstance(fitted, Arc):
                radius_squared = fitted.radius * fitted.radius
                for e in error_points:
                    point = self.position_at(start_t * (1 - e) + end_t * e)
                    if abs(point.distance_squared(fitted.center) - radius_squared) > error_threshold:
                        needs_split = True
                        break
            if not needs_split:
                segments.append(fitted)
                return

        self._piecewise_linear_or_arc(segments, min_levels - 1, max_levels - 1,
                                      curvature_threshold, error_threshold, error_points,
                                      start_t, middle_t, start_point, middle_point,
                                      start_curvature, middle_curvature)
        self._piecewise_linear_or_arc(segments, min_levels - 1, max_levels - 1,
                                      curvature_threshold, error_threshold, error_points,
                                      middle_t, end_t, middle_point, end_point,
                                      middle_curvature, end_curvature)

    # ---------------------------
    # Closest point
    # ---------------------------

    def get_closest_points(self, point) -> List[ClosestPoint]:
        return Segment.filter_closest_to_point_result(
            Segment.closest_to_point([self], point, 1e-7))

    @staticmethod
    def closest_to_point(segments: Sequence["Segment"], point, threshold: float) -> List[ClosestPoint]:
        """
        Branch-and-bound search for the points on any of the segments closest to
        point. Every candidate region is refined until its chord is within
        threshold; all surviving candidates are returned, so results may repeat.
        """
        point = v2(point)
        threshold_squared = threshold * threshold
        items: List[_ClosestItem] = []
        best_list: List[ClosestPoint] = []
        best_distance_squared = math.inf

        for segment in segments:
            if segment.kind is SegmentKind.LINE:
                for info in segment.explicit_closest_to_point(point):
                    if info.distance_squared < best_distance_squared:
                        best_list = [info]
                        best_distance_squared = info.distance_squared
                    elif info.distance_squared == best_distance_squared:
                        best_list.append(info)
                continue

            ts = [0.0] + segment.get_interior_extrema_ts() + [1.0]
            for ta, tb in zip(ts, ts[1:]):
                pa = segment.position_at(ta)
                pb = segment.position_at(tb)
                item = _ClosestItem(segment, ta, tb, pa, pb, point)
                if item.min <= best_distance_squared:
                    maximum = item.max
                    if maximum < best_distance_squared:
                        best_distance_squared = maximum
                        best_list = []
                    items.append(item)

        threshold_ok = False
        while items and not threshold_ok:
            current = items
            items = []
            threshold_ok = True
            for item in current:
                if item.min > best_distance_squared:
                    continue
                if threshold_ok and item.pa.distance_squared(item.pb) > threshold_squared:
                    threshold_ok = False
                t_mid = (item.ta + item.tb) / 2
                p_mid = item.segment.position_at(t_mid)
                for child in (_ClosestItem(item.segment, item.ta, t_mid, item.pa, p_mid, point),
                              _ClosestItem(item.segment, t_mid, item.tb, p_mid, item.pb, point)):
                    if child.min <= best_distance_squared:
                        maximum = child.max
                        if maximum < best_distance_squared:
                            best_distance_squared = maximum
                            best_list = []
                        items.append(child)

        for item in items:
            t = (item.ta + item.tb) / 2
            closest = item.segment.position_at(t)
            best_list.append(ClosestPoint(item.segment, t, closest, point.distance_squared(closest)))
        return best_list

    @staticmethod
    def filter_closest_to_point_result(results: Sequence[ClosestPoint]) -> List[ClosestPoint]:
        """Results tied (within 1e-11) for the minimum distance, unique by location."""
        if not results:
            return []
        closest = min(r.distance_squared for r in results)
        filtered: List[ClosestPoint] = []
        for result in results:
            if abs(result.distance_squared - closest) >= CLOSEST_POINT_EPSILON:
                continue
            if any(result.closest_point.distance_squared(kept.closest_point) < CLOSEST_POINT_EPSILON
                   for kept in filtered):
                continue
            filtered.append(result)
        return filtered

    # ---------------------------
    # Intersections
    # ---------------------------

    @staticmethod
    def intersect(a: "Segment", b: "Segment") -> List[SegmentIntersection]:
        """
        Intersections between two segments, with the parameter of each hit on
        both of them. Non-finite hits and duplicates are dropped.
        """
        from .arc import Arc
        from .bounds_intersection import BoundsIntersection
        from .elliptical_arc import EllipticalArc
        from .line import Line

        beziers = (SegmentKind.QUADRATIC, SegmentKind.CUBIC)
        if a.kind is SegmentKind.LINE and b.kind is SegmentKind.LINE:
            hits = Line.intersect_lines(a, b)
        elif a.kind is SegmentKind.LINE:
            hits = Line.intersect_other(a, b)
        elif b.kind is SegmentKind.LINE:
            hits = [hit.swapped() for hit in Line.intersect_other(b, a)]
        elif a.kind is SegmentKind.ARC and b.kind is SegmentKind.ARC:
            hits = Arc.intersect_arcs(a, b)
        elif a.kind is SegmentKind.ELLIPTICAL_ARC and b.kind is SegmentKind.ELLIPTICAL_ARC:
            hits = EllipticalArc.intersect_elliptical_arcs(a, b)
        elif a.kind in beziers and b.kind in beziers:
            hits = _intersect_beziers(a, b)
        else:
            logger.debug("falling back to bounds intersection for %s/%s", a.kind.value, b.kind.value)
            hits = BoundsIntersection.intersect(a, b)
        return _clean_intersections(a, b, hits)


class _ClosestItem:
    """A monotone t-range of a segment, boxed by its end points."""
    __slots__ = ("segment", "ta", "tb", "pa", "pb", "bounds", "min", "_point", "_max")

    def __init__(self, segment, ta, tb, pa, pb, point):
        self.segment = segment
        self.ta = ta
        self.tb = tb
        self.pa = pa
        self.pb = pb
        self.bounds = Bounds2.point(pa).with_point(pb)
        self.min = self.bounds.minimum_distance_to_point_squared(point)
        self._point = point
        self._max = None

    @property
    def max(self) -> float:
        if self._max is None:
            self._max = self.bounds.maximum_distance_to_point_squared(self._point)
        return self._max


def _intersect_beziers(a: Segment, b: Segment) -> List[SegmentIntersection]:
    """Quadratic/cubic pairs, degree-elevated to cubics and handed to svgpathtools."""
    from svgpathtools import CubicBezier

    if _beziers_overlap(a, b):
        # curves sharing a stretch meet everywhere along it, not at isolated points
        logger.debug("bezier pair overlaps, no isolated intersections")
        return []

    cubic_a = a if a.kind is SegmentKind.CUBIC else a.degree_elevated()
    cubic_b = b if b.kind is SegmentKind.CUBIC else b.degree_elevated()

    def to_svg(cubic):
        return CubicBezier(*(complex(x, y) for x, y in cubic.control_points))

    hits = []
    for t1, t2 in to_svg(cubic_a).intersect(to_svg(cubic_b)):
        hits.append(SegmentIntersection(cubic_a.position_at(clamp(t1, 0, 1)), t1, t2))
    return hits


def _lowest_degree(segment: Segment) -> Segment:
    if segment.kind is SegmentKind.CUBIC:
        reduced = segment.degree_reduced(BEZIER_REDUCE_EPSILON)
        if reduced is not None:
            return reduced
    return segment


def _beziers_overlap(a: Segment, b: Segment) -> bool:
    """
    Whether two quadratics/cubics share a stretch. Cubics that are elevated
    quadratics are compared as quadratics, since their cubic coefficient only
    cancels up to rounding.
    """
    a, b = _lowest_degree(a), _lowest_degree(b)
    if a.kind is not b.kind:
        return False
    return bool(a.get_overlaps(b))


def _is_shared_end_point(a: Segment, b: Segment, hit: SegmentIntersection) -> bool:
    if hit.a_t not in (0, 1) or hit.b_t not in (0, 1):
        return False
    a_point = a.start if hit.a_t == 0 else a.end
    b_point = b.start if hit.b_t == 0 else b.end
    return a_point == b_point


def _clean_intersections(a: Segment, b: Segment,
                         hits: Sequence[SegmentIntersection]) -> List[SegmentIntersection]:
    """Drops non-finite hits, hits at exactly shared end points and duplicates."""
    result: List[SegmentIntersection] = []
    for hit in hits:
        if not (math.isfinite(hit.a_t) and math.isfinite(hit.b_t)):
            continue
        if _is_shared_end_point(a, b, hit):
            continue
        if any(abs(hit.a_t - kept.a_t) < INTERSECTION_DUPLICATE_EPSILON
               and abs(hit.b_t - kept.b_t) < INTERSECTION_DUPLICATE_EPSILON for kept in result):
            continue
        result.append(hit)
    return result


def ray_frame(ray):
    """Affine map taking the ray to the positive x axis from the origin."""
    from ..transforms.affine import Affine

    return Affine.rotation(-ray.direction.angle).times(Affine.translation(-ray.position.x, -ray.position.y))


def ray_hits_at(segment: Segment, ray, ts: Optional[Sequence[float]]) -> list:
    """RayIntersections for the candidate parameters ts (roots of the curve in the ray frame)."""
    from .results import RayIntersection

    result = []
    for t in ts or []:
        if not 0 <= t <= 1:
            continue
        hit_point = segment.position_at(t)
        tangent = segment.tangent_at(t)
        if tangent.magnitude_squared == 0:
            continue
        unit_tangent = tangent.normalized()
        perp = unit_tangent.perpendicular
        to_hit = hit_point.minus(ray.position)
        # behind the ray
        if to_hit.dot(ray.direction) <= 0:
            continue
        normal = perp.negated() if perp.dot(ray.direction) > 0 else perp
        wind = 1 if ray.direction.perpendicular.dot(unit_tangent) < 0 else -1
        result.append(RayIntersection(to_hit.magnitude, hit_point, normal, wind, t))
    return result


def bezier_end_curvature(segment: Segment, t: float, p0, p1, p2) -> float:
    """
    Curvature at an end point of a bezier of the given degree, from the first
    three control points counted from that end.
    """
    is_start = t < 0.5
    d10 = p1.minus(p0)
    a = d10.magnitude
    h = (-1 if is_start else 1) * d10.perpendicular.normalized().dot(p2.minus(p1))
    return h * (segment.degree - 1) / (segment.degree * a * a)
