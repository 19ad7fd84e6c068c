"""
Generic segment/segment intersection by repeated bounding-box subdivision.

Both segments are cut into monotone pieces; every pair of pieces whose end
point boxes overlap becomes a candidate range, and each round halves both
t-ranges of every candidate, keeping the quarter pairs whose boxes still
overlap. Candidates that end up (nearly) identical in parameter space are
averaged into a single intersection.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List
import logging

from ..geometry.vector import Vector2
from .results import SegmentIntersection

logger = logging.getLogger(__name__)

ROUNDS = 50
GROUP_EPSILON = 1e-13


def box_intersects(a_min, a_max, b_min, b_max) -> bool:
    """Whether the boxes spanned by (a_min, a_max) and (b_min, b_max) touch or overlap."""
    min_x = max(min(a_min.x, a_max.x), min(b_min.x, b_max.x))
    min_y = max(min(a_min.y, a_max.y), min(b_min.y, b_max.y))
    max_x = min(max(a_min.x, a_max.x), max(b_min.x, b_max.x))
    max_y = min(max(a_min.y, a_max.y), max(b_min.y, b_max.y))
    return max_x - min_x >= 0 and max_y - min_y >= 0


@dataclass
class BoundsIntersection:
    a: Any
    b: Any
    at_min: float
    at_max: float
    bt_min: float
    bt_max: float
    a_min: Vector2
    a_max: Vector2
    b_min: Vector2
    b_max: Vector2

    def push_subdivisions(self, intersections: List["BoundsIntersection"]) -> None:
        at_mid = (self.at_max + self.at_min) / 2
        bt_mid = (self.bt_max + self.bt_min) / 2

        # no more precision available in floating point
        if at_mid in (self.at_min, self.at_max) or bt_mid in (self.bt_min, self.bt_max):
            intersections.append(self)
            return

        a_mid = self.a.position_at(at_mid)
        b_mid = self.b.position_at(bt_mid)
        for at0, at1, a0, a1 in ((self.at_min, at_mid, self.a_min, a_mid),
                                 (at_mid, self.at_max, a_mid, self.a_max)):
            for bt0, bt1, b0, b1 in ((self.bt_min, bt_mid, self.b_min, b_mid),
                                     (bt_mid, self.bt_max, b_mid, self.b_max)):
                if box_intersects(a0, a1, b0, b1):
                    intersections.append(BoundsIntersection(self.a, self.b, at0, at1, bt0, bt1, a0, a1, b0, b1))

    def distance(self, other: "BoundsIntersection") -> float:
        """Squared distance between two candidates in parameter space."""
        da_min = self.at_min - other.at_min
        da_max = self.at_max - other.at_max
        db_min = self.bt_min - other.bt_min
        db_max = self.bt_max - other.bt_max
        return da_min * da_min + da_max * da_max + db_min * db_min + db_max * db_max

    @staticmethod
    def get_intersection_ranges(a, b) -> List["BoundsIntersection"]:
        a_extrema = a.get_interior_extrema_ts()
        b_extrema = b.get_interior_extrema_ts()
        a_ranges = list(zip([0.0] + a_extrema, a_extrema + [1.0]))
        b_ranges = list(zip([0.0] + b_extrema, b_extrema + [1.0]))

        intersections: List[BoundsIntersection] = []
        for at_min, at_max in a_ranges:
            for bt_min, bt_max in b_ranges:
                a_min, a_max = a.position_at(at_min), a.position_at(at_max)
                b_min, b_max = b.position_at(bt_min), b.position_at(bt_max)
                if box_intersects(a_min, a_max, b_min, b_max):
                    intersections.append(BoundsIntersection(
                        a, b, at_min, at_max, bt_min, bt_max, a_min, a_max, b_min, b_max))

        for _ in range(ROUNDS):
            refined: List[BoundsIntersection] = []
            for intersection in reversed(intersections):
                intersection.push_subdivisions(refined)
            intersections = refined
        return intersections

    @staticmethod
    def intersect(a, b) -> List[SegmentIntersection]:
        if not a.bounds.intersects_bounds(b.bounds):
            return []

        groups: List[List[BoundsIntersection]] = []
        for intersection in BoundsIntersection.get_intersection_ranges(a, b):
            for group in groups:
                if any(intersection.distance(other) < GROUP_EPSILON for other in group):
                    group.append(intersection)
                    break
            else:
                groups.append([intersection])
        logger.debug("bounds intersection grouped into %d hits", len(groups))

        results = []
        for group in groups:
            a_t = sum(i.at_min + i.at_max for i in group) / (2 * len(group))
            b_t = sum(i.bt_min + i.bt_max for i in group) / (2 * len(group))
            point = a.position_at(a_t).average(b.position_at(b_t))
            results.append(SegmentIntersection(point, a_t, b_t))
        return results
