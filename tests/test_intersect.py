import math

import pytest

from curvekernel.geometry.vector import Vector2
from curvekernel.segments.arc import Arc
from curvekernel.segments.bounds_intersection import BoundsIntersection
from curvekernel.segments.cubic import Cubic
from curvekernel.segments.elliptical_arc import EllipticalArc
from curvekernel.segments.line import Line
from curvekernel.segments.quadratic import Quadratic
from curvekernel.segments.results import Ray2
from curvekernel.segments.segment import Segment


def test_crossing_lines():
    (hit,) = Segment.intersect(Line((0, 0), (10, 10)), Line((0, 10), (10, 0)))
    assert hit.point == pytest.approx((5, 5))
    assert hit.a_t == pytest.approx(0.5)
    assert hit.b_t == pytest.approx(0.5)


def test_parallel_lines_miss():
    assert Segment.intersect(Line((0, 0), (10, 0)), Line((0, 1), (10, 1))) == []


def test_lines_joined_at_end_point():
    a = Line((0, 0), (1, 0))
    b = Line((1, 0), (2, 1))
    assert Segment.intersect(a, b) == []
    assert Segment.intersect(b, a) == []


def test_line_ending_inside_another_is_kept():
    (hit,) = Segment.intersect(Line((0, 0), (2, 0)), Line((1, 0), (1, 1)))
    assert hit.point == pytest.approx((1, 0))
    assert (hit.a_t, hit.b_t) == pytest.approx((0.5, 0))


def test_line_and_quadratic(hump):
    crossing = Line((-1, 2.5), (11, 2.5))
    hits = sorted(Segment.intersect(crossing, hump), key=lambda h: h.a_t)
    assert len(hits) == 2
    root = math.sqrt(0.5) / 2
    expected_ts = [0.5 - root, 0.5 + root]
    assert [h.b_t for h in hits] == pytest.approx(expected_ts)
    assert [h.a_t for h in hits] == pytest.approx([(10 * t + 1) / 12 for t in expected_ts])
    for hit in hits:
        assert hit.point.y == pytest.approx(2.5)


def test_order_of_arguments_is_respected(hump):
    crossing = Line((-1, 2.5), (11, 2.5))
    forward = sorted(Segment.intersect(crossing, hump), key=lambda h: h.a_t)
    backward = sorted(Segment.intersect(hump, crossing), key=lambda h: h.b_t)
    for f, b in zip(forward, backward):
        assert f.a_t == pytest.approx(b.b_t)
        assert f.b_t == pytest.approx(b.a_t)


def test_line_and_cubic_hits_lie_on_both(wave):
    crossing = Line((0, 5), (50, 5))
    hits = Segment.intersect(crossing, wave)
    assert hits
    for hit in hits:
        assert crossing.position_at(hit.a_t) == pytest.approx(hit.point, abs=1e-6)
        assert wave.position_at(hit.b_t) == pytest.approx(hit.point, abs=1e-6)


def test_line_endpoint_touch_excluded(hump):
    # the line ends exactly on the curve
    assert Segment.intersect(Line((5, 10), (5, 5)), hump) == []


def test_arcs():
    a = Arc((0, 0), 1, 0, 2 * math.pi)
    b = Arc((1, 0), 1, 0, 2 * math.pi)
    hits = Segment.intersect(a, b)
    points = sorted((tuple(h.point) for h in hits), key=lambda p: p[1])
    assert points == [pytest.approx((0.5, -math.sqrt(3) / 2)), pytest.approx((0.5, math.sqrt(3) / 2))]
    for hit in hits:
        assert a.position_at(hit.a_t) == pytest.approx(hit.point)
        assert b.position_at(hit.b_t) == pytest.approx(hit.point)


def test_partial_arcs_filter_by_angle():
    a = Arc((0, 0), 1, 0, math.pi)  # only the y >= 0 half
    b = Arc((1, 0), 1, 0, 2 * math.pi)
    (hit,) = Segment.intersect(a, b)
    assert hit.point == pytest.approx((0.5, math.sqrt(3) / 2))


def test_same_circle_arcs_joined_end_to_end():
    a = Arc((0, 0), 1, 0, math.pi / 2)
    b = Arc((0, 0), 1, math.pi / 2, math.pi)
    # the only common point is the shared end point
    assert Segment.intersect(a, b) == []
    assert Segment.intersect(b, a) == []


def test_cubics():
    a = Cubic((0, 0), (0, 10), (10, 10), (10, 0))
    b = Cubic((0, 10), (0, 0), (10, 0), (10, 10))
    hits = Segment.intersect(a, b)
    ts = sorted({round(h.a_t, 6) for h in hits})
    root = math.sqrt(12) / 12
    assert ts == pytest.approx([0.5 - root, 0.5 + root], abs=1e-6)
    for hit in hits:
        assert hit.a_t == pytest.approx(hit.b_t, abs=1e-6)


def test_quadratic_and_cubic(hump):
    cubic = Cubic((0, 10), (3, 0), (7, 0), (10, 10))
    hits = Segment.intersect(hump, cubic)
    assert len({round(h.a_t, 6) for h in hits}) == 2
    for hit in hits:
        assert hump.position_at(hit.a_t) == pytest.approx(hit.point, abs=1e-6)
        assert cubic.position_at(hit.b_t) == pytest.approx(hit.point, abs=1e-6)


def test_identical_curves_have_no_isolated_hits(wave):
    assert Segment.intersect(wave, Cubic(*wave.control_points)) == []


def test_curve_and_its_slice_have_no_isolated_hits(wave):
    assert Segment.intersect(wave, wave.slice(0.2, 0.7)) == []
    assert Segment.intersect(wave.slice(0.2, 0.7), wave) == []


def test_curve_and_its_reverse_have_no_isolated_hits(wave):
    assert Segment.intersect(wave, wave.reversed()) == []


def test_quadratic_and_its_elevated_slice_have_no_isolated_hits(hump):
    assert Segment.intersect(hump, hump.slice(0.3, 1).degree_elevated()) == []


def test_ellipse_and_line(ellipse):
    hits = sorted(Segment.intersect(Line((0, -10), (0, 10)), ellipse), key=lambda h: h.a_t)
    assert [h.a_t for h in hits] == pytest.approx([0.4, 0.6])
    assert [h.b_t for h in hits] == pytest.approx([0.75, 0.25])
    assert hits[0].point == pytest.approx((0, -2))


def test_arc_and_quadratic_use_bounds_subdivision():
    circle = Arc((0, 0), 5, 0, 2 * math.pi)
    curve = Quadratic((-10, -1), (0, 1), (10, -1))
    hits = Segment.intersect(circle, curve)
    assert len(hits) == 2
    for hit in hits:
        assert hit.point.magnitude == pytest.approx(5, abs=1e-6)
        assert curve.position_at(hit.b_t) == pytest.approx(hit.point, abs=1e-6)


def test_bounds_intersection_misses_far_segments(hump):
    assert BoundsIntersection.intersect(hump, Quadratic((100, 100), (105, 110), (110, 100))) == []


def test_elliptical_arcs():
    a = EllipticalArc((0, 0), 4, 2, 0, 0, 2 * math.pi)
    b = EllipticalArc((0, 0), 4, 2, math.pi / 2, 0, 2 * math.pi)
    hits = Segment.intersect(a, b)
    # two ellipses rotated a quarter turn cross on both diagonals
    assert len(hits) == 4
    for hit in hits:
        assert abs(hit.point.x) == pytest.approx(abs(hit.point.y), abs=1e-6)
        assert b.position_at(hit.b_t) == pytest.approx(hit.point, abs=1e-6)


class TestRayIntersection:
    def test_line(self):
        (hit,) = Line((0, -1), (0, 1)).intersection(Ray2(Vector2(-5, 0), Vector2(1, 0)))
        assert hit.distance == pytest.approx(5)
        assert hit.point == pytest.approx((0, 0))
        assert hit.t == pytest.approx(0.5)
        assert hit.normal == pytest.approx((-1, 0))

    def test_line_behind_ray(self):
        assert Line((0, -1), (0, 1)).intersection(Ray2(Vector2(5, 0), Vector2(1, 0))) == []

    def test_circle(self):
        circle = Arc((0, 0), 1, 0, 2 * math.pi)
        hits = circle.intersection(Ray2(Vector2(-5, 0), Vector2(1, 0)))
        assert sorted(h.distance for h in hits) == pytest.approx([4, 6])
        assert {h.wind for h in hits} == {1, -1}

    def test_ellipse(self, ellipse):
        hits = sorted(ellipse.intersection(Ray2(Vector2(-10, 0), Vector2(1, 0))), key=lambda h: h.distance)
        assert [h.distance for h in hits] == pytest.approx([6, 14])
        assert hits[0].point == pytest.approx((-4, 0))
        assert hits[0].normal == pytest.approx((-1, 0))
        assert hits[1].point == pytest.approx((4, 0))

    def test_quadratic(self, hump):
        (hit,) = hump.intersection(Ray2(Vector2(5, -5), Vector2(0, 1)))
        assert hit.distance == pytest.approx(10)
        assert hit.t == pytest.approx(0.5)

    def test_cubic(self):
        cubic = Cubic((0, 0), (0, 10), (10, 10), (10, 0))
        (hit,) = cubic.intersection(Ray2(Vector2(5, -5), Vector2(0, 1)))
        assert hit.point == pytest.approx((5, 7.5))
        assert hit.t == pytest.approx(0.5)
