import math

import pytest
from shapely.geometry import LineString, Point

from conftest import all_families
from curvekernel.segments.line import Line
from curvekernel.segments.segment import Segment


def test_line_closest_point(line):
    (result,) = line.get_closest_points((5, 3))
    assert result.t == pytest.approx(0.5)
    assert result.closest_point == pytest.approx((5, 0))
    assert result.distance_squared == pytest.approx(9)
    assert result.segment is line


def test_line_clamps_to_ends(line):
    (result,) = line.get_closest_points((-4, 3))
    assert result.t == 0
    assert result.distance_squared == pytest.approx(25)


def test_zero_length_line():
    (result,) = Line((1, 1), (1, 1)).explicit_closest_to_point((4, 5))
    assert result.t == 0
    assert result.distance_squared == 25


def test_quadratic_apex(hump):
    results = hump.get_closest_points((5, 10))
    assert results
    for result in results:
        assert result.t == pytest.approx(0.5, abs=1e-4)
        assert result.distance_squared == pytest.approx(25, rel=1e-6)


def test_ties_across_segments():
    a = Line((0, 0), (10, 0))
    b = Line((0, 6), (10, 6))
    results = Segment.filter_closest_to_point_result(Segment.closest_to_point([a, b], (5, 3), 1e-7))
    assert {id(r.segment) for r in results} == {id(a), id(b)}
    assert all(r.distance_squared == pytest.approx(9) for r in results)


def test_mixed_segments_pick_the_nearest(hump, quarter):
    results = Segment.filter_closest_to_point_result(
        Segment.closest_to_point([hump, quarter], (0, 2.5), 1e-7))
    # the quarter arc passes through (0, 2); the hump is farther away
    assert results
    for result in results:
        assert result.segment is quarter
        assert result.closest_point == pytest.approx((0, 2), abs=1e-6)


def test_circle_center_is_equidistant():
    from curvekernel.segments.arc import Arc
    circle = Arc((0, 0), 1, 0, 2 * math.pi)
    results = Segment.closest_to_point([circle], (0, 0), 1e-3)
    assert results
    assert all(r.distance_squared == pytest.approx(1) for r in results)


@pytest.mark.parametrize("segment", all_families(), ids=lambda s: s.kind.value)
@pytest.mark.parametrize("query", [(3, 7), (-2, -2), (20, 1)])
def test_matches_dense_polyline_distance(segment, query):
    coords = [tuple(segment.position_at(i / 4000)) for i in range(4001)]
    expected = LineString(coords).distance(Point(query))
    results = segment.get_closest_points(query)
    assert results
    assert math.sqrt(results[0].distance_squared) == pytest.approx(expected, abs=1e-3)


def test_cubic_closest_is_on_curve(wave):
    (result,) = wave.get_closest_points((25, 20))[:1]
    assert result.closest_point == pytest.approx(wave.position_at(result.t))
