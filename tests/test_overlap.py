import math

import pytest

from curvekernel.segments.arc import Arc
from curvekernel.segments.cubic import Cubic
from curvekernel.segments.elliptical_arc import EllipticalArc, EllipticalArcOverlapType
from curvekernel.segments.line import Line
from curvekernel.segments.overlap import (
    ALWAYS, NO_OVERLAP, OverlapSolution, get_polynomial_overlaps, pick_axis_overlap,
    polynomial_get_overlap_cubic, polynomial_get_overlap_linear, polynomial_get_overlap_quadratic,
    power_basis,
)
from curvekernel.segments.quadratic import Quadratic
from curvekernel.segments.results import Overlap


def test_linear_solver():
    assert polynomial_get_overlap_linear(0, 10, 5, 10) == OverlapSolution(1, -0.5)
    assert polynomial_get_overlap_linear(3, 0, 3, 0) is ALWAYS
    assert polynomial_get_overlap_linear(3, 0, 4, 0) is NO_OVERLAP
    assert not NO_OVERLAP


def test_quadratic_solver():
    # q(t) = t^2, p(t) = q(2t + 1) = 4t^2 + 4t + 1
    solution = polynomial_get_overlap_quadratic(1, 4, 4, 0, 0, 1)
    assert solution.a == pytest.approx(2)
    assert solution.b == pytest.approx(1)
    assert polynomial_get_overlap_quadratic(0, 0, -1, 0, 0, 1) is NO_OVERLAP


def test_cubic_solver():
    # q(t) = t^3, p(t) = q(-t + 1) = -t^3 + 3t^2 - 3t + 1
    solution = polynomial_get_overlap_cubic(1, -3, 3, -1, 0, 0, 0, 1)
    assert solution.a == pytest.approx(-1)
    assert solution.b == pytest.approx(1)


def test_pick_axis_prefers_wider_spread():
    x, y = OverlapSolution(1, 0), OverlapSolution(2, 0)
    assert pick_axis_overlap(x, y, 10, 1) is x
    assert pick_axis_overlap(x, y, 1, 10) is y
    assert pick_axis_overlap(ALWAYS, y, 10, 1) is y


def test_power_basis():
    assert power_basis([1, 3]) == [1, 2]
    assert power_basis([0, 1, 0]) == [0, 2, -2]
    with pytest.raises(ValueError):
        power_basis([1])


def test_line_overlap():
    a = Line((0, 0), (10, 0))
    b = Line((5, 0), (15, 0))
    (overlap,) = a.get_overlaps(b)
    assert overlap.a == pytest.approx(1)
    assert overlap.b == pytest.approx(-0.5)
    (p_range, q_range) = overlap.get_overlap_ranges()
    assert p_range == pytest.approx((0.5, 1))
    assert q_range == pytest.approx((0, 0.5))


def test_parallel_lines_do_not_overlap():
    assert Line((0, 0), (10, 0)).get_overlaps(Line((0, 1), (10, 1))) == []


def test_disjoint_collinear_lines():
    assert Line((0, 0), (10, 0)).get_overlaps(Line((20, 0), (30, 0))) == []


def test_reversed_line_overlap():
    a = Line((0, 0), (10, 0))
    (overlap,) = a.get_overlaps(a.reversed())
    assert overlap.a == pytest.approx(-1)
    assert overlap.b == pytest.approx(1)


def test_quadratic_overlap_with_slice(hump):
    piece = hump.slice(0.25, 0.75)
    (overlap,) = Quadratic.get_overlaps_between(piece, hump)
    assert overlap.a == pytest.approx(0.5)
    assert overlap.b == pytest.approx(0.25)


def test_cubic_overlap_with_itself(wave):
    (overlap,) = Cubic.get_overlaps_between(wave, Cubic(*wave.control_points))
    assert overlap.a == pytest.approx(1)
    assert overlap.b == pytest.approx(0, abs=1e-12)


def test_degree_elevated_overlap(hump):
    elevated = hump.degree_elevated()
    (overlap,) = elevated.get_overlaps(hump.slice(0, 1).degree_elevated())
    assert overlap.a == pytest.approx(1)
    assert overlap.b == pytest.approx(0, abs=1e-9)


def test_cubic_overlap_with_slice(wave):
    piece = wave.slice(0.25, 0.75)
    (overlap,) = piece.get_overlaps(wave)
    assert overlap.a == pytest.approx(0.5)
    assert overlap.b == pytest.approx(0.25)
    assert overlap.apply(0.5) == pytest.approx(0.5)


def test_different_cubics_do_not_overlap(wave):
    other = Cubic((0, 0), (10, 31), (40, -20), (50, 10))
    assert wave.get_overlaps(other) == []


def test_overlap_needs_same_family(line, hump):
    assert line.get_overlaps(hump) == []
    with pytest.raises(TypeError):
        Line.get_overlaps_between(line, hump)
    with pytest.raises(ValueError):
        get_polynomial_overlaps(line.control_points, hump.control_points)


def test_overlap_create_linear():
    overlap = Overlap.create_linear(0, 0.5, 1, 1)
    assert overlap == Overlap(0.5, 0.5)
    assert overlap.inverse(0.75) == pytest.approx(0.5)


def test_arc_overlap():
    a = Arc((0, 0), 1, 0, math.pi)
    b = Arc((0, 0), 1, math.pi / 2, 3 * math.pi / 2)
    (overlap,) = a.get_overlaps(b)
    assert overlap.a == pytest.approx(1)
    assert overlap.b == pytest.approx(-0.5)
    assert a.position_at(0.75) == pytest.approx(b.position_at(overlap.apply(0.75)))


def test_arc_overlap_across_wraparound():
    a = Arc((0, 0), 1, -math.pi / 2, math.pi / 2)
    b = Arc((0, 0), 1, 0, math.pi)
    overlaps = a.get_overlaps(b)
    assert len(overlaps) == 1
    t = 0.75
    assert a.position_at(t) == pytest.approx(b.position_at(overlaps[0].apply(t)))


def test_arc_overlap_requires_same_circle():
    a = Arc((0, 0), 1, 0, math.pi)
    assert a.get_overlaps(Arc((0, 0), 2, 0, math.pi)) == []
    assert a.get_overlaps(Arc((0, 1), 1, 0, math.pi)) == []
    with pytest.raises(TypeError):
        Arc.get_overlaps_between(a, Line((0, 0), (1, 1)))


def test_elliptical_overlap_type():
    a = EllipticalArc((0, 0), 4, 2, 0, 0, math.pi / 2)
    b = EllipticalArc((0, 0), 4, 2, math.pi, math.pi, 3 * math.pi / 2)
    assert EllipticalArc.get_overlap_type(a, b) is EllipticalArcOverlapType.MATCHING_OVERLAP
    c = EllipticalArc((0, 0), 4, 2, math.pi / 4, 0, 1)
    assert EllipticalArc.get_overlap_type(a, c) is EllipticalArcOverlapType.NONE
    (overlap,) = a.get_overlaps(b)
    assert overlap.a == pytest.approx(1)
    assert overlap.b == pytest.approx(0, abs=1e-9)
    assert a.position_at(0.5) == pytest.approx(b.position_at(0.5))


def test_elliptical_overlap_rejects_other_families(ellipse, line):
    assert ellipse.get_overlaps(line) == []
    with pytest.raises(TypeError):
        EllipticalArc.get_overlaps_between(ellipse, line)
