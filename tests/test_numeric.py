import math

import pytest

from curvekernel.geometry.bounds import Bounds2, NOTHING
from curvekernel.geometry.eval import eval_expr
from curvekernel.geometry.numeric import (
    circle_center_from_points, line_line_intersection, line_segment_intersection, linear,
    modulo_between_down, modulo_between_up, solve_cubic_roots_real, solve_linear_roots_real,
    solve_quadratic_roots_real,
)
from curvekernel.geometry.vector import Vector2
from curvekernel.transforms.affine import Affine


def test_linear_maps_ranges():
    assert linear(0, 10, 0, 1, 5) == pytest.approx(0.5)
    assert linear(0, 1, 10, 20, 2) == pytest.approx(30)


def test_modulo_between():
    assert modulo_between_down(-0.5, 0, 1) == pytest.approx(0.5)
    assert modulo_between_down(1, 0, 1) == 0
    assert modulo_between_up(1, 0, 1) == 1
    with pytest.raises(ValueError):
        modulo_between_down(1, 1, 1)


def test_root_solvers():
    assert solve_linear_roots_real(0, 0) is None
    assert solve_linear_roots_real(0, 1) == []
    assert solve_linear_roots_real(2, -4) == [2]
    assert sorted(solve_quadratic_roots_real(1, -3, 2)) == pytest.approx([1, 2])
    assert solve_quadratic_roots_real(1, 0, 1) == []
    assert sorted(solve_cubic_roots_real(1, -6, 11, -6)) == pytest.approx([1, 2, 3])
    # d == 0 factors out a zero root
    assert sorted(solve_cubic_roots_real(1, -3, 2, 0)) == pytest.approx([0, 1, 2])


def test_line_intersections():
    assert line_line_intersection((0, 0), (1, 1), (0, 1), (1, 0)) == pytest.approx((0.5, 0.5))
    assert line_line_intersection((0, 0), (1, 0), (0, 1), (1, 1)) is None
    assert line_segment_intersection(0, 0, 10, 10, 0, 10, 10, 0) == pytest.approx((5, 5))
    assert line_segment_intersection(0, 0, 1, 1, 5, 0, 6, -1) is None


def test_circle_center_from_points():
    center = circle_center_from_points((1, 0), (0, 1), (-1, 0))
    assert center == pytest.approx((0, 0))
    assert circle_center_from_points((0, 0), (1, 1), (2, 2)) is None


def test_vector_basics():
    v = Vector2(3, 4)
    assert v.magnitude == 5
    assert v.perpendicular == (4, -3)
    assert v.normalized() == pytest.approx((0.6, 0.8))
    assert Vector2(0, 0).blend((10, 20), 0.25) == (2.5, 5)
    with pytest.raises(ValueError):
        Vector2(0, 0).normalized()


def test_bounds():
    b = NOTHING.with_point((0, 0)).with_point((2, 4))
    assert b == Bounds2(0, 0, 2, 4)
    assert b.minimum_distance_to_point_squared((1, 1)) == 0
    assert b.minimum_distance_to_point_squared((5, 0)) == 9
    assert b.maximum_distance_to_point_squared((0, 0)) == 20
    assert not b.intersects_bounds(Bounds2(3, 3, 4, 4))


def test_affine():
    m = Affine.translation(1, 2).times(Affine.scaling(2, 3))
    assert m.apply((1, 1)) == (3, 5)
    assert m.apply_vector((1, 1)) == (2, 3)
    assert m.inverted().apply((3, 5)) == pytest.approx((1, 1))
    rotated = Affine.rotation(math.pi / 2).apply((1, 0))
    assert rotated == pytest.approx((0, 1))
    with pytest.raises(ValueError):
        Affine.scaling(0, 1).inverted()


def test_eval_expr():
    assert eval_expr("{pi/2}") == pytest.approx(math.pi / 2)
    assert eval_expr("sqrt(2)*10") == pytest.approx(10 * math.sqrt(2))
    with pytest.raises(ValueError):
        eval_expr("__import__('os')")
