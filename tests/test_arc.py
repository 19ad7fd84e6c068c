import math

import pytest

from curvekernel.segments.arc import Arc, compute_actual_end_angle
from curvekernel.segments.elliptical_arc import EllipticalArc
from curvekernel.segments.line import Line
from curvekernel.transforms.affine import Affine


def test_actual_end_angle():
    assert compute_actual_end_angle(0, 1, False) == 1
    assert compute_actual_end_angle(1, 0, False) == pytest.approx(2 * math.pi)
    assert compute_actual_end_angle(0, 1, True) == pytest.approx(1 - 2 * math.pi)
    assert compute_actual_end_angle(1, 1, True) == 1


def test_negative_radius_is_remapped():
    arc = Arc((0, 0), -2, 0, math.pi / 2)
    assert arc.radius == 2
    assert arc.start == pytest.approx((-2, 0))
    arc.radius = -3
    assert arc.radius == 3


def test_arc_positions_and_tangents(quarter):
    assert quarter.start == pytest.approx((2, 0))
    assert quarter.end == pytest.approx((0, 2))
    assert quarter.position_at(0.5) == pytest.approx((math.sqrt(2), math.sqrt(2)))
    assert quarter.start_tangent == pytest.approx((0, 1))
    ccw = Arc((0, 0), 2, 0, -math.pi / 2, True)
    assert ccw.start_tangent == pytest.approx((0, -1))


def test_arc_bounds(quarter):
    b = Arc((0, 0), 1, -math.pi / 4, math.pi / 4).bounds
    assert b.max_x == pytest.approx(1)
    assert b.min_x == pytest.approx(math.sqrt(0.5))
    assert quarter.get_interior_extrema_ts() == []
    assert Arc((0, 0), 1, 0, 2 * math.pi).get_interior_extrema_ts() == pytest.approx([0.25, 0.5, 0.75])


def test_map_angle_and_t():
    arc = Arc((0, 0), 1, math.pi / 2, 3 * math.pi / 2)
    assert arc.t_at_angle(math.pi) == pytest.approx(0.5)
    assert arc.t_at_angle(-math.pi) == pytest.approx(0.5)
    assert arc.contains_angle(math.pi)
    assert not arc.contains_angle(0)


def test_create_from_points():
    arc = Arc.create_from_points((1, 0), (0, 1), (-1, 0))
    assert isinstance(arc, Arc)
    assert arc.center == pytest.approx((0, 0))
    assert arc.radius == pytest.approx(1)
    assert arc.position_at(0.5) == pytest.approx((0, 1))
    lower = Arc.create_from_points((1, 0), (0, -1), (-1, 0))
    assert lower.position_at(0.5) == pytest.approx((0, -1))
    assert isinstance(Arc.create_from_points((0, 0), (1, 1), (2, 2)), Line)


def test_uniform_transform_keeps_arc(quarter):
    moved = quarter.transformed(Affine.translation(1, 1).times(Affine.scaling(2)))
    assert isinstance(moved, Arc)
    assert moved.radius == pytest.approx(4)
    assert moved.position_at(0.5) == pytest.approx((1 + 2 * math.sqrt(2), 1 + 2 * math.sqrt(2)))


def test_reflection_flips_direction(quarter):
    mirrored = quarter.transformed(Affine.scaling(1, -1))
    assert isinstance(mirrored, Arc)
    assert mirrored.anticlockwise
    assert mirrored.position_at(0.5) == pytest.approx((math.sqrt(2), -math.sqrt(2)))


def test_non_uniform_scale_gives_ellipse():
    arc = Arc((0, 0), 1, 0, math.pi / 2)
    stretched = arc.transformed(Affine.scaling(2, 1))
    assert isinstance(stretched, EllipticalArc)
    assert stretched.position_at(0.5) == pytest.approx((2 * math.cos(math.pi / 4), math.sin(math.pi / 4)))
    assert stretched.end == pytest.approx((0, 1))


def test_full_circle_survives_transform():
    circle = Arc((0, 0), 1, 0, 2 * math.pi)
    moved = circle.transformed(Affine.translation(3, 0))
    assert moved.get_arc_length() == pytest.approx(2 * math.pi)


class TestEllipticalArc:
    def test_positions(self):
        e = EllipticalArc((0, 0), 4, 2, 0, 0, math.pi / 2)
        assert e.start == pytest.approx((4, 0))
        assert e.end == pytest.approx((0, 2))
        assert e.position_at(1) == pytest.approx((0, 2))

    def test_rotation(self):
        e = EllipticalArc((1, 1), 4, 2, math.pi / 2, 0, math.pi)
        assert e.start == pytest.approx((1, 5))

    def test_negative_radius_remapped(self):
        e = EllipticalArc((0, 0), -4, 2, 0, 0, math.pi / 2)
        assert e.radius_x == 4
        assert e.position_at(0) == pytest.approx((-4, 0))
        assert e.position_at(1) == pytest.approx((0, 2))

    def test_minor_major_swap(self):
        e = EllipticalArc((0, 0), 2, 4, 0, 0, math.pi / 2)
        assert e.radius_x == 4 and e.radius_y == 2
        assert e.position_at(0) == pytest.approx((2, 0))
        assert e.position_at(1) == pytest.approx((0, 4))
        assert e.position_at(0.5) == pytest.approx((2 * math.cos(math.pi / 4), 4 * math.sin(math.pi / 4)))

    def test_curvature(self, ellipse):
        # a / b^2 at the end of the major axis, b / a^2 at the end of the minor one
        assert ellipse.curvature_at(0) == pytest.approx(1)
        assert ellipse.curvature_at(0.25) == pytest.approx(0.125)

    def test_bounds_and_extrema(self, ellipse):
        b = ellipse.bounds
        assert (b.min_x, b.min_y, b.max_x, b.max_y) == pytest.approx((-4, -2, 4, 2))
        assert ellipse.get_interior_extrema_ts() == pytest.approx([0.25, 0.5, 0.75])

    def test_rotated_bounds(self):
        e = EllipticalArc((0, 0), 4, 2, math.pi / 4, 0, 2 * math.pi)
        half_width = math.sqrt((16 + 4) / 2)
        assert e.bounds.max_x == pytest.approx(half_width)
        assert e.bounds.max_y == pytest.approx(half_width)

    def test_tangent_direction(self):
        e = EllipticalArc((0, 0), 4, 2, 0, 0, math.pi / 2)
        assert e.start_tangent == pytest.approx((0, 1))
        assert e.reversed().end_tangent == pytest.approx((0, -1))

    def test_signed_area(self, ellipse):
        assert ellipse.get_signed_area_fragment() == pytest.approx(8 * math.pi)

    def test_circle_becomes_arc(self):
        e = EllipticalArc((1, 0), 2, 2, math.pi / 2, 0, math.pi / 2)
        (arc,) = e.get_nondegenerate_segments()
        assert isinstance(arc, Arc)
        for t in (0, 0.3, 1):
            assert arc.position_at(t) == pytest.approx(e.position_at(t))
        assert EllipticalArc((0, 0), 0, 2, 0, 0, 1).get_nondegenerate_segments() == []

    def test_transformed(self):
        e = EllipticalArc((0, 0), 4, 2, 0, 0, math.pi / 2)
        m = Affine.translation(5, 0).times(Affine.rotation(math.pi / 2))
        moved = e.transformed(m)
        for t in (0, 0.5, 1):
            assert moved.position_at(t) == pytest.approx(m.apply(e.position_at(t)))

    def test_radius_setter_invalidates(self):
        e = EllipticalArc((0, 0), 4, 2, 0, 0, math.pi / 2)
        assert e.start == pytest.approx((4, 0))
        e.radius_x = 6
        assert e.start == pytest.approx((6, 0))
