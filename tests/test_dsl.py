import math

import pytest

from curvekernel.dsl.dsl_parser import parse_point, parse_segments
from curvekernel.segments.arc import Arc
from curvekernel.segments.cubic import Cubic
from curvekernel.segments.elliptical_arc import EllipticalArc
from curvekernel.segments.line import Line
from curvekernel.segments.quadratic import Quadratic

DEMO = """
# every family once
LINE 0,0 -> 10,0
QUAD 10,0 -> 15,5 -> 10,10
CUBIC 10,10 -> 5,15 -> 0,5 -> 0,0
ARC 0,0 R=5 FROM=0 TO={pi / 2}
ELLIPSE 1,2 RX=4 RY=2 ROT={radians(30)} FROM=0 TO={tau} CCW
"""


def test_parse_every_family():
    segments = parse_segments(DEMO)
    assert [type(s) for s in segments] == [Line, Quadratic, Cubic, Arc, EllipticalArc]
    line, quad, cubic, arc, ellipse = segments
    assert line.end == (10, 0)
    assert quad.control == (15, 5)
    assert cubic.control2 == (0, 5)
    assert arc.radius == 5
    assert arc.end_angle == pytest.approx(math.pi / 2)
    assert not arc.anticlockwise
    assert ellipse.rotation == pytest.approx(math.pi / 6)
    assert ellipse.anticlockwise


def test_parse_point_expressions():
    assert parse_point("1,{2*3}") == (1, 6)
    assert parse_point(" -1 , atan2(0, 1) ") == (-1, 0)
    with pytest.raises(ValueError):
        parse_point("1,2,3")


@pytest.mark.parametrize("text", [
    "SPLINE 0,0 -> 1,1",
    "LINE 0,0",
    "QUAD 0,0 -> 1,1",
    "ARC 0,0 R=1 FROM=0",
    "ARC 0,0 R=1 FROM=0 TO=1 SWEEP=2",
    "ELLIPSE 0,0 RX=1 RY=1 FROM=0 TO=1",
    "LINE 0,0 -> 1,nope",
])
def test_malformed_lines(text):
    with pytest.raises(ValueError):
        parse_segments(text)


def test_comments_and_blank_lines_are_skipped():
    assert parse_segments("# nothing here\n\n   \n") == []
