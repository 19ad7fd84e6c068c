import math

import pytest

from curvekernel.segments.arc import Arc
from curvekernel.segments.cubic import Cubic
from curvekernel.segments.elliptical_arc import EllipticalArc
from curvekernel.segments.line import Line
from curvekernel.segments.quadratic import Quadratic


@pytest.fixture
def line():
    return Line((0, 0), (10, 0))


@pytest.fixture
def hump():
    # apex at (5, 5), t=0.5
    return Quadratic((0, 0), (5, 10), (10, 0))


@pytest.fixture
def wave():
    return Cubic((0, 0), (10, 30), (40, -20), (50, 10))


@pytest.fixture
def quarter():
    return Arc((0, 0), 2, 0, math.pi / 2)


@pytest.fixture
def ellipse():
    return EllipticalArc((0, 0), 4, 2, 0, 0, 2 * math.pi)


def all_families():
    return [
        Line((0, 0), (10, 0)),
        Quadratic((0, 0), (5, 10), (10, 0)),
        Cubic((0, 0), (10, 30), (40, -20), (50, 10)),
        Arc((1, 1), 3, 0.25, 2.5),
        EllipticalArc((1, -1), 5, 2, 0.3, -0.5, 2.0, True),
    ]
