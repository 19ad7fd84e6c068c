"""
Candidate (a, b) reparameterizations between two 1-dimensional polynomial
curves of the same family, such that p(t) == q(a*t + b).

Coefficients are the control values premultiplied into power-basis form, one
dimension at a time. For a cubic with control values p0..p3:

    [ p0s ]    [  1   0   0   0 ]   [ p0 ]
    [ p1s ] == [ -3   3   0   0 ] * [ p1 ]
    [ p2s ]    [  3  -6   3   0 ]   [ p2 ]
    [ p3s ]    [ -1   3  -3   1 ]   [ p3 ]

quadratic: p0s = p0, p1s = 2(p1 - p0), p2s = p0 - 2p1 + p2
linear:    p0s = p0, p1s = p1 - p0

Substituting a*t + b into q gives

    [ p0s ]    [ 1 b b^2  b^3  ]   [ q0s ]
    [ p1s ] == [ 0 a 2ab 3ab^2 ] * [ q1s ]
    [ p2s ]    [ 0 0 a^2 3a^2b ]   [ q2s ]
    [ p3s ]    [ 0 0  0   a^3  ]   [ q3s ]

which is solved from the bottom row up. Only the candidate for one axis is
computed by the three solvers; get_polynomial_overlaps checks that it holds
for every axis.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Union
import math

from ..geometry.numeric import is_between_0_and_1, solve_linear_roots_real, solve_quadratic_roots_real
from .results import Overlap


class NoOverlap:
    """No reparameterization maps q onto p."""
    __slots__ = ()

    def __repr__(self):
        return "NO_OVERLAP"

    def __bool__(self):
        return False


class AlwaysOverlaps:
    """Both polynomials are the same constant: every (a, b) works."""
    __slots__ = ()

    def __repr__(self):
        return "ALWAYS"


@dataclass(frozen=True)
class OverlapSolution:
    a: float
    b: float


NO_OVERLAP = NoOverlap()
ALWAYS = AlwaysOverlaps()

OverlapResult = Union[NoOverlap, AlwaysOverlaps, OverlapSolution]


def polynomial_get_overlap_linear(p0s: float, p1s: float, q0s: float, q1s: float) -> OverlapResult:
    if q1s == 0:
        return ALWAYS if p0s == q0s else NO_OVERLAP
    a = p1s / q1s
    if a == 0:
        return NO_OVERLAP
    b = (p0s - q0s) / q1s
    return OverlapSolution(a, b)


def polynomial_get_overlap_quadratic(p0s: float, p1s: float, p2s: float,
                                     q0s: float, q1s: float, q2s: float) -> OverlapResult:
    if q2s == 0:
        return polynomial_get_overlap_linear(p0s, p1s, q0s, q1s)
    discr = p2s / q2s
    if discr < 0:
        # a would be imaginary
        return NO_OVERLAP
    a = math.sqrt(discr)
    if a == 0:
        # with a solution, q2s would have been zero too
        return NO_OVERLAP
    b = (p1s - a * q1s) / (2 * a * q2s)
    return OverlapSolution(a, b)


def polynomial_get_overlap_cubic(p0s: float, p1s: float, p2s: float, p3s: float,
                                 q0s: float, q1s: float, q2s: float, q3s: float) -> OverlapResult:
    if q3s == 0:
        return polynomial_get_overlap_quadratic(p0s, p1s, p2s, q0s, q1s, q2s)
    ratio = p3s / q3s
    a = math.copysign(abs(ratio) ** (1 / 3), ratio) if ratio != 0 else 0.0
    if a == 0:
        return NO_OVERLAP
    b = (p2s - a * a * q2s) / (3 * a * a * q3s)
    return OverlapSolution(a, b)


def pick_axis_overlap(x_overlap: OverlapResult, y_overlap: OverlapResult,
                      x_spread: float, y_spread: float) -> OverlapResult:
    """
    Prefer the candidate from the axis with the larger spread of control values,
    falling back to the other axis when that one can't pin down (a, b).
    """
    if x_spread > y_spread:
        first, second = x_overlap, y_overlap
    else:
        first, second = y_overlap, x_overlap
    return first if isinstance(first, OverlapSolution) else second


_POLYNOMIAL_SOLVERS = {
    2: polynomial_get_overlap_linear,
    3: polynomial_get_overlap_quadratic,
    4: polynomial_get_overlap_cubic,
}


def power_basis(values: Sequence[float]) -> List[float]:
    """Bezier control values (degree 1 to 3) to power-basis coefficients, lowest first."""
    if len(values) == 2:
        p0, p1 = values
        return [p0, p1 - p0]
    if len(values) == 3:
        p0, p1, p2 = values
        return [p0, 2 * (p1 - p0), p0 - 2 * p1 + p2]
    if len(values) == 4:
        p0, p1, p2, p3 = values
        return [p0, -3 * p0 + 3 * p1, 3 * p0 - 6 * p1 + 3 * p2, -p0 + 3 * p1 - 3 * p2 + p3]
    raise ValueError(f"unsupported bezier degree {len(values) - 1}")


def _difference_coefficients(p: Sequence[float], q: Sequence[float], a: float, b: float) -> List[float]:
    """Power-basis coefficients of q(a*t + b) - p(t)."""
    d = []
    for j in range(len(p)):
        total = 0.0
        for k in range(j, len(q)):
            total += q[k] * math.comb(k, j) * a ** j * b ** (k - j)
        d.append(total - p[j])
    return d


def _extreme_ts(d: Sequence[float]) -> List[float]:
    """0, 1 and the interior critical points of the polynomial d."""
    if len(d) == 3:
        roots = solve_linear_roots_real(2 * d[2], d[1])
    elif len(d) == 4:
        roots = solve_quadratic_roots_real(3 * d[3], 2 * d[2], d[1])
    else:
        roots = []
    ts = [0.0, 1.0]
    for t in roots or []:
        if is_between_0_and_1(t) and t not in ts:
            ts.append(t)
    return ts


def _evaluate(d: Sequence[float], t: float) -> float:
    result = 0.0
    for coefficient in reversed(d):
        result = result * t + coefficient
    return result


def get_polynomial_overlaps(p_points: Sequence, q_points: Sequence, epsilon: float = 1e-6) -> List[Overlap]:
    """
    Overlap between two bezier curves of the same degree, given their control
    points: p(t) == q(a*t + b) for some a, b, within epsilon per coordinate.
    Returns [Overlap(a, b)] or [].
    """
    if len(p_points) != len(q_points):
        raise ValueError("overlap check needs curves of the same degree")
    solver = _POLYNOMIAL_SOLVERS[len(p_points)]

    px = power_basis([p[0] for p in p_points])
    py = power_basis([p[1] for p in p_points])
    qx = power_basis([q[0] for q in q_points])
    qy = power_basis([q[1] for q in q_points])

    xs = [p[0] for p in p_points] + [q[0] for q in q_points]
    ys = [p[1] for p in p_points] + [q[1] for q in q_points]
    overlap = pick_axis_overlap(solver(*px, *qx), solver(*py, *qy),
                                max(xs) - min(xs), max(ys) - min(ys))
    if not isinstance(overlap, OverlapSolution):
        return []
    a, b = overlap.a, overlap.b

    for p, q in ((px, qx), (py, qy)):
        d = _difference_coefficients(p, q, a, b)
        if any(abs(_evaluate(d, t)) > epsilon for t in _extreme_ts(d)):
            return []

    qt0, qt1 = b, a + b
    if (qt0 > 1 and qt1 > 1) or (qt0 < 0 and qt1 < 0):
        return []
    return [Overlap(a, b)]
