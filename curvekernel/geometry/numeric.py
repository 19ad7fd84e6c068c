"""
Scalar helpers and small closed-form solvers shared by the segment types.
"""
from __future__ import annotations
from typing import List, Optional
import math

from .vector import Vector2

# ratio above which a leading coefficient is treated as zero (degree drops)
_DEGENERATE_RATIO = 1e7


def linear(a1: float, a2: float, b1: float, b2: float, a3: float) -> float:
    """Maps a3 from the range [a1,a2] onto [b1,b2] (no clamping)."""
    return (b2 - b1) / (a2 - a1) * (a3 - a1) + b1


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def modulo_between_down(value: float, lo: float, hi: float) -> float:
    """value mod (hi-lo), mapped into [lo, hi)."""
    if not hi > lo:
        raise ValueError("modulo_between requires hi > lo")
    divisor = hi - lo
    partial = math.fmod(value - lo, divisor)
    if partial < 0:
        partial += divisor
    return partial + lo


def modulo_between_up(value: float, lo: float, hi: float) -> float:
    """value mod (hi-lo), mapped into (lo, hi]."""
    return -modulo_between_down(-value, -hi, -lo)


def cube_root(x: float) -> float:
    return x ** (1 / 3) if x >= 0 else -((-x) ** (1 / 3))


def solve_linear_roots_real(a: float, b: float) -> Optional[List[float]]:
    """Roots of a*x + b = 0. None means every x is a root."""
    if a == 0:
        return None if b == 0 else []
    return [-b / a]


def solve_quadratic_roots_real(a: float, b: float, c: float) -> Optional[List[float]]:
    """Real roots of a*x^2 + b*x + c = 0 (both roots returned for a double root)."""
    if a == 0 or abs(b / a) > _DEGENERATE_RATIO or abs(c / a) > _DEGENERATE_RATIO:
        return solve_linear_roots_real(b, c)
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return []
    sq = math.sqrt(discriminant)
    return [(-b - sq) / (2 * a), (-b + sq) / (2 * a)]


def solve_cubic_roots_real(a: float, b: float, c: float, d: float,
                           discriminant_threshold: float = 1e-7) -> Optional[List[float]]:
    """Real roots of a*x^3 + b*x^2 + c*x + d = 0, via Cardano / trigonometric form."""
    if a == 0 or abs(b / a) > _DEGENERATE_RATIO or abs(c / a) > _DEGENERATE_RATIO \
            or abs(d / a) > _DEGENERATE_RATIO:
        return solve_quadratic_roots_real(b, c, d)
    if d == 0 or abs(a / d) > _DEGENERATE_RATIO or abs(b / d) > _DEGENERATE_RATIO \
            or abs(c / d) > _DEGENERATE_RATIO:
        rest = solve_quadratic_roots_real(a, b, c)
        return [0.0] + (rest or [])

    b /= a
    c /= a
    d /= a
    q = (3.0 * c - b * b) / 9
    r = (-(27 * d) + b * (9 * c - 2 * (b * b))) / 54
    discriminant = q * q * q + r * r
    b3 = b / 3
    if discriminant > discriminant_threshold:
        dsqrt = math.sqrt(discriminant)
        return [cube_root(r + dsqrt) + cube_root(r - dsqrt) - b3]
    if discriminant > -discriminant_threshold:
        rsqrt = cube_root(r)
        double_root = -b3 - rsqrt
        return [-b3 + 2 * rsqrt, double_root, double_root]
    qx = math.acos(clamp(r / math.sqrt(-q * q * q), -1.0, 1.0))
    rr = 2 * math.sqrt(-q)
    return [
        -b3 + rr * math.cos(qx / 3),
        -b3 + rr * math.cos((qx + 2 * math.pi) / 3),
        -b3 + rr * math.cos((qx + 4 * math.pi) / 3),
    ]


def dist_to_segment_squared(p, a, b) -> float:
    """Squared distance from p to the closed segment a-b."""
    x0, y0 = p[0], p[1]
    x1, y1 = a[0], a[1]
    x2, y2 = b[0], b[1]
    dx, dy = x2 - x1, y2 - y1
    seg_sq = dx * dx + dy * dy
    if seg_sq == 0:
        return (x0 - x1) ** 2 + (y0 - y1) ** 2
    t = ((x0 - x1) * dx + (y0 - y1) * dy) / seg_sq
    if t < 0:
        return (x0 - x1) ** 2 + (y0 - y1) ** 2
    if t > 1:
        return (x0 - x2) ** 2 + (y0 - y2) ** 2
    px, py = x1 + t * dx, y1 + t * dy
    return (x0 - px) ** 2 + (y0 - py) ** 2


def line_line_intersection(p1, p2, p3, p4) -> Optional[Vector2]:
    """Intersection of the infinite lines p1-p2 and p3-p4, None if parallel or undefined."""
    epsilon = 1e-10
    if Vector2(*p1).equals_epsilon(p2, epsilon) or Vector2(*p3).equals_epsilon(p4, epsilon):
        return None
    x12 = p1[0] - p2[0]
    x34 = p3[0] - p4[0]
    y12 = p1[1] - p2[1]
    y34 = p3[1] - p4[1]
    denom = x12 * y34 - y12 * x34
    if abs(denom) < epsilon:
        return None
    a = p1[0] * p2[1] - p1[1] * p2[0]
    b = p3[0] * p4[1] - p3[1] * p4[0]
    return Vector2((a * x34 - x12 * b) / denom, (a * y34 - y12 * b) / denom)


def line_segment_intersection(x1, y1, x2, y2, x3, y3, x4, y4) -> Optional[Vector2]:
    """Intersection point of the closed segments (x1,y1)-(x2,y2) and (x3,y3)-(x4,y4)."""
    def ccw(a, b, c, d, e, f):
        return (f - b) * (c - a) - (d - b) * (e - a)

    if ccw(x1, y1, x3, y3, x4, y4) * ccw(x2, y2, x3, y3, x4, y4) > 0 or \
            ccw(x3, y3, x1, y1, x2, y2) * ccw(x4, y4, x1, y1, x2, y2) > 0:
        return None
    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < 1e-10:
        return None
    # exact shared endpoints
    if (x1 == x3 and y1 == y3) or (x1 == x4 and y1 == y4):
        return Vector2(x1, y1)
    if (x2 == x3 and y2 == y3) or (x2 == x4 and y2 == y4):
        return Vector2(x2, y2)
    ix = ((x1 * y2 - y1 * x2) * (x3 - x4) - (x1 - x2) * (x3 * y4 - y3 * x4)) / denom
    iy = ((x1 * y2 - y1 * x2) * (y3 - y4) - (y1 - y2) * (x3 * y4 - y3 * x4)) / denom
    return Vector2(ix, iy)


def circle_center_from_points(p1, p2, p3) -> Optional[Vector2]:
    """Center of the circle through three points, None when they are collinear."""
    p12 = Vector2((p1[0] + p2[0]) / 2, (p1[1] + p2[1]) / 2)
    p23 = Vector2((p2[0] + p3[0]) / 2, (p2[1] + p3[1]) / 2)
    p12x = Vector2(p12.x + (p2[1] - p1[1]), p12.y - (p2[0] - p1[0]))
    p23x = Vector2(p23.x + (p3[1] - p2[1]), p23.y - (p3[0] - p2[0]))
    return line_line_intersection(p12, p12x, p23, p23x)


def triangle_area_signed(a, b, c) -> float:
    return a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1])


def are_points_collinear(a, b, c, epsilon: float = 0.0) -> bool:
    return abs(triangle_area_signed(a, b, c)) <= epsilon


def is_between_0_and_1(t: float) -> bool:
    return 0 <= t <= 1
