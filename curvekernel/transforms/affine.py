"""
2D affine matrices.

Coefficients follow shapely's ``affine_transform`` order [a, b, d, e, xoff, yoff]:

    x' = a*x + b*y + xoff
    y' = d*x + e*y + yoff

so ``list(matrix)`` can be handed straight to ``shapely.affinity.affine_transform``.
"""
from __future__ import annotations
from typing import NamedTuple
import math

from ..geometry.vector import Vector2


class Affine(NamedTuple):
    a: float
    b: float
    d: float
    e: float
    xoff: float
    yoff: float

    @staticmethod
    def identity() -> "Affine":
        return Affine(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @staticmethod
    def translation(x: float, y: float) -> "Affine":
        return Affine(1.0, 0.0, 0.0, 1.0, x, y)

    @staticmethod
    def scaling(sx: float, sy: float = None) -> "Affine":
        if sy is None:
            sy = sx
        return Affine(sx, 0.0, 0.0, sy, 0.0, 0.0)

    @staticmethod
    def rotation(angle: float) -> "Affine":
        c, s = math.cos(angle), math.sin(angle)
        return Affine(c, -s, s, c, 0.0, 0.0)

    def times(self, other: "Affine") -> "Affine":
        """Composition self * other (other is applied first)."""
        return Affine(
            self.a * other.a + self.b * other.d,
            self.a * other.b + self.b * other.e,
            self.d * other.a + self.e * other.d,
            self.d * other.b + self.e * other.e,
            self.a * other.xoff + self.b * other.yoff + self.xoff,
            self.d * other.xoff + self.e * other.yoff + self.yoff,
        )

    def apply(self, p) -> Vector2:
        x, y = p[0], p[1]
        return Vector2(self.a * x + self.b * y + self.xoff, self.d * x + self.e * y + self.yoff)

    def apply_vector(self, v) -> Vector2:
        """Linear part only (directions, not positions)."""
        x, y = v[0], v[1]
        return Vector2(self.a * x + self.b * y, self.d * x + self.e * y)

    @property
    def determinant(self) -> float:
        return self.a * self.e - self.b * self.d

    def inverted(self) -> "Affine":
        det = self.determinant
        if det == 0:
            raise ValueError("matrix is not invertible")
        a, b, d, e = self.e / det, -self.b / det, -self.d / det, self.a / det
        return Affine(a, b, d, e,
                      -(a * self.xoff + b * self.yoff),
                      -(d * self.xoff + e * self.yoff))

    @property
    def scale_vector(self) -> Vector2:
        """Lengths of the transformed unit x and y axes."""
        return Vector2(math.hypot(self.a, self.d), math.hypot(self.b, self.e))
