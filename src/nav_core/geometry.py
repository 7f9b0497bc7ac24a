# src/nav_core/geometry.py
"""
Quaternion helpers for the navigation layer.

Only what the closest-point heuristic needs: the shortest rotation between
two vectors, and rotating a vector by a unit quaternion.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from spec.types import Vector3

# Below this length a vector has no usable direction.
EPSILON = 1e-9


@dataclass(frozen=True)
class Quaternion:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls) -> Quaternion:
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3, angle: float) -> Quaternion:
        unit = axis.normalize()
        s = math.sin(angle / 2.0)
        return cls(unit.x * s, unit.y * s, unit.z * s, math.cos(angle / 2.0))

    @classmethod
    def rotation_between(cls, a: Vector3, b: Vector3) -> Quaternion:
        """
        Shortest rotation taking the direction of `a` onto the direction of `b`.

        Degenerate inputs (either vector ~zero length, or both pointing the
        same way) give the identity. Opposite vectors give a half turn about
        an arbitrary axis perpendicular to `a`.
        """
        la = a.length()
        lb = b.length()
        if la < EPSILON or lb < EPSILON:
            return cls.identity()

        ua = a * (1.0 / la)
        ub = b * (1.0 / lb)
        d = max(-1.0, min(1.0, ua.dot(ub)))

        if d >= 1.0 - EPSILON:
            return cls.identity()

        if d <= -1.0 + EPSILON:
            axis = ua.cross(Vector3(1.0, 0.0, 0.0))
            if axis.length() < EPSILON:
                axis = ua.cross(Vector3(0.0, 1.0, 0.0))
            return cls.from_axis_angle(axis, math.pi)

        return cls.from_axis_angle(ua.cross(ub), math.acos(d))

    def is_identity(self, tol: float = EPSILON) -> bool:
        return (
            abs(self.x) < tol
            and abs(self.y) < tol
            and abs(self.z) < tol
            and abs(abs(self.w) - 1.0) < tol
        )

    def rotate(self, v: Vector3) -> Vector3:
        """Rotate `v` by this (unit) quaternion: q * v * q^-1."""
        u = Vector3(self.x, self.y, self.z)
        uv = u.cross(v)
        uuv = u.cross(uv)
        return v + uv * (2.0 * self.w) + uuv * 2.0
