# src/nav_core/closest_point.py
"""
Closest-navigable-point heuristic.

Instead of a real pathfinding query this nudges a small vertical offset,
rotated by the shortest rotation from the caller's position vector to the
target vector, and adds it to the caller's position. There is no obstacle
or reachability check; the result is a placement hint only.
"""

from __future__ import annotations

from typing import List

from spec.types import Vector3

from .geometry import Quaternion

DEFAULT_OFFSET = 0.1


def resolve_closest_nav_point(
    target: Vector3,
    caller_position: Vector3,
    *,
    offset: float = DEFAULT_OFFSET,
) -> List[Vector3]:
    """
    Return a one-element list with the snapped point.

    When caller_position and target point the same way (including equal
    vectors) the rotation is the identity and the result is
    caller_position + (0, 0, offset).
    """
    rotation = Quaternion.rotation_between(caller_position, target)
    diff = rotation.rotate(Vector3(0.0, 0.0, offset))
    return [caller_position + diff]
