# src/nav_core/waypoints.py
"""
Waypoint normalization and travel-mode assignment.

Scripts hand us loosely typed lists. This module keeps the entries that
are real 3D positions, in order, and pairs each one with a travel mode.
Anything else is skipped, never rejected; the optional `on_drop` hook is
how callers find out (NavigationTracer in practice).
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Callable, Iterable, List, Optional

from spec.types import TravelMode, Vector3, Waypoint

# Decides the travel mode for one waypoint.
TravelModePolicy = Callable[[Vector3], TravelMode]

# Called with (index, element) for every skipped element.
DropHook = Callable[[int, Any], None]


def constant_mode(mode: TravelMode) -> TravelModePolicy:
    """Policy that assigns the same mode to every waypoint."""

    def _policy(_position: Vector3) -> TravelMode:
        return mode

    return _policy


walk_policy: TravelModePolicy = constant_mode(TravelMode.WALK)


def _is_coordinate(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def coerce_position(element: Any) -> Optional[Vector3]:
    """
    Return `element` as a Vector3, or None if it is not a valid position.

    Accepted:
      - Vector3 with finite components
      - tuple / list of exactly three finite real numbers (bools excluded)
    """
    if isinstance(element, Vector3):
        coords = element.as_tuple()
    elif isinstance(element, (tuple, list)) and len(element) == 3:
        coords = tuple(element)
    else:
        return None

    if not all(_is_coordinate(c) for c in coords):
        return None
    if isinstance(element, Vector3):
        return element
    return Vector3(float(coords[0]), float(coords[1]), float(coords[2]))


def normalize_waypoints(
    elements: Optional[Iterable[Any]],
    *,
    on_drop: Optional[DropHook] = None,
) -> List[Vector3]:
    """
    Keep the valid positions from `elements`, preserving relative order.

    None or an empty iterable gives an empty list.
    """
    positions: List[Vector3] = []
    if elements is None:
        return positions

    for index, element in enumerate(elements):
        pos = coerce_position(element)
        if pos is None:
            if on_drop is not None:
                on_drop(index, element)
            continue
        positions.append(pos)
    return positions


def assign_travel_modes(
    positions: List[Vector3],
    policy: TravelModePolicy = walk_policy,
) -> List[TravelMode]:
    """One travel mode per position, same length and order."""
    return [policy(p) for p in positions]


def build_waypoints(
    positions: List[Vector3],
    policy: TravelModePolicy = walk_policy,
) -> List[Waypoint]:
    """Pair positions with their travel modes."""
    modes = assign_travel_modes(positions, policy)
    return [Waypoint(position=p, mode=m) for p, m in zip(positions, modes)]
