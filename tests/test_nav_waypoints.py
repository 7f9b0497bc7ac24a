# path: tests/test_nav_waypoints.py
"""
Tests for nav_core.waypoints

Covers:
- Which elements count as positions
- Order preservation and silent skipping
- Drop hook reporting
- Travel mode assignment (constant and per-waypoint policies)
"""

from __future__ import annotations

import math
from typing import Any, List, Tuple

from nav_core.waypoints import (
    assign_travel_modes,
    build_waypoints,
    coerce_position,
    constant_mode,
    normalize_waypoints,
    walk_policy,
)
from spec.types import TravelMode, Vector3, Waypoint


def test_coerce_position_accepts_vectors_tuples_and_lists() -> None:
    assert coerce_position(Vector3(1.0, 2.0, 3.0)) == Vector3(1.0, 2.0, 3.0)
    assert coerce_position((1, 2, 3)) == Vector3(1.0, 2.0, 3.0)
    assert coerce_position([0.5, -1, 2]) == Vector3(0.5, -1.0, 2.0)


def test_coerce_position_rejects_non_positions() -> None:
    rejects: List[Any] = [
        None,
        "not-a-point",
        42,
        (1, 2),
        (1, 2, 3, 4),
        ("1", "2", "3"),
        (True, 0, 0),
        (math.nan, 0, 0),
        (0, math.inf, 0),
        Vector3(math.nan, 0.0, 0.0),
        {"x": 1, "y": 2, "z": 3},
    ]
    for element in rejects:
        assert coerce_position(element) is None, element


def test_normalize_skips_malformed_and_keeps_order() -> None:
    points = [(0, 0, 0), "not-a-point", (5, 5, 0)]

    out = normalize_waypoints(points)

    assert out == [Vector3(0, 0, 0), Vector3(5, 5, 0)]


def test_normalize_keeps_exactly_the_valid_positions_in_order() -> None:
    valid = [Vector3(float(i), float(i * 2), -float(i)) for i in range(6)]
    junk: List[Any] = ["a", None, (1, 2), 7, [], {"k": 1}]

    # Interleave in several patterns; output must always equal `valid`.
    patterns: List[List[Any]] = [
        valid + junk,
        junk + valid,
        [x for pair in zip(valid, junk) for x in pair],
        [x for pair in zip(junk, valid) for x in pair],
    ]
    for elements in patterns:
        assert normalize_waypoints(elements) == valid


def test_normalize_allows_duplicates() -> None:
    p = (1, 1, 1)
    assert normalize_waypoints([p, p, p]) == [Vector3(1, 1, 1)] * 3


def test_normalize_empty_and_none() -> None:
    assert normalize_waypoints([]) == []
    assert normalize_waypoints(None) == []
    assert normalize_waypoints(["x", 1, None]) == []


def test_normalize_reports_each_drop_with_index() -> None:
    dropped: List[Tuple[int, Any]] = []

    normalize_waypoints(
        [(0, 0, 0), "bad", (1, 1, 1), None],
        on_drop=lambda i, e: dropped.append((i, e)),
    )

    assert dropped == [(1, "bad"), (3, None)]


def test_assign_travel_modes_default_is_walk_and_same_length() -> None:
    for n in (0, 1, 5):
        positions = [Vector3(float(i), 0.0, 0.0) for i in range(n)]
        modes = assign_travel_modes(positions)
        assert len(modes) == n
        assert all(m is TravelMode.WALK for m in modes)


def test_assign_travel_modes_with_constant_policy() -> None:
    positions = [Vector3(), Vector3(1, 0, 0)]
    assert assign_travel_modes(positions, constant_mode(TravelMode.FLY)) == [
        TravelMode.FLY,
        TravelMode.FLY,
    ]


def test_assign_travel_modes_per_waypoint_policy() -> None:
    def fly_when_high(p: Vector3) -> TravelMode:
        return TravelMode.FLY if p.z > 50 else TravelMode.WALK

    positions = [Vector3(0, 0, 10), Vector3(0, 0, 100), Vector3(0, 0, 20)]

    modes = assign_travel_modes(positions, fly_when_high)

    assert modes == [TravelMode.WALK, TravelMode.FLY, TravelMode.WALK]


def test_build_waypoints_pairs_positions_with_modes() -> None:
    positions = [Vector3(1, 2, 3), Vector3(4, 5, 6)]

    wps = build_waypoints(positions, walk_policy)

    assert wps == [
        Waypoint(Vector3(1, 2, 3), TravelMode.WALK),
        Waypoint(Vector3(4, 5, 6), TravelMode.WALK),
    ]
