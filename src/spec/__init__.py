# src/spec/__init__.py

from __future__ import annotations

"""
Public spec surface for script_nav.

This module re-exports *interfaces and data types* used across the codebase:
  - Geometry and navigation value types (Vector3, TravelMode, Waypoint, NavigationCommand)
  - Collaborator protocols (SceneEntity, BotMovementService, PermissionGate)
  - ThreatLevel classification for gated script calls

Concrete implementations live in src/nav_core/.
"""

from .types import (
    EntityId,
    NavigationCommand,
    TravelMode,
    Vector3,
    Waypoint,
)

from .nav import (
    BotMovementService,
    PermissionGate,
    SceneEntity,
    ThreatLevel,
)

__all__ = [
    # Value types
    "EntityId",
    "NavigationCommand",
    "TravelMode",
    "Vector3",
    "Waypoint",
    # Collaborators
    "BotMovementService",
    "PermissionGate",
    "SceneEntity",
    "ThreatLevel",
]
