# Collaborator interfaces consumed by the navigation layer
# src/spec/nav.py

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Protocol

from .types import EntityId, TravelMode, Vector3


class ThreatLevel(IntEnum):
    """Risk classification of a scripted operation, lowest first."""

    NONE = 0
    NUISANCE = 1
    VERY_LOW = 2
    LOW = 3
    MODERATE = 4
    HIGH = 5
    VERY_HIGH = 6
    SEVERE = 7
    FULL = 8
    NO_ACCESS = 9


class SceneEntity(Protocol):
    """Scene object a script runs in (or the root of its linkset).

    Only the accessors and mutators the navigation layer needs are listed
    here; the scene model owns everything else.
    """

    @property
    def entity_id(self) -> EntityId:
        ...

    @property
    def owner_id(self) -> EntityId:
        ...

    @property
    def root(self) -> "SceneEntity":
        """Root entity of the linkset (itself for a root part)."""
        ...

    @property
    def absolute_position(self) -> Vector3:
        ...

    @property
    def is_deleted(self) -> bool:
        ...

    @property
    def is_attachment(self) -> bool:
        ...

    def move_to_target(self, target: Vector3, tau: float) -> None:
        """Start direct-force movement; tau <= 0 is interpreted as a stop."""
        ...

    def stop_move_to_target(self) -> None:
        ...

    def set_volume_detect(self, enabled: bool) -> None:
        ...


class BotMovementService(Protocol):
    """External subsystem that owns pathfinding and per-tick bot motion."""

    def set_bot_map(
        self,
        entity_id: EntityId,
        positions: List[Vector3],
        modes: List[TravelMode],
        flags: int,
        owner_id: EntityId,
    ) -> None:
        """
        Replace (or queue, per the subsystem's own policy) the bot's path.

        positions and modes are parallel lists of identical length.
        """
        ...


class PermissionGate(Protocol):
    """Authorization check run before any state-mutating scripted call."""

    def check_threat_level(
        self,
        level: ThreatLevel,
        function_name: str,
        host: SceneEntity,
        api_name: str,
        item_id: Optional[EntityId],
    ) -> bool:
        ...
