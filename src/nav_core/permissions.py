# src/nav_core/permissions.py
"""
Threat-level permission gate.

State-mutating script calls ask the gate first and do nothing at all on
denial. The policy here is config-driven:

- calls at or below `max_threat_level` are allowed for everyone
- above it, only owners listed under the function name are allowed
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from env.schema import PermissionsConfig
from spec.nav import SceneEntity, ThreatLevel
from spec.types import EntityId

log = logging.getLogger(__name__)


class ThreatLevelGate:
    """PermissionGate backed by PermissionsConfig."""

    def __init__(
        self,
        max_threat_level: ThreatLevel = ThreatLevel.NONE,
        allowed_owners: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> None:
        self._max_level = max_threat_level
        self._allowed: Dict[str, FrozenSet[str]] = {
            name: frozenset(str(o).lower() for o in owners)
            for name, owners in (allowed_owners or {}).items()
        }

    @classmethod
    def from_config(cls, cfg: PermissionsConfig) -> ThreatLevelGate:
        return cls(cfg.max_threat_level, cfg.allowed_owners)

    @property
    def max_threat_level(self) -> ThreatLevel:
        return self._max_level

    def check_threat_level(
        self,
        level: ThreatLevel,
        function_name: str,
        host: SceneEntity,
        api_name: str,
        item_id: Optional[EntityId],
    ) -> bool:
        if level <= self._max_level:
            return True

        owners = self._allowed.get(function_name)
        if owners and str(host.owner_id).lower() in owners:
            return True

        log.debug(
            "ThreatLevelGate denied %s.%s level=%s max=%s owner=%s item=%s",
            api_name,
            function_name,
            level.name,
            self._max_level.name,
            host.owner_id,
            item_id,
        )
        return False
