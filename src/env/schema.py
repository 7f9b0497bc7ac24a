# NavigationConfig, PermissionsConfig, MonitoringConfig dataclasses
# src/env/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from spec.nav import ThreatLevel
from spec.types import TravelMode


@dataclass
class NavigationSettings:
    """Knobs for the navigation command layer."""
    patrol_flags: int = 1                      # flags sent with every patrol request
    closest_point_offset: float = 0.1          # vertical offset used by the closest-point heuristic
    default_travel_mode: TravelMode = TravelMode.WALK
    throw_error_on_not_implemented: bool = False


@dataclass
class PermissionsConfig:
    """Threat-level policy for gated script calls."""
    max_threat_level: ThreatLevel = ThreatLevel.NONE
    # function name -> owner UUID strings allowed above max_threat_level
    allowed_owners: Dict[str, FrozenSet[str]] = field(default_factory=dict)


@dataclass
class MonitoringConfig:
    """Where navigation outcomes go besides stdlib logging."""
    trace_buffer: int = 1000
    event_log: Optional[str] = None            # JSONL path, or None to disable


@dataclass
class NavigationConfig:
    """Resolved navigation.yaml."""
    navigation: NavigationSettings = field(default_factory=NavigationSettings)
    permissions: PermissionsConfig = field(default_factory=PermissionsConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    source: Optional[str] = None               # file the config was loaded from
