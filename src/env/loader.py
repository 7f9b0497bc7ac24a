from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import yaml

from spec.nav import ThreatLevel
from spec.types import TravelMode

from .schema import (
    MonitoringConfig,
    NavigationConfig,
    NavigationSettings,
    PermissionsConfig,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_NAME = "navigation.yaml"

# Environment override for the config file location.
CONFIG_PATH_ENV = "NAV_CONFIG_PATH"


def _resolve_path(path: Optional[Path | str]) -> Path:
    """Explicit path, else $NAV_CONFIG_PATH, else config/navigation.yaml."""
    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return CONFIG_ROOT / DEFAULT_CONFIG_NAME


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file and require a mapping at the top."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' section must be a mapping, got {type(section)}")
    return section


def parse_travel_mode(value: Any) -> TravelMode:
    """Accept 'walk', 'WALK' or a TravelMode member."""
    if isinstance(value, TravelMode):
        return value
    try:
        return TravelMode[str(value).strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown travel mode: {value!r}") from None


def parse_threat_level(value: Any) -> ThreatLevel:
    """Accept 'none', 'very_low', 'VeryLow', an int, or a ThreatLevel member."""
    if isinstance(value, ThreatLevel):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return ThreatLevel(value)
        except ValueError:
            raise ValueError(f"Unknown threat level: {value!r}") from None

    text = str(value).strip()
    # "VeryLow" -> "VERY_LOW"; "very_low" -> "VERY_LOW"
    key = "".join(
        ("_" + ch if ch.isupper() and i > 0 and text[i - 1].islower() else ch)
        for i, ch in enumerate(text)
    ).upper()
    try:
        return ThreatLevel[key]
    except KeyError:
        raise ValueError(f"Unknown threat level: {value!r}") from None


def _parse_int(name: str, value: Any) -> int:
    # .nan, .inf, 1.5 and true are all rejected rather than truncated
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


def _parse_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return float(value)


def _parse_flag(name: str, value: Any) -> bool:
    # a quoted 'false' would be truthy; only YAML booleans are accepted
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def _parse_allowed_owners(raw: Any) -> Dict[str, FrozenSet[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("permissions.allowed_owners must map function names to owner lists")
    out: Dict[str, FrozenSet[str]] = {}
    for fn_name, owners in raw.items():
        if owners is None:
            owners = []
        if isinstance(owners, str):
            owners = [owners]
        out[str(fn_name)] = frozenset(str(o).strip().lower() for o in owners)
    return out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_navigation_config(path: Optional[Path | str] = None) -> NavigationConfig:
    """Main entry point: returns a fully resolved NavigationConfig."""
    cfg_path = _resolve_path(path)
    raw = _load_yaml(cfg_path)

    nav_raw = _section(raw, "navigation")
    perm_raw = _section(raw, "permissions")
    mon_raw = _section(raw, "monitoring")

    defaults = NavigationSettings()
    navigation = NavigationSettings(
        patrol_flags=_parse_int(
            "navigation.patrol_flags", nav_raw.get("patrol_flags", defaults.patrol_flags)
        ),
        closest_point_offset=_parse_float(
            "navigation.closest_point_offset",
            nav_raw.get("closest_point_offset", defaults.closest_point_offset),
        ),
        default_travel_mode=parse_travel_mode(
            nav_raw.get("default_travel_mode", defaults.default_travel_mode)
        ),
        throw_error_on_not_implemented=_parse_flag(
            "navigation.throw_error_on_not_implemented",
            nav_raw.get(
                "throw_error_on_not_implemented",
                defaults.throw_error_on_not_implemented,
            ),
        ),
    )

    permissions = PermissionsConfig(
        max_threat_level=parse_threat_level(
            perm_raw.get("max_threat_level", ThreatLevel.NONE)
        ),
        allowed_owners=_parse_allowed_owners(perm_raw.get("allowed_owners")),
    )

    mon_defaults = MonitoringConfig()
    monitoring = MonitoringConfig(
        trace_buffer=_parse_int(
            "monitoring.trace_buffer", mon_raw.get("trace_buffer", mon_defaults.trace_buffer)
        ),
        event_log=mon_raw.get("event_log", mon_defaults.event_log),
    )

    # perform basic validation before returning
    _validate_config(navigation, monitoring)

    return NavigationConfig(
        navigation=navigation,
        permissions=permissions,
        monitoring=monitoring,
        source=str(cfg_path),
    )


def _validate_config(nav: NavigationSettings, mon: MonitoringConfig) -> None:
    """Minimal sanity checks for the navigation config."""
    if nav.patrol_flags < 0:
        raise ValueError(f"navigation.patrol_flags must be >= 0, got {nav.patrol_flags}")
    if not math.isfinite(nav.closest_point_offset) or nav.closest_point_offset < 0:
        raise ValueError(
            "navigation.closest_point_offset must be finite and >= 0, "
            f"got {nav.closest_point_offset}"
        )
    if mon.trace_buffer <= 0:
        raise ValueError(f"monitoring.trace_buffer must be > 0, got {mon.trace_buffer}")
    if mon.event_log is not None and not isinstance(mon.event_log, str):
        raise ValueError("monitoring.event_log must be a path string or null")
