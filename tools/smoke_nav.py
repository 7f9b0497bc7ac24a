#!/usr/bin/env python3
"""
tools/smoke_nav.py

Minimal harness to sanity-check the script navigation wiring.

Default mode:
    - Builds a NavigationRuntime from config/navigation.yaml (or --config)
    - Uses FakeBotMovementService and FakeSceneEntity (no region, no bots)
    - Calls:
        - patrol_points (one malformed entry)
        - navigate_to (with flags)
        - get_closest_nav_point
        - move_to_target / stop_move_to_target
        - evade (not implemented)
    - Prints the forwarded set_bot_map calls and the trace records

--no-subsystem:
    - Same calls without a bot service, to show the traced drops.

--dashboard:
    - Also prints the rich dashboard at the end.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any
from uuid import uuid4

# ---------------------------------------------------------------------------
# Ensure src/ is on sys.path when running as a script
# ---------------------------------------------------------------------------

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# ---------------------------------------------------------------------------
# Imports from the project
# ---------------------------------------------------------------------------

from app.runtime import create_navigation_runtime  # type: ignore[import]
from monitoring.dashboard import NavDashboard  # type: ignore[import]
from monitoring.logging_config import configure_logging  # type: ignore[import]
from nav_core.testing.fakes import FakeBotMovementService, FakeSceneEntity  # type: ignore[import]
from spec.types import Vector3  # type: ignore[import]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_dict(obj: Any) -> Any:
    """Best-effort conversion of dataclasses to plain dicts for printing."""
    if is_dataclass(obj):
        return asdict(obj)
    return obj


def _print_header(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def run_smoke(config: Path | None, with_subsystem: bool, show_dashboard: bool) -> None:
    service = FakeBotMovementService() if with_subsystem else None
    runtime = create_navigation_runtime(config_path=config, bot_service=service)
    dashboard = NavDashboard(runtime.bus) if show_dashboard else None

    host = FakeSceneEntity(Vector3(10.0, 10.0, 20.0))
    api = runtime.api_for(host, uuid4())

    _print_header("patrol_points [(0,0,0), 'not-a-point', (5,5,0)]")
    api.patrol_points([(0, 0, 0), "not-a-point", (5, 5, 0)], [])

    _print_header("navigate_to (10,0,0) options=[4]")
    api.navigate_to((10, 0, 0), [4])

    _print_header("get_closest_nav_point (12,10,20)")
    print(api.get_closest_nav_point((12.0, 10.0, 20.0)))

    _print_header("move_to_target (11,10,20) tau=1.5, then stop")
    api.move_to_target((11.0, 10.0, 20.0), 1.5)
    print("moving after move_to_target:", host.is_moving)
    api.stop_move_to_target()
    print("moving after stop_move_to_target:", host.is_moving)

    _print_header("evade (not implemented)")
    try:
        api.evade((0, 0, 0), [])
    except NotImplementedError as exc:
        print("raised:", exc)

    if service is not None:
        _print_header("set_bot_map calls")
        for call in service.calls:
            print(f"  - {_to_dict(call)}")

    _print_header("Trace records")
    for rec in runtime.tracer.get_records():
        print(f"  - {rec.to_payload()}")
    print("counts:", runtime.tracer.counts())

    if dashboard is not None:
        dashboard.print()

    runtime.close()
    _print_header("Smoke run completed")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Smoke test harness for the script navigation layer",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="navigation.yaml to use (default: $NAV_CONFIG_PATH or config/navigation.yaml)",
    )
    parser.add_argument(
        "--no-subsystem",
        action="store_true",
        help="Run without a bot-movement service to see the traced drops",
    )
    parser.add_argument(
        "--dashboard",
        action="store_true",
        help="Print the rich outcome dashboard at the end",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    run_smoke(args.config, not args.no_subsystem, args.dashboard)


if __name__ == "__main__":
    main()
