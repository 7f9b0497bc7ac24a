# path: tests/test_app_runtime.py

from __future__ import annotations

import json
from pathlib import Path
from textwrap import dedent
from uuid import uuid4

from app.runtime import create_navigation_runtime
from env.schema import MonitoringConfig, NavigationConfig, NavigationSettings, PermissionsConfig
from nav_core.testing.fakes import FakeBotMovementService, FakeSceneEntity
from nav_core.tracing import NavOutcome
from spec.nav import ThreatLevel
from spec.types import Vector3


def test_runtime_from_config_file_serves_script_calls(tmp_path: Path) -> None:
    event_log = tmp_path / "logs" / "nav.jsonl"
    cfg_path = tmp_path / "navigation.yaml"
    cfg_path.write_text(
        dedent(
            f"""
            navigation:
              patrol_flags: 5
            monitoring:
              trace_buffer: 10
              event_log: "{event_log.as_posix()}"
            """
        ).lstrip("\n"),
        encoding="utf-8",
    )
    service = FakeBotMovementService()

    runtime = create_navigation_runtime(config_path=cfg_path, bot_service=service)
    api = runtime.api_for(FakeSceneEntity(Vector3()), uuid4())
    api.patrol_points([(0, 0, 0), (1, 1, 1)])
    runtime.close()
    runtime.close()  # idempotent

    assert service.last_call is not None
    assert service.last_call.flags == 5
    assert runtime.tracer.count(NavOutcome.DISPATCHED) == 1

    lines = event_log.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event_type"] == "NAV_DISPATCHED"


def test_bot_service_can_come_and_go() -> None:
    runtime = create_navigation_runtime(NavigationConfig())
    api = runtime.api_for(FakeSceneEntity(Vector3()))

    api.navigate_to((1, 0, 0))
    service = FakeBotMovementService()
    runtime.register_bot_service(service)
    api.navigate_to((2, 0, 0), [8])
    runtime.unregister_bot_service()
    api.navigate_to((3, 0, 0))

    assert [c.positions for c in service.calls] == [[Vector3(2, 0, 0)]]
    assert runtime.tracer.count(NavOutcome.DROPPED) == 2
    assert runtime.tracer.count(NavOutcome.DISPATCHED) == 1


def test_runtime_gate_follows_permissions_config() -> None:
    owner = uuid4()
    cfg = NavigationConfig(
        navigation=NavigationSettings(),
        permissions=PermissionsConfig(
            max_threat_level=ThreatLevel.NONE,
            allowed_owners={"move_to_target": frozenset({str(owner)})},
        ),
        monitoring=MonitoringConfig(),
    )
    runtime = create_navigation_runtime(cfg)

    # Gate default (NONE) allows NONE-level calls for everyone.
    host = FakeSceneEntity(Vector3())
    runtime.api_for(host).move_to_target((1, 0, 0), 1.0)
    assert host.is_moving
    assert runtime.gate.check_threat_level(
        ThreatLevel.HIGH, "move_to_target", FakeSceneEntity(owner_id=owner), "script_nav", None
    )
    assert not runtime.gate.check_threat_level(
        ThreatLevel.HIGH, "move_to_target", host, "script_nav", None
    )
