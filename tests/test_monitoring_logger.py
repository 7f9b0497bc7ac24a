#tests/test_monitoring_logger.py
"""
Tests for monitoring.logger.JsonFileLogger and log_event.

Covers:
- One JSON object per line, fields encoded
- Non-JSON payload values (UUIDs) are stringified
- close() detaches from the bus
- LoggingEventSink forwards to stdlib logging
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from uuid import uuid4

import pytest

from monitoring.bus import EventBus
from monitoring.events import EventType, LoggingEventSink
from monitoring.logger import JsonFileLogger, log_event
from nav_core.tracing import NavOutcome, NavTraceRecord
from spec.monitoring import event_to_dict


def test_json_file_logger_writes_one_line_per_event(tmp_path: Path):
    bus = EventBus()
    log_path = tmp_path / "nested" / "nav" / "events.jsonl"
    sink = JsonFileLogger(log_path, bus)
    entity = uuid4()

    log_event(
        bus=bus,
        module="nav_core",
        event_type=EventType.NAV_DROPPED,
        message="navigate_to: dropped",
        payload={"operation": "navigate_to", "entity": entity},
        correlation_id=str(entity),
    )
    log_event(bus=bus, module="nav_core", event_type=EventType.LOG, message="second")
    sink.close()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2

    first = json.loads(lines[0])
    assert first["module"] == "nav_core"
    assert first["event_type"] == "NAV_DROPPED"
    assert first["message"] == "navigate_to: dropped"
    assert first["payload"]["operation"] == "navigate_to"
    assert first["payload"]["entity"] == str(entity)
    assert first["correlation_id"] == str(entity)
    assert isinstance(first["ts"], (int, float))

    second = json.loads(lines[1])
    assert second["payload"] == {}


def test_close_unsubscribes(tmp_path: Path):
    bus = EventBus()
    sink = JsonFileLogger(tmp_path / "events.jsonl", bus)
    assert bus.subscriber_count() == 1

    sink.close()

    assert bus.subscriber_count() == 0
    # Publishing after close must not touch the closed file.
    log_event(bus=bus, module="nav_core", event_type=EventType.LOG, message="late")
    assert sink.path.read_text(encoding="utf-8") == ""


def test_log_event_returns_published_event():
    bus = EventBus()
    seen = []
    bus.subscribe(seen.append)

    evt = log_event(
        bus=bus,
        module="nav_core",
        event_type=EventType.NOT_IMPLEMENTED,
        message="evade: not_implemented",
    )

    assert seen == [evt]
    assert evt.payload == {}


def test_json_file_logger_event_type_filter_and_context_manager(tmp_path: Path):
    bus = EventBus()
    log_path = tmp_path / "drops.jsonl"

    with JsonFileLogger(log_path, bus, event_types=[EventType.NAV_DROPPED]) as sink:
        log_event(bus=bus, module="nav_core", event_type=EventType.NAV_DISPATCHED, message="ok")
        log_event(bus=bus, module="nav_core", event_type=EventType.NAV_DROPPED, message="lost")
        assert sink.written == 1

    assert bus.subscriber_count() == 0
    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["lost"]
    sink.close()  # already closed: no error


def test_logging_event_sink_levels(caplog: pytest.LogCaptureFixture):
    bus = EventBus()
    sink = LoggingEventSink()
    sink.attach(bus)

    with caplog.at_level(logging.INFO, logger="monitoring.events"):
        log_event(bus=bus, module="nav_core", event_type=EventType.NAV_DISPATCHED, message="sent")
        log_event(bus=bus, module="nav_core", event_type=EventType.PERMISSION_DENIED, message="denied")
    sink.detach(bus)

    records = [r for r in caplog.records if r.name == "monitoring.events"]
    assert len(records) == 2
    assert "sent" in records[0].getMessage()
    assert records[0].levelno == logging.INFO
    assert "denied" in records[1].getMessage()
    assert records[1].levelno == logging.WARNING
    assert bus.subscriber_count() == 0


def test_event_to_dict_prefers_explicit_views():
    rec = NavTraceRecord(
        timestamp=1.0,
        operation="navigate_to",
        outcome=NavOutcome.DROPPED,
        reason="subsystem_unavailable",
        entity_id="e-1",
        waypoint_count=1,
        flags=4,
    )

    assert event_to_dict(rec)["outcome"] == "dropped"
    assert event_to_dict(object())["repr"].startswith("<object")

    class Plain:
        def __init__(self) -> None:
            self.kind = EventType.LOG
            self._hidden = 1

    assert event_to_dict(Plain()) == {"kind": "LOG"}
