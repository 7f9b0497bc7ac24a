# JSONL sink for navigation monitoring events
"""
Structured event logging for navigation monitoring.

- JsonFileLogger: bus subscriber appending one JSON object per event.
- log_event: build a MonitoringEvent and publish it.

    bus = EventBus()
    with JsonFileLogger(Path("logs/nav/events.jsonl"), bus, event_types=DROP_EVENT_TYPES):
        ...  # scripts run; absorbed failures land in the file
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .bus import EventBus
from .events import EventType, MonitoringEvent

log = logging.getLogger(__name__)


class JsonFileLogger:
    """
    Append MonitoringEvents to `path` as JSON lines (UTF-8).

    The parent directory is created on construction. Write failures are
    logged and swallowed so a full disk never reaches a script.
    """

    def __init__(
        self,
        path: Path,
        bus: EventBus,
        *,
        event_types: Optional[Iterable[EventType]] = None,
    ) -> None:
        self._path = Path(path)
        self._bus = bus
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._written = 0
        bus.subscribe(self._on_event, event_types)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def written(self) -> int:
        """Events successfully written so far."""
        return self._written

    def _on_event(self, event: MonitoringEvent) -> None:
        # UUIDs and similar payload values are stringified.
        line = json.dumps(event.to_dict(), ensure_ascii=False, default=str)
        try:
            self._fh.write(line + "\n")
            self._fh.flush()
        except (OSError, ValueError):
            log.warning("JsonFileLogger could not append to %s", self._path, exc_info=True)
            return
        self._written += 1

    def close(self) -> None:
        """Stop listening and close the file; safe to call twice."""
        self._bus.unsubscribe(self._on_event)
        if self._fh.closed:
            return
        try:
            self._fh.close()
        except OSError:
            log.warning("JsonFileLogger could not close %s", self._path, exc_info=True)

    def __enter__(self) -> "JsonFileLogger":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def log_event(
    bus: EventBus,
    module: str,
    event_type: EventType,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> MonitoringEvent:
    """
    Publish a new MonitoringEvent stamped with the current time.

    `correlation_id` groups events for one entity (NavigationTracer uses
    the target entity id). Returns the event for callers that keep it.
    """
    event = MonitoringEvent(
        ts=time.time(),
        module=module,
        event_type=event_type,
        message=message,
        payload=dict(payload or {}),
        correlation_id=correlation_id,
    )
    bus.publish(event)
    return event
