# path: src/monitoring/events.py
"""
Event schemas for navigation monitoring.

This module defines:
- EventType: one member per traced navigation outcome, plus LOG
- DROP_EVENT_TYPES: the outcomes a script sees as "nothing happened"
- MonitoringEvent: what travels over monitoring.bus.EventBus
- LoggingEventSink: bus subscriber that forwards to stdlib logging
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Optional

from spec.monitoring import EventSink, event_to_dict

if TYPE_CHECKING:
    from .bus import EventBus

logger = logging.getLogger(__name__)


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by the navigation layer."""

    # A command reached the bot-movement subsystem
    NAV_DISPATCHED = auto()

    # A gated call changed the host entity (move, stop, volume detect)
    NAV_APPLIED = auto()

    # A command was built but never reached the subsystem
    # (subsystem absent, or it raised)
    NAV_DROPPED = auto()

    # A caller-supplied element was not a usable position / flag value
    INPUT_DROPPED = auto()

    # Permission gate denied a state-mutating call
    PERMISSION_DENIED = auto()

    # Script called an API function with no implementation
    NOT_IMPLEMENTED = auto()

    # Free-form messages
    LOG = auto()


DROP_EVENT_TYPES = frozenset(
    {
        EventType.NAV_DROPPED,
        EventType.INPUT_DROPPED,
        EventType.PERMISSION_DENIED,
        EventType.NOT_IMPLEMENTED,
    }
)


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Runtime event emitted by the navigation layer.

    Payload values should be JSON-safe; JsonFileLogger stringifies the rest.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module ("nav_core", ...)
    event_type: EventType
    message: str                # "navigate_to: dropped"
    payload: Dict[str, Any]     # NavTraceRecord.to_payload() for traced outcomes
    correlation_id: Optional[str] = None  # target entity id

    @property
    def is_drop(self) -> bool:
        return self.event_type in DROP_EVENT_TYPES

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["event_type"] = self.event_type.name
        return data


class LoggingEventSink(EventSink):
    """
    Forward events to the "monitoring.events" logger.

    Drops log at WARNING, everything else at INFO, so a default log level
    of WARNING shows only the calls that did nothing.
    """

    def emit(self, event: Any) -> None:
        level = logging.WARNING if getattr(event, "is_drop", False) else logging.INFO
        logger.log(level, "NavEvent: %s", event_to_dict(event))

    def attach(self, bus: "EventBus") -> None:
        bus.subscribe(self.emit)

    def detach(self, bus: "EventBus") -> None:
        bus.unsubscribe(self.emit)
