# src/nav_core/tracing.py
"""
Tracing and counters for the navigation command layer.

Every scripted navigation call ends in exactly one outcome: forwarded to
the bot subsystem, applied to the host entity, or absorbed (denied,
subsystem missing, bad input, not implemented). Scripts never see the
absorbed cases, so this module is where operators find them:

- a rolling buffer of NavTraceRecord entries
- per-(outcome, reason) counters
- one structured log line per record
- an optional MonitoringEvent per record on a monitoring EventBus

It does NOT:
- decide whether a call proceeds
- retry anything
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Tuple

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event


class NavOutcome(str, Enum):
    """Terminal state of one navigation call (or one dropped input element)."""

    DISPATCHED = "dispatched"            # command handed to the bot subsystem
    APPLIED = "applied"                  # gated mutation applied to the host entity
    DROPPED = "dropped"                  # command built but not delivered
    INPUT_DROPPED = "input_dropped"      # malformed element skipped
    DENIED = "denied"                    # permission gate said no
    NOT_IMPLEMENTED = "not_implemented"  # API function has no implementation


# Reasons used with DROPPED / INPUT_DROPPED / DENIED.
REASON_SUBSYSTEM_UNAVAILABLE = "subsystem_unavailable"
REASON_SUBSYSTEM_ERROR = "subsystem_error"
REASON_MALFORMED_INPUT = "malformed_input"
REASON_PERMISSION_DENIED = "permission_denied"
REASON_NOT_IMPLEMENTED = "not_implemented"
REASON_HOST_NOT_ELIGIBLE = "host_not_eligible"
REASON_INTERNAL_ERROR = "internal_error"


_EVENT_TYPES: Dict[NavOutcome, EventType] = {
    NavOutcome.DISPATCHED: EventType.NAV_DISPATCHED,
    NavOutcome.APPLIED: EventType.NAV_APPLIED,
    NavOutcome.DROPPED: EventType.NAV_DROPPED,
    NavOutcome.INPUT_DROPPED: EventType.INPUT_DROPPED,
    NavOutcome.DENIED: EventType.PERMISSION_DENIED,
    NavOutcome.NOT_IMPLEMENTED: EventType.NOT_IMPLEMENTED,
}

_LOG_LEVELS: Dict[NavOutcome, int] = {
    NavOutcome.DISPATCHED: logging.INFO,
    NavOutcome.APPLIED: logging.INFO,
    NavOutcome.DROPPED: logging.WARNING,
    NavOutcome.INPUT_DROPPED: logging.INFO,
    NavOutcome.DENIED: logging.WARNING,
    NavOutcome.NOT_IMPLEMENTED: logging.WARNING,
}


@dataclass
class NavTraceRecord:
    """
    Structured record of one navigation outcome.

    Fields are JSON-friendly (ids are strings) so records can be dumped
    straight into monitoring payloads.
    """

    timestamp: float                 # wall-clock time (time.time())
    operation: str                   # "patrol_points", "navigate_to", ...
    outcome: NavOutcome
    reason: Optional[str]

    entity_id: Optional[str]
    waypoint_count: int
    flags: Optional[int]
    details: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "entity_id": self.entity_id,
            "waypoint_count": self.waypoint_count,
            "flags": self.flags,
            "details": dict(self.details),
        }


class NavigationTracer:
    """
    In-memory navigation tracer with logging and optional event publishing.

    Safe to share between scripts running on different threads.
    """

    def __init__(
        self,
        *,
        logger: Optional[logging.Logger] = None,
        bus: Optional[EventBus] = None,
        max_records: int = 1000,
    ) -> None:
        self._logger = logger or logging.getLogger("nav_core.trace")
        self._bus = bus
        self._records: Deque[NavTraceRecord] = deque(maxlen=max_records)
        self._counts: Counter[Tuple[NavOutcome, Optional[str]]] = Counter()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def record(
        self,
        operation: str,
        outcome: NavOutcome,
        *,
        reason: Optional[str] = None,
        entity_id: Any = None,
        waypoint_count: int = 0,
        flags: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[NavTraceRecord]:
        """
        Record one outcome. Never raises into the caller.

        Returns the stored record, or None if building it failed.
        """
        try:
            rec = NavTraceRecord(
                timestamp=time.time(),
                operation=operation,
                outcome=NavOutcome(outcome),
                reason=reason,
                entity_id=str(entity_id) if entity_id is not None else None,
                waypoint_count=int(waypoint_count),
                flags=flags,
                details=dict(details or {}),
            )
        except Exception:
            # Tracing must never crash the caller.
            self._logger.exception("Failed to build NavTraceRecord for %s", operation)
            return None

        with self._lock:
            self._records.append(rec)
            self._counts[(rec.outcome, rec.reason)] += 1

        self._logger.log(
            _LOG_LEVELS.get(rec.outcome, logging.INFO),
            "nav op=%s outcome=%s reason=%s entity=%s waypoints=%d flags=%s",
            rec.operation,
            rec.outcome.value,
            rec.reason,
            rec.entity_id,
            rec.waypoint_count,
            rec.flags,
        )

        if self._bus is not None:
            try:
                log_event(
                    bus=self._bus,
                    module="nav_core",
                    event_type=_EVENT_TYPES.get(rec.outcome, EventType.LOG),
                    message=f"{rec.operation}: {rec.outcome.value}",
                    payload=rec.to_payload(),
                    correlation_id=rec.entity_id,
                )
            except Exception:
                self._logger.exception("Publishing nav trace event failed")

        return rec

    def get_records(self) -> List[NavTraceRecord]:
        """Snapshot of the buffered records, oldest first."""
        with self._lock:
            return list(self._records)

    def count(self, outcome: NavOutcome, reason: Optional[str] = None) -> int:
        """
        Number of records with `outcome`.

        With `reason`, only records carrying that reason are counted.
        """
        with self._lock:
            if reason is not None:
                return self._counts[(outcome, reason)]
            return sum(n for (o, _), n in self._counts.items() if o == outcome)

    def counts(self) -> Dict[str, int]:
        """Flat {"outcome[:reason]": n} view, handy for dashboards."""
        with self._lock:
            items = list(self._counts.items())
        out: Dict[str, int] = {}
        for (outcome, reason), n in items:
            key = outcome.value if reason is None else f"{outcome.value}:{reason}"
            out[key] = n
        return out

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._counts.clear()
