# EventBus for navigation monitoring events
"""
In-process pub/sub for navigation MonitoringEvents.

Publishers:
    - NavigationTracer (one event per traced outcome)
Subscribers:
    - NavDashboard (counters, recent drops)
    - JsonFileLogger (JSONL file)
    - LoggingEventSink (stdlib logging)

A subscriber may ask for a subset of EventTypes; by default it gets all.
Delivery is synchronous on the publishing thread, in subscription order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Callable, FrozenSet, Iterable, List, Optional

from .events import EventType, MonitoringEvent

log = logging.getLogger(__name__)

SubscriberFn = Callable[[MonitoringEvent], None]


@dataclass(frozen=True)
class _Subscription:
    fn: SubscriberFn
    event_types: Optional[FrozenSet[EventType]]   # None = every type

    def wants(self, event: MonitoringEvent) -> bool:
        return self.event_types is None or event.event_type in self.event_types


class EventBus:
    """
    Thread-safe bus; the subscription list is guarded by a Lock and
    publish() works from a snapshot, so subscribers may (un)subscribe
    from inside a callback.
    """

    def __init__(self) -> None:
        self._subs: List[_Subscription] = []
        self._lock = Lock()

    def subscribe(
        self,
        fn: SubscriberFn,
        event_types: Optional[Iterable[EventType]] = None,
    ) -> None:
        """
        Deliver future events to `fn`, optionally only those of `event_types`.

        A raising subscriber is logged and skipped; the rest still run.
        """
        types = frozenset(event_types) if event_types is not None else None
        with self._lock:
            self._subs.append(_Subscription(fn, types))

    def unsubscribe(self, fn: SubscriberFn) -> None:
        """Drop every subscription of `fn`; unknown callbacks are ignored."""
        with self._lock:
            self._subs = [s for s in self._subs if s.fn != fn]

    def publish(self, event: MonitoringEvent) -> None:
        with self._lock:
            targets = [s.fn for s in self._subs if s.wants(event)]

        for fn in targets:
            try:
                fn(event)
            except Exception:
                log.exception(
                    "EventBus subscriber %r failed on %s", fn, event.event_type.name
                )

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def clear(self) -> None:
        """Forget all subscribers (tests, shutdown)."""
        with self._lock:
            self._subs.clear()
