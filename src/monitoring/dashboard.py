# rich-based navigation dashboard
# src/monitoring/dashboard.py
"""
Terminal dashboard for navigation monitoring.

A lightweight view (using `rich`) that subscribes to the monitoring
EventBus and renders:

- Outcome counters:
    - per event type and reason (dispatched, dropped, denied, ...)

- Recent drops:
    - operation, reason, entity, details
    - the calls a script author would report as "my script does nothing"

This runs entirely offline. No web server, no external services.
"""

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from typing import Any, Deque, Dict, List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from .bus import EventBus
from .events import MonitoringEvent


class NavDashboard:
    """
    Dashboard bound to a monitoring.EventBus.

    It consumes MonitoringEvents and keeps a small in-memory summary,
    which is rendered on demand (`render`, `print`) or live (`run`).
    """

    def __init__(
        self,
        bus: EventBus,
        *,
        max_recent: int = 20,
        console: Optional[Console] = None,
    ) -> None:
        self._bus = bus
        self._console = console or Console()
        self._lock = threading.Lock()

        self._counts: Counter[str] = Counter()
        self._recent_drops: Deque[Dict[str, Any]] = deque(maxlen=max_recent)
        self._last_event_ts: Optional[float] = None

        self._bus.subscribe(self._on_event)

    # --------------------------------------------------------
    # Event handler
    # --------------------------------------------------------

    def _on_event(self, event: MonitoringEvent) -> None:
        """Update counters; cheap and non-blocking."""
        payload = event.payload or {}
        reason = payload.get("reason")
        key = event.event_type.name if not reason else f"{event.event_type.name}:{reason}"

        with self._lock:
            self._counts[key] += 1
            self._last_event_ts = event.ts
            if event.is_drop:
                self._recent_drops.append(
                    {
                        "ts": event.ts,
                        "operation": payload.get("operation", "?"),
                        "event_type": event.event_type.name,
                        "reason": reason or "-",
                        "entity_id": payload.get("entity_id") or event.correlation_id or "-",
                        "details": payload.get("details") or {},
                    }
                )

    # --------------------------------------------------------
    # Snapshot accessors
    # --------------------------------------------------------

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def recent_drops(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._recent_drops)

    def detach(self) -> None:
        """Stop receiving events."""
        self._bus.unsubscribe(self._on_event)

    # --------------------------------------------------------
    # Rendering helpers
    # --------------------------------------------------------

    def _render_counts_table(self) -> Table:
        table = Table(title="Navigation outcomes", show_header=True, header_style="bold cyan")
        table.add_column("Outcome", style="bold")
        table.add_column("Count", justify="right")

        counts = self.counts()
        if counts:
            for key in sorted(counts):
                table.add_row(key, str(counts[key]))
        else:
            table.add_row("<none>", "-")
        return table

    def _render_drops_table(self) -> Table:
        table = Table(title="Recent drops", show_header=True, header_style="bold red")
        table.add_column("Time")
        table.add_column("Operation", style="bold")
        table.add_column("Kind")
        table.add_column("Reason")
        table.add_column("Entity")
        table.add_column("Details")

        drops = self.recent_drops()
        if not drops:
            table.add_row("-", "<none>", "-", "-", "-", "-")
            return table

        for drop in reversed(drops):
            details = drop["details"]
            detail_str = ", ".join(f"{k}={v}" for k, v in list(details.items())[:4])
            table.add_row(
                time.strftime("%H:%M:%S", time.localtime(drop["ts"])),
                str(drop["operation"]),
                drop["event_type"],
                str(drop["reason"]),
                str(drop["entity_id"]),
                detail_str or "-",
            )
        return table

    def render(self) -> Panel:
        """Build the full dashboard renderable."""
        with self._lock:
            last_ts = self._last_event_ts
        subtitle = (
            "no events yet"
            if last_ts is None
            else "last event " + time.strftime("%H:%M:%S", time.localtime(last_ts))
        )
        return Panel(
            Group(self._render_counts_table(), self._render_drops_table()),
            title="Script Navigation",
            subtitle=subtitle,
            border_style="cyan",
        )

    def print(self) -> None:
        """Render once to the console."""
        self._console.print(self.render())

    # --------------------------------------------------------
    # Main loop
    # --------------------------------------------------------

    def run(self, refresh_per_second: float = 4.0, duration: Optional[float] = None) -> None:
        """
        Re-render live until `duration` seconds pass (forever if None).

        This blocks the current thread. Use a separate thread if needed.
        """
        refresh_delay = 1.0 / max(refresh_per_second, 0.1)
        deadline = None if duration is None else time.monotonic() + duration
        with Live(self.render(), console=self._console, refresh_per_second=refresh_per_second) as live:
            while deadline is None or time.monotonic() < deadline:
                live.update(self.render())
                time.sleep(refresh_delay)
