# src/nav_core/dispatcher.py
"""
Navigation dispatcher.

Hands a NavigationCommand to the bot-movement subsystem, fire-and-forget.

Design constraints:
- The subsystem is an injected collaborator (directly, or through a
  ServiceRegistry looked up once per call); it may be absent.
- Absent subsystem: silent drop, reported to the tracer.
- Subsystem raising: absorbed, reported to the tracer.
- No retries, no handle to the outcome, no state kept between calls.
"""

from __future__ import annotations

import logging
from typing import Optional

from spec.nav import BotMovementService
from spec.types import NavigationCommand

from .registry import ServiceRegistry
from .tracing import (
    NavOutcome,
    NavigationTracer,
    REASON_SUBSYSTEM_ERROR,
    REASON_SUBSYSTEM_UNAVAILABLE,
)

log = logging.getLogger(__name__)


class NavigationDispatcher:
    """
    Forward NavigationCommands to a BotMovementService.

    Public contract:
      dispatch(command, operation=...) -> bool  (True if forwarded)
    """

    def __init__(
        self,
        bot_service: Optional[BotMovementService] = None,
        *,
        registry: Optional[ServiceRegistry] = None,
        tracer: Optional[NavigationTracer] = None,
    ) -> None:
        self._bot_service = bot_service
        self._registry = registry
        self._tracer = tracer or NavigationTracer()

    @property
    def tracer(self) -> NavigationTracer:
        return self._tracer

    def resolve(self) -> Optional[BotMovementService]:
        """The bot service for this call, or None if unavailable."""
        if self._bot_service is not None:
            return self._bot_service
        if self._registry is not None:
            # Protocol classes are used as registry keys.
            return self._registry.lookup(BotMovementService)  # type: ignore[type-abstract]
        return None

    def dispatch(self, command: NavigationCommand, *, operation: str = "dispatch") -> bool:
        """
        Forward `command` once. Never raises.

        An empty waypoint list is still forwarded; what an empty map means
        (typically "stop") is up to the subsystem.
        """
        service = self.resolve()
        if service is None:
            self._tracer.record(
                operation,
                NavOutcome.DROPPED,
                reason=REASON_SUBSYSTEM_UNAVAILABLE,
                entity_id=command.target_entity_id,
                waypoint_count=len(command.waypoints),
                flags=command.flags,
            )
            return False

        try:
            service.set_bot_map(
                command.target_entity_id,
                command.positions,
                command.modes,
                command.flags,
                command.issuer_id,
            )
        except Exception as exc:
            log.exception("NavigationDispatcher: bot service raised during %s", operation)
            self._tracer.record(
                operation,
                NavOutcome.DROPPED,
                reason=REASON_SUBSYSTEM_ERROR,
                entity_id=command.target_entity_id,
                waypoint_count=len(command.waypoints),
                flags=command.flags,
                details={"exception": repr(exc)},
            )
            return False

        self._tracer.record(
            operation,
            NavOutcome.DISPATCHED,
            entity_id=command.target_entity_id,
            waypoint_count=len(command.waypoints),
            flags=command.flags,
        )
        return True
