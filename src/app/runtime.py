# src/app/runtime.py

from __future__ import annotations  # allow forward type hints

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from env.loader import load_navigation_config     # navigation.yaml -> dataclasses
from env.schema import NavigationConfig
from monitoring.bus import EventBus
from monitoring.logger import JsonFileLogger
from nav_core.api import ScriptNavigationApi
from nav_core.dispatcher import NavigationDispatcher
from nav_core.permissions import ThreatLevelGate
from nav_core.registry import ServiceRegistry
from nav_core.tracing import NavigationTracer
from spec.nav import BotMovementService, PermissionGate, SceneEntity
from spec.types import EntityId

log = logging.getLogger(__name__)


@dataclass
class NavigationRuntime:
    """Everything one region needs to serve scripted navigation calls.

    Owns the shared pieces (tracer, bus, dispatcher, gate); hands out a
    ScriptNavigationApi per script via `api_for`.
    """

    config: NavigationConfig                  # resolved navigation.yaml
    registry: ServiceRegistry                 # where the bot subsystem registers itself
    bus: EventBus                             # monitoring events
    tracer: NavigationTracer                  # outcome records + counters
    dispatcher: NavigationDispatcher          # set_bot_map forwarding
    gate: PermissionGate                      # threat-level checks
    event_logger: Optional[JsonFileLogger] = None   # JSONL sink when configured
    _closed: bool = field(default=False, repr=False)

    def register_bot_service(self, service: BotMovementService) -> None:
        # Region module came up; calls from now on reach it.
        self.registry.register(BotMovementService, service)  # type: ignore[type-abstract]

    def unregister_bot_service(self) -> None:
        # Region module went away; calls become traced drops again.
        self.registry.unregister(BotMovementService)  # type: ignore[type-abstract]

    def api_for(self, host: SceneEntity, item_id: Optional[EntityId] = None) -> ScriptNavigationApi:
        """Bind a scripting API to one script's host entity and item."""
        return ScriptNavigationApi(
            host,
            item_id,
            dispatcher=self.dispatcher,
            gate=self.gate,
            settings=self.config.navigation,
        )

    def close(self) -> None:
        if self._closed:
            return
        if self.event_logger is not None:
            self.event_logger.close()
        self._closed = True


def create_navigation_runtime(
    config: Optional[NavigationConfig] = None,
    *,
    config_path: Optional[Path | str] = None,
    bot_service: Optional[BotMovementService] = None,
    gate: Optional[PermissionGate] = None,
    bus: Optional[EventBus] = None,
) -> NavigationRuntime:
    """Wire config + monitoring + dispatcher + gate into a NavigationRuntime.

    `config` wins over `config_path`; with neither, the usual
    NAV_CONFIG_PATH / config/navigation.yaml lookup applies.
    """
    cfg = config if config is not None else load_navigation_config(config_path)

    bus = bus or EventBus()
    event_logger: Optional[JsonFileLogger] = None
    if cfg.monitoring.event_log:
        event_logger = JsonFileLogger(Path(cfg.monitoring.event_log), bus)

    tracer = NavigationTracer(bus=bus, max_records=cfg.monitoring.trace_buffer)
    registry = ServiceRegistry()
    if bot_service is not None:
        registry.register(BotMovementService, bot_service)  # type: ignore[type-abstract]

    dispatcher = NavigationDispatcher(registry=registry, tracer=tracer)
    gate = gate or ThreatLevelGate.from_config(cfg.permissions)

    log.info(
        "Navigation runtime ready (config=%s, max_threat_level=%s, event_log=%s)",
        cfg.source,
        cfg.permissions.max_threat_level.name,
        cfg.monitoring.event_log,
    )

    return NavigationRuntime(
        config=cfg,
        registry=registry,
        bus=bus,
        tracer=tracer,
        dispatcher=dispatcher,
        gate=gate,
        event_logger=event_logger,
    )
