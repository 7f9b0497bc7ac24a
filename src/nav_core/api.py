# src/nav_core/api.py
"""
Script-facing navigation API.

One ScriptNavigationApi is bound to one running script: the scene entity
the script lives in (`host`) and the script's inventory item id. Its
methods are the navigation functions scripts call.

Design constraints:
- Best effort, never throw: permission denials, a missing bot subsystem
  and malformed input all end as "did nothing" from the script's point
  of view. Each case is recorded on the NavigationTracer.
- Gated calls check the permission gate before touching anything.
- Geometry queries are not gated and dispatch nothing.
- No state is kept between calls.

The one deliberate exception is the not-implemented family (evade,
flee_from, wander_within), which raises NotImplementedError when
`throw_error_on_not_implemented` is set.
"""

from __future__ import annotations

import functools
import logging
import math
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from env.schema import NavigationSettings
from spec.nav import PermissionGate, SceneEntity, ThreatLevel
from spec.types import EntityId, NavigationCommand, Vector3

from .closest_point import resolve_closest_nav_point
from .dispatcher import NavigationDispatcher
from .options import coerce_script_int, decode_option_flags
from .tracing import (
    NavOutcome,
    NavigationTracer,
    REASON_HOST_NOT_ELIGIBLE,
    REASON_INTERNAL_ERROR,
    REASON_MALFORMED_INPUT,
    REASON_NOT_IMPLEMENTED,
    REASON_PERMISSION_DENIED,
)
from .waypoints import (
    TravelModePolicy,
    build_waypoints,
    coerce_position,
    constant_mode,
    normalize_waypoints,
)

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

API_NAME = "script_nav"


def _best_effort(default: Callable[["ScriptNavigationApi"], Any] = lambda self: None) -> Callable[[F], F]:
    """
    Absorb unexpected exceptions from a scripting call.

    The failure is logged with traceback, traced as an internal error, and
    the script gets `default(self)` back instead of a fault.
    """

    def deco(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(self: "ScriptNavigationApi", *args: Any, **kwargs: Any) -> Any:
            try:
                return fn(self, *args, **kwargs)
            except Exception as exc:
                log.exception("ScriptNavigationApi.%s raised unexpectedly", fn.__name__)
                self._tracer.record(
                    fn.__name__,
                    NavOutcome.DROPPED,
                    reason=REASON_INTERNAL_ERROR,
                    entity_id=self._safe_root_id(),
                    details={"exception": repr(exc)},
                )
                return default(self)

        return wrapper  # type: ignore[return-value]

    return deco


class ScriptNavigationApi:
    """
    Navigation functions for one script instance.

    Public surface:
        patrol_points(points, options) -> None
        navigate_to(point, options) -> None
        get_closest_nav_point(point, options) -> list[Vector3]   (always 1 item)
        move_to_target(target, tau) -> None                       (gated)
        stop_move_to_target() -> None                             (gated)
        volume_detect(detect) -> None                             (gated)
        stop_point_at() -> None
        evade / flee_from / wander_within                         (not implemented)
    """

    def __init__(
        self,
        host: SceneEntity,
        item_id: Optional[EntityId],
        *,
        dispatcher: NavigationDispatcher,
        gate: PermissionGate,
        settings: Optional[NavigationSettings] = None,
        travel_mode_policy: Optional[TravelModePolicy] = None,
    ) -> None:
        self._host = host
        self._item_id = item_id
        self._dispatcher = dispatcher
        self._gate = gate
        self._settings = settings or NavigationSettings()
        self._policy: TravelModePolicy = travel_mode_policy or constant_mode(
            self._settings.default_travel_mode
        )
        self._tracer: NavigationTracer = dispatcher.tracer

    @property
    def tracer(self) -> NavigationTracer:
        return self._tracer

    # ------------------------------------------------------------------
    # Waypoint navigation
    # ------------------------------------------------------------------

    @_best_effort()
    def patrol_points(self, points: Sequence[Any], options: Optional[Sequence[Any]] = None) -> None:
        """
        Ask the bot subsystem to patrol `points` in order.

        Non-position entries are skipped. Flags are always the configured
        patrol flags; `options` is accepted for call-shape compatibility.
        """
        root = self._host.root
        positions = normalize_waypoints(
            points, on_drop=self._input_drop_hook("patrol_points", root.entity_id)
        )
        command = NavigationCommand(
            target_entity_id=root.entity_id,
            waypoints=tuple(build_waypoints(positions, self._policy)),
            flags=self._settings.patrol_flags,
            issuer_id=root.owner_id,
        )
        self._dispatcher.dispatch(command, operation="patrol_points")

    @_best_effort()
    def navigate_to(self, point: Any, options: Optional[Sequence[Any]] = None) -> None:
        """
        Ask the bot subsystem to go to a single point.

        Flags come from options[0] (default 0). A point that is not a
        position drops the whole request.
        """
        root = self._host.root
        positions = normalize_waypoints(
            [point], on_drop=self._input_drop_hook("navigate_to", root.entity_id)
        )
        if not positions:
            return

        flags = decode_option_flags(
            options,
            on_invalid=lambda value: self._record_input_drop(
                "navigate_to", root.entity_id, {"field": "options[0]", "value": repr(value)}
            ),
        )
        command = NavigationCommand(
            target_entity_id=root.entity_id,
            waypoints=tuple(build_waypoints(positions, self._policy)),
            flags=flags,
            issuer_id=root.owner_id,
        )
        self._dispatcher.dispatch(command, operation="navigate_to")

    @_best_effort(default=lambda self: [self._fallback_nav_point()])
    def get_closest_nav_point(
        self, point: Any, options: Optional[Sequence[Any]] = None
    ) -> List[Vector3]:
        """
        Cheap "snap near target" hint; always a one-element list.

        Not gated and dispatches nothing. A target that is not a position
        is treated like a degenerate rotation.
        """
        root = self._host.root
        caller = root.absolute_position
        target = coerce_position(point)
        if target is None:
            self._record_input_drop(
                "get_closest_nav_point", root.entity_id, {"field": "point", "value": repr(point)}
            )
            target = caller
        return resolve_closest_nav_point(
            target, caller, offset=self._settings.closest_point_offset
        )

    # ------------------------------------------------------------------
    # Gated direct movement
    # ------------------------------------------------------------------

    @_best_effort()
    def move_to_target(self, target: Any, tau: float) -> None:
        """Direct-force movement toward `target` over `tau` seconds (gated)."""
        if not self._check_gate("move_to_target", ThreatLevel.NONE):
            return

        pos = coerce_position(target)
        tau_value = self._coerce_tau(tau)
        if pos is None or tau_value is None:
            self._record_input_drop(
                "move_to_target",
                self._host.entity_id,
                {"target": repr(target), "tau": repr(tau)},
            )
            return

        self._host.move_to_target(pos, tau_value)
        self._tracer.record(
            "move_to_target",
            NavOutcome.APPLIED,
            entity_id=self._host.entity_id,
            waypoint_count=1,
            details={"tau": tau_value},
        )

    @_best_effort()
    def stop_move_to_target(self) -> None:
        """Cancel direct-force movement (gated)."""
        if not self._check_gate("stop_move_to_target", ThreatLevel.NONE):
            return

        self._host.stop_move_to_target()
        self._tracer.record(
            "stop_move_to_target",
            NavOutcome.APPLIED,
            entity_id=self._host.entity_id,
        )

    @_best_effort()
    def volume_detect(self, detect: Any) -> None:
        """Toggle volume detection on the root entity (gated)."""
        if not self._check_gate("volume_detect", ThreatLevel.NONE):
            return

        root = self._host.root
        if root.is_deleted or root.is_attachment:
            self._tracer.record(
                "volume_detect",
                NavOutcome.DROPPED,
                reason=REASON_HOST_NOT_ELIGIBLE,
                entity_id=root.entity_id,
                details={"is_deleted": root.is_deleted, "is_attachment": root.is_attachment},
            )
            return

        value = coerce_script_int(detect)
        if value is None:
            self._record_input_drop("volume_detect", root.entity_id, {"detect": repr(detect)})
            return

        enabled = value != 0
        root.set_volume_detect(enabled)
        self._tracer.record(
            "volume_detect",
            NavOutcome.APPLIED,
            entity_id=root.entity_id,
            details={"enabled": enabled},
        )

    def stop_point_at(self) -> None:
        """Accepted for compatibility; has no effect."""
        return None

    # ------------------------------------------------------------------
    # Not implemented upstream
    # ------------------------------------------------------------------

    def evade(self, target: Any, options: Optional[Sequence[Any]] = None) -> None:
        self._not_implemented("evade")

    def flee_from(
        self, source: Any, distance: float, options: Optional[Sequence[Any]] = None
    ) -> None:
        self._not_implemented("flee_from")

    def wander_within(
        self, origin: Any, distance: float, options: Optional[Sequence[Any]] = None
    ) -> None:
        self._not_implemented("wander_within")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_gate(self, function_name: str, level: ThreatLevel) -> bool:
        allowed = self._gate.check_threat_level(
            level, function_name, self._host, API_NAME, self._item_id
        )
        if not allowed:
            self._tracer.record(
                function_name,
                NavOutcome.DENIED,
                reason=REASON_PERMISSION_DENIED,
                entity_id=self._host.entity_id,
                details={"level": level.name, "item_id": str(self._item_id)},
            )
        return bool(allowed)

    def _input_drop_hook(self, operation: str, entity_id: EntityId) -> Callable[[int, Any], None]:
        def _hook(index: int, element: Any) -> None:
            self._record_input_drop(operation, entity_id, {"index": index, "value": repr(element)})

        return _hook

    def _record_input_drop(self, operation: str, entity_id: Any, details: dict) -> None:
        self._tracer.record(
            operation,
            NavOutcome.INPUT_DROPPED,
            reason=REASON_MALFORMED_INPUT,
            entity_id=entity_id,
            details=details,
        )

    def _not_implemented(self, function_name: str) -> None:
        self._tracer.record(
            function_name,
            NavOutcome.NOT_IMPLEMENTED,
            reason=REASON_NOT_IMPLEMENTED,
            entity_id=self._safe_root_id(),
        )
        if self._settings.throw_error_on_not_implemented:
            raise NotImplementedError(f"Command not implemented: {function_name}")

    @staticmethod
    def _coerce_tau(tau: Any) -> Optional[float]:
        if isinstance(tau, bool):
            return None
        try:
            value = float(tau)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) else None

    def _safe_root_id(self) -> Optional[EntityId]:
        try:
            return self._host.root.entity_id
        except Exception:
            return None

    def _fallback_nav_point(self) -> Vector3:
        try:
            return self._host.root.absolute_position
        except Exception:
            return Vector3()
