# src/nav_core/__init__.py
"""
nav_core package.

Exports:
    - ScriptNavigationApi: per-script navigation functions
    - NavigationDispatcher: forwards NavigationCommands to the bot subsystem
    - NavigationTracer / NavOutcome: where absorbed failures are reported
    - ThreatLevelGate: config-driven PermissionGate
    - ServiceRegistry: call-time lookup of optional subsystems
    - NavError / InvalidOptionsError: domain errors for strict callers
"""

from __future__ import annotations

from .api import ScriptNavigationApi
from .dispatcher import NavigationDispatcher
from .errors import InvalidOptionsError, NavError
from .permissions import ThreatLevelGate
from .registry import ServiceRegistry
from .tracing import NavOutcome, NavigationTracer, NavTraceRecord

__all__ = [
    "ScriptNavigationApi",
    "NavigationDispatcher",
    "NavigationTracer",
    "NavOutcome",
    "NavTraceRecord",
    "ThreatLevelGate",
    "ServiceRegistry",
    "NavError",
    "InvalidOptionsError",
]
