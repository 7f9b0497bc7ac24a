# src/app/__init__.py
"""
Application wiring for script navigation.

Exposes:
- NavigationRuntime: shared tracer/bus/dispatcher/gate for one region
- create_navigation_runtime: builds one from navigation.yaml
"""

from __future__ import annotations

from .runtime import NavigationRuntime, create_navigation_runtime

__all__ = [
    "NavigationRuntime",
    "create_navigation_runtime",
]
