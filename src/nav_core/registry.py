# src/nav_core/registry.py
"""
Minimal service registry.

Region modules register the capabilities they provide under an interface
key (usually a Protocol class); consumers look them up at call time and
must cope with "not registered". Lookups take a lock only long enough to
read the mapping, so many scripts can resolve services concurrently.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, Optional, Type, TypeVar, cast

log = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceRegistry:
    """Interface key -> provider instance."""

    def __init__(self) -> None:
        self._services: Dict[Any, Any] = {}
        self._lock = Lock()

    def register(self, interface: Type[T], provider: T) -> None:
        """Register (or replace) the provider for `interface`."""
        with self._lock:
            previous = self._services.get(interface)
            self._services[interface] = provider
        if previous is not None and previous is not provider:
            log.info(
                "ServiceRegistry replaced provider for %s: %r -> %r",
                getattr(interface, "__name__", interface),
                previous,
                provider,
            )

    def unregister(self, interface: Type[T]) -> None:
        """Remove the provider for `interface`; safe if none is registered."""
        with self._lock:
            self._services.pop(interface, None)

    def lookup(self, interface: Type[T]) -> Optional[T]:
        """Provider for `interface`, or None if nothing is registered."""
        with self._lock:
            return cast(Optional[T], self._services.get(interface))

    def __contains__(self, interface: object) -> bool:
        with self._lock:
            return interface in self._services
