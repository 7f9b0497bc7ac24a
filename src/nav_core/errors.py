# src/nav_core/errors.py
"""
Domain errors for the navigation command layer.

The scripting surface (nav_core.api) absorbs every failure and reports it
through NavigationTracer instead of raising. These types exist for the
lower-level helpers that integrators may call directly with stricter
requirements (e.g. decode_option_flags(..., required=True)).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class NavError(RuntimeError):
    """
    Base domain error.

    `code` is a stable machine-readable string; `details` carries context.
    """

    code: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, details={self.details!r})"


@dataclass
class InvalidOptionsError(NavError, ValueError):
    """An options list lacked a value the integrating subsystem requires."""
