# src/nav_core/testing/__init__.py
"""In-memory collaborators for exercising nav_core without a live scene."""

from __future__ import annotations

from .fakes import (
    AllowAllGate,
    DenyAllGate,
    FakeBotMovementService,
    FakeSceneEntity,
    SetBotMapCall,
)

__all__ = [
    "AllowAllGate",
    "DenyAllGate",
    "FakeBotMovementService",
    "FakeSceneEntity",
    "SetBotMapCall",
]
