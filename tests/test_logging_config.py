# path: tests/test_logging_config.py

from __future__ import annotations

import logging

import pytest

from monitoring.logging_config import LOG_FORMAT, configure_logging


def test_configure_logging_installs_single_stdout_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    original_level = root.level
    monkeypatch.setattr(root, "handlers", [])

    try:
        configure_logging("debug")
        configure_logging(logging.ERROR)  # already configured: no-op

        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert root.handlers[0].formatter._fmt == LOG_FORMAT  # type: ignore[union-attr]
    finally:
        root.setLevel(original_level)


def test_configure_logging_leaves_existing_setup_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    original_level = root.level
    existing = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [existing])

    try:
        root.setLevel(logging.WARNING)
        configure_logging(logging.DEBUG)

        assert root.handlers == [existing]
        assert root.level == logging.WARNING
    finally:
        root.setLevel(original_level)
