# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

# src/ holds flat top-level packages (`nav_core`, `monitoring`, `env`, `spec`, `app`);
# put it first on sys.path so tests run without an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

import pytest  # noqa: E402

from env import loader  # noqa: E402


@pytest.fixture(autouse=True)
def _no_config_path_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """A developer's NAV_CONFIG_PATH must not leak into tests."""
    monkeypatch.delenv(loader.CONFIG_PATH_ENV, raising=False)
