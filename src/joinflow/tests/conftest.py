"""Shared fixtures for joinflow tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from joinflow.foundation.config import clear_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from JOINFLOW_* variables and cached settings."""
    for key in [k for k in os.environ if k.startswith("JOINFLOW_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()
