"""Shared fixtures: registry and settings isolation."""

import pytest

from simple_error.config import reset_settings
from simple_error.registry import get_registry


@pytest.fixture
def registry():
    """Empty descriptor registry, restored after the test."""
    reg = get_registry()
    saved = dict(reg._descriptors)
    reg.clear()
    yield reg
    reg.clear()
    reg._descriptors.update(saved)


@pytest.fixture
def clean_settings(monkeypatch):
    """Settings rebuilt from a clean environment, reset after the test."""
    for name in ("EAGER_COMPILE", "VALIDATE_VALUES", "LOG_LEVEL"):
        monkeypatch.delenv(f"SIMPLE_ERROR_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()
