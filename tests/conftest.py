"""Shared fixtures."""

from __future__ import annotations

import pytest

from tripsheet.config import get_settings


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.delenv("BILLING_API_URL", raising=False)
    monkeypatch.delenv("BILLING_API_KEY", raising=False)
    monkeypatch.delenv("TRIPSHEET_FREE_EXPORTS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
