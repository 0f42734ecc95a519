"""Tests for export entitlement checks."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from tripsheet.config import get_settings
from tripsheet.services.billing import (
    BillingError,
    Entitlement,
    check_subscription,
    get_entitlement,
)


@pytest.fixture
def billing_url(monkeypatch):
    monkeypatch.setenv("BILLING_API_URL", "https://billing.example.com/api/")
    monkeypatch.setenv("BILLING_API_KEY", "secret")
    get_settings.cache_clear()


def test_free_exports_run_out():
    assert Entitlement(is_subscribed=False, exports_used=2).can_export
    exhausted = Entitlement(is_subscribed=False, exports_used=3)
    assert not exhausted.can_export
    assert exhausted.exports_remaining == 0


def test_subscribers_are_unlimited():
    entitlement = Entitlement(is_subscribed=True, exports_used=50)
    assert entitlement.can_export
    assert entitlement.exports_remaining is None


def test_no_customer_or_service_means_not_subscribed():
    assert check_subscription(None) is False
    assert check_subscription("cus_123") is False


@patch("tripsheet.services.billing.httpx.get")
def test_active_subscription(mock_get, billing_url):
    response = MagicMock()
    response.json.return_value = {"isActive": True}
    mock_get.return_value = response

    assert check_subscription("cus_123") is True
    args, kwargs = mock_get.call_args
    assert args[0] == "https://billing.example.com/api/check-subscription"
    assert kwargs["params"] == {"customer_id": "cus_123"}
    assert kwargs["headers"]["Authorization"] == "Bearer secret"


@patch("tripsheet.services.billing.httpx.get", side_effect=httpx.ConnectError("refused"))
def test_unreachable_billing_raises(_mock_get, billing_url):
    with pytest.raises(BillingError):
        check_subscription("cus_123")


def test_entitlement_uses_configured_limit(monkeypatch):
    monkeypatch.setenv("TRIPSHEET_FREE_EXPORTS", "5")
    get_settings.cache_clear()

    entitlement = get_entitlement(None, exports_used=4)

    assert entitlement.can_export
    assert entitlement.exports_remaining == 1
