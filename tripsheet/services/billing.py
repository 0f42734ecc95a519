"""Export entitlement checks against the billing service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import get_settings


logger = logging.getLogger(__name__)


class BillingError(RuntimeError):
    """Raised when the billing service cannot be reached."""


@dataclass
class Entitlement:
    is_subscribed: bool
    exports_used: int = 0
    free_export_limit: int = 3

    @property
    def exports_remaining(self) -> Optional[int]:
        """None means unlimited."""
        if self.is_subscribed:
            return None
        return max(0, self.free_export_limit - self.exports_used)

    @property
    def can_export(self) -> bool:
        return self.is_subscribed or self.exports_used < self.free_export_limit


def check_subscription(customer_id: Optional[str]) -> bool:
    """Ask the billing service whether the customer has an active plan."""

    settings = get_settings()
    if not customer_id or not settings.billing_api_url:
        return False

    headers = {}
    if settings.billing_api_key:
        headers["Authorization"] = f"Bearer {settings.billing_api_key}"
    url = settings.billing_api_url.rstrip("/") + "/check-subscription"
    try:
        response = httpx.get(
            url, params={"customer_id": customer_id}, headers=headers, timeout=10.0
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise BillingError(f"Subscription check failed: {exc}") from exc

    payload = response.json()
    return bool(payload.get("isActive")) if isinstance(payload, dict) else False


def get_entitlement(customer_id: Optional[str], exports_used: int = 0) -> Entitlement:
    settings = get_settings()
    entitlement = Entitlement(
        is_subscribed=check_subscription(customer_id),
        exports_used=max(0, exports_used),
        free_export_limit=settings.free_export_limit,
    )
    logger.info(
        "Entitlement for %s: subscribed=%s remaining=%s",
        customer_id or "anonymous",
        entitlement.is_subscribed,
        entitlement.exports_remaining,
    )
    return entitlement
