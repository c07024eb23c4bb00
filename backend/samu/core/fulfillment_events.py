"""Fulfillment Events — Printful webhook verification and event -> order update mapping.

Invariants:
    - Signature = hex(HMAC-SHA256(secret, raw_body)), compared in constant time
    - Unknown event types produce no update (FulfillmentUpdate.handled is False)
    - Tracking info from package_in_transit never overwrites existing values
    - Delivered releases escrow; failed and canceled refund it

Design Decisions:
    - Mapping is a pure function over (event, payload, current tracking): the webhook
      route only loads the order, applies the returned fields, and triggers escrow
"""

import hashlib
import hmac
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from samu.core.domain_types import OrderStatus


class EscrowAction(str, Enum):
    NONE = "none"
    RELEASE = "release"
    REFUND = "refund"


@dataclass
class FulfillmentUpdate:
    handled: bool
    fields: dict[str, Any] = field(default_factory=dict)
    escrow_action: EscrowAction = EscrowAction.NONE


def sign_payload(secret: str, body: bytes) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """No secret configured means verification is disabled."""
    if not secret:
        return True
    if not signature:
        return False
    return hmac.compare_digest(
        signature.encode("latin-1", "replace"), sign_payload(secret, body).encode(),
    )


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def extract_printful_order_id(data: dict) -> int | None:
    order_id = _section(data, "order").get("id") or _section(data, "shipment").get("order_id")
    if order_id is None:
        return None
    try:
        return int(order_id)
    except (TypeError, ValueError):
        return None


def map_event(
    event_type: str,
    data: dict,
    *,
    current_tracking_number: str | None = None,
    current_tracking_url: str | None = None,
) -> FulfillmentUpdate:
    """Translate one Printful webhook event into order field updates."""
    shipment = _section(data, "shipment")
    order = _section(data, "order")

    if event_type == "package_shipped":
        fields: dict[str, Any] = {"printful_status": "shipped"}
        if shipment.get("tracking_number"):
            fields["tracking_number"] = shipment["tracking_number"]
        if shipment.get("tracking_url"):
            fields["tracking_url"] = shipment["tracking_url"]
        return FulfillmentUpdate(True, fields)

    if event_type == "package_in_transit":
        fields = {"printful_status": "in_transit"}
        if shipment.get("tracking_number") and not current_tracking_number:
            fields["tracking_number"] = shipment["tracking_number"]
        if shipment.get("tracking_url") and not current_tracking_url:
            fields["tracking_url"] = shipment["tracking_url"]
        return FulfillmentUpdate(True, fields)

    if event_type == "package_delivered":
        return FulfillmentUpdate(
            True,
            {"printful_status": "delivered", "status": OrderStatus.DELIVERED.value},
            EscrowAction.RELEASE,
        )

    if event_type == "order_failed":
        return FulfillmentUpdate(
            True,
            {"printful_status": "failed", "status": OrderStatus.FAILED.value},
            EscrowAction.REFUND,
        )

    if event_type == "order_canceled":
        return FulfillmentUpdate(
            True,
            {"printful_status": "canceled", "status": OrderStatus.CANCELED.value},
            EscrowAction.REFUND,
        )

    if event_type == "order_created":
        return FulfillmentUpdate(True, {"printful_status": "pending"})

    if event_type == "order_updated":
        fields = {}
        if order.get("status"):
            fields["printful_status"] = order["status"]
        return FulfillmentUpdate(True, fields)

    return FulfillmentUpdate(False)
