"""Webhook Routes — Printful fulfillment events.

Invariants:
    - The signature is checked over the raw body bytes, before JSON parsing
    - Payloads without `type` and an object `data` are rejected with 400
"""

import json
import logging

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_platform_wallet
from samu.config import Settings, get_settings
from samu.core.errors import InvalidRequestError, WebhookSignatureError
from samu.core.fulfillment_events import verify_signature
from samu.infrastructure.database import get_db
from samu.services.fulfillment_service import FulfillmentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post("/printful")
async def printful_webhook(
    request: Request,
    x_printful_signature: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    platform_wallet: str = Depends(get_platform_wallet),
):
    body = await request.body()
    if not verify_signature(settings.printful_webhook_secret, body, x_printful_signature):
        logger.warning("Printful webhook rejected: invalid signature")
        raise WebhookSignatureError()

    try:
        payload = json.loads(body or b"{}")
    except json.JSONDecodeError:
        raise InvalidRequestError("Webhook body is not valid JSON")
    if not isinstance(payload, dict):
        raise InvalidRequestError("Invalid webhook payload")
    event_type, data = payload.get("type"), payload.get("data")
    if not event_type or not isinstance(data, dict):
        raise InvalidRequestError("Invalid webhook payload")

    logger.info(f"Printful webhook received: {event_type}", extra={"event_type": event_type})
    return await FulfillmentService(db).handle_event(
        event_type, data, platform_wallet=platform_wallet,
    )
