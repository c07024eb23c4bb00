"""Fulfillment Service — applies Printful webhook events to orders and settles escrow.

Invariants:
    - Unknown orders and unknown event types are acknowledged without changes
    - Order field updates and the escrow release/refund commit together
    - Redelivered events (escrow already settled) update the order and skip settlement
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.domain_types import EscrowStatus
from samu.core.fulfillment_events import (
    EscrowAction, extract_printful_order_id, map_event,
)
from samu.models.order import Order
from samu.services.escrow_service import EscrowService

logger = logging.getLogger(__name__)


class FulfillmentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def handle_event(
        self, event_type: str, data: dict, *, platform_wallet: str,
    ) -> dict:
        printful_order_id = extract_printful_order_id(data)
        if printful_order_id is None:
            logger.info("Webhook without order id, skipping", extra={"event_type": event_type})
            return {"ok": True}

        order = (await self.db.execute(
            select(Order).where(Order.printful_order_id == printful_order_id),
        )).scalar_one_or_none()
        if not order:
            logger.info(
                f"No order for Printful id {printful_order_id}",
                extra={"event_type": event_type},
            )
            return {"ok": True}

        update = map_event(
            event_type, data,
            current_tracking_number=order.tracking_number,
            current_tracking_url=order.tracking_url,
        )
        if not update.handled:
            logger.info(
                f"Unhandled webhook event: {event_type}",
                extra={"event_type": event_type, "order_id": order.id},
            )
            return {"ok": True}

        for key, value in update.fields.items():
            setattr(order, key, value)

        escrows = EscrowService(self.db)
        escrow = await escrows.for_order(order.id)
        settle = (
            escrow is not None
            and escrow.status == EscrowStatus.HELD.value
            and update.escrow_action != EscrowAction.NONE
        )
        if settle and update.escrow_action == EscrowAction.RELEASE:
            await escrows.release(order.id, platform_wallet=platform_wallet)
        elif settle and update.escrow_action == EscrowAction.REFUND:
            await escrows.refund(order.id)
        else:
            await self.db.commit()

        logger.info(
            f"Order updated from {event_type}: {update.fields}",
            extra={"event_type": event_type, "order_id": order.id},
        )
        return {"ok": True, "order_id": order.id, "escrow_action": (
            update.escrow_action.value if settle else EscrowAction.NONE.value
        )}
