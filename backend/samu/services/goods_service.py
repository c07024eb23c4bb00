"""Goods Service — merch catalog, Printful product sync, shipping quotes and orders.

Invariants:
    - Offline mode (no Printful client): simple goods only, flat shipping, orders stay pending
    - Goods always have at least one mockup URL (the design image as fallback)
    - An order's size/colour must exist in the variant map
    - A Printful order failure never fails the purchase; it is recorded as printful_error
    - A paid order (sol_amount + tx signature) holds its profit in escrow in the same commit

Design Decisions:
    - Mockups are best-effort during product creation but mandatory for the explicit
      generate-mockup action (no result -> 504)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samu.config import Settings
from samu.core.domain_types import GoodsStatus, OrderStatus, sol_to_lamports
from samu.core.errors import (
    ConflictError, ErrorContext, ExternalServiceError, InvalidRequestError,
    ResourceNotFoundError,
)
from samu.core.printful_catalog import (
    MOCKUP_POSITION, TSHIRT_PRODUCT_ID, build_sync_variants, default_variant,
    group_variants, mockup_variant_ids, offline_variants, resolve_variant,
)
from samu.infrastructure.printful_client import PrintfulClient
from samu.models.escrow import Escrow
from samu.models.goods import Goods
from samu.models.order import Order
from samu.schemas.goods import GoodsCreate, OrderCreate, ShippingEstimateRequest
from samu.services.escrow_service import EscrowService

logger = logging.getLogger(__name__)


def _require_printful(printful: PrintfulClient | None) -> PrintfulClient:
    if printful is None:
        raise ExternalServiceError("printful", "API key not configured", http_status=503)
    return printful


class GoodsService:
    def __init__(
        self, db: AsyncSession, settings: Settings, printful: PrintfulClient | None,
    ):
        self.db = db
        self.settings = settings
        self.printful = printful

    # ─── Catalog ────────────────────────────────────────────────

    async def list_active(self) -> list[Goods]:
        result = await self.db.execute(
            select(Goods)
            .where(Goods.status == GoodsStatus.ACTIVE.value)
            .order_by(Goods.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get(self, goods_id: int) -> Goods:
        goods = await self.db.get(Goods, goods_id)
        if not goods:
            raise ResourceNotFoundError("Goods", goods_id)
        return goods

    async def orders_of(self, wallet: str) -> list[Order]:
        result = await self.db.execute(
            select(Order)
            .where(Order.buyer_wallet == wallet)
            .order_by(Order.created_at.desc()),
        )
        return list(result.scalars().all())

    async def variants(self) -> dict:
        if self.printful is None:
            return offline_variants()
        product = await self.printful.get_product(TSHIRT_PRODUCT_ID)
        return group_variants(product)

    def _base_price(self, retail_price: float) -> float:
        return round(retail_price * self.settings.base_price_ratio, 2)

    async def _save(self, goods: Goods) -> Goods:
        self.db.add(goods)
        await self.db.commit()
        await self.db.refresh(goods)
        logger.info(f"Goods created: {goods.title}", extra={"goods_id": goods.id})
        return goods

    async def create_simple(self, body: GoodsCreate) -> Goods:
        return await self._save(Goods(
            title=body.title,
            description=body.description,
            image_url=body.image_url,
            mockup_urls=[body.image_url],
            contest_id=body.contest_id,
            meme_id=body.meme_id,
            category=body.category,
            product_type=body.product_type,
            base_price=self._base_price(body.retail_price),
            retail_price=body.retail_price,
            sizes=body.sizes,
            colors=body.colors,
            status=GoodsStatus.ACTIVE.value,
        ))

    async def create_with_printful(self, body: GoodsCreate) -> tuple[Goods, dict]:
        printful = _require_printful(self.printful)
        sync_variants = build_sync_variants(
            body.colors, body.sizes, body.retail_price, body.image_url,
        )
        if not sync_variants:
            raise InvalidRequestError(
                "No valid variant combinations found for the selected sizes and colors",
            )

        result = await printful.create_sync_product({
            "sync_product": {"name": body.title, "thumbnail": body.image_url},
            "sync_variants": sync_variants,
        })
        sync_product = result.get("sync_product") or {}
        created_variants = result.get("sync_variants") or []

        mockup_urls = [body.image_url]
        try:
            generated = await printful.generate_mockups(
                TSHIRT_PRODUCT_ID,
                {
                    "variant_ids": [sync_variants[0]["variant_id"]],
                    "format": "jpg",
                    "files": [{"placement": "front", "image_url": body.image_url}],
                },
                attempts=self.settings.printful_mockup_poll_attempts,
                interval_seconds=self.settings.printful_mockup_poll_interval_seconds,
            )
            mockup_urls = generated or mockup_urls
        except ExternalServiceError as e:
            logger.warning(f"Mockup generation failed, using design image: {e.message}")

        goods = await self._save(Goods(
            printful_product_id=sync_product.get("id"),
            printful_variant_id=created_variants[0].get("id") if created_variants else None,
            contest_id=body.contest_id,
            meme_id=body.meme_id,
            title=body.title,
            description=body.description,
            image_url=body.image_url,
            mockup_urls=mockup_urls,
            category="clothing",
            product_type="t-shirt",
            base_price=self._base_price(body.retail_price),
            retail_price=body.retail_price,
            sizes=body.sizes,
            colors=body.colors,
            status=GoodsStatus.ACTIVE.value,
        ))
        return goods, sync_product

    async def generate_mockup(self, goods_id: int) -> Goods:
        goods = await self.get(goods_id)
        printful = _require_printful(self.printful)
        urls = await printful.generate_mockups(
            TSHIRT_PRODUCT_ID,
            {
                "variant_ids": mockup_variant_ids(goods.colors, goods.sizes),
                "format": "jpg",
                "files": [{
                    "placement": "front",
                    "image_url": goods.image_url,
                    "position": MOCKUP_POSITION,
                }],
            },
            attempts=self.settings.printful_mockup_poll_attempts,
            interval_seconds=self.settings.printful_mockup_poll_interval_seconds,
        )
        if not urls:
            raise ExternalServiceError(
                "printful", "mockup generation timed out or produced no results",
                http_status=504,
            )
        goods.mockup_urls = urls
        await self.db.commit()
        await self.db.refresh(goods)
        return goods

    # ─── Shipping & orders ──────────────────────────────────────

    async def estimate_shipping(
        self, goods_id: int, body: ShippingEstimateRequest,
    ) -> list:
        goods = await self.get(goods_id)
        if self.printful is None:
            return [{
                "id": "STANDARD",
                "name": "Flat Rate (Standard)",
                "rate": self.settings.default_shipping_rate,
                "currency": "USD",
                "min_delivery_days": 5,
                "max_delivery_days": 10,
            }]
        if not (body.address1 and body.city and body.country_code and body.zip):
            raise InvalidRequestError("address1, city, country_code, and zip are required")

        recipient = {
            "address1": body.address1,
            "city": body.city,
            "country_code": body.country_code,
            "zip": body.zip,
        }
        if body.state_code:
            recipient["state_code"] = body.state_code
        return await self.printful.estimate_shipping({
            "recipient": recipient,
            "items": [{
                "variant_id": default_variant(goods.colors, goods.sizes),
                "quantity": 1,
            }],
        })

    async def _submit_to_printful(
        self, goods: Goods, body: OrderCreate,
    ) -> tuple[int | None, str | None]:
        recipient = {
            "name": body.shipping_name,
            "address1": body.shipping_address1,
            "city": body.shipping_city,
            "country_code": body.shipping_country,
            "zip": body.shipping_zip,
            "email": body.buyer_email,
        }
        for key, value in (
            ("address2", body.shipping_address2),
            ("state_code", body.shipping_state),
            ("phone", body.shipping_phone),
        ):
            if value:
                recipient[key] = value
        try:
            result = await self.printful.create_order({
                "recipient": recipient,
                "items": [{
                    "sync_variant_id": goods.printful_variant_id,
                    "quantity": 1,
                    "retail_price": f"{goods.retail_price:.2f}",
                    "files": [{"url": goods.image_url}],
                }],
            })
        except ExternalServiceError as e:
            logger.error(
                f"Printful order creation failed: {e.message}",
                extra={"goods_id": goods.id, "wallet": body.buyer_wallet},
            )
            return None, "printful_error"
        return result.get("id"), result.get("status")

    async def place_order(
        self, goods_id: int, body: OrderCreate,
    ) -> tuple[Order, Escrow | None]:
        goods = await self.get(goods_id)
        ctx = ErrorContext(wallet=body.buyer_wallet)
        if resolve_variant(body.color, body.size) is None:
            raise InvalidRequestError(
                f"Invalid size/color combination: {body.size}/{body.color}", ctx,
            )
        if body.payment_tx_signature:
            existing = await self.db.execute(
                select(Order.id).where(
                    Order.payment_tx_signature == body.payment_tx_signature,
                ),
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError("Payment transaction already used for an order", ctx)

        printful_order_id, printful_status = None, None
        if self.printful is not None and goods.printful_product_id:
            printful_order_id, printful_status = await self._submit_to_printful(goods, body)

        order = Order(
            goods_id=goods.id,
            buyer_wallet=body.buyer_wallet,
            buyer_email=body.buyer_email,
            printful_order_id=printful_order_id,
            size=body.size,
            color=body.color,
            quantity=1,
            total_price=goods.retail_price,
            sol_amount_lamports=(
                sol_to_lamports(body.sol_amount) if body.sol_amount is not None else None
            ),
            payment_tx_signature=body.payment_tx_signature,
            shipping_name=body.shipping_name,
            shipping_address1=body.shipping_address1,
            shipping_address2=body.shipping_address2,
            shipping_city=body.shipping_city,
            shipping_state=body.shipping_state,
            shipping_country=body.shipping_country,
            shipping_zip=body.shipping_zip,
            shipping_phone=body.shipping_phone,
            shipping_lat=body.shipping_lat,
            shipping_lng=body.shipping_lng,
            status=(
                OrderStatus.CONFIRMED.value if printful_order_id
                else OrderStatus.PENDING.value
            ),
            printful_status=printful_status,
        )
        escrow = None
        try:
            self.db.add(order)
            await self.db.flush()
            if order.sol_amount_lamports:
                escrow = await EscrowService(self.db).hold(order, goods)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Payment transaction already used for an order", ctx)

        await self.db.refresh(order)
        logger.info(
            f"Order placed ({order.status})",
            extra={"order_id": order.id, "goods_id": goods.id, "wallet": body.buyer_wallet},
        )
        return order, escrow
