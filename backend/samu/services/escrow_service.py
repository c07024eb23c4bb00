"""Escrow Service — hold a paid order's profit, then release or refund it.

Invariants:
    - hold() joins the order-creation transaction (flush only)
    - release() writes the distribution, deposits the voter pool part and marks the escrow
      released in ONE commit; any pending changes on the session (webhook order fields)
      are committed with it
    - Creator = author of the goods' meme; no meme (or deleted meme) -> creator part to platform
    - Voter pool part goes to the contest pool; no contest or no votes -> platform
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.domain_types import EscrowStatus, Lamports
from samu.core.errors import (
    BusinessRuleError, ConflictError, ErrorContext, ResourceNotFoundError,
)
from samu.core.escrow import check_can_settle, profit_lamports
from samu.core.revenue_split import split_goods_profit
from samu.models.escrow import Escrow
from samu.models.goods import Goods
from samu.models.goods_revenue import GoodsRevenueDistribution
from samu.models.meme import Meme
from samu.models.order import Order
from samu.services.reward_service import RewardService

logger = logging.getLogger(__name__)


class EscrowService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def for_order(self, order_id: int) -> Escrow | None:
        result = await self.db.execute(select(Escrow).where(Escrow.order_id == order_id))
        return result.scalar_one_or_none()

    async def hold(self, order: Order, goods: Goods) -> Escrow:
        amount = profit_lamports(
            Lamports(order.sol_amount_lamports or 0), goods.retail_price, goods.base_price,
        )
        escrow = Escrow(
            order_id=order.id, amount_lamports=amount, status=EscrowStatus.HELD.value,
        )
        self.db.add(escrow)
        await self.db.flush()
        logger.info(
            f"Escrow held: {amount} lamports",
            extra={"order_id": order.id, "goods_id": goods.id},
        )
        return escrow

    async def _settleable(self, order_id: int) -> Escrow:
        ctx = ErrorContext(order_id=order_id)
        escrow = await self.for_order(order_id)
        if not escrow:
            raise ResourceNotFoundError("Escrow for order", order_id, ctx)
        error = check_can_settle(escrow.status)
        if error:
            raise BusinessRuleError(error, "ESCROW_SETTLED", ctx)
        return escrow

    async def release(
        self, order_id: int, *, platform_wallet: str,
    ) -> GoodsRevenueDistribution:
        escrow = await self._settleable(order_id)
        order = await self.db.get(Order, order_id)
        goods = await self.db.get(Goods, order.goods_id) if order else None
        if goods is None:
            raise ResourceNotFoundError("Goods for order", order_id)

        meme = await self.db.get(Meme, goods.meme_id) if goods.meme_id else None
        creator_wallet = meme.author_wallet if meme else None
        contest_id = goods.contest_id or (meme.contest_id if meme else None)

        rewards = RewardService(self.db)
        pool = await rewards.ensure_pool(contest_id) if contest_id is not None else None

        split = split_goods_profit(
            Lamports(escrow.amount_lamports),
            has_creator=creator_wallet is not None,
            has_voter_pool=pool is not None,
        )
        if pool is not None and split.voter_pool > 0:
            await rewards.deposit(pool, split.voter_pool)

        distribution = GoodsRevenueDistribution(
            order_id=order_id,
            goods_id=goods.id,
            contest_id=contest_id,
            creator_wallet=creator_wallet,
            platform_wallet=platform_wallet,
            total_lamports=split.total,
            creator_lamports=split.creator,
            voter_pool_lamports=split.voter_pool,
            platform_lamports=split.platform,
        )
        self.db.add(distribution)
        escrow.status = EscrowStatus.RELEASED.value
        escrow.settled_at = datetime.now(timezone.utc)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                "Escrow already released", ErrorContext(order_id=order_id),
            )
        await self.db.refresh(distribution)
        logger.info(
            f"Escrow released: creator {split.creator}, voters {split.voter_pool}, "
            f"platform {split.platform}",
            extra={"order_id": order_id, "contest_id": contest_id},
        )
        return distribution

    async def refund(self, order_id: int) -> Escrow:
        escrow = await self._settleable(order_id)
        escrow.status = EscrowStatus.REFUNDED.value
        escrow.settled_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(escrow)
        logger.info("Escrow refunded", extra={"order_id": order_id})
        return escrow
