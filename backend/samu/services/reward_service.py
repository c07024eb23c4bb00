"""Reward Service — contest voter pools, voter claims, and the goods revenue dashboards.

Invariants:
    - A pool is created on its first deposit, weighted by the contest's votes so far
      (snapshot_vote_id marks the last vote counted)
    - deposit() never commits: it joins the caller's escrow-release transaction
    - A claim checkpoint only advances via compare-and-set on last_reward_per_share,
      so two concurrent claims cannot both pay the same accrual
    - Wallets without votes in the pool's snapshot cannot claim

Design Decisions:
    - Claims are bookkeeping only: paying out the recorded amount is an operator task
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.domain_types import Lamports, OrderStatus, ShareRole, lamports_to_sol
from samu.core.errors import (
    BusinessRuleError, ConflictError, ErrorContext, NothingToClaimError,
)
from samu.core.revenue_split import GOODS_PROFIT_BPS, BPS_DENOMINATOR, share_ratios
from samu.core.reward_pool import accrue, pending_reward, settle_claim
from samu.models.goods import Goods
from samu.models.goods_revenue import GoodsRevenueDistribution
from samu.models.order import Order
from samu.models.reward_pool import VoterClaim, VoterRewardPool
from samu.models.vote import Vote
from samu.services.vote_service import VoteService

logger = logging.getLogger(__name__)

_PAID_STATUSES = (OrderStatus.CONFIRMED.value, OrderStatus.DELIVERED.value)


class RewardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Pool ───────────────────────────────────────────────────

    async def get_pool(self, contest_id: int) -> VoterRewardPool | None:
        result = await self.db.execute(
            select(VoterRewardPool).where(VoterRewardPool.contest_id == contest_id),
        )
        return result.scalar_one_or_none()

    async def ensure_pool(self, contest_id: int) -> VoterRewardPool | None:
        """Existing pool, or a new one over the contest's current votes. None if nobody voted."""
        pool = await self.get_pool(contest_id)
        if pool:
            return pool
        row = (await self.db.execute(
            select(
                func.coalesce(func.sum(Vote.samu_amount), 0),
                func.coalesce(func.max(Vote.id), 0),
            ).where(Vote.contest_id == contest_id),
        )).one()
        total_weight, last_vote_id = int(row[0]), int(row[1])
        if total_weight <= 0:
            return None
        pool = VoterRewardPool(
            contest_id=contest_id,
            total_weight=total_weight,
            snapshot_vote_id=last_vote_id,
            reward_per_share=0,
            total_deposited_lamports=0,
            total_claimed_lamports=0,
        )
        self.db.add(pool)
        await self.db.flush()
        logger.info(
            f"Voter reward pool created (weight {total_weight})",
            extra={"contest_id": contest_id},
        )
        return pool

    async def deposit(self, pool: VoterRewardPool, amount: Lamports) -> None:
        pool.reward_per_share = accrue(pool.reward_per_share, amount, pool.total_weight)
        pool.total_deposited_lamports += amount
        await self.db.flush()

    async def voter_weight(self, pool: VoterRewardPool, wallet: str) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Vote.samu_amount), 0)).where(
                Vote.contest_id == pool.contest_id,
                Vote.voter_wallet == wallet,
                Vote.id <= pool.snapshot_vote_id,
            ),
        )
        return int(result.scalar_one())

    async def _claim_row(self, contest_id: int, wallet: str) -> VoterClaim | None:
        result = await self.db.execute(
            select(VoterClaim).where(
                VoterClaim.contest_id == contest_id,
                VoterClaim.wallet_address == wallet,
            ),
        )
        return result.scalar_one_or_none()

    # ─── Claims ─────────────────────────────────────────────────

    async def claimable(self, contest_id: int, wallet: str) -> dict:
        pool = await self.get_pool(contest_id)
        claim = await self._claim_row(contest_id, wallet)
        weight = await self.voter_weight(pool, wallet) if pool else 0
        pending = pending_reward(
            weight,
            pool.reward_per_share if pool else 0,
            claim.last_reward_per_share if claim else 0,
        )
        return {
            "contest_id": contest_id,
            "wallet_address": wallet,
            "weight": weight,
            "pending_lamports": pending,
            "pending_sol": lamports_to_sol(pending),
            "total_claimed_lamports": claim.total_claimed_lamports if claim else 0,
        }

    async def claim(self, contest_id: int, wallet: str) -> dict:
        ctx = ErrorContext(contest_id=contest_id, wallet=wallet)
        pool = await self.get_pool(contest_id)
        if not pool:
            raise NothingToClaimError(contest_id, wallet)
        weight = await self.voter_weight(pool, wallet)
        if weight <= 0:
            raise BusinessRuleError(
                "Wallet did not vote in this contest", "NOT_A_VOTER", ctx,
            )

        claim = await self._claim_row(contest_id, wallet)
        last = claim.last_reward_per_share if claim else 0
        result = settle_claim(weight, pool.reward_per_share, last)
        if result.amount <= 0:
            raise NothingToClaimError(contest_id, wallet)

        try:
            if claim is None:
                claim = VoterClaim(
                    contest_id=contest_id,
                    wallet_address=wallet,
                    weight=weight,
                    last_reward_per_share=result.new_last_reward_per_share,
                    total_claimed_lamports=result.amount,
                )
                self.db.add(claim)
                await self.db.flush()
            else:
                updated = await self.db.execute(
                    update(VoterClaim)
                    .where(
                        VoterClaim.id == claim.id,
                        VoterClaim.last_reward_per_share == last,
                    )
                    .values(
                        weight=weight,
                        last_reward_per_share=result.new_last_reward_per_share,
                        total_claimed_lamports=(
                            VoterClaim.total_claimed_lamports + result.amount
                        ),
                    )
                    .execution_options(synchronize_session=False),
                )
                if updated.rowcount == 0:
                    raise ConflictError("Claim already processed", ctx)
            await self.db.execute(
                update(VoterRewardPool)
                .where(VoterRewardPool.id == pool.id)
                .values(
                    total_claimed_lamports=(
                        VoterRewardPool.total_claimed_lamports + result.amount
                    ),
                )
                .execution_options(synchronize_session=False),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Claim already processed", ctx)

        await self.db.refresh(claim)
        logger.info(
            f"Voter claim recorded: {result.amount} lamports",
            extra={"contest_id": contest_id, "wallet": wallet},
        )
        return {
            "contest_id": contest_id,
            "wallet_address": wallet,
            "claimed_lamports": result.amount,
            "claimed_sol": lamports_to_sol(result.amount),
            "total_claimed_lamports": claim.total_claimed_lamports,
        }

    async def claims_of(self, wallet: str) -> list[dict]:
        claims = (await self.db.execute(
            select(VoterClaim)
            .where(VoterClaim.wallet_address == wallet)
            .order_by(VoterClaim.updated_at.desc()),
        )).scalars().all()
        out = []
        for claim in claims:
            pool = await self.get_pool(claim.contest_id)
            pending = pending_reward(
                claim.weight,
                pool.reward_per_share if pool else 0,
                claim.last_reward_per_share,
            )
            out.append({
                "contest_id": claim.contest_id,
                "wallet_address": claim.wallet_address,
                "weight": claim.weight,
                "total_claimed_lamports": claim.total_claimed_lamports,
                "pending_lamports": pending,
                "updated_at": claim.updated_at,
            })
        return out

    async def pool_view(self, contest_id: int) -> dict:
        pool = await self.get_pool(contest_id)
        if not pool:
            return {"pool": None, "voters": []}
        summary = await VoteService(self.db).contest_vote_summary(contest_id)
        total = sum(amount for _, amount in summary)
        return {
            "pool": pool,
            "voters": [
                {
                    "wallet": wallet,
                    "samu_amount": amount,
                    "share_percent": amount * 100 / total if total else 0.0,
                }
                for wallet, amount in summary
            ],
        }

    # ─── Dashboards ─────────────────────────────────────────────

    async def _distributions(self) -> list[GoodsRevenueDistribution]:
        result = await self.db.execute(
            select(GoodsRevenueDistribution)
            .order_by(GoodsRevenueDistribution.created_at.desc(),
                      GoodsRevenueDistribution.id.desc()),
        )
        return list(result.scalars().all())

    async def dashboard(self, platform_wallet: str) -> dict:
        distributions = await self._distributions()
        sales = (await self.db.execute(
            select(
                func.count(Order.id),
                func.coalesce(func.sum(Order.sol_amount_lamports), 0),
            ).where(
                Order.status.in_(_PAID_STATUSES),
                Order.sol_amount_lamports.is_not(None),
            ),
        )).one()

        creator_total = sum(d.creator_lamports for d in distributions)
        voter_total = sum(d.voter_pool_lamports for d in distributions)
        platform_total = sum(d.platform_lamports for d in distributions)
        creator_wallets = sorted({d.creator_wallet for d in distributions if d.creator_wallet})

        def percent(role: ShareRole) -> float:
            return GOODS_PROFIT_BPS[role] * 100 / BPS_DENOMINATOR

        return {
            "summary": {
                "total_sales_lamports": int(sales[1]),
                "total_orders": int(sales[0]),
                "total_distributed_lamports": sum(d.total_lamports for d in distributions),
            },
            "share_breakdown": {
                "creator": {
                    "percent": percent(ShareRole.CREATOR),
                    "total_lamports": creator_total,
                    "wallets": creator_wallets,
                },
                "voter": {
                    "percent": percent(ShareRole.VOTER),
                    "total_lamports": voter_total,
                },
                "platform": {
                    "percent": percent(ShareRole.PLATFORM),
                    "total_lamports": platform_total,
                    "wallet": platform_wallet,
                },
            },
            "recent_distributions": distributions[:20],
            "share_ratios": share_ratios(GOODS_PROFIT_BPS),
        }

    async def order_map(self, wallet: str | None = None) -> dict:
        orders = (await self.db.execute(
            select(Order).order_by(Order.created_at.desc()),
        )).scalars().all()
        goods_by_id = {
            g.id: g for g in (await self.db.execute(select(Goods))).scalars().all()
        }
        dist_by_order = {d.order_id: d for d in await self._distributions()}

        voted_contests: set[int] = set()
        if wallet:
            voted_contests = {
                cid for cid in (await self.db.execute(
                    select(Vote.contest_id)
                    .where(Vote.voter_wallet == wallet, Vote.contest_id.is_not(None))
                    .distinct(),
                )).scalars().all()
            }

        entries = []
        for order in orders:
            if not order.shipping_country:
                continue
            dist = dist_by_order.get(order.id)
            goods = goods_by_id.get(order.goods_id)
            has_revenue = bool(wallet and dist and (
                dist.creator_wallet == wallet
                or (dist.voter_pool_lamports > 0 and dist.contest_id in voted_contests)
            ))
            entries.append({
                "id": order.id,
                "city": order.shipping_city,
                "country": order.shipping_country,
                "lat": order.shipping_lat,
                "lng": order.shipping_lng,
                "status": order.printful_status or order.status,
                "tracking_number": order.tracking_number,
                "tracking_url": order.tracking_url,
                "sol_amount_lamports": order.sol_amount_lamports,
                "total_price": order.total_price,
                "goods_title": goods.title if goods else "SAMU Goods",
                "goods_image": goods.image_url if goods else None,
                "product_type": goods.product_type if goods else None,
                "created_at": order.created_at,
                "has_revenue": has_revenue,
                "distribution": {
                    "creator_lamports": dist.creator_lamports,
                    "voter_pool_lamports": dist.voter_pool_lamports,
                    "platform_lamports": dist.platform_lamports,
                } if dist else None,
            })

        return {
            "orders": entries,
            "stats": {
                "total": len(entries),
                "shipped": sum(1 for e in entries if e["status"] in ("shipped", "in_transit")),
                "delivered": sum(1 for e in entries if e["status"] == "delivered"),
                "countries": len({e["country"] for e in entries}),
            },
        }
