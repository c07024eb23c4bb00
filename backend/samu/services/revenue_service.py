"""Revenue Service — admin-recorded contest revenue and its per-wallet shares.

Invariants:
    - A revenue is distributed at most once (pending -> distributed)
    - Share amounts sum exactly to the revenue total (platform absorbs dust)
    - Creator = author of the archived winner, else of the top-voted contest meme
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.contest_lifecycle import pick_winner
from samu.core.domain_types import Lamports, RevenueStatus, sol_to_lamports
from samu.core.errors import BusinessRuleError, ErrorContext, ResourceNotFoundError
from samu.core.revenue_split import (
    CONTEST_REVENUE_BPS, NFT_HOLDER_UNASSIGNED, share_ratios, split_contest_revenue,
)
from samu.models.meme import Meme
from samu.models.revenue import Revenue, RevenueShare
from samu.schemas.revenue import RevenueCreate
from samu.services.contest_service import ContestService
from samu.services.vote_service import VoteService

logger = logging.getLogger(__name__)


def _vote_breakdown(summary: list[tuple[str, int]]) -> dict:
    total = sum(amount for _, amount in summary)
    return {
        "total_voters": len(summary),
        "total_samu_voted": total,
        "voter_breakdown": [
            {
                "wallet": wallet,
                "samu_voted": amount,
                "vote_percent": amount * 100 / total if total else 0.0,
            }
            for wallet, amount in summary
        ],
    }


class RevenueService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, body: RevenueCreate) -> Revenue:
        await ContestService(self.db).get(body.contest_id)
        revenue = Revenue(
            contest_id=body.contest_id,
            source=body.source,
            description=body.description,
            total_lamports=sol_to_lamports(body.total_amount_sol),
            status=RevenueStatus.PENDING.value,
        )
        self.db.add(revenue)
        await self.db.commit()
        await self.db.refresh(revenue)
        logger.info(
            f"Revenue recorded: {revenue.total_lamports} lamports from {revenue.source}",
            extra={"contest_id": revenue.contest_id},
        )
        return revenue

    async def _creator_wallet(self, contest_id: int) -> str | None:
        archive = await ContestService(self.db).archive_for_contest(contest_id)
        if archive and archive.winner_meme_id:
            winner = await self.db.get(Meme, archive.winner_meme_id)
            if winner:
                return winner.author_wallet
        memes = (await self.db.execute(
            select(Meme).where(Meme.contest_id == contest_id),
        )).scalars().all()
        top = pick_winner(list(memes))
        return top.author_wallet if top else None

    async def distribute(
        self, revenue_id: int, *, nft_holder_wallet: str | None, platform_wallet: str,
    ) -> tuple[Revenue, list[RevenueShare]]:
        revenue = await self.db.get(Revenue, revenue_id)
        if not revenue:
            raise ResourceNotFoundError("Revenue", revenue_id)
        ctx = ErrorContext(contest_id=revenue.contest_id)
        if revenue.status == RevenueStatus.DISTRIBUTED.value:
            raise BusinessRuleError("Revenue already distributed", "ALREADY_DISTRIBUTED", ctx)

        creator_wallet = await self._creator_wallet(revenue.contest_id)
        summary = await VoteService(self.db).contest_vote_summary(revenue.contest_id)
        lines = split_contest_revenue(
            Lamports(revenue.total_lamports),
            creator_wallet=creator_wallet,
            voter_weights=summary,
            nft_holder_wallet=nft_holder_wallet or NFT_HOLDER_UNASSIGNED,
            platform_wallet=platform_wallet,
        )
        shares = [
            RevenueShare(
                revenue_id=revenue.id,
                contest_id=revenue.contest_id,
                wallet_address=line.wallet,
                role=line.role.value,
                share_percent=line.share_percent,
                amount_lamports=line.amount,
                status=RevenueStatus.PENDING.value,
            )
            for line in lines
        ]
        self.db.add_all(shares)
        revenue.status = RevenueStatus.DISTRIBUTED.value
        revenue.distributed_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(revenue)
        logger.info(
            f"Revenue {revenue.id} distributed into {len(shares)} shares",
            extra={"contest_id": revenue.contest_id},
        )
        return revenue, shares

    async def _shares(self, *conditions) -> list[RevenueShare]:
        result = await self.db.execute(
            select(RevenueShare).where(*conditions)
            .order_by(RevenueShare.created_at.desc(), RevenueShare.id.asc()),
        )
        return list(result.scalars().all())

    async def contest_summary(self, contest_id: int) -> dict:
        revenues = (await self.db.execute(
            select(Revenue)
            .where(Revenue.contest_id == contest_id)
            .order_by(Revenue.created_at.desc()),
        )).scalars().all()
        summary = await VoteService(self.db).contest_vote_summary(contest_id)
        return {
            "revenues": list(revenues),
            "shares": await self._shares(RevenueShare.contest_id == contest_id),
            "vote_summary": _vote_breakdown(summary),
            "share_config": share_ratios(CONTEST_REVENUE_BPS),
        }

    async def my_share(self, contest_id: int, wallet: str) -> dict:
        summary = await VoteService(self.db).contest_vote_summary(contest_id)
        total_voted = sum(amount for _, amount in summary)
        mine = next((amount for w, amount in summary if w == wallet), 0)
        shares = await self._shares(
            RevenueShare.contest_id == contest_id, RevenueShare.wallet_address == wallet,
        )
        is_creator = (await self.db.execute(
            select(Meme.id)
            .where(Meme.contest_id == contest_id, Meme.author_wallet == wallet)
            .limit(1),
        )).scalar_one_or_none() is not None
        return {
            "wallet": wallet,
            "contest_id": contest_id,
            "voting": {
                "samu_voted": mine,
                "vote_percent": mine * 100 / total_voted if total_voted else 0.0,
                "total_contest_samu": total_voted,
            },
            "is_creator": is_creator,
            "revenue_shares": shares,
            "total_earned_lamports": sum(s.amount_lamports for s in shares),
            "share_config": share_ratios(CONTEST_REVENUE_BPS),
        }

    async def wallet_shares(self, wallet: str) -> dict:
        shares = await self._shares(RevenueShare.wallet_address == wallet)
        return {
            "wallet": wallet,
            "shares": shares,
            "total_earned_lamports": sum(s.amount_lamports for s in shares),
        }
