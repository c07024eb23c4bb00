"""Vote Service — SAMU-backed votes with on-chain payment verification.

Invariants:
    - A vote is accepted only for an existing, non-archived meme whose contest has not ended
    - tx_signature is single-use: a duplicate is a 409, whether caught by lookup or by the
      unique index under a concurrent insert
    - meme.votes is incremented in SQL (votes = votes + amount), never read-modify-write
    - With verification enabled, nothing is written until the transaction checks out

Design Decisions:
    - Verification before the duplicate-insert race: an RPC round trip is the slow part,
      the unique index is the final arbiter
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samu.config import Settings
from samu.core.domain_types import ContestStatus
from samu.core.errors import (
    BusinessRuleError, ConflictError, ErrorContext, ExternalServiceError,
    TransactionVerificationError,
)
from samu.core.token_transfer import check_samu_transfer
from samu.infrastructure.solana_rpc import SolanaRpcClient
from samu.models.contest import Contest
from samu.models.meme import Meme
from samu.models.vote import Vote
from samu.schemas.meme import VoteCreate
from samu.services.meme_service import MemeService

logger = logging.getLogger(__name__)


class VoteService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def cast_vote(
        self,
        meme_id: int,
        body: VoteCreate,
        *,
        rpc: SolanaRpcClient,
        settings: Settings,
    ) -> tuple[Vote, Meme]:
        ctx = ErrorContext(meme_id=meme_id, wallet=body.voter_wallet)
        meme = await MemeService(self.db).get(meme_id)
        await self._check_voting_open(meme, ctx)

        if await self._signature_used(body.tx_signature):
            raise ConflictError("Transaction signature already used for a vote", ctx)

        if settings.verify_vote_transactions:
            await self._verify_payment(body, rpc=rpc, settings=settings, ctx=ctx)

        vote = Vote(
            meme_id=meme.id,
            contest_id=meme.contest_id,
            voter_wallet=body.voter_wallet,
            samu_amount=body.samu_amount,
            tx_signature=body.tx_signature,
        )
        self.db.add(vote)
        try:
            await self.db.execute(
                update(Meme)
                .where(Meme.id == meme.id)
                .values(votes=Meme.votes + body.samu_amount),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Transaction signature already used for a vote", ctx)

        await self.db.refresh(vote)
        await self.db.refresh(meme)
        logger.info(
            f"Vote recorded: {body.samu_amount} SAMU",
            extra={"meme_id": meme.id, "contest_id": meme.contest_id,
                   "wallet": body.voter_wallet},
        )
        return vote, meme

    async def _check_voting_open(self, meme: Meme, ctx: ErrorContext) -> None:
        if meme.is_archived:
            raise BusinessRuleError("Voting is closed for this meme", "VOTING_CLOSED", ctx)
        if meme.contest_id is None:
            return
        contest = await self.db.get(Contest, meme.contest_id)
        if contest and contest.status == ContestStatus.ENDED.value:
            raise BusinessRuleError("Voting is closed for this meme", "VOTING_CLOSED", ctx)

    async def _signature_used(self, tx_signature: str) -> bool:
        result = await self.db.execute(
            select(Vote.id).where(Vote.tx_signature == tx_signature),
        )
        return result.scalar_one_or_none() is not None

    async def _verify_payment(
        self, body: VoteCreate, *, rpc: SolanaRpcClient, settings: Settings,
        ctx: ErrorContext,
    ) -> None:
        if not settings.treasury_wallet_address:
            raise ExternalServiceError(
                "solana", "treasury wallet not configured", ctx, http_status=500,
            )
        transaction = await rpc.get_transaction(body.tx_signature)
        reason = check_samu_transfer(
            transaction,
            voter_wallet=body.voter_wallet,
            treasury_wallet=settings.treasury_wallet_address,
            mint=settings.samu_token_mint,
            samu_amount=body.samu_amount,
            decimals=settings.samu_decimals,
        )
        if reason:
            logger.warning(
                f"Vote payment rejected: {reason}",
                extra={"meme_id": ctx.meme_id, "wallet": body.voter_wallet},
            )
            raise TransactionVerificationError(reason, ctx)

    async def has_voted(self, meme_id: int, wallet: str) -> bool:
        result = await self.db.execute(
            select(Vote.id)
            .where(Vote.meme_id == meme_id, Vote.voter_wallet == wallet)
            .limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def contest_vote_summary(self, contest_id: int) -> list[tuple[str, int]]:
        """[(voter_wallet, total SAMU voted)] for a contest, largest first."""
        total = func.sum(Vote.samu_amount)
        result = await self.db.execute(
            select(Vote.voter_wallet, total)
            .where(Vote.contest_id == contest_id)
            .group_by(Vote.voter_wallet)
            .order_by(total.desc(), Vote.voter_wallet.asc()),
        )
        return [(wallet, int(amount)) for wallet, amount in result.all()]
