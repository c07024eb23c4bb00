"""User Service — wallet profiles, activity lookups and on-chain balance sync.

Invariants:
    - Profiles are created lazily on first read (username = first8...last4)
    - samu_balance and total_voting_power only change through sync_balance() or sync_all()
    - remaining voting power = total_voting_power - votes cast, floored at 0

Design Decisions:
    - Stats computed from memes/votes rows on read: no denormalized counters to drift
"""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.errors import ErrorContext, ResourceNotFoundError
from samu.core.voting_power import compute_voting_power, remaining_voting_power
from samu.infrastructure.solana_rpc import SolanaRpcClient
from samu.models.meme import Meme
from samu.models.user import User
from samu.models.vote import Vote

logger = logging.getLogger(__name__)


def default_username(wallet: str) -> str:
    return f"{wallet[:8]}...{wallet[-4:]}"


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_wallet(self, wallet: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.wallet_address == wallet),
        )
        return result.scalar_one_or_none()

    async def require(self, wallet: str) -> User:
        user = await self.get_by_wallet(wallet)
        if not user:
            raise ResourceNotFoundError(
                "User", wallet, ErrorContext(wallet=wallet),
            )
        return user

    async def get_or_create(self, wallet: str) -> User:
        user = await self.get_by_wallet(wallet)
        if user:
            return user
        user = User(
            wallet_address=wallet,
            username=default_username(wallet),
            samu_balance=0,
            total_voting_power=0,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # concurrent first read created the row
            await self.db.rollback()
            return await self.require(wallet)
        await self.db.refresh(user)
        logger.info("Created user profile", extra={"wallet": wallet})
        return user

    async def update_profile(self, wallet: str, changes: dict) -> User:
        user = await self.require(wallet)
        for key, value in changes.items():
            setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def memes_of(self, wallet: str) -> list[Meme]:
        result = await self.db.execute(
            select(Meme)
            .where(Meme.author_wallet == wallet)
            .order_by(Meme.created_at.desc()),
        )
        return list(result.scalars().all())

    async def votes_of(self, wallet: str) -> list[Vote]:
        result = await self.db.execute(
            select(Vote)
            .where(Vote.voter_wallet == wallet)
            .order_by(Vote.created_at.desc()),
        )
        return list(result.scalars().all())

    async def stats(self, wallet: str) -> dict:
        user = await self.require(wallet)

        meme_row = (await self.db.execute(
            select(func.count(Meme.id), func.coalesce(func.sum(Meme.votes), 0))
            .where(Meme.author_wallet == wallet),
        )).one()
        vote_row = (await self.db.execute(
            select(func.count(Vote.id), func.coalesce(func.sum(Vote.samu_amount), 0))
            .where(Vote.voter_wallet == wallet),
        )).one()

        votes_cast = int(vote_row[0])
        return {
            "total_memes": int(meme_row[0]),
            "total_votes_received": int(meme_row[1]),
            "votes_cast": votes_cast,
            "samu_voted": int(vote_row[1]),
            "samu_balance": user.samu_balance,
            "total_voting_power": user.total_voting_power,
            "remaining_voting_power": remaining_voting_power(
                user.total_voting_power, votes_cast,
            ),
            "member_since": user.created_at,
        }

    async def sync_balance(self, wallet: str, rpc: SolanaRpcClient) -> User:
        """Refresh the cached SAMU balance and recompute voting power."""
        user = await self.get_or_create(wallet)
        balance = await rpc.get_samu_balance(wallet)
        user.samu_balance = int(balance)
        user.total_voting_power = compute_voting_power(balance)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(
            f"Synced balance: {balance} SAMU -> {user.total_voting_power} voting power",
            extra={"wallet": wallet},
        )
        return user

    async def sync_all(self, rpc: SolanaRpcClient, delay_seconds: float = 0.0) -> list[dict]:
        """Re-sync every profile, oldest first, pausing between RPC lookups."""
        users = (await self.db.execute(
            select(User).order_by(User.id.asc()),
        )).scalars().all()

        results = []
        for index, user in enumerate(users):
            if index and delay_seconds:
                await asyncio.sleep(delay_seconds)
            old_balance = user.samu_balance
            balance = await rpc.get_samu_balance(user.wallet_address)
            user.samu_balance = int(balance)
            user.total_voting_power = compute_voting_power(balance)
            await self.db.commit()
            results.append({
                "wallet": user.wallet_address,
                "username": user.username,
                "old_balance": old_balance,
                "new_balance": user.samu_balance,
                "voting_power": user.total_voting_power,
            })
        logger.info(f"Bulk balance sync finished for {len(results)} users")
        return results
