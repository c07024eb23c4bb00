"""Partner Contest Service — memes and one-per-wallet votes for partner communities.

Invariants:
    - Every operation first resolves the partner; unknown or inactive partners are a 404
    - A meme id is only valid under the partner it was submitted to
    - A wallet votes at most once per partner meme (400 ALREADY_VOTED), whether caught
      by lookup or by the unique constraint under a concurrent insert
    - meme.votes is incremented in SQL by the vote's voting power
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.errors import BusinessRuleError, ErrorContext, ResourceNotFoundError
from samu.core.partners import Partner, find_partner
from samu.models.partner import PartnerMeme, PartnerVote
from samu.models.user import User
from samu.schemas.meme import MemeCreate
from samu.schemas.partner import PartnerVoteCreate

logger = logging.getLogger(__name__)


def require_partner(partner_id: str) -> Partner:
    partner = find_partner(partner_id)
    if partner is None:
        raise ResourceNotFoundError("Partner", partner_id)
    return partner


class PartnerService:
    def __init__(self, db: AsyncSession, partner_id: str):
        self.db = db
        self.partner = require_partner(partner_id)

    async def list_memes(self) -> list[PartnerMeme]:
        result = await self.db.execute(
            select(PartnerMeme)
            .where(PartnerMeme.partner_id == self.partner.id)
            .order_by(PartnerMeme.votes.desc(), PartnerMeme.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_meme(self, meme_id: int) -> PartnerMeme:
        meme = await self.db.get(PartnerMeme, meme_id)
        if not meme or meme.partner_id != self.partner.id:
            raise ResourceNotFoundError(
                "Partner meme", meme_id, ErrorContext(meme_id=meme_id),
            )
        return meme

    async def create_meme(self, body: MemeCreate) -> PartnerMeme:
        author = (await self.db.execute(
            select(User).where(User.wallet_address == body.author_wallet),
        )).scalar_one_or_none()

        meme = PartnerMeme(
            partner_id=self.partner.id,
            title=body.title,
            description=body.description,
            image_url=body.image_url,
            author_wallet=body.author_wallet,
            author_username=author.username if author else body.author_username,
            author_avatar_url=(
                author.avatar_url if author and author.avatar_url
                else body.author_avatar_url
            ),
            votes=0,
        )
        self.db.add(meme)
        await self.db.commit()
        await self.db.refresh(meme)
        logger.info(
            f"Partner meme created for {self.partner.id}",
            extra={"meme_id": meme.id, "wallet": meme.author_wallet},
        )
        return meme

    async def cast_vote(self, meme_id: int, body: PartnerVoteCreate) -> PartnerVote:
        ctx = ErrorContext(meme_id=meme_id, wallet=body.voter_wallet)
        meme = await self.get_meme(meme_id)
        if await self.has_voted(meme.id, body.voter_wallet):
            raise _already_voted(ctx)

        vote = PartnerVote(
            partner_id=self.partner.id,
            meme_id=meme.id,
            voter_wallet=body.voter_wallet,
            voting_power=body.voting_power,
        )
        self.db.add(vote)
        try:
            await self.db.execute(
                update(PartnerMeme)
                .where(PartnerMeme.id == meme.id)
                .values(votes=PartnerMeme.votes + body.voting_power),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise _already_voted(ctx)

        await self.db.refresh(vote)
        logger.info(
            f"Partner vote recorded for {self.partner.id}: {body.voting_power}",
            extra={"meme_id": meme.id, "wallet": body.voter_wallet},
        )
        return vote

    async def has_voted(self, meme_id: int, wallet: str) -> bool:
        result = await self.db.execute(
            select(PartnerVote.id).where(
                PartnerVote.partner_id == self.partner.id,
                PartnerVote.meme_id == meme_id,
                PartnerVote.voter_wallet == wallet,
            ),
        )
        return result.scalar_one_or_none() is not None


def _already_voted(ctx: ErrorContext) -> BusinessRuleError:
    return BusinessRuleError(
        "User has already voted on this meme", "ALREADY_VOTED", ctx,
    )
