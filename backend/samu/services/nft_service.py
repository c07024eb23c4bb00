"""NFT Service — collection catalog and per-NFT comment threads.

Invariants:
    - Catalog listed in id order; comments newest first
    - Comments are only accepted for an existing NFT
    - A commenter with a profile is shown under the profile username
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.errors import ResourceNotFoundError
from samu.models.nft import Nft, NftComment
from samu.models.user import User
from samu.schemas.nft import CommentCreate, NftCreate

logger = logging.getLogger(__name__)


class NftService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_nfts(self) -> list[Nft]:
        result = await self.db.execute(select(Nft).order_by(Nft.id.asc()))
        return list(result.scalars().all())

    async def get(self, nft_id: int) -> Nft:
        nft = await self.db.get(Nft, nft_id)
        if not nft:
            raise ResourceNotFoundError("NFT", nft_id)
        return nft

    async def create(self, body: NftCreate) -> Nft:
        nft = Nft(title=body.title, description=body.description, image_url=body.image_url)
        self.db.add(nft)
        await self.db.commit()
        await self.db.refresh(nft)
        logger.info(f"NFT {nft.id} added to catalog")
        return nft

    async def comments_of(self, nft_id: int) -> list[NftComment]:
        await self.get(nft_id)
        result = await self.db.execute(
            select(NftComment)
            .where(NftComment.nft_id == nft_id)
            .order_by(NftComment.created_at.desc(), NftComment.id.desc()),
        )
        return list(result.scalars().all())

    async def add_comment(self, nft_id: int, body: CommentCreate) -> NftComment:
        await self.get(nft_id)
        username = (await self.db.execute(
            select(User.username).where(User.wallet_address == body.author_wallet),
        )).scalar_one_or_none()

        comment = NftComment(
            nft_id=nft_id,
            author_wallet=body.author_wallet,
            author_username=username or body.author_username,
            content=body.content,
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        logger.info(f"Comment added to NFT {nft_id}", extra={"wallet": body.author_wallet})
        return comment
