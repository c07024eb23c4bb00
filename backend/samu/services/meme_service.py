"""Meme Service — feed listing, submission and author-only deletion.

Invariants:
    - The current feed is every non-archived meme; a contest feed is every meme of that contest
    - New memes join the active contest when one exists, else contest_id stays null
    - Deleting a meme removes its votes first, then the meme, in one commit
    - Stored image removal after delete is best-effort (logged, never fails the request)
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.domain_types import ContestStatus, MemeSort
from samu.core.errors import (
    ErrorContext, ExternalServiceError, ForbiddenActionError, ResourceNotFoundError,
)
from samu.core.meme_listing import Page
from samu.infrastructure.object_storage import ObjectStorage, name_from_url
from samu.models.contest import Contest
from samu.models.meme import Meme
from samu.models.user import User
from samu.models.vote import Vote
from samu.schemas.meme import MemeCreate

logger = logging.getLogger(__name__)


class MemeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_memes(
        self, *, sort: MemeSort, page: int, limit: int, contest_id: int | None = None,
    ) -> tuple[list[Meme], Page]:
        condition = (
            Meme.contest_id == contest_id if contest_id is not None
            else Meme.is_archived.is_(False)
        )
        total = (await self.db.execute(
            select(func.count(Meme.id)).where(condition),
        )).scalar_one()

        if sort == MemeSort.VOTES:
            order = (Meme.votes.desc(), Meme.created_at.asc(), Meme.id.asc())
        else:
            order = (Meme.created_at.desc(), Meme.id.desc())

        pagination = Page(page=page, limit=limit, total=total)
        result = await self.db.execute(
            select(Meme).where(condition).order_by(*order)
            .limit(limit).offset(pagination.offset),
        )
        return list(result.scalars().all()), pagination

    async def list_all(self) -> list[Meme]:
        result = await self.db.execute(select(Meme).order_by(Meme.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, meme_id: int) -> Meme:
        meme = await self.db.get(Meme, meme_id)
        if not meme:
            raise ResourceNotFoundError(
                "Meme", meme_id, ErrorContext(meme_id=meme_id),
            )
        return meme

    async def create(self, body: MemeCreate) -> Meme:
        author = (await self.db.execute(
            select(User).where(User.wallet_address == body.author_wallet),
        )).scalar_one_or_none()
        active_contest_id = (await self.db.execute(
            select(Contest.id)
            .where(Contest.status == ContestStatus.ACTIVE.value)
            .order_by(Contest.id.desc())
            .limit(1),
        )).scalar_one_or_none()

        meme = Meme(
            title=body.title,
            description=body.description,
            image_url=body.image_url,
            author_wallet=body.author_wallet,
            author_username=author.username if author else body.author_username,
            author_avatar_url=(
                author.avatar_url if author and author.avatar_url
                else body.author_avatar_url
            ),
            contest_id=active_contest_id,
            is_archived=False,
            votes=0,
        )
        self.db.add(meme)
        await self.db.commit()
        await self.db.refresh(meme)
        logger.info(
            f"Meme created in contest {active_contest_id}",
            extra={"meme_id": meme.id, "wallet": meme.author_wallet},
        )
        return meme

    async def delete(
        self, meme_id: int, author_wallet: str, storage: ObjectStorage,
    ) -> None:
        meme = await self.get(meme_id)
        if meme.author_wallet != author_wallet:
            raise ForbiddenActionError(
                "Only the author can delete this meme",
                ErrorContext(meme_id=meme_id, wallet=author_wallet),
            )
        image_url = meme.image_url

        await self.db.execute(delete(Vote).where(Vote.meme_id == meme_id))
        await self.db.delete(meme)
        await self.db.commit()
        logger.info("Meme deleted", extra={"meme_id": meme_id, "wallet": author_wallet})

        name = name_from_url(image_url)
        if not name:
            return
        try:
            await storage.delete(name)
        except (ExternalServiceError, OSError) as e:
            logger.warning(
                f"Stored image cleanup failed for {name}: {e}",
                extra={"meme_id": meme_id},
            )
