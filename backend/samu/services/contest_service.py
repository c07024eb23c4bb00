"""Contest Service — admin lifecycle (create, start, end-and-archive) and public reads.

Invariants:
    - At most one contest is active at any time
    - Ending archives atomically: contest ended, snapshot written, memes archived, one commit
    - Memes archived on end = the contest's memes + current memes not yet assigned to any contest
      (their votes are re-tagged with the contest id)
    - Archive snapshot totals are computed once, at end time

Design Decisions:
    - Transition checks live in core/contest_lifecycle.py so the scheduler and the admin
      routes reject exactly the same transitions
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.contest_lifecycle import as_utc, check_can_end, check_can_start, pick_winner
from samu.core.domain_types import ContestStatus
from samu.core.errors import (
    BusinessRuleError, ConflictError, ErrorContext, ResourceNotFoundError,
)
from samu.models.contest import ArchivedContest, Contest
from samu.models.meme import Meme
from samu.models.vote import Vote
from samu.schemas.contest import ContestCreate

logger = logging.getLogger(__name__)


class ContestService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, contest_id: int) -> Contest:
        contest = await self.db.get(Contest, contest_id)
        if not contest:
            raise ResourceNotFoundError(
                "Contest", contest_id, ErrorContext(contest_id=contest_id),
            )
        return contest

    async def create(self, body: ContestCreate, created_by: str | None) -> Contest:
        contest = Contest(
            title=body.title,
            description=body.description,
            status=ContestStatus.DRAFT.value,
            start_time=body.start_time,
            end_time=body.end_time,
            created_by=created_by,
        )
        self.db.add(contest)
        await self.db.commit()
        await self.db.refresh(contest)
        logger.info(f"Contest created: {contest.title}", extra={"contest_id": contest.id})
        return contest

    async def current(self) -> Contest | None:
        result = await self.db.execute(
            select(Contest)
            .where(Contest.status == ContestStatus.ACTIVE.value)
            .order_by(Contest.id.desc())
            .limit(1),
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Contest]:
        result = await self.db.execute(select(Contest).order_by(Contest.created_at.desc()))
        return list(result.scalars().all())

    async def list_pending_transitions(self) -> list[Contest]:
        result = await self.db.execute(
            select(Contest).where(Contest.status.in_(
                (ContestStatus.DRAFT.value, ContestStatus.ACTIVE.value),
            )),
        )
        return list(result.scalars().all())

    async def start(self, contest_id: int, now: datetime | None = None) -> Contest:
        ctx = ErrorContext(contest_id=contest_id)
        contest = await self.get(contest_id)
        error = check_can_start(contest.status)
        if error:
            raise BusinessRuleError(error, "INVALID_CONTEST_TRANSITION", ctx)

        active = await self.current()
        if active is not None:
            raise ConflictError(f"Contest {active.id} is already active", ctx)

        contest.status = ContestStatus.ACTIVE.value
        if contest.start_time is None:
            contest.start_time = now or datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(contest)
        logger.info("Contest started", extra={"contest_id": contest_id})
        return contest

    async def end_and_archive(
        self, contest_id: int, now: datetime | None = None,
    ) -> ArchivedContest:
        ctx = ErrorContext(contest_id=contest_id)
        contest = await self.get(contest_id)
        error = check_can_end(contest.status)
        if error:
            raise BusinessRuleError(error, "INVALID_CONTEST_TRANSITION", ctx)
        now = now or datetime.now(timezone.utc)

        in_scope = or_(
            Meme.contest_id == contest_id,
            (Meme.contest_id.is_(None)) & (Meme.is_archived.is_(False)),
        )
        memes = list((await self.db.execute(select(Meme).where(in_scope))).scalars().all())
        winner = pick_winner(memes)

        archive = ArchivedContest(
            original_contest_id=contest.id,
            title=contest.title,
            description=contest.description,
            winner_meme_id=winner.id if winner else None,
            total_memes=len(memes),
            total_votes=sum(m.votes for m in memes),
            started_at=contest.start_time,
            ended_at=now,
        )
        self.db.add(archive)
        await self.db.execute(
            update(Meme).where(in_scope)
            .values(is_archived=True, contest_id=contest_id)
            .execution_options(synchronize_session=False),
        )
        unassigned_ids = [m.id for m in memes if m.contest_id is None]
        if unassigned_ids:
            # votes follow their meme into the contest so vote summaries include them
            await self.db.execute(
                update(Vote)
                .where(Vote.meme_id.in_(unassigned_ids))
                .values(contest_id=contest_id)
                .execution_options(synchronize_session=False),
            )
        contest.status = ContestStatus.ENDED.value
        if contest.end_time is None or as_utc(contest.end_time) > as_utc(now):
            contest.end_time = now
        await self.db.commit()
        await self.db.refresh(archive)
        logger.info(
            f"Contest ended: {archive.total_memes} memes, winner {archive.winner_meme_id}",
            extra={"contest_id": contest_id},
        )
        return archive

    async def list_archived(self) -> list[ArchivedContest]:
        result = await self.db.execute(
            select(ArchivedContest).order_by(ArchivedContest.archived_at.desc()),
        )
        return list(result.scalars().all())

    async def archived_detail(self, archive_id: int) -> tuple[ArchivedContest, list[Meme]]:
        archive = await self.db.get(ArchivedContest, archive_id)
        if not archive:
            raise ResourceNotFoundError("ArchivedContest", archive_id)
        result = await self.db.execute(
            select(Meme)
            .where(Meme.contest_id == archive.original_contest_id)
            .order_by(Meme.votes.desc(), Meme.created_at.asc()),
        )
        return archive, list(result.scalars().all())

    async def archive_for_contest(self, contest_id: int) -> ArchivedContest | None:
        result = await self.db.execute(
            select(ArchivedContest)
            .where(ArchivedContest.original_contest_id == contest_id),
        )
        return result.scalar_one_or_none()
