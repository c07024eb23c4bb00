"""Contest Scheduler — background asyncio loop that starts and ends contests on time.

Invariants:
    - One tick = one DB session; each transition runs independently
    - A failing transition is logged and the rest of the tick continues
    - A failing tick is logged and the loop keeps polling
    - stop() cancels the loop and waits for it to exit

Design Decisions:
    - Polling over per-contest timers: survives restarts, nothing to reschedule when an
      admin edits a contest, and a missed tick is caught up on the next one
    - Session factory injected (defaults to db_manager.session) so tests tick against SQLite
"""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.contest_lifecycle import DueTransitions, find_due_transitions
from samu.core.errors import SamuError
from samu.services.contest_service import ContestService

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _default_session_factory() -> AbstractAsyncContextManager[AsyncSession]:
    from samu.infrastructure import database

    if not database.db_manager:
        raise RuntimeError("Database not initialized")
    return database.db_manager.session()


class ContestScheduler:
    def __init__(
        self,
        interval_seconds: float = 60.0,
        session_factory: SessionFactory | None = None,
    ):
        self.interval_seconds = interval_seconds
        self._session_factory = session_factory or _default_session_factory
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self, now: datetime | None = None) -> DueTransitions:
        """Apply every due transition at `now`. Returns what was due."""
        now = now or datetime.now(timezone.utc)
        async with self._session_factory() as db:
            contests = await ContestService(db).list_pending_transitions()
            due = find_due_transitions(contests, now)

        for contest_id in due.to_end:
            await self._apply("end", contest_id, now)
        for contest_id in due.to_start:
            await self._apply("start", contest_id, now)
        return due

    async def _apply(self, action: str, contest_id: int, now: datetime) -> None:
        try:
            async with self._session_factory() as db:
                service = ContestService(db)
                if action == "end":
                    await service.end_and_archive(contest_id, now)
                else:
                    await service.start(contest_id, now)
            logger.info(f"Scheduler {action}ed contest", extra={"contest_id": contest_id})
        except SamuError as e:
            logger.warning(
                f"Scheduler could not {action} contest: {e.message}",
                extra={"contest_id": contest_id, "error_code": e.code},
            )

    async def _run(self) -> None:
        logger.info(f"Contest scheduler started (every {self.interval_seconds}s)")
        while True:
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Contest scheduler tick failed: {e}", exc_info=True)
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="contest-scheduler")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Contest scheduler stopped")
