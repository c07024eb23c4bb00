"""Contest Lifecycle — pure decisions about contest state transitions and winners.

Invariants:
    - draft -> active -> ended; no other transition is legal
    - A draft contest is due to start when start_time <= now
    - An active contest is due to end when end_time <= now
    - Winner = most votes; ties broken by earliest created_at, then lowest id

Design Decisions:
    - Decisions separated from IO: the scheduler and admin routes share them,
      and the scheduler tick is testable with a fixed `now`
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, Sequence

from samu.core.domain_types import ContestStatus


class ContestLike(Protocol):
    id: int
    status: str
    start_time: datetime | None
    end_time: datetime | None


class MemeLike(Protocol):
    id: int
    votes: int
    created_at: datetime


@dataclass(frozen=True)
class DueTransitions:
    to_start: list[int]
    to_end: list[int]


def as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def find_due_transitions(
    contests: Sequence[ContestLike], now: datetime,
) -> DueTransitions:
    """Which contests the scheduler must start or end at `now`."""
    now = as_utc(now)
    to_start = [
        c.id for c in contests
        if c.status == ContestStatus.DRAFT.value
        and c.start_time is not None
        and as_utc(c.start_time) <= now
    ]
    to_end = [
        c.id for c in contests
        if c.status == ContestStatus.ACTIVE.value
        and c.end_time is not None
        and as_utc(c.end_time) <= now
    ]
    return DueTransitions(to_start=to_start, to_end=to_end)


def check_can_start(status: str) -> str | None:
    if status != ContestStatus.DRAFT.value:
        return f"Only draft contests can be started (status: {status})"
    return None


def check_can_end(status: str) -> str | None:
    if status != ContestStatus.ACTIVE.value:
        return f"Only active contests can be ended (status: {status})"
    return None


def check_window(start_time: datetime | None, end_time: datetime | None) -> str | None:
    if start_time and end_time and as_utc(end_time) <= as_utc(start_time):
        return "end_time must be after start_time"
    return None


def pick_winner(memes: Sequence[MemeLike]) -> MemeLike | None:
    if not memes:
        return None
    return min(memes, key=lambda m: (-m.votes, as_utc(m.created_at), m.id))
