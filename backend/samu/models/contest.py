"""Contest ORM — time-boxed meme competition plus its archive snapshot.

Invariants:
    - status transitions: draft -> active -> ended (see core/contest_lifecycle.py)
    - At most one ArchivedContest per contest (original_contest_id unique)
    - ArchivedContest totals are a snapshot taken at end time, never recomputed

Design Decisions:
    - Archive as its own table: revenue distribution reads the frozen winner even if
      memes are later deleted
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class Contest(Base):
    __tablename__ = "contests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft", index=True,
    )
    start_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )


class ArchivedContest(Base):
    __tablename__ = "archived_contests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    original_contest_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contests.id"), nullable=False, unique=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    winner_meme_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_memes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_votes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    archived_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
