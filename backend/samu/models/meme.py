"""Meme ORM — a contest submission and its running SAMU vote total.

Invariants:
    - votes == sum(Vote.samu_amount) for the meme (maintained on every vote insert)
    - is_archived memes accept no further votes
    - contest_id is null only for memes submitted while no contest was active
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class Meme(Base):
    __tablename__ = "memes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    author_wallet: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    author_username: Mapped[str] = mapped_column(String(100), nullable=False)
    author_avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    contest_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("contests.id"), nullable=True, index=True,
    )
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    votes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
