"""Partner Contest ORM — memes and votes for partner-community contests.

Invariants:
    - partner_id is a key of the partner registry (core/partners.py), checked at the API
    - One vote per (partner_id, meme_id, voter_wallet); the unique constraint is final
    - PartnerMeme.votes == sum(PartnerVote.voting_power) for the meme
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class PartnerMeme(Base):
    __tablename__ = "partner_memes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partner_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    author_wallet: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    author_username: Mapped[str] = mapped_column(String(100), nullable=False)
    author_avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    votes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )


class PartnerVote(Base):
    __tablename__ = "partner_votes"
    __table_args__ = (
        UniqueConstraint(
            "partner_id", "meme_id", "voter_wallet", name="uq_partner_vote_wallet",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partner_id: Mapped[str] = mapped_column(String(32), nullable=False)
    meme_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("partner_memes.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    voter_wallet: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    voting_power: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
