"""Vote ORM — one on-chain SAMU payment toward a meme.

Invariants:
    - tx_signature unique: a transaction backs at most one vote
    - samu_amount > 0 (validated at the API boundary)
    - contest_id copied from the meme at vote time (vote summaries never join memes)
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class Vote(Base):
    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meme_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("memes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    contest_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    voter_wallet: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    samu_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tx_signature: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
