"""Contest Revenue ORM — admin-recorded income and its per-wallet shares.

Invariants:
    - Revenue.status: pending -> distributed (once); distributed_at set then
    - sum(RevenueShare.amount_lamports) == Revenue.total_lamports after distribution
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class Revenue(Base):
    __tablename__ = "revenues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contest_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    source: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    distributed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )


class RevenueShare(Base):
    __tablename__ = "revenue_shares"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    revenue_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("revenues.id"), nullable=False, index=True,
    )
    contest_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    wallet_address: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    share_percent: Mapped[float] = mapped_column(Float, nullable=False)
    amount_lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
