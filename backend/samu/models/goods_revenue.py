"""Goods Revenue Distribution ORM — how one released escrow was split.

Invariants:
    - creator_lamports + voter_pool_lamports + platform_lamports == total_lamports
    - One distribution per order (order_id unique)
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class GoodsRevenueDistribution(Base):
    __tablename__ = "goods_revenue_distributions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id"), nullable=False, unique=True,
    )
    goods_id: Mapped[int] = mapped_column(Integer, nullable=False)
    contest_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    creator_wallet: Mapped[str | None] = mapped_column(String(64), nullable=True)
    platform_wallet: Mapped[str] = mapped_column(String(64), nullable=False)
    total_lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    creator_lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    voter_pool_lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    platform_lamports: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
