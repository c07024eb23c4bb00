"""Order ORM — a single-item goods purchase and its fulfillment state.

Invariants:
    - status: pending | confirmed | delivered | failed | canceled (internal view)
    - printful_status mirrors the last webhook event (shipped, in_transit, ...)
    - payment_tx_signature unique when present: a SOL payment backs one order
    - sol_amount_lamports null means the order was not paid on-chain (no escrow)
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    goods_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("goods.id"), nullable=False, index=True,
    )
    buyer_wallet: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    buyer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    printful_order_id: Mapped[int | None] = mapped_column(
        BigInteger, nullable=True, index=True,
    )
    size: Mapped[str] = mapped_column(String(10), nullable=False)
    color: Mapped[str] = mapped_column(String(30), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    sol_amount_lamports: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    payment_tx_signature: Mapped[str | None] = mapped_column(
        String(128), nullable=True, unique=True,
    )

    shipping_name: Mapped[str] = mapped_column(String(200), nullable=False)
    shipping_address1: Mapped[str] = mapped_column(String(255), nullable=False)
    shipping_address2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    shipping_city: Mapped[str] = mapped_column(String(100), nullable=False)
    shipping_state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shipping_country: Mapped[str] = mapped_column(String(2), nullable=False)
    shipping_zip: Mapped[str] = mapped_column(String(20), nullable=False)
    shipping_phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    shipping_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    shipping_lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    printful_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    tracking_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tracking_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
