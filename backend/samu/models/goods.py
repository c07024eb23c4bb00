"""Goods ORM — a merch product made from a winning meme.

Invariants:
    - base_price <= retail_price (validated at the API boundary)
    - printful_product_id is null for goods created without Printful (create-simple)
    - mockup_urls always has at least one entry (falls back to image_url)
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class Goods(Base):
    __tablename__ = "goods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    printful_product_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    printful_variant_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contest_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("contests.id"), nullable=True,
    )
    meme_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    mockup_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="clothing")
    product_type: Mapped[str] = mapped_column(String(50), nullable=False, default="t-shirt")
    base_price: Mapped[float] = mapped_column(Float, nullable=False)
    retail_price: Mapped[float] = mapped_column(Float, nullable=False)
    sizes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    colors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
