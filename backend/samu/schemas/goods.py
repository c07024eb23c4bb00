"""Goods & Order Schemas — catalog admin payloads, shipping and order placement.

Invariants:
    - retail_price > 0 (USD)
    - Orders carry a complete shipping address; country is ISO 3166-1 alpha-2
    - sol_amount and payment_tx_signature come together or not at all
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from samu.core.printful_catalog import DEFAULT_COLORS, DEFAULT_SIZES


class GoodsCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    image_url: str = Field(min_length=1)
    contest_id: int | None = None
    meme_id: int | None = None
    retail_price: float = Field(gt=0)
    sizes: list[str] = Field(default_factory=lambda: list(DEFAULT_SIZES), min_length=1)
    colors: list[str] = Field(default_factory=lambda: list(DEFAULT_COLORS), min_length=1)
    category: str = Field("clothing", max_length=50)
    product_type: str = Field("t-shirt", max_length=50)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class GoodsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    printful_product_id: int | None
    printful_variant_id: int | None
    contest_id: int | None
    meme_id: int | None
    title: str
    description: str | None
    image_url: str
    mockup_urls: list[str]
    category: str
    product_type: str
    base_price: float
    retail_price: float
    sizes: list[str]
    colors: list[str]
    status: str
    created_at: datetime


class ShippingEstimateRequest(BaseModel):
    """All fields optional: offline mode ignores the address entirely."""
    address1: str | None = None
    city: str | None = None
    country_code: str | None = Field(None, min_length=2, max_length=2)
    state_code: str | None = None
    zip: str | None = None


class OrderCreate(BaseModel):
    size: str = Field(min_length=1, max_length=10)
    color: str = Field(min_length=1, max_length=30)
    buyer_wallet: str = Field(min_length=1, max_length=64)
    buyer_email: str = Field(min_length=3, max_length=255)
    shipping_name: str = Field(min_length=1, max_length=200)
    shipping_address1: str = Field(min_length=1, max_length=255)
    shipping_address2: str | None = Field(None, max_length=255)
    shipping_city: str = Field(min_length=1, max_length=100)
    shipping_state: str | None = Field(None, max_length=100)
    shipping_country: str = Field(min_length=2, max_length=2)
    shipping_zip: str = Field(min_length=1, max_length=20)
    shipping_phone: str | None = Field(None, max_length=40)
    shipping_lat: float | None = Field(None, ge=-90, le=90)
    shipping_lng: float | None = Field(None, ge=-180, le=180)
    sol_amount: float | None = Field(None, gt=0)
    payment_tx_signature: str | None = Field(None, min_length=32, max_length=128)

    @field_validator("shipping_country")
    @classmethod
    def upper_country(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def payment_fields_together(self):
        if (self.sol_amount is None) != (self.payment_tx_signature is None):
            raise ValueError("sol_amount and payment_tx_signature must be given together")
        return self


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    goods_id: int
    buyer_wallet: str
    buyer_email: str
    printful_order_id: int | None
    size: str
    color: str
    quantity: int
    total_price: float
    sol_amount_lamports: int | None
    payment_tx_signature: str | None
    shipping_name: str
    shipping_city: str
    shipping_country: str
    status: str
    printful_status: str | None
    tracking_number: str | None
    tracking_url: str | None
    created_at: datetime
    updated_at: datetime


class EscrowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    amount_lamports: int
    status: str
    created_at: datetime
    settled_at: datetime | None


class DistributionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    goods_id: int
    contest_id: int | None
    creator_wallet: str | None
    platform_wallet: str
    total_lamports: int
    creator_lamports: int
    voter_pool_lamports: int
    platform_lamports: int
    created_at: datetime
