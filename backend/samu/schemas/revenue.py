"""Revenue & Reward Schemas — contest revenue records, shares, pools and claims."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RevenueCreate(BaseModel):
    contest_id: int
    source: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2_000)
    total_amount_sol: float = Field(gt=0)


class RevenueDistribute(BaseModel):
    nft_holder_wallet: str | None = Field(None, max_length=64)


class RevenueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contest_id: int
    source: str
    description: str | None
    total_lamports: int
    status: str
    distributed_at: datetime | None
    created_at: datetime


class RevenueShareResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    revenue_id: int
    contest_id: int
    wallet_address: str
    role: str
    share_percent: float
    amount_lamports: int
    status: str
    created_at: datetime


class ClaimRequest(BaseModel):
    wallet_address: str = Field(min_length=1, max_length=64)


class VoterPoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    contest_id: int
    total_weight: int
    reward_per_share: int
    total_deposited_lamports: int
    total_claimed_lamports: int
    updated_at: datetime
