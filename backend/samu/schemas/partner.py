"""Partner Contest Schemas — partner memes, votes and vote status.

Invariants:
    - Partner memes reuse MemeCreate validation (stripped title, length limits)
    - PartnerVoteCreate.voting_power > 0
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PartnerResponse(BaseModel):
    id: str
    name: str
    symbol: str
    description: str
    token_address: str
    color: str
    is_active: bool


class PartnerMemeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    partner_id: str
    title: str
    description: str | None
    image_url: str
    author_wallet: str
    author_username: str
    author_avatar_url: str | None
    votes: int
    created_at: datetime


class PartnerVoteCreate(BaseModel):
    voter_wallet: str = Field(min_length=1, max_length=64)
    voting_power: int = Field(gt=0)


class PartnerVoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    partner_id: str
    meme_id: int
    voter_wallet: str
    voting_power: int
    created_at: datetime
