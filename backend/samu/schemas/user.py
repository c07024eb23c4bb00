"""User Schemas — profile reads, partial updates and stats."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    wallet_address: str
    username: str
    email: str | None
    avatar_url: str | None
    samu_balance: int
    total_voting_power: int
    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseModel):
    """Partial update — omitted fields are left untouched."""
    username: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    avatar_url: str | None = Field(None, max_length=1024)


class UserStats(BaseModel):
    total_memes: int
    total_votes_received: int
    votes_cast: int
    samu_voted: int
    samu_balance: int
    total_voting_power: int
    remaining_voting_power: int
    member_since: datetime


class SyncResult(BaseModel):
    wallet: str
    username: str
    old_balance: int
    new_balance: int
    voting_power: int


class BulkSyncResponse(BaseModel):
    total_users: int
    results: list[SyncResult]
