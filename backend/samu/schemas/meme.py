"""Meme & Vote Schemas — submission, vote and listing payloads.

Invariants:
    - MemeCreate.title: 1-200 chars, stripped, non-empty
    - VoteCreate.samu_amount > 0 (whole SAMU)
    - tx_signature: base58 characters only, 32-128 long
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MemeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    image_url: str = Field(min_length=1)
    author_wallet: str = Field(min_length=1, max_length=64)
    author_username: str = Field(min_length=1, max_length=100)
    author_avatar_url: str | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class MemeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    image_url: str
    author_wallet: str
    author_username: str
    author_avatar_url: str | None
    contest_id: int | None
    is_archived: bool
    votes: int
    created_at: datetime


class VoteCreate(BaseModel):
    voter_wallet: str = Field(min_length=1, max_length=64)
    samu_amount: int = Field(gt=0)
    tx_signature: str = Field(
        min_length=32, max_length=128, pattern=r"^[1-9A-HJ-NP-Za-km-z]+$",
    )


class VoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meme_id: int
    contest_id: int | None
    voter_wallet: str
    samu_amount: int
    tx_signature: str
    created_at: datetime


class MemeDelete(BaseModel):
    author_wallet: str = Field(min_length=1, max_length=64)
