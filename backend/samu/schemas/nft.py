"""NFT Schemas — catalog entries and comment threads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NftCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    image_url: str = Field(min_length=1)


class NftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    image_url: str
    created_at: datetime


class CommentCreate(BaseModel):
    author_wallet: str = Field(min_length=1, max_length=64)
    author_username: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1, max_length=1_000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("comment cannot be empty or whitespace")
        return v


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nft_id: int
    author_wallet: str
    author_username: str
    content: str
    created_at: datetime
