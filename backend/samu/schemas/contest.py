"""Contest Schemas — admin creation and public contest/archive views.

Invariants:
    - ContestCreate.title: 1-200 chars, stripped, non-empty
    - end_time after start_time when both given (cross-field check)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from samu.core.contest_lifecycle import check_window


class ContestCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    start_time: datetime | None = None
    end_time: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Contest title is required")
        return v

    @model_validator(mode="after")
    def validate_window(self):
        error = check_window(self.start_time, self.end_time)
        if error:
            raise ValueError(error)
        return self


class ContestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    status: str
    start_time: datetime | None
    end_time: datetime | None
    created_by: str | None
    created_at: datetime


class ArchivedContestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    original_contest_id: int
    title: str
    description: str | None
    winner_meme_id: int | None
    total_memes: int
    total_votes: int
    started_at: datetime | None
    ended_at: datetime | None
    archived_at: datetime
