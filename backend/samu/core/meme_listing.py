"""Meme listing — sorting, pagination metadata and cache policy for the meme feed."""

import math
from dataclasses import dataclass

from samu.core.domain_types import MemeSort

NO_CACHE = "no-cache, no-store, must-revalidate"
SHORT_CACHE = "public, max-age=60"


@dataclass(frozen=True)
class Page:
    page: int
    limit: int
    total: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "has_more": self.has_more,
            "total_pages": self.total_pages,
        }


def cache_control_for(sort: MemeSort) -> str:
    # vote counts change live, the latest feed tolerates a minute of staleness
    return NO_CACHE if sort == MemeSort.VOTES else SHORT_CACHE
