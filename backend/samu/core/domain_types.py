"""Domain Types — enums and value types shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - SOL amounts are integer lamports (Lamports); SAMU vote amounts are whole tokens

Design Decisions:
    - str Enums: serialize to JSON without custom encoders, store as plain VARCHAR
    - NewType over wrapper classes: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType


# ─── Value Types ─────────────────────────────────────────────────

Lamports = NewType("Lamports", int)
SamuAmount = NewType("SamuAmount", int)

LAMPORTS_PER_SOL = 1_000_000_000


def sol_to_lamports(sol: float) -> Lamports:
    return Lamports(round(sol * LAMPORTS_PER_SOL))


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


# ─── Enums ───────────────────────────────────────────────────────

class ContestStatus(str, Enum):
    """Contest lifecycle — draft -> active -> ended."""
    DRAFT = "draft"
    ACTIVE = "active"
    ENDED = "ended"


class OrderStatus(str, Enum):
    """Internal order state — maps to `orders.status`."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    FAILED = "failed"
    CANCELED = "canceled"


class EscrowStatus(str, Enum):
    HELD = "held"
    RELEASED = "released"
    REFUNDED = "refunded"


class RevenueStatus(str, Enum):
    PENDING = "pending"
    DISTRIBUTED = "distributed"


class ShareRole(str, Enum):
    """Recipients of a contest revenue split."""
    CREATOR = "creator"
    VOTER = "voter"
    NFT_HOLDER = "nft_holder"
    PLATFORM = "platform"


class GoodsStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class MemeSort(str, Enum):
    VOTES = "votes"
    LATEST = "latest"
