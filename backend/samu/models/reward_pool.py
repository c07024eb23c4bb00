"""Voter Reward Pool ORM — per-contest accumulator and per-voter claim checkpoints.

Invariants:
    - One pool per contest (contest_id unique); total_weight fixed at creation
    - total_weight == sum of the contest's votes with id <= snapshot_vote_id; a voter's
      weight is computed over the same vote range
    - total_claimed_lamports <= total_deposited_lamports
    - One VoterClaim per (contest_id, wallet_address)

Design Decisions:
    - reward_per_share stored scaled by ACC_PRECISION (core/reward_pool.py) in BIGINT
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from samu.db.base import Base, utcnow


class VoterRewardPool(Base):
    __tablename__ = "voter_reward_pools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contest_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    total_weight: Mapped[int] = mapped_column(BigInteger, nullable=False)
    snapshot_vote_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reward_per_share: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_deposited_lamports: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    total_claimed_lamports: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )


class VoterClaim(Base):
    __tablename__ = "voter_claims"
    __table_args__ = (
        UniqueConstraint("contest_id", "wallet_address", name="uq_voter_claim_wallet"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contest_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    wallet_address: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    weight: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_reward_per_share: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    total_claimed_lamports: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
