"""Voter Reward Pool — accumulator math for pro-rata voter rewards.

Invariants:
    - reward_per_share only grows; it is lamports per SAMU voted, scaled by ACC_PRECISION
    - pending(weight, last) = weight * (reward_per_share - last) // ACC_PRECISION
    - A voter never receives more than what was deposited (floor division everywhere)

Design Decisions:
    - Accumulator over per-voter rows on every deposit: a goods sale is O(1) no matter
      how many wallets voted; each voter settles lazily when they claim
"""

from dataclasses import dataclass

from samu.core.domain_types import Lamports

ACC_PRECISION = 1_000_000


@dataclass(frozen=True)
class ClaimResult:
    amount: Lamports
    new_last_reward_per_share: int


def accrue(reward_per_share: int, deposit: Lamports, total_weight: int) -> int:
    """New accumulator value after depositing into a pool of total_weight SAMU."""
    if deposit < 0:
        raise ValueError("deposit cannot be negative")
    if total_weight <= 0:
        raise ValueError("cannot accrue into a pool with no weight")
    return reward_per_share + deposit * ACC_PRECISION // total_weight


def pending_reward(weight: int, reward_per_share: int, last_reward_per_share: int) -> Lamports:
    if weight <= 0 or reward_per_share <= last_reward_per_share:
        return Lamports(0)
    return Lamports(weight * (reward_per_share - last_reward_per_share) // ACC_PRECISION)


def settle_claim(weight: int, reward_per_share: int, last_reward_per_share: int) -> ClaimResult:
    """Compute a claim and the checkpoint to store afterwards."""
    return ClaimResult(
        amount=pending_reward(weight, reward_per_share, last_reward_per_share),
        new_last_reward_per_share=reward_per_share,
    )
