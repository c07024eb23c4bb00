"""Voting power — base allowance plus a bonus per million SAMU held."""

BASE_VOTING_POWER = 3
POWER_PER_MILLION = 10
SAMU_PER_BONUS_STEP = 1_000_000


def compute_voting_power(samu_balance: float) -> int:
    """3 for everyone, +10 for every full 1,000,000 SAMU."""
    steps = int(max(samu_balance, 0) // SAMU_PER_BONUS_STEP)
    return BASE_VOTING_POWER + steps * POWER_PER_MILLION


def remaining_voting_power(total: int, used: int) -> int:
    return max(total - used, 0)
