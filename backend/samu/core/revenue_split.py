"""Revenue Split — pure percentage arithmetic for contest revenue and goods profit.

Invariants:
    - All amounts are integer lamports; shares are basis points (1/100 of a percent)
    - The parts of every split sum exactly to the input amount
    - Rounding dust and unclaimable portions (no creator, no voters) go to the platform
    - Voter amounts are pro-rata to SAMU voted, floor-divided

Design Decisions:
    - Basis points over float ratios: exact integer math, no drift across many voters
    - Platform as residual recipient: one place absorbs every remainder, so totals reconcile
"""

from dataclasses import dataclass

from samu.core.domain_types import Lamports, ShareRole

BPS_DENOMINATOR = 10_000

# Contest revenue (e.g. sponsorship, NFT sale) — four recipients
CONTEST_REVENUE_BPS: dict[ShareRole, int] = {
    ShareRole.CREATOR: 3_000,
    ShareRole.VOTER: 3_000,
    ShareRole.NFT_HOLDER: 2_500,
    ShareRole.PLATFORM: 1_500,
}

# Goods sale profit released from escrow — three recipients
GOODS_PROFIT_BPS: dict[ShareRole, int] = {
    ShareRole.CREATOR: 4_500,
    ShareRole.VOTER: 4_000,
    ShareRole.PLATFORM: 1_500,
}

NFT_HOLDER_UNASSIGNED = "unassigned_nft_holder"


@dataclass(frozen=True)
class ShareLine:
    """One recipient's slice of a contest revenue."""
    wallet: str
    role: ShareRole
    share_percent: float
    amount: Lamports


@dataclass(frozen=True)
class GoodsSplit:
    """Escrow release breakdown for one order."""
    total: Lamports
    creator: Lamports
    voter_pool: Lamports
    platform: Lamports


def share_ratios(table: dict[ShareRole, int]) -> dict[str, float]:
    """Public view of a bps table as fractions (0.30, ...)."""
    return {role.value: bps / BPS_DENOMINATOR for role, bps in table.items()}


def _portion(total: int, bps: int) -> int:
    return total * bps // BPS_DENOMINATOR


def _percent(amount: int, total: int) -> float:
    return round(amount * 100 / total, 6) if total else 0.0


def split_contest_revenue(
    total: Lamports,
    *,
    creator_wallet: str | None,
    voter_weights: list[tuple[str, int]],
    nft_holder_wallet: str,
    platform_wallet: str,
) -> list[ShareLine]:
    """Split a contest revenue among creator, voters, NFT holder and platform.

    voter_weights is [(wallet, samu_voted)], typically the contest vote summary.
    Voters with zero weight receive nothing and get no line.
    """
    if total <= 0:
        raise ValueError("total must be positive")

    creator_amount = _portion(total, CONTEST_REVENUE_BPS[ShareRole.CREATOR])
    voter_pool = _portion(total, CONTEST_REVENUE_BPS[ShareRole.VOTER])
    nft_amount = _portion(total, CONTEST_REVENUE_BPS[ShareRole.NFT_HOLDER])
    platform_amount = total - creator_amount - voter_pool - nft_amount

    lines: list[ShareLine] = []

    if creator_wallet:
        lines.append(ShareLine(
            creator_wallet, ShareRole.CREATOR,
            _percent(creator_amount, total), Lamports(creator_amount),
        ))
    else:
        platform_amount += creator_amount

    voter_lines, voter_dust = _split_pro_rata(voter_pool, voter_weights)
    if voter_lines:
        lines.extend(
            ShareLine(wallet, ShareRole.VOTER, _percent(amount, total), Lamports(amount))
            for wallet, amount in voter_lines
        )
        platform_amount += voter_dust
    else:
        platform_amount += voter_pool

    lines.append(ShareLine(
        nft_holder_wallet or NFT_HOLDER_UNASSIGNED, ShareRole.NFT_HOLDER,
        _percent(nft_amount, total), Lamports(nft_amount),
    ))
    lines.append(ShareLine(
        platform_wallet, ShareRole.PLATFORM,
        _percent(platform_amount, total), Lamports(platform_amount),
    ))
    return lines


def _split_pro_rata(
    pool: int, weights: list[tuple[str, int]],
) -> tuple[list[tuple[str, int]], int]:
    """Floor-divide pool by weight. Returns (allocations, undistributed dust)."""
    positive = [(wallet, w) for wallet, w in weights if w > 0]
    total_weight = sum(w for _, w in positive)
    if total_weight == 0:
        return [], pool
    allocations = [(wallet, pool * w // total_weight) for wallet, w in positive]
    dust = pool - sum(amount for _, amount in allocations)
    return allocations, dust


def split_goods_profit(
    amount: Lamports, *, has_creator: bool, has_voter_pool: bool,
) -> GoodsSplit:
    """Split an escrowed goods profit 45/40/15 (creator / voter pool / platform)."""
    if amount < 0:
        raise ValueError("amount cannot be negative")
    creator = _portion(amount, GOODS_PROFIT_BPS[ShareRole.CREATOR])
    voter_pool = _portion(amount, GOODS_PROFIT_BPS[ShareRole.VOTER])
    platform = amount - creator - voter_pool

    if not has_creator:
        platform += creator
        creator = 0
    if not has_voter_pool:
        platform += voter_pool
        voter_pool = 0

    return GoodsSplit(
        total=amount,
        creator=Lamports(creator),
        voter_pool=Lamports(voter_pool),
        platform=Lamports(platform),
    )
