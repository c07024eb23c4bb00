"""Revenue Split — verifies contest revenue and goods profit arithmetic.

Invariants:
    - Parts always sum to the input amount
    - Dust and unclaimable portions land on the platform line
"""

import pytest

from samu.core.domain_types import Lamports, ShareRole
from samu.core.revenue_split import (
    CONTEST_REVENUE_BPS, GOODS_PROFIT_BPS, NFT_HOLDER_UNASSIGNED,
    share_ratios, split_contest_revenue, split_goods_profit,
)


def _by_role(lines, role):
    return [line for line in lines if line.role == role]


def test_bps_tables_sum_to_one_hundred_percent():
    assert sum(CONTEST_REVENUE_BPS.values()) == 10_000
    assert sum(GOODS_PROFIT_BPS.values()) == 10_000


def test_share_ratios_exposes_fractions():
    assert share_ratios(CONTEST_REVENUE_BPS) == {
        "creator": 0.3, "voter": 0.3, "nft_holder": 0.25, "platform": 0.15,
    }


def test_contest_split_with_all_recipients():
    lines = split_contest_revenue(
        Lamports(1_000_000_000),
        creator_wallet="creator",
        voter_weights=[("v1", 300), ("v2", 100)],
        nft_holder_wallet="nft",
        platform_wallet="platform",
    )
    amounts = {line.wallet: line.amount for line in lines}
    assert amounts["creator"] == 300_000_000
    assert amounts["v1"] == 225_000_000
    assert amounts["v2"] == 75_000_000
    assert amounts["nft"] == 250_000_000
    assert amounts["platform"] == 150_000_000
    assert sum(amounts.values()) == 1_000_000_000


def test_contest_split_dust_goes_to_platform():
    lines = split_contest_revenue(
        Lamports(1_001),
        creator_wallet="creator",
        voter_weights=[("a", 1), ("b", 1), ("c", 1)],
        nft_holder_wallet="nft",
        platform_wallet="platform",
    )
    assert sum(line.amount for line in lines) == 1_001
    voter_amounts = [line.amount for line in _by_role(lines, ShareRole.VOTER)]
    assert voter_amounts == [100, 100, 100]
    platform = _by_role(lines, ShareRole.PLATFORM)[0]
    # 1001 - 300 creator - 300 voters - 250 nft
    assert platform.amount == 151


def test_contest_split_without_creator_or_voters():
    lines = split_contest_revenue(
        Lamports(10_000),
        creator_wallet=None,
        voter_weights=[],
        nft_holder_wallet="",
        platform_wallet="platform",
    )
    assert not _by_role(lines, ShareRole.CREATOR)
    assert not _by_role(lines, ShareRole.VOTER)
    nft = _by_role(lines, ShareRole.NFT_HOLDER)[0]
    assert nft.wallet == NFT_HOLDER_UNASSIGNED
    assert nft.amount == 2_500
    platform = _by_role(lines, ShareRole.PLATFORM)[0]
    assert platform.amount == 7_500
    assert platform.share_percent == 75.0


def test_contest_split_skips_zero_weight_voters():
    lines = split_contest_revenue(
        Lamports(10_000),
        creator_wallet="c",
        voter_weights=[("zero", 0), ("one", 5)],
        nft_holder_wallet="n",
        platform_wallet="p",
    )
    voters = _by_role(lines, ShareRole.VOTER)
    assert [v.wallet for v in voters] == ["one"]
    assert voters[0].amount == 3_000


def test_contest_split_rejects_non_positive_total():
    with pytest.raises(ValueError):
        split_contest_revenue(
            Lamports(0), creator_wallet=None, voter_weights=[],
            nft_holder_wallet="n", platform_wallet="p",
        )


def test_goods_split_45_40_15():
    split = split_goods_profit(Lamports(1_000), has_creator=True, has_voter_pool=True)
    assert (split.creator, split.voter_pool, split.platform) == (450, 400, 150)


def test_goods_split_dust_to_platform():
    split = split_goods_profit(Lamports(7), has_creator=True, has_voter_pool=True)
    assert split.creator == 3
    assert split.voter_pool == 2
    assert split.platform == 2
    assert split.creator + split.voter_pool + split.platform == 7


def test_goods_split_without_creator_or_pool_all_to_platform():
    split = split_goods_profit(Lamports(1_000), has_creator=False, has_voter_pool=False)
    assert split.creator == 0
    assert split.voter_pool == 0
    assert split.platform == 1_000


def test_goods_split_rejects_negative_amount():
    with pytest.raises(ValueError):
        split_goods_profit(Lamports(-1), has_creator=True, has_voter_pool=True)
