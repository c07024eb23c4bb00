"""Escrow amounts and voter reward accumulator — pure math, no IO."""

import pytest

from samu.core.domain_types import Lamports
from samu.core.escrow import check_can_settle, profit_lamports
from samu.core.reward_pool import (
    ACC_PRECISION, accrue, pending_reward, settle_claim,
)


def test_profit_is_margin_share_of_payment():
    # retail 25.00, base 15.00 -> 40% margin
    assert profit_lamports(Lamports(1_000_000_000), 25.0, 15.0) == 400_000_000


def test_profit_floors_fractional_lamports():
    # 10 * 1/3 = 3.33
    assert profit_lamports(Lamports(10), 30.0, 20.0) == 3


def test_profit_zero_when_no_margin_or_payment():
    assert profit_lamports(Lamports(0), 25.0, 15.0) == 0
    assert profit_lamports(Lamports(100), 25.0, 25.0) == 0
    assert profit_lamports(Lamports(100), 25.0, 30.0) == 0
    assert profit_lamports(Lamports(100), 0.0, 0.0) == 0


def test_profit_never_exceeds_payment():
    assert profit_lamports(Lamports(100), 25.0, 0.0) == 100


def test_only_held_escrow_can_settle():
    assert check_can_settle("held") is None
    assert "released" in check_can_settle("released")
    assert "refunded" in check_can_settle("refunded")
    assert check_can_settle("bogus") is not None


def test_accrue_scales_by_precision():
    assert accrue(0, Lamports(400), 100) == 4 * ACC_PRECISION


def test_accrue_is_cumulative():
    rps = accrue(0, Lamports(100), 100)
    rps = accrue(rps, Lamports(300), 100)
    assert rps == 4 * ACC_PRECISION


def test_accrue_rejects_empty_pool_and_negative_deposit():
    with pytest.raises(ValueError):
        accrue(0, Lamports(100), 0)
    with pytest.raises(ValueError):
        accrue(0, Lamports(-1), 10)


def test_pending_reward_pro_rata():
    rps = accrue(0, Lamports(1_000), 400)
    assert pending_reward(300, rps, 0) == 750
    assert pending_reward(100, rps, 0) == 250


def test_pending_reward_zero_after_checkpoint():
    rps = accrue(0, Lamports(1_000), 400)
    assert pending_reward(300, rps, rps) == 0
    assert pending_reward(0, rps, 0) == 0


def test_pending_never_exceeds_deposits():
    rps = accrue(0, Lamports(10), 3)
    total = sum(pending_reward(1, rps, 0) for _ in range(3))
    assert total <= 10


def test_settle_claim_moves_checkpoint():
    rps = accrue(0, Lamports(500), 100)
    result = settle_claim(40, rps, 0)
    assert result.amount == 200
    assert result.new_last_reward_per_share == rps
    later = accrue(rps, Lamports(100), 100)
    assert settle_claim(40, later, result.new_last_reward_per_share).amount == 40
