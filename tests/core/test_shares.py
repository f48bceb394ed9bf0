from __future__ import annotations

import pytest

from autovault.core.errors import ArithmeticIntegrityError, InvalidAmountError
from autovault.core.fees import FeeParams, HarvestFees
from autovault.core.math import MAX_UINT256, PRICE_PER_SHARE_SCALE
from autovault.core.shares import (
    PositionSnapshot,
    compute_assets_for_shares,
    compute_price_per_share,
    compute_shares_to_mint,
    compute_withdraw_payout,
    discounted_net_assets,
)


def test_discounted_net_assets() -> None:
    snap = PositionSnapshot(deposited=1000, unclaimed=100)
    assert snap.total == 1100
    assert discounted_net_assets(snap, FeeParams()) == 1097
    assert discounted_net_assets(PositionSnapshot(deposited=1000, unclaimed=0), FeeParams()) == 1000


def test_snapshot_rejects_negative_and_overflow() -> None:
    with pytest.raises(ArithmeticIntegrityError):
        PositionSnapshot(deposited=-1, unclaimed=0)
    with pytest.raises(ArithmeticIntegrityError):
        PositionSnapshot(deposited=0, unclaimed=MAX_UINT256 + 1)


def test_first_deposit_is_priced_one_to_one() -> None:
    assert compute_shares_to_mint(1000, 0, 0) == 1000
    # Even with stray value already in the position.
    assert compute_shares_to_mint(1000, 0, 5_000) == 1000


def test_subsequent_deposit_priced_against_pre_deposit_value() -> None:
    # 1000 shares backed by 1097: depositing 1097 buys exactly 1000 shares.
    assert compute_shares_to_mint(1097, 1000, 1097) == 1000
    # Floor rounding favours existing holders.
    assert compute_shares_to_mint(100, 1000, 1097) == 91


@pytest.mark.parametrize("amount", [0, -5])
def test_deposit_rejects_non_positive(amount: int) -> None:
    with pytest.raises(InvalidAmountError):
        compute_shares_to_mint(amount, 0, 0)


def test_deposit_against_zero_value_with_shares_outstanding_traps() -> None:
    with pytest.raises(ArithmeticIntegrityError):
        compute_shares_to_mint(10, 1000, 0)


def test_deposit_product_overflow_traps() -> None:
    with pytest.raises(ArithmeticIntegrityError):
        compute_shares_to_mint(MAX_UINT256, MAX_UINT256, 1)


def test_withdraw_payout_folds_harvest_fee_into_caller() -> None:
    fees = HarvestFees(strategist_amount=2, harvest_amount=1)
    # 600 * (1100 - 1 - 2) // 1000 + 1 = 658 + 1
    assert compute_withdraw_payout(600, 1000, 1100, fees) == 659


def test_withdraw_payout_last_holder_takes_everything_but_strategist_fee() -> None:
    fees = HarvestFees(strategist_amount=2, harvest_amount=1)
    assert compute_withdraw_payout(1000, 1000, 1100, fees) == 1098


def test_withdraw_payout_guards() -> None:
    fees = HarvestFees(strategist_amount=0, harvest_amount=0)
    with pytest.raises(InvalidAmountError):
        compute_withdraw_payout(0, 1000, 1000, fees)
    with pytest.raises(ArithmeticIntegrityError):
        compute_withdraw_payout(1001, 1000, 1000, fees)
    with pytest.raises(ArithmeticIntegrityError):
        compute_withdraw_payout(1, 1000, 2, HarvestFees(strategist_amount=2, harvest_amount=1))


def test_assets_for_shares() -> None:
    assert compute_assets_for_shares(400, 1000, 1097) == 438
    assert compute_assets_for_shares(0, 1000, 1097) == 0
    assert compute_assets_for_shares(0, 0, 0) == 0


def test_price_per_share() -> None:
    assert compute_price_per_share(0, 0) == PRICE_PER_SHARE_SCALE
    assert compute_price_per_share(1000, 1000) == PRICE_PER_SHARE_SCALE
    assert compute_price_per_share(1000, 1097) == 1097 * PRICE_PER_SHARE_SCALE // 1000
