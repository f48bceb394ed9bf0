"""
Share pricing for the autocompounding vault.

This module implements the share/asset conversions with deterministic
rounding rules. All of them floor.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Pricing denominator: the fee-discounted net asset value
      nav = deposited + (unclaimed - floor(unclaimed * total_fee_bps / 10_000))
- Invariant: issuing or redeeming shares for one holder never changes the
  asset value of any other holder's shares (up to floor rounding, which
  always favours the remaining holders).

Callers pass a freshly read `PositionSnapshot`; nothing here caches position
totals.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ArithmeticIntegrityError, InvalidAmountError
from .fees import FeeParams, HarvestFees, discount_rewards
from .math import PRICE_PER_SHARE_SCALE, checked_add, checked_sub, mul_div, require_uint


@dataclass(frozen=True)
class PositionSnapshot:
    """Point-in-time totals of the vault's account in the external position."""

    deposited: int
    unclaimed: int

    def __post_init__(self) -> None:
        require_uint(self.deposited, name="deposited")
        require_uint(self.unclaimed, name="unclaimed")

    @property
    def total(self) -> int:
        return checked_add(self.deposited, self.unclaimed)


def discounted_net_assets(snapshot: PositionSnapshot, params: FeeParams) -> int:
    """Principal plus rewards net of both fee fractions."""
    return checked_add(snapshot.deposited, discount_rewards(snapshot.unclaimed, params))


def compute_shares_to_mint(amount: int, share_supply: int, net_assets: int) -> int:
    """
    Compute shares to issue for a deposit of `amount`.

    For the first deposit (share_supply == 0):
        shares = amount                       (1:1 bootstrap pricing)

    For subsequent deposits:
        shares = floor(amount * share_supply / net_assets)

    `net_assets` must be the pre-deposit discounted value.

    Raises:
        InvalidAmountError: If amount is not positive
        ArithmeticIntegrityError: If shares exist but net assets are zero
    """
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidAmountError(f"deposit amount must be positive: {amount}")
    require_uint(amount, name="amount")
    require_uint(share_supply, name="share_supply")
    require_uint(net_assets, name="net_assets")

    if share_supply == 0:
        return amount
    if net_assets == 0:
        raise ArithmeticIntegrityError("cannot price shares against zero net assets")
    return mul_div(amount, share_supply, net_assets)


def compute_withdraw_payout(
    shares: int,
    share_supply: int,
    vault_balance: int,
    fees: HarvestFees,
) -> int:
    """
    Compute the base-asset payout for redeeming `shares`.

    `vault_balance` is the vault's own holding after the full exit (all
    principal plus all claimed rewards). Formula:

        payout = floor(shares * (vault_balance - harvest_fee - strategist_fee) / share_supply)
                 + harvest_fee

    The harvester fee goes to the withdrawer in full, since the full exit is
    an implicit harvest triggered by that withdrawer.

    Raises:
        InvalidAmountError: If shares is not positive
        ArithmeticIntegrityError: If shares exceed supply or fees exceed the balance
    """
    if not isinstance(shares, int) or isinstance(shares, bool) or shares <= 0:
        raise InvalidAmountError(f"shares must be positive: {shares}")
    require_uint(share_supply, name="share_supply")
    require_uint(vault_balance, name="vault_balance")
    if shares > share_supply:
        raise ArithmeticIntegrityError(f"cannot redeem more shares than supply: {shares} > {share_supply}")

    distributable = checked_sub(checked_sub(vault_balance, fees.harvest_amount), fees.strategist_amount)
    return checked_add(mul_div(shares, distributable, share_supply), fees.harvest_amount)


def compute_assets_for_shares(shares: int, share_supply: int, net_assets: int) -> int:
    """Asset value of `shares`: ``floor(shares * net_assets / share_supply)`` (0 on empty supply)."""
    require_uint(shares, name="shares")
    require_uint(share_supply, name="share_supply")
    if share_supply == 0:
        return 0
    if shares > share_supply:
        raise ArithmeticIntegrityError(f"shares exceed supply: {shares} > {share_supply}")
    return mul_div(shares, net_assets, share_supply)


def compute_price_per_share(share_supply: int, net_assets: int) -> int:
    """Net assets per share, scaled by 1e18 (1e18 on empty supply)."""
    require_uint(share_supply, name="share_supply")
    if share_supply == 0:
        return PRICE_PER_SHARE_SCALE
    return mul_div(net_assets, PRICE_PER_SHARE_SCALE, share_supply)
