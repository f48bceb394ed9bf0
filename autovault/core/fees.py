"""
Harvest fee kernels (deterministic, integer-only).

Fees are only ever charged on accrued rewards, never on principal. Each fee
fraction is computed independently with floor rounding:

    strategist_fee = floor(unclaimed * strategist_fee_bps / 10_000)
    harvest_fee    = floor(unclaimed * harvest_fee_bps / 10_000)

The rounding remainder stays with the holders (it is redeposited).
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ExceedsMaximumError, InvalidAmountError
from .math import bps_of, checked_sub, require_uint


MAX_STRATEGIST_FEE_BPS = 200
MAX_HARVEST_FEE_BPS = 100

DEFAULT_STRATEGIST_FEE_BPS = 200
DEFAULT_HARVEST_FEE_BPS = 100


def validate_fee_bps(value: int, *, name: str, maximum: int) -> int:
    """Return *value* if it is an int in ``[0, maximum]``."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise InvalidAmountError(f"{name} must be non-negative: {value}")
    if value > maximum:
        raise ExceedsMaximumError(f"{name} must be <= {maximum}: {value}")
    return value


@dataclass(frozen=True)
class FeeParams:
    strategist_fee_bps: int = DEFAULT_STRATEGIST_FEE_BPS
    harvest_fee_bps: int = DEFAULT_HARVEST_FEE_BPS

    def __post_init__(self) -> None:
        validate_fee_bps(self.strategist_fee_bps, name="strategist_fee_bps", maximum=MAX_STRATEGIST_FEE_BPS)
        validate_fee_bps(self.harvest_fee_bps, name="harvest_fee_bps", maximum=MAX_HARVEST_FEE_BPS)

    @property
    def total_bps(self) -> int:
        return self.strategist_fee_bps + self.harvest_fee_bps


@dataclass(frozen=True)
class HarvestFees:
    strategist_amount: int
    harvest_amount: int

    def __post_init__(self) -> None:
        for name, v in (
            ("strategist_amount", self.strategist_amount),
            ("harvest_amount", self.harvest_amount),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def total(self) -> int:
        return self.strategist_amount + self.harvest_amount


def compute_harvest_fees(unclaimed: int, params: FeeParams) -> HarvestFees:
    """
    Split the fee fractions off `unclaimed` rewards.

    Both fees are floor-rounded independently, so their sum never exceeds
    `unclaimed * total_bps / 10_000`.
    """
    require_uint(unclaimed, name="unclaimed")
    fees = HarvestFees(
        strategist_amount=bps_of(unclaimed, params.strategist_fee_bps),
        harvest_amount=bps_of(unclaimed, params.harvest_fee_bps),
    )
    if fees.total > unclaimed:
        raise AssertionError("harvest fees over-distributed")
    return fees


def discount_rewards(unclaimed: int, params: FeeParams) -> int:
    """Rewards net of the combined fee: ``unclaimed - floor(unclaimed * total_bps / 10_000)``."""
    require_uint(unclaimed, name="unclaimed")
    return checked_sub(unclaimed, bps_of(unclaimed, params.total_bps))


def pending_harvest_fee(unclaimed: int, params: FeeParams) -> int:
    """Harvester's cut of `unclaimed` (harvest fee only, not the combined fee)."""
    require_uint(unclaimed, name="unclaimed")
    return bps_of(unclaimed, params.harvest_fee_bps)
