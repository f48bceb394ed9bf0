"""
Core vault algorithms (pure, integer-only)
"""

from .errors import (
    VaultError,
    InvalidAmountError,
    ExceedsMaximumError,
    UnauthorizedError,
    InsufficientSharesError,
    ArithmeticIntegrityError,
    VaultInvariantError,
)
from .events import Event, VaultEvent
from .fees import (
    FeeParams,
    HarvestFees,
    MAX_HARVEST_FEE_BPS,
    MAX_STRATEGIST_FEE_BPS,
    compute_harvest_fees,
    discount_rewards,
    pending_harvest_fee,
)
from .invariants import VaultObservation, check_all
from .shares import (
    PositionSnapshot,
    compute_assets_for_shares,
    compute_price_per_share,
    compute_shares_to_mint,
    compute_withdraw_payout,
    discounted_net_assets,
)
from .vault import VaultCommand, VaultParams, VaultStepResult, init_vault_params
from .vault import step as vault_step

__all__ = [
    "VaultError",
    "InvalidAmountError",
    "ExceedsMaximumError",
    "UnauthorizedError",
    "InsufficientSharesError",
    "ArithmeticIntegrityError",
    "VaultInvariantError",
    "Event",
    "VaultEvent",
    "FeeParams",
    "HarvestFees",
    "MAX_HARVEST_FEE_BPS",
    "MAX_STRATEGIST_FEE_BPS",
    "compute_harvest_fees",
    "discount_rewards",
    "pending_harvest_fee",
    "VaultObservation",
    "check_all",
    "PositionSnapshot",
    "compute_assets_for_shares",
    "compute_price_per_share",
    "compute_shares_to_mint",
    "compute_withdraw_payout",
    "discounted_net_assets",
    "VaultCommand",
    "VaultParams",
    "VaultStepResult",
    "init_vault_params",
    "vault_step",
]
