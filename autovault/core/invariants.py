"""Invariant checkers for the vault.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass).

Checks run over a `VaultObservation` taken by the engine right after a
mutating operation, so they see the post-state of every collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .fees import MAX_HARVEST_FEE_BPS, MAX_STRATEGIST_FEE_BPS


@dataclass(frozen=True)
class VaultObservation:
    strategist_fee_bps: int
    harvest_fee_bps: int
    vault_residual: int          # vault's own base-asset balance after the operation
    residual_before: int         # same balance when the operation started
    settles_residual: bool       # operation redeposits everything it holds (withdraw, harvest)
    share_supply: int
    share_balances_total: int    # sum of all holder balances
    position_deposited: int


def inv_strategist_fee_bounded(o: VaultObservation) -> bool:
    return 0 <= o.strategist_fee_bps <= MAX_STRATEGIST_FEE_BPS


def inv_harvest_fee_bounded(o: VaultObservation) -> bool:
    return 0 <= o.harvest_fee_bps <= MAX_HARVEST_FEE_BPS


def inv_residual_settled(o: VaultObservation) -> bool:
    return not o.settles_residual or o.vault_residual == 0


def inv_residual_not_grown(o: VaultObservation) -> bool:
    # Base asset sent straight to the vault is tolerated until the next
    # settling operation, but no operation may add to it.
    return o.vault_residual <= o.residual_before


def inv_supply_matches_balances(o: VaultObservation) -> bool:
    return o.share_supply == o.share_balances_total


def inv_shares_backed_by_principal(o: VaultObservation) -> bool:
    # Shares without principal would make the next deposit unpriceable.
    if o.share_supply == 0:
        return True
    return o.position_deposited > 0


INVARIANT_REGISTRY: dict[str, Callable[[VaultObservation], bool]] = {
    "inv_strategist_fee_bounded": inv_strategist_fee_bounded,
    "inv_harvest_fee_bounded": inv_harvest_fee_bounded,
    "inv_residual_settled": inv_residual_settled,
    "inv_residual_not_grown": inv_residual_not_grown,
    "inv_supply_matches_balances": inv_supply_matches_balances,
    "inv_shares_backed_by_principal": inv_shares_backed_by_principal,
}


def check_all(observation: VaultObservation) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(observation)
    ]
