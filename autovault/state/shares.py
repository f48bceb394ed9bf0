"""
Share (claim token) balance tracking for the vault.

Shares are tracked separately from asset balances; the vault is the only
minter and burner.
"""

from __future__ import annotations

from typing import Dict

from ..core.errors import ArithmeticIntegrityError, InvalidAmountError
from ..core.interfaces import Address, ShareLedgerService
from ..core.math import MAX_UINT256
from .balances import Amount


class ShareLedger(ShareLedgerService):
    """
    Deterministic share balance table mapping holder -> shares.

    Notes:
    - Share balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    - `total_supply()` always equals the sum of balances.
    """

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}
        self._supply: Amount = 0

    def balance_of(self, holder: Address) -> Amount:
        """Get share balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def total_supply(self) -> Amount:
        return self._supply

    def mint(self, holder: Address, amount: Amount) -> None:
        if amount <= 0:
            raise InvalidAmountError(f"mint amount must be positive: {amount}")
        new_supply = self._supply + amount
        if new_supply > MAX_UINT256:
            raise ArithmeticIntegrityError(f"share supply overflow: {new_supply}")
        self._set(holder, self.balance_of(holder) + amount)
        self._supply = new_supply

    def burn(self, holder: Address, amount: Amount) -> None:
        if amount <= 0:
            raise InvalidAmountError(f"burn amount must be positive: {amount}")
        current = self.balance_of(holder)
        if current < amount:
            raise ArithmeticIntegrityError(
                f"Insufficient shares: {current} - {amount} = {current - amount} < 0"
            )
        self._set(holder, current - amount)
        self._supply -= amount

    def _set(self, holder: Address, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def get_all_balances(self) -> Dict[Address, Amount]:
        """Return all share balances."""
        return dict(self._balances)

    def checkpoint(self) -> tuple[Dict[Address, Amount], Amount]:
        return dict(self._balances), self._supply

    def rollback(self, snapshot) -> None:
        balances, supply = snapshot
        self._balances = dict(balances)
        self._supply = supply

    def __repr__(self) -> str:
        return f"ShareLedger({len(self._balances)} holders, supply={self._supply})"
