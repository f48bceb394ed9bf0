"""
In-memory reward-bearing staking position.

`RewardPool` accepts base-asset deposits, accrues rewards denominated in the
same asset, and pays principal/rewards back out through the shared
`TokenLedger`. Rewards are always backed: `fund_rewards` moves the reward
tokens into the pool before they are credited to an account.
"""

from __future__ import annotations

import logging
from typing import Dict

from ..core.errors import InvalidAmountError
from ..core.interfaces import Address, PositionService, TokenId
from .balances import Amount, TokenLedger

logger = logging.getLogger(__name__)


class RewardPool(PositionService):
    def __init__(self, ledger: TokenLedger, asset: TokenId, address: Address) -> None:
        self.ledger = ledger
        self.asset = asset
        self.address = address
        self._deposited: Dict[Address, Amount] = {}
        self._unclaimed: Dict[Address, Amount] = {}

    # -- Reads -------------------------------------------------------------------

    def deposited_for(self, account: Address) -> Amount:
        return self._deposited.get(account, 0)

    def unclaimed_for(self, account: Address) -> Amount:
        return self._unclaimed.get(account, 0)

    def total_deposited(self) -> Amount:
        return sum(self._deposited.values())

    def total_unclaimed(self) -> Amount:
        return sum(self._unclaimed.values())

    # -- Reward accrual ----------------------------------------------------------

    def fund_rewards(self, funder: Address, account: Address, amount: Amount) -> None:
        """Move `amount` from `funder` into the pool and credit it to `account` as unclaimed."""
        if amount <= 0:
            raise InvalidAmountError(f"reward amount must be positive: {amount}")
        self.ledger.transfer(self.asset, funder, self.address, amount)
        self._unclaimed[account] = self.unclaimed_for(account) + amount
        logger.debug("accrued %d reward for %s (unclaimed=%d)", amount, account, self._unclaimed[account])

    # -- PositionService ---------------------------------------------------------

    def deposit(self, account: Address, amount: Amount) -> None:
        if amount <= 0:
            raise InvalidAmountError(f"cannot stake {amount}")
        self.ledger.transfer_from(self.asset, self.address, account, self.address, amount)
        self._deposited[account] = self.deposited_for(account) + amount

    def claim(self, account: Address) -> Amount:
        reward = self.unclaimed_for(account)
        if reward > 0:
            self.ledger.transfer(self.asset, self.address, account, reward)
            self._unclaimed.pop(account, None)
        return reward

    def exit(self, account: Address) -> Amount:
        principal = self.deposited_for(account)
        if principal > 0:
            self.ledger.transfer(self.asset, self.address, account, principal)
            self._deposited.pop(account, None)
        return principal + self.claim(account)

    def verify_backed(self) -> bool:
        """Pool holdings cover every account's principal plus unclaimed rewards."""
        owed = self.total_deposited() + self.total_unclaimed()
        return self.ledger.balance_of(self.asset, self.address) >= owed

    # -- Checkpointable ----------------------------------------------------------

    def checkpoint(self) -> tuple[Dict[Address, Amount], Dict[Address, Amount]]:
        return dict(self._deposited), dict(self._unclaimed)

    def rollback(self, snapshot) -> None:
        deposited, unclaimed = snapshot
        self._deposited = dict(deposited)
        self._unclaimed = dict(unclaimed)

    def __repr__(self) -> str:
        return f"RewardPool({self.address}, deposited={self.total_deposited()}, unclaimed={self.total_unclaimed()})"
