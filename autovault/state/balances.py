"""
In-memory base-asset and token ledger.

`BalanceTable` is the raw (holder, token) -> amount map; `TokenLedger` layers
transfers and allowances on top of it and is what the vault engine talks to
as its `AssetTransferService`.
"""

from typing import Dict, Optional, Tuple

from ..core.errors import ArithmeticIntegrityError, InvalidAmountError
from ..core.interfaces import Address, AssetTransferService, TokenId
from ..core.math import MAX_UINT256


Amount = int  # 0 <= amount <= MAX_UINT256

BalanceKey = Tuple[Address, TokenId]
AllowanceKey = Tuple[TokenId, Address, Address]


class BalanceTable:
    """Sparse (holder, token) -> amount map; zero entries are dropped."""

    def __init__(self, entries: Optional[Dict[BalanceKey, Amount]] = None) -> None:
        self._balances: Dict[BalanceKey, Amount] = {}
        for (holder, token), amount in (entries or {}).items():
            self.set(holder, token, amount)

    def get(self, holder: Address, token: TokenId) -> Amount:
        return self._balances.get((holder, token), 0)

    def set(self, holder: Address, token: TokenId, amount: Amount) -> None:
        if amount < 0 or amount > MAX_UINT256:
            raise ArithmeticIntegrityError(f"balance of {holder}/{token} out of range: {amount}")
        if amount == 0:
            self._balances.pop((holder, token), None)
        else:
            self._balances[(holder, token)] = amount

    def add(self, holder: Address, token: TokenId, delta: int) -> None:
        """Apply a signed delta; a debit past zero traps."""
        current = self.get(holder, token)
        if current + delta < 0:
            raise ArithmeticIntegrityError(f"insufficient {token} balance for {holder}: {current} < {-delta}")
        self.set(holder, token, current + delta)

    def subtract(self, holder: Address, token: TokenId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        self.add(holder, token, -amount)

    def get_all_balances(self) -> Dict[BalanceKey, Amount]:
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"


class TokenLedger(AssetTransferService):
    """
    In-memory asset transfer service.

    Each transfer debits before it credits, so a failed debit moves nothing.
    An allowance of MAX_UINT256 is unlimited and is never decremented.
    """

    def __init__(self) -> None:
        self.balances = BalanceTable()
        self._allowances: Dict[AllowanceKey, Amount] = {}

    def mint(self, token: TokenId, holder: Address, amount: Amount) -> None:
        """Credit new tokens to `holder` (reward funding, scenario faucets)."""
        if amount < 0:
            raise InvalidAmountError(f"mint amount must be non-negative: {amount}")
        self.balances.add(holder, token, amount)

    # -- AssetTransferService ----------------------------------------------------

    def balance_of(self, token: TokenId, holder: Address) -> Amount:
        return self.balances.get(holder, token)

    def transfer(self, token: TokenId, sender: Address, destination: Address, amount: Amount) -> None:
        if amount < 0:
            raise InvalidAmountError(f"transfer amount must be non-negative: {amount}")
        if amount == 0 or sender == destination:
            if self.balances.get(sender, token) < amount:
                raise ArithmeticIntegrityError(f"insufficient {token} balance for {sender}: {amount}")
            return
        self.balances.subtract(sender, token, amount)
        self.balances.add(destination, token, amount)

    def transfer_from(
        self,
        token: TokenId,
        spender: Address,
        holder: Address,
        destination: Address,
        amount: Amount,
    ) -> None:
        delegated = spender != holder
        current = self.allowance(token, holder, spender)
        if delegated and current < amount:
            raise ArithmeticIntegrityError(f"allowance {holder} -> {spender} is {current}, need {amount}")
        self.transfer(token, holder, destination, amount)
        if delegated and current != MAX_UINT256:
            self._allowances[(token, holder, spender)] = current - amount

    def approve(self, token: TokenId, owner: Address, spender: Address, amount: Amount) -> None:
        if amount < 0 or amount > MAX_UINT256:
            raise InvalidAmountError(f"allowance out of range: {amount}")
        self._allowances[(token, owner, spender)] = amount

    def allowance(self, token: TokenId, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((token, owner, spender), 0)

    # -- Checkpointable ----------------------------------------------------------

    def checkpoint(self) -> Tuple[Dict[BalanceKey, Amount], Dict[AllowanceKey, Amount]]:
        return self.balances.get_all_balances(), dict(self._allowances)

    def rollback(self, snapshot) -> None:
        balances, allowances = snapshot
        self.balances = BalanceTable(balances)
        self._allowances = dict(allowances)

    def __repr__(self) -> str:
        return f"TokenLedger({self.balances!r}, {len(self._allowances)} allowances)"
