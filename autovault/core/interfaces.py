"""
Collaborator interfaces required by the vault engine.

The engine talks to three external services. Only the calls listed here are
used; in-memory implementations live in `autovault.state`.

Every service also exposes `checkpoint()` / `rollback(snapshot)` so the engine
can make each public operation all-or-nothing.
"""

from __future__ import annotations

from typing import Any, Dict

Address = str  # holder / contract identity
TokenId = str  # asset identifier


class Checkpointable:
    def checkpoint(self) -> Any:
        """Return an opaque snapshot of the current state."""
        raise NotImplementedError

    def rollback(self, snapshot: Any) -> None:
        """Restore the state captured by `checkpoint()`."""
        raise NotImplementedError


class AssetTransferService(Checkpointable):
    """Conservation-preserving token transfers with allowances."""

    def balance_of(self, token: TokenId, holder: Address) -> int:
        raise NotImplementedError

    def transfer(self, token: TokenId, sender: Address, destination: Address, amount: int) -> None:
        raise NotImplementedError

    def transfer_from(
        self,
        token: TokenId,
        spender: Address,
        holder: Address,
        destination: Address,
        amount: int,
    ) -> None:
        raise NotImplementedError

    def approve(self, token: TokenId, owner: Address, spender: Address, amount: int) -> None:
        raise NotImplementedError

    def allowance(self, token: TokenId, owner: Address, spender: Address) -> int:
        raise NotImplementedError


class PositionService(Checkpointable):
    """
    Pooled, reward-bearing staking position for the base asset.

    Mutating calls act on behalf of `account` (the calling vault). Reads must
    reflect accrued rewards at call time. `address` is the identity that pulls
    deposits, so it is the spender the vault approves.
    """

    address: Address

    def deposited_for(self, account: Address) -> int:
        raise NotImplementedError

    def unclaimed_for(self, account: Address) -> int:
        raise NotImplementedError

    def deposit(self, account: Address, amount: int) -> None:
        raise NotImplementedError

    def claim(self, account: Address) -> int:
        """Pay all pending rewards to `account`; return the amount paid."""
        raise NotImplementedError

    def exit(self, account: Address) -> int:
        """Withdraw all principal and claim all rewards; return the amount paid."""
        raise NotImplementedError


class ShareLedgerService(Checkpointable):
    """Fungible claim-token ledger (mint / burn / balance / supply)."""

    def mint(self, holder: Address, amount: int) -> None:
        raise NotImplementedError

    def burn(self, holder: Address, amount: int) -> None:
        raise NotImplementedError

    def balance_of(self, holder: Address) -> int:
        raise NotImplementedError

    def total_supply(self) -> int:
        raise NotImplementedError

    def get_all_balances(self) -> Dict[Address, int]:
        raise NotImplementedError
