"""
Autocompounding vault engine (imperative shell).

This wraps the functional core (`core.shares`, `core.fees`, `core.vault`)
around three collaborators:
- a `PositionService` holding the pooled, reward-bearing stake,
- an `AssetTransferService` moving the base asset,
- a `ShareLedgerService` for the claim token.

Every public operation is serialized on one re-entrant lock and runs inside a
checkpoint scope: on any exception all collaborators are rolled back and no
event is published. Position totals are read fresh inside each operation and
passed explicitly through the formulas; nothing is cached across calls.

Withdraw and harvest leave the vault's own base-asset balance at zero:
whatever is not paid out is redeposited into the position. Other operations
never add to that balance; base asset sent to the vault directly waits there
until the next withdraw or harvest compounds it (or the strategist sweeps it).
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..core.errors import InsufficientSharesError, InvalidAmountError, VaultInvariantError
from ..core.events import Event, VaultEvent
from ..core.fees import FeeParams, compute_harvest_fees, pending_harvest_fee
from ..core.interfaces import Address, AssetTransferService, PositionService, ShareLedgerService, TokenId
from ..core.invariants import VaultObservation, check_all
from ..core.math import MAX_UINT256
from ..core.shares import (
    PositionSnapshot,
    compute_assets_for_shares,
    compute_price_per_share,
    compute_shares_to_mint,
    compute_withdraw_payout,
    discounted_net_assets,
)
from ..core.vault import VaultCommand, VaultParams, apply_command, require_strategist
from ..state.balances import TokenLedger
from ..state.position import RewardPool
from ..state.shares import ShareLedger
from .config import VaultConfig

logger = logging.getLogger(__name__)

EventListener = Callable[[VaultEvent], None]


def _require_positive(value: int, *, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise InvalidAmountError(f"{name} must be positive: {value}")


class AutocompoundVault:
    def __init__(
        self,
        config: VaultConfig,
        *,
        assets: AssetTransferService,
        position: PositionService,
        shares: ShareLedgerService,
    ) -> None:
        self.config = config
        self.address: Address = config.vault
        self.asset: TokenId = config.asset
        self.assets = assets
        self.position = position
        self.shares = shares

        self._params: VaultParams = config.vault_params()
        self._lock = threading.RLock()
        self._events: List[VaultEvent] = []
        self._pending: List[VaultEvent] = []
        self._listeners: List[EventListener] = []

        # One-time unlimited allowance so the position can pull deposits.
        self.assets.approve(self.asset, self.address, self.position.address, MAX_UINT256)
        logger.info(
            "vault %s initialised: asset=%s strategist=%s fees=%d/%d bps",
            self.address,
            self.asset,
            self._params.strategist,
            self._params.strategist_fee_bps,
            self._params.harvest_fee_bps,
        )

    # -- Parameters / events -----------------------------------------------------

    @property
    def params(self) -> VaultParams:
        return self._params

    @property
    def fee_params(self) -> FeeParams:
        return self._params.fees

    @property
    def strategist(self) -> Address:
        return self._params.strategist

    @property
    def events(self) -> List[VaultEvent]:
        return list(self._events)

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback that receives each event after its operation commits."""
        self._listeners.append(listener)

    # -- Read-only projections ---------------------------------------------------

    def _position_snapshot(self) -> PositionSnapshot:
        return PositionSnapshot(
            deposited=self.position.deposited_for(self.address),
            unclaimed=self.position.unclaimed_for(self.address),
        )

    def discounted_net_assets(self) -> int:
        """Principal plus pending rewards net of both fee fractions."""
        with self._lock:
            return discounted_net_assets(self._position_snapshot(), self._params.fees)

    def total_assets(self) -> int:
        """Principal plus pending rewards, undiscounted."""
        with self._lock:
            return self._position_snapshot().total

    def total_pending_rewards(self) -> int:
        with self._lock:
            return self.position.unclaimed_for(self.address)

    def total_pending_harvest_fees(self) -> int:
        """What a harvest right now would pay its caller."""
        with self._lock:
            return pending_harvest_fee(self.position.unclaimed_for(self.address), self._params.fees)

    def total_supply(self) -> int:
        with self._lock:
            return self.shares.total_supply()

    def balance_of(self, holder: Address) -> int:
        with self._lock:
            return self.shares.balance_of(holder)

    def total_staked_assets(self, holder: Address) -> int:
        """Fee-discounted asset value of `holder`'s shares."""
        with self._lock:
            return compute_assets_for_shares(
                self.shares.balance_of(holder),
                self.shares.total_supply(),
                self.discounted_net_assets(),
            )

    def price_per_share(self) -> int:
        """Discounted net assets per share, scaled by 1e18."""
        with self._lock:
            return compute_price_per_share(self.shares.total_supply(), self.discounted_net_assets())

    def vault_residual(self) -> int:
        """The vault's own base-asset holding (zero unless sent to it directly)."""
        return self.assets.balance_of(self.asset, self.address)

    def state_view(self) -> Dict[str, Any]:
        """Consistent read of parameters, share balances and position totals."""
        with self._lock:
            holders = self.shares.get_all_balances()
            return {
                "vault": self.address,
                "asset": self.asset,
                "params": {
                    "strategist": self._params.strategist,
                    "strategist_fee_bps": self._params.strategist_fee_bps,
                    "harvest_fee_bps": self._params.harvest_fee_bps,
                },
                "shares": {
                    "total_supply": self.shares.total_supply(),
                    "balances": [{"holder": h, "shares": holders[h]} for h in sorted(holders)],
                },
                "position": {
                    "deposited": self.position.deposited_for(self.address),
                    "unclaimed": self.position.unclaimed_for(self.address),
                },
                "discounted_net_assets": self.discounted_net_assets(),
                "price_per_share": self.price_per_share(),
                "vault_residual": self.vault_residual(),
            }

    # -- Atomicity ---------------------------------------------------------------

    @contextmanager
    def _atomic(self, op: str, *, settles_residual: bool = False) -> Iterator[None]:
        with self._lock:
            services = (self.assets, self.shares, self.position)
            checkpoints = [(svc, svc.checkpoint()) for svc in services]
            params = self._params
            residual_before = self.vault_residual()
            self._pending = []
            try:
                yield
                if self.config.check_invariants:
                    violations = check_all(self._observe(residual_before, settles_residual))
                    if violations:
                        raise VaultInvariantError(violations)
            except Exception as exc:
                for svc, snap in reversed(checkpoints):
                    svc.rollback(snap)
                self._params = params
                self._pending = []
                logger.warning("%s rolled back: %s", op, exc)
                raise
            published, self._pending = self._pending, []
            self._events.extend(published)
        for event in published:
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception:
                    # The operation has committed; a listener cannot undo it.
                    logger.exception("listener %r failed on %s", listener, event.event.value)

    def _emit(self, event: VaultEvent) -> None:
        self._pending.append(event)

    def _observe(self, residual_before: int, settles_residual: bool) -> VaultObservation:
        return VaultObservation(
            strategist_fee_bps=self._params.strategist_fee_bps,
            harvest_fee_bps=self._params.harvest_fee_bps,
            vault_residual=self.vault_residual(),
            residual_before=residual_before,
            settles_residual=settles_residual,
            share_supply=self.shares.total_supply(),
            share_balances_total=sum(self.shares.get_all_balances().values()),
            position_deposited=self.position.deposited_for(self.address),
        )

    def _redeposit_all(self) -> int:
        remaining = self.vault_residual()
        if remaining > 0:
            self.position.deposit(self.address, remaining)
        return remaining

    # -- Deposit / withdraw / harvest -------------------------------------------

    def deposit(self, caller: Address, amount: int) -> int:
        """
        Deposit `amount` of the base asset and return the shares issued.

        Shares are priced against the pre-deposit discounted net assets; the
        first deposit into an empty vault is priced 1:1.
        """
        _require_positive(amount, name="amount")
        with self._atomic("deposit"):
            supply = self.shares.total_supply()
            nav = discounted_net_assets(self._position_snapshot(), self._params.fees)
            issued = compute_shares_to_mint(amount, supply, nav)
            if issued == 0:
                raise InvalidAmountError(f"deposit of {amount} is too small to issue a share")

            self.shares.mint(caller, issued)
            self.assets.transfer_from(self.asset, self.address, caller, self.address, amount)
            self.position.deposit(self.address, amount)

            self._emit(VaultEvent(event=Event.DEPOSITED, caller=caller, amount=amount, shares=issued))
        logger.info("deposit: %s deposited %d, issued %d shares (supply=%d)", caller, amount, issued, supply + issued)
        return issued

    def withdraw(self, caller: Address, shares: int) -> int:
        """
        Redeem `shares` and return the base-asset amount paid to `caller`.

        The position offers no per-holder partial exit, so the whole position
        is unwound, the fees are settled, the caller is paid, and everything
        left is redeposited for the remaining holders. The harvester fee of
        that implicit harvest is paid to the withdrawer.
        """
        _require_positive(shares, name="shares")
        with self._atomic("withdraw", settles_residual=True):
            held = self.shares.balance_of(caller)
            if held < shares:
                raise InsufficientSharesError(f"{caller} holds {held} shares, cannot redeem {shares}")

            fees = compute_harvest_fees(self.position.unclaimed_for(self.address), self._params.fees)
            self.position.exit(self.address)

            supply = self.shares.total_supply()
            payout = compute_withdraw_payout(shares, supply, self.vault_residual(), fees)

            self.shares.burn(caller, shares)
            self.assets.transfer(self.asset, self.address, self._params.strategist, fees.strategist_amount)
            self.assets.transfer(self.asset, self.address, caller, payout)
            redeposited = self._redeposit_all()

            self._emit(VaultEvent(event=Event.WITHDRAWN, caller=caller, amount=payout, shares=shares))
        logger.info(
            "withdraw: %s burned %d shares for %d (strategist_fee=%d harvest_fee=%d redeposited=%d)",
            caller,
            shares,
            payout,
            fees.strategist_amount,
            fees.harvest_amount,
            redeposited,
        )
        return payout

    def harvest(self, caller: Address) -> int:
        """
        Claim pending rewards, pay both fees and compound the rest.

        Permissionless; returns the harvest fee paid to `caller`.
        """
        with self._atomic("harvest", settles_residual=True):
            unclaimed = self.position.unclaimed_for(self.address)
            fees = compute_harvest_fees(unclaimed, self._params.fees)
            self.position.claim(self.address)

            self.assets.transfer(self.asset, self.address, self._params.strategist, fees.strategist_amount)
            self.assets.transfer(self.asset, self.address, caller, fees.harvest_amount)
            compounded = self._redeposit_all()

            self._emit(VaultEvent(event=Event.HARVESTED, caller=caller, amount=fees.harvest_amount))
        logger.info(
            "harvest: %s claimed %d (strategist_fee=%d harvest_fee=%d compounded=%d)",
            caller,
            unclaimed,
            fees.strategist_amount,
            fees.harvest_amount,
            compounded,
        )
        return fees.harvest_amount

    # -- Strategist operations ---------------------------------------------------

    def _apply(self, cmd: VaultCommand) -> None:
        with self._atomic(cmd.tag):
            new_params, event = apply_command(self._params, cmd)
            self._params = new_params
            self._emit(event)
        logger.info("%s: %s -> %d", cmd.tag, cmd.caller, event.value)

    def set_strategist_fee(self, caller: Address, fee_bps: int) -> None:
        self._apply(VaultCommand(tag="set_strategist_fee", caller=caller, args={"fee_bps": fee_bps}))

    def set_harvest_fee(self, caller: Address, fee_bps: int) -> None:
        self._apply(VaultCommand(tag="set_harvest_fee", caller=caller, args={"fee_bps": fee_bps}))

    def clear_tokens(self, caller: Address, token: TokenId) -> int:
        """
        Sweep the vault's whole balance of `token` to the strategist.

        The base asset is not special-cased; its balance is zero between
        operations, so sweeping it normally moves nothing.
        """
        with self._atomic("clear_tokens"):
            require_strategist(self._params, caller)
            amount = self.assets.balance_of(token, self.address)
            if amount > 0:
                self.assets.transfer(token, self.address, self._params.strategist, amount)
            self._emit(VaultEvent(event=Event.TOKENS_CLEARED, caller=caller, amount=amount, token=token))
        logger.info("clear_tokens: swept %d of %s to strategist", amount, token)
        return amount

    def __repr__(self) -> str:
        return f"AutocompoundVault({self.address}, supply={self.shares.total_supply()})"


def make_in_memory_vault(
    config: VaultConfig,
    *,
    position_address: Optional[Address] = None,
) -> Tuple[AutocompoundVault, TokenLedger, RewardPool]:
    """Build a vault wired to fresh in-memory ledgers and a reward pool."""
    ledger = TokenLedger()
    pool = RewardPool(ledger, config.asset, position_address or f"{config.vault}:position")
    vault = AutocompoundVault(config, assets=ledger, position=pool, shares=ShareLedger())
    return vault, ledger, pool
