"""Observable events emitted by the vault.

Events are consumed by off-core auditing; correctness never depends on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Optional


@unique
class Event(Enum):
    DEPOSITED = "Deposited"
    WITHDRAWN = "Withdrawn"
    HARVESTED = "Harvested"
    STRATEGIST_FEE_CHANGED = "StrategistFeeChanged"
    HARVEST_FEE_CHANGED = "HarvestFeeChanged"
    TOKENS_CLEARED = "TokensCleared"


@dataclass(frozen=True)
class VaultEvent:
    """One emitted event. Unused fields default to None/0."""

    event: Event
    caller: Optional[str] = None
    amount: int = 0               # assets deposited / paid out / harvest fee / tokens swept
    shares: int = 0               # deposited / withdrawn
    value: int = 0                # new fee bps
    token: Optional[str] = None   # tokens cleared

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"event": self.event.value}
        if self.caller is not None:
            out["caller"] = self.caller
        if self.event in (Event.STRATEGIST_FEE_CHANGED, Event.HARVEST_FEE_CHANGED):
            out["value"] = self.value
        else:
            out["amount"] = self.amount
        if self.event in (Event.DEPOSITED, Event.WITHDRAWN):
            out["shares"] = self.shares
        if self.token is not None:
            out["token"] = self.token
        return out
