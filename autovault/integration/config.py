"""
Vault configuration (imperative shell).

Configs are plain frozen dataclasses; `load_vault_config()` reads one from a
YAML mapping such as:

    vault: "0xvault"
    asset: "0xasset"
    strategist: "0xstrategist"
    strategist_fee_bps: 200
    harvest_fee_bps: 100

Validation is fail-closed: unknown keys and out-of-range fees are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.fees import DEFAULT_HARVEST_FEE_BPS, DEFAULT_STRATEGIST_FEE_BPS, FeeParams
from ..core.vault import VaultParams


@dataclass(frozen=True)
class VaultConfig:
    vault: str
    asset: str
    strategist: str
    strategist_fee_bps: int = DEFAULT_STRATEGIST_FEE_BPS
    harvest_fee_bps: int = DEFAULT_HARVEST_FEE_BPS
    # Run the invariant registry after every mutating operation (fail-closed).
    check_invariants: bool = True

    def __post_init__(self) -> None:
        for name in ("vault", "asset", "strategist"):
            v = getattr(self, name)
            if not isinstance(v, str) or not v:
                raise ValueError(f"{name} must be a non-empty string")
        if self.vault == self.strategist:
            raise ValueError("vault and strategist must be distinct identities")
        if not isinstance(self.check_invariants, bool):
            raise TypeError("check_invariants must be a bool")
        # Range-check fees eagerly so a bad config never reaches the engine.
        self.fee_params()

    def fee_params(self) -> FeeParams:
        return FeeParams(strategist_fee_bps=self.strategist_fee_bps, harvest_fee_bps=self.harvest_fee_bps)

    def vault_params(self) -> VaultParams:
        return VaultParams(strategist=self.strategist, fees=self.fee_params())

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "VaultConfig":
        if not isinstance(d, Mapping):
            raise TypeError("vault config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"unknown vault config keys: {unknown}")
        return cls(**dict(d))

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_vault_config(path: Path | str) -> VaultConfig:
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("vault config YAML must be a mapping")
    section = obj.get("vault_config", obj)
    return VaultConfig.from_dict(section)
