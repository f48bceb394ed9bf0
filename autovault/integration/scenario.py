"""
Scripted vault scenarios.

A scenario is a mapping (usually loaded from YAML):

    vault_config: {vault: ..., asset: ..., strategist: ...}
    funder: "0xfunder"                 # optional; source of reward tokens
    balances: {"0xalice": 1000}        # initial base-asset balances
    steps:
      - {op: deposit, caller: "0xalice", amount: 1000}
      - {op: accrue, amount: 100}
      - {op: harvest, caller: "0xkeeper"}
      - {op: withdraw, caller: "0xalice", shares: 500}
      - {op: set_strategist_fee, caller: "0xstrategist", fee_bps: 100}
      - {op: set_harvest_fee, caller: "0xstrategist", fee_bps: 50}
      - {op: clear_tokens, caller: "0xstrategist", token: "0xstray"}

Every holder named in `balances` approves the vault for an unlimited amount
before the first step. A failing step is recorded (ok=False, error, code) and
the scenario continues with the rolled-back state. Vault rejections carry the
error's own code; a malformed step (unknown op, missing or mistyped field)
is recorded with code "invalid_step".
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..core.errors import VaultError
from ..core.math import MAX_UINT256
from .config import VaultConfig
from .vault_engine import AutocompoundVault, make_in_memory_vault
from .vault_snapshot import snapshot_hash, vault_to_dict

DEFAULT_FUNDER = "reward-funder"
INVALID_STEP = "invalid_step"


@dataclass(frozen=True)
class ScenarioStepResult:
    index: int
    op: str
    ok: bool
    result: Optional[int] = None
    error: Optional[str] = None
    code: Optional[str] = None
    snapshot: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"index": self.index, "op": self.op, "ok": self.ok}
        if self.ok:
            out["result"] = self.result
        else:
            out["error"] = self.error
            out["code"] = self.code
        if self.snapshot is not None:
            out["snapshot"] = self.snapshot
            out["snapshot_hash"] = snapshot_hash(self.snapshot)
        return out


def _int_arg(step: Mapping[str, Any], key: str) -> int:
    v = step.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise TypeError(f"step field {key!r} must be an int")
    return v


def _str_arg(step: Mapping[str, Any], key: str) -> str:
    v = step.get(key)
    if not isinstance(v, str) or not v:
        raise TypeError(f"step field {key!r} must be a non-empty string")
    return v


def _apply_step(vault: AutocompoundVault, pool, funder: str, step: Mapping[str, Any]) -> Optional[int]:
    op = step.get("op")
    if op == "deposit":
        return vault.deposit(_str_arg(step, "caller"), _int_arg(step, "amount"))
    if op == "withdraw":
        return vault.withdraw(_str_arg(step, "caller"), _int_arg(step, "shares"))
    if op == "harvest":
        return vault.harvest(_str_arg(step, "caller"))
    if op == "accrue":
        amount = _int_arg(step, "amount")
        vault.assets.mint(vault.asset, funder, amount)
        pool.fund_rewards(funder, vault.address, amount)
        return amount
    if op == "set_strategist_fee":
        vault.set_strategist_fee(_str_arg(step, "caller"), _int_arg(step, "fee_bps"))
        return None
    if op == "set_harvest_fee":
        vault.set_harvest_fee(_str_arg(step, "caller"), _int_arg(step, "fee_bps"))
        return None
    if op == "clear_tokens":
        return vault.clear_tokens(_str_arg(step, "caller"), _str_arg(step, "token"))
    if op == "send":
        # Stray transfer straight to the vault (e.g. a mistaken airdrop).
        token = _str_arg(step, "token")
        vault.assets.mint(token, vault.address, _int_arg(step, "amount"))
        return None
    raise ValueError(f"unknown scenario op: {op!r}")


def run_scenario(scenario: Mapping[str, Any], *, with_snapshots: bool = True) -> List[ScenarioStepResult]:
    if not isinstance(scenario, Mapping):
        raise TypeError("scenario must be a mapping")
    config = VaultConfig.from_dict(scenario.get("vault_config") or {})
    funder = scenario.get("funder", DEFAULT_FUNDER)

    vault, ledger, pool = make_in_memory_vault(config)
    for holder, amount in sorted((scenario.get("balances") or {}).items()):
        ledger.mint(config.asset, holder, amount)
        ledger.approve(config.asset, holder, config.vault, MAX_UINT256)

    steps = scenario.get("steps") or []
    if not isinstance(steps, list):
        raise TypeError("scenario steps must be a list")

    results: List[ScenarioStepResult] = []
    for i, step in enumerate(steps):
        if not isinstance(step, Mapping):
            raise TypeError(f"step {i} must be a mapping")
        op = str(step.get("op"))
        try:
            value = _apply_step(vault, pool, funder, step)
        except VaultError as exc:
            results.append(ScenarioStepResult(index=i, op=op, ok=False, error=str(exc), code=exc.code))
            continue
        except (TypeError, ValueError) as exc:
            results.append(ScenarioStepResult(index=i, op=op, ok=False, error=str(exc), code=INVALID_STEP))
            continue
        snapshot = vault_to_dict(vault) if with_snapshots else None
        results.append(ScenarioStepResult(index=i, op=op, ok=True, result=value, snapshot=snapshot))
    return results


def load_scenario(path: Path | str) -> Mapping[str, Any]:
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("scenario YAML must be a mapping")
    return obj
