"""
Vault parameter kernel.

This is a pure state machine intended for the functional core:
- Inputs are integers / identities (range-checked here, fail-closed).
- Outputs are (next_params, effects) or an error.

Authorization is a plain equality test against the stored strategist
identity, performed before anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Mapping

from .errors import UnauthorizedError, VaultError
from .events import Event, VaultEvent
from .fees import (
    DEFAULT_HARVEST_FEE_BPS,
    DEFAULT_STRATEGIST_FEE_BPS,
    MAX_HARVEST_FEE_BPS,
    MAX_STRATEGIST_FEE_BPS,
    FeeParams,
    validate_fee_bps,
)


@dataclass(frozen=True)
class VaultParams:
    """Strategist identity plus the two fee fractions."""

    strategist: str
    fees: FeeParams = FeeParams()

    def __post_init__(self) -> None:
        if not isinstance(self.strategist, str) or not self.strategist:
            raise ValueError("strategist must be a non-empty identity string")
        if not isinstance(self.fees, FeeParams):
            raise TypeError("fees must be FeeParams")

    @property
    def strategist_fee_bps(self) -> int:
        return self.fees.strategist_fee_bps

    @property
    def harvest_fee_bps(self) -> int:
        return self.fees.harvest_fee_bps


@dataclass(frozen=True)
class VaultCommand:
    tag: Literal["set_strategist_fee", "set_harvest_fee"]
    caller: str
    args: Mapping[str, Any]


@dataclass(frozen=True)
class VaultStepResult:
    ok: bool
    state: VaultParams | None = None
    effects: Mapping[str, Any] | None = None
    error: str | None = None
    code: str | None = None


def init_vault_params(
    strategist: str,
    strategist_fee_bps: int = DEFAULT_STRATEGIST_FEE_BPS,
    harvest_fee_bps: int = DEFAULT_HARVEST_FEE_BPS,
) -> VaultParams:
    return VaultParams(
        strategist=strategist,
        fees=FeeParams(strategist_fee_bps=strategist_fee_bps, harvest_fee_bps=harvest_fee_bps),
    )


def require_strategist(params: VaultParams, caller: str) -> None:
    if caller != params.strategist:
        raise UnauthorizedError(f"caller {caller!r} is not the strategist")


def apply_command(params: VaultParams, cmd: VaultCommand) -> tuple[VaultParams, VaultEvent]:
    """Execute a parameter command. Raises `VaultError` on rejection."""
    if cmd.tag == "set_strategist_fee":
        return _set_strategist_fee(params, cmd)
    if cmd.tag == "set_harvest_fee":
        return _set_harvest_fee(params, cmd)
    raise ValueError(f"unknown action: {cmd.tag}")


def step(params: VaultParams, cmd: VaultCommand) -> VaultStepResult:
    """Execute a parameter command, reporting rejection in the result."""
    try:
        new_params, event = apply_command(params, cmd)
    except VaultError as exc:
        return VaultStepResult(ok=False, error=str(exc), code=exc.code)
    except (TypeError, ValueError) as exc:
        return VaultStepResult(ok=False, error=str(exc), code="invalid_param")
    return VaultStepResult(ok=True, state=new_params, effects={"event": event})


def _set_strategist_fee(params: VaultParams, cmd: VaultCommand) -> tuple[VaultParams, VaultEvent]:
    require_strategist(params, cmd.caller)
    value = validate_fee_bps(cmd.args.get("fee_bps"), name="strategist_fee_bps", maximum=MAX_STRATEGIST_FEE_BPS)
    new_params = replace(params, fees=replace(params.fees, strategist_fee_bps=value))
    return new_params, VaultEvent(event=Event.STRATEGIST_FEE_CHANGED, caller=cmd.caller, value=value)


def _set_harvest_fee(params: VaultParams, cmd: VaultCommand) -> tuple[VaultParams, VaultEvent]:
    require_strategist(params, cmd.caller)
    value = validate_fee_bps(cmd.args.get("fee_bps"), name="harvest_fee_bps", maximum=MAX_HARVEST_FEE_BPS)
    new_params = replace(params, fees=replace(params.fees, harvest_fee_bps=value))
    return new_params, VaultEvent(event=Event.HARVEST_FEE_CHANGED, caller=cmd.caller, value=value)
