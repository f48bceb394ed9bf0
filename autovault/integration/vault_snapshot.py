"""
Deterministic vault snapshots.

`vault_to_dict()` captures everything an auditor needs to recompute share
prices: parameters, share balances (sorted by holder), position totals and the
vault's residual balance. `snapshot_hash()` commits to it with a
domain-separated SHA-256 over canonical JSON.
"""

from __future__ import annotations

from typing import Any, Dict

from ..state.canonical import CANONICAL_ENCODING_VERSION, canonical_json_bytes, domain_sep_bytes, sha256_hex
from .vault_engine import AutocompoundVault


SNAPSHOT_VERSION = 1


def vault_to_dict(vault: AutocompoundVault) -> Dict[str, Any]:
    return {"version": SNAPSHOT_VERSION, "encoding": CANONICAL_ENCODING_VERSION, **vault.state_view()}


def snapshot_hash(snapshot: Dict[str, Any]) -> str:
    return sha256_hex(domain_sep_bytes("vault_snapshot", SNAPSHOT_VERSION) + canonical_json_bytes(snapshot))
