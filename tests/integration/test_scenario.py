from __future__ import annotations

from pathlib import Path

import pytest

from autovault.integration.scenario import load_scenario, run_scenario
from autovault.integration.vault_snapshot import snapshot_hash

ROOT = Path(__file__).resolve().parents[2]

BASE = {
    "vault_config": {"vault": "0xvault", "asset": "0xasset", "strategist": "0xstrategist"},
    "balances": {"0xalice": 1000},
}


def _scenario(*steps):
    return {**BASE, "steps": list(steps)}


def test_bundled_harvest_scenario() -> None:
    scenario = load_scenario(ROOT / "tools" / "scenarios" / "harvest_e2e.yaml")
    results = run_scenario(scenario)
    assert all(r.ok for r in results)
    assert [r.op for r in results] == ["deposit", "accrue", "harvest", "withdraw"]
    assert [r.result for r in results] == [1000, 100, 1, 1097]

    after_harvest = results[2].snapshot
    assert after_harvest["position"] == {"deposited": 1097, "unclaimed": 0}
    assert after_harvest["vault_residual"] == 0

    final = results[-1].snapshot
    assert final["shares"] == {"total_supply": 0, "balances": []}


def test_failed_step_is_recorded_and_run_continues() -> None:
    results = run_scenario(
        _scenario(
            {"op": "deposit", "caller": "0xalice", "amount": 400},
            {"op": "set_harvest_fee", "caller": "0xalice", "fee_bps": 10},
            {"op": "set_strategist_fee", "caller": "0xstrategist", "fee_bps": 500},
            {"op": "withdraw", "caller": "0xalice", "shares": 100},
        )
    )
    assert [r.ok for r in results] == [True, False, False, True]
    assert results[1].code == "unauthorized"
    assert results[2].code == "exceeds_maximum"
    assert results[1].snapshot is None
    assert results[3].result == 100

    d = results[1].to_dict()
    assert d["ok"] is False
    assert "result" not in d and "snapshot" not in d


def test_stray_token_is_swept() -> None:
    results = run_scenario(
        _scenario(
            {"op": "send", "token": "0xstray", "amount": 42},
            {"op": "clear_tokens", "caller": "0xstrategist", "token": "0xstray"},
        )
    )
    assert results[1].ok and results[1].result == 42


def test_malformed_steps_are_recorded_and_run_continues() -> None:
    results = run_scenario(
        _scenario(
            {"op": "rebase"},
            {"op": "deposit", "caller": "0xalice", "amount": "100"},
            {"op": "withdraw", "caller": "0xalice"},
            {"op": "deposit", "caller": "0xalice", "amount": 100},
        )
    )
    assert [r.ok for r in results] == [False, False, False, True]
    assert [r.code for r in results[:3]] == ["invalid_step"] * 3
    assert "unknown scenario op" in results[0].error
    assert results[3].result == 100


def test_non_mapping_step_rejected() -> None:
    with pytest.raises(TypeError):
        run_scenario(_scenario("deposit"))


def test_snapshot_hash_is_deterministic() -> None:
    steps = (
        {"op": "deposit", "caller": "0xalice", "amount": 1000},
        {"op": "accrue", "amount": 100},
    )
    first = run_scenario(_scenario(*steps))
    second = run_scenario(_scenario(*steps))
    assert first[-1].to_dict()["snapshot_hash"] == second[-1].to_dict()["snapshot_hash"]
    assert snapshot_hash(first[0].snapshot) != snapshot_hash(first[1].snapshot)
    digest = snapshot_hash(first[-1].snapshot)
    assert digest.startswith("0x") and len(digest) == 66


def test_without_snapshots() -> None:
    results = run_scenario(_scenario({"op": "deposit", "caller": "0xalice", "amount": 10}), with_snapshots=False)
    assert results[0].snapshot is None
    assert "snapshot_hash" not in results[0].to_dict()
