from __future__ import annotations

import json
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def test_cli_prints_results_and_exit_code(capsys) -> None:
    from tools.vault_scenario import main

    rc = main([str(ROOT / "tools" / "scenarios" / "harvest_e2e.yaml"), "--no-snapshots"])
    out = json.loads(capsys.readouterr().out)

    assert rc == 0
    assert [step["result"] for step in out] == [1000, 100, 1, 1097]
    assert all("snapshot" not in step for step in out)


def test_cli_nonzero_exit_on_rejected_step(tmp_path: Path, capsys) -> None:
    scenario = tmp_path / "bad.yaml"
    scenario.write_text(
        "vault_config: {vault: v, asset: a, strategist: s}\n"
        "steps:\n"
        "  - {op: set_harvest_fee, caller: mallory, fee_bps: 1}\n",
        encoding="utf-8",
    )
    from tools.vault_scenario import main

    assert main([str(scenario)]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out[0]["code"] == "unauthorized"
