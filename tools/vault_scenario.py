#!/usr/bin/env python3
"""
Run a scripted vault scenario and print the per-step results as JSON.

Example:
  python3 tools/vault_scenario.py tools/scenarios/harvest_e2e.yaml
  python3 tools/vault_scenario.py tools/scenarios/harvest_e2e.yaml --no-snapshots -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from autovault.integration.scenario import load_scenario, run_scenario
from autovault.log import setup_logging_to_console


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Replay a YAML vault scenario against in-memory collaborators.")
    p.add_argument("scenario", type=Path, help="Path to scenario YAML")
    p.add_argument("--no-snapshots", action="store_true", help="Omit the post-step vault snapshot from the output")
    p.add_argument("-v", "--verbose", action="store_true", help="Log engine activity to stderr")
    args = p.parse_args(argv)

    setup_logging_to_console(logging.INFO if args.verbose else logging.WARNING)

    results = run_scenario(load_scenario(args.scenario), with_snapshots=not args.no_snapshots)
    json.dump([r.to_dict() for r in results], sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")
    return 0 if all(r.ok for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
