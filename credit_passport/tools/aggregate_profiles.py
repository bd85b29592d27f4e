#!/usr/bin/env python3
"""
Aggregate persisted profiles from a JSON file into dashboard statistics.

The file holds a JSON array of profiles as a chain read returns them: each
item either a 10-element array or an object with the same field names.

Usage:
  py -m credit_passport.tools.aggregate_profiles profiles.json
  py -m credit_passport.tools.aggregate_profiles profiles.json --scale legacy_850
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from credit_passport.passport_logging import get_logger
from credit_passport.profiles.decoder import decode_profiles
from credit_passport.scoring.aggregation import ScoreScale, global_score
from credit_passport.scoring.dashboard import dashboard_summary

logger = get_logger(__name__)


def run(path: Path, scale: ScoreScale = ScoreScale.PERCENT) -> dict[str, Any]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    profiles = decode_profiles(raw)
    summary = dashboard_summary(profiles)
    summary["globalScore"] = global_score(profiles, scale=scale)
    summary["scale"] = scale.value
    logger.info("aggregate_profiles_done", path=str(path), profiles=len(profiles))
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Aggregate persisted credit profiles")
    parser.add_argument("path", type=Path, help="JSON file with an array of profiles")
    parser.add_argument(
        "--scale",
        choices=[s.value for s in ScoreScale],
        default=ScoreScale.PERCENT.value,
        help="Global score scale (default: percent)",
    )
    args = parser.parse_args(argv)

    try:
        summary = run(args.path, ScoreScale(args.scale))
    except (OSError, json.JSONDecodeError) as e:
        print(f"[aggregate_profiles] ERROR: {e}", file=sys.stderr)
        return 1
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
