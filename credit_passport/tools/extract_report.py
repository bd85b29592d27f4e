#!/usr/bin/env python3
"""
Extract a canonical credit profile from a report text file.

Prints the ParsedProfile as JSON (with defaultedFields). Nothing is stored.

Usage:
  py -m credit_passport.tools.extract_report report.txt --country USA
  py -m credit_passport.tools.extract_report - --country Auto < report.txt
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from credit_passport.config.env import print_passport_startup
from credit_passport.config.settings import get_settings
from credit_passport.core.exceptions import CreditPassportError, ExtractionParseError
from credit_passport.extraction.adapter import build_gemini_adapter
from credit_passport.passport_logging import get_logger

logger = get_logger(__name__)


def _read_report(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def run(source: str, country: str | None) -> dict:
    text = _read_report(source)
    if not text.strip():
        raise ValueError("report text is empty")
    adapter = build_gemini_adapter(get_settings())
    return adapter.extract(text, country).to_dict()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract a credit profile from report text")
    parser.add_argument("source", help="Report text file, or - for stdin")
    parser.add_argument("--country", default="Auto", help="Country hint (default: Auto)")
    args = parser.parse_args(argv)

    print_passport_startup("extract_report")
    try:
        result = run(args.source, args.country)
    except ExtractionParseError as e:
        print(f"[extract_report] ERROR: {e}", file=sys.stderr)
        print(e.raw_text, file=sys.stderr)
        return 1
    except (CreditPassportError, OSError, ValueError) as e:
        logger.error("extract_report_failed", error=str(e))
        print(f"[extract_report] ERROR: {e}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
