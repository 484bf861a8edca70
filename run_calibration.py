#!/usr/bin/env python3
"""
run_calibration.py — Score the labelled letter corpus and gate on accuracy.

Usage:
    python run_calibration.py                            # Report to calibration/reports
    python run_calibration.py --corpus-dir path/         # Custom corpus location
    python run_calibration.py --min-accuracy 0.9         # Stricter gate
    python run_calibration.py --json                     # JSON only (for CI)

Exit codes:
    0  tier accuracy at or above the gate
    1  corpus directory missing or without samples
    2  tier accuracy below the gate
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root on sys.path so calibration/ and klartext/ import from a checkout
sys.path.insert(0, str(Path(__file__).parent))

from calibration.corpus_parser import parse_all_corpora
from calibration.benchmark import run_benchmark, format_report, save_report

MIN_TIER_ACCURACY = 0.8


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Klartext calibration: compare engine verdicts with labelled letters",
    )
    parser.add_argument("--corpus-dir", default="calibration/corpus",
                        help="Directory with labelled *.txt corpus files")
    parser.add_argument("--output-dir", default="calibration/reports",
                        help="Where calibration_report.txt/.json are written")
    parser.add_argument("--min-accuracy", type=float, default=MIN_TIER_ACCURACY,
                        help=f"Tier accuracy gate (default: {MIN_TIER_ACCURACY})")
    parser.add_argument("--json", action="store_true",
                        help="Print the JSON report only")
    return parser


def main(argv=None):
    args = _build_parser().parse_args(argv)

    corpus_dir = Path(args.corpus_dir)
    if not corpus_dir.is_dir():
        print(f"Error: Corpus directory not found: {corpus_dir}")
        sys.exit(1)

    sample_count = len(parse_all_corpora(corpus_dir))
    if sample_count == 0:
        print(f"Error: No labelled letters in {corpus_dir}")
        print("Add samples in the '---' block format, e.g. calibration/corpus/letters.txt")
        sys.exit(1)

    result = run_benchmark(corpus_dir=corpus_dir)
    report_path, json_path = save_report(result, args.output_dir)

    if args.json:
        print(json_path.read_text(encoding="utf-8"))
    else:
        print(f"Scored {sample_count} letters from {corpus_dir}\n")
        print(format_report(result))
        print(f"\nReports: {report_path}, {json_path}")

    if result.tier_accuracy < args.min_accuracy:
        print(
            f"\nTier accuracy {result.tier_accuracy:.1%} is below the "
            f"{args.min_accuracy:.0%} gate ({result.false_greens} false green(s))"
        )
        sys.exit(2)

    sys.exit(0)


if __name__ == "__main__":
    main()
