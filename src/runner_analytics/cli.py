"""
Runner Analytics - Command Line Interface
Summarize a run log CSV from the terminal
"""

import argparse
import logging
import os
import sys

from runner_analytics.analyzer import RunLogAnalyzer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runner-analytics",
        description="Metrics and forecasts for a date,person,miles run log.",
    )
    parser.add_argument("csv_path", help="CSV file with date, person and miles (or mi) columns")
    parser.add_argument("--person", help="only report this runner in the per-person section")
    parser.add_argument("--verbose", action="store_true", help="log pipeline details to stderr")
    return parser


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not os.path.isfile(args.csv_path):
        print(f"❌ Error: {args.csv_path} is not a file")
        return 1

    print("=" * 60)
    report = RunLogAnalyzer().analyze_file(args.csv_path, person=args.person)
    if report is None:
        return 1

    print(f"\n✅ Processed {len(report.entries)} run(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
