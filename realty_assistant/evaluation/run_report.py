"""
CLI entry point for the turn-log analytics report.

Usage:
    python -m realty_assistant.evaluation.run_report --log logs/chat_turns.jsonl
    python -m realty_assistant.evaluation.run_report --log logs/ --report report.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from realty_assistant.evaluation.metrics import MetricsCalculator
from realty_assistant.evaluation.turn_log import load_turn_log, load_turn_logs

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Summarize assistant conversations from turn logs."
    )
    parser.add_argument(
        "--log",
        type=str,
        required=True,
        help="Path to a JSONL turn log or a directory of them.",
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Path to write the report (default: stdout).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first malformed line instead of skipping it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    log_path = Path(args.log)
    if not log_path.exists():
        logger.error("Turn log not found: %s", log_path)
        sys.exit(1)

    if log_path.is_dir():
        records = load_turn_logs(log_path, strict=args.strict)
    else:
        records = load_turn_log(log_path, strict=args.strict)

    if not records:
        logger.error("No turn records found in %s", log_path)
        sys.exit(1)

    logger.info("Loaded %d turn(s) from %s", len(records), log_path)

    calculator = MetricsCalculator()
    metrics = calculator.calculate(records)
    output = calculator.format_report(metrics)
    misses = calculator.check_targets(metrics)
    if misses:
        output += "\n\nTARGETS MISSED:\n" + "\n".join(f"  {m}" for m in misses)

    if args.report:
        report_path = Path(args.report)
        report_path.write_text(output, encoding="utf-8")
        logger.info("Report written to %s", report_path)
    else:
        sys.stdout.write(output + "\n")


if __name__ == "__main__":
    main()
