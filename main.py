"""
Real-estate assistant entry point.

Usage:
    Console chat:      python main.py console [--scenario budget] [--user ID]
    Turn-log report:   python main.py report --log logs/chat_turns.jsonl
"""

import logging
import sys

from realty_assistant.config import settings

logger = logging.getLogger(__name__)


def _run_console_mode() -> None:
    """Start the offline console chat."""
    from console_demo import main as console_main

    console_main()


def _run_report_mode() -> None:
    """Summarize recorded turns."""
    from realty_assistant.evaluation.run_report import main as report_main

    report_main()


if __name__ == "__main__":
    mode = "console"
    if len(sys.argv) > 1 and sys.argv[1] in ("console", "report"):
        mode = sys.argv.pop(1)
    logger.debug("Starting %s in %s mode", settings.app_name, mode)
    if mode == "report":
        _run_report_mode()
    else:
        _run_console_mode()
