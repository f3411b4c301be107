"""Loading of JSONL turn logs written by JsonlTurnRecorder."""

import json
import logging
from pathlib import Path

from realty_assistant.schemas.conversation_schema import TurnRecord

logger = logging.getLogger(__name__)


def load_turn_log(path: Path, *, strict: bool = False) -> list[TurnRecord]:
    """Load every turn record from a JSONL file.

    Args:
        path: Turn log written one JSON object per line.
        strict: If True, raise on the first bad line instead of skipping it.
    """
    records: list[TurnRecord] = []
    failed: list[int] = []

    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(TurnRecord(**json.loads(line)))
            except Exception as e:
                if strict:
                    raise
                failed.append(line_no)
                logger.warning("Skipping %s line %d: %s", path.name, line_no, e)

    if failed:
        logger.warning(
            "Skipped %d of %d lines in %s", len(failed), len(failed) + len(records), path.name
        )
    return records


def load_turn_logs(directory: Path, *, strict: bool = False) -> list[TurnRecord]:
    """Load all ``*.jsonl`` turn logs in a directory, in file-name order."""
    records: list[TurnRecord] = []
    for path in sorted(directory.glob("*.jsonl")):
        records.extend(load_turn_log(path, strict=strict))
        logger.debug("Loaded turn log: %s", path.name)
    return records
