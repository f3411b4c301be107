"""
Best-effort turn persistence.

In production the host app would store each turn summary in its backend
(the original wrote a consultation service request per chat turn). The
engine only needs something that accepts a TurnRecord; failures are the
caller's to log and ignore.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol, Union

from realty_assistant.config import settings
from realty_assistant.schemas.conversation_schema import TurnRecord

logger = logging.getLogger(__name__)


class TurnRecorder(Protocol):
    """Persistence collaborator for completed turns."""

    async def record_turn(self, record: TurnRecord) -> None: ...


class NullTurnRecorder:
    """Discards every record."""

    async def record_turn(self, record: TurnRecord) -> None:
        return None


class LoggingTurnRecorder:
    """Writes a one-line summary of each turn to the log."""

    async def record_turn(self, record: TurnRecord) -> None:
        logger.info(
            "Turn recorded for %s: intent=%s entities=%s",
            record.session_id,
            record.classified_intent.value,
            record.extracted_entities,
        )


class JsonlTurnRecorder:
    """Appends each turn as one JSON line to a log file.

    The file write runs in a worker thread so a slow disk never stalls
    the event loop serving the chat.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    async def record_turn(self, record: TurnRecord) -> None:
        line = record.model_dump_json()
        await asyncio.to_thread(self._append_line, line)

    def _append_line(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")


def build_default_recorder() -> TurnRecorder:
    """Recorder selected by the persistence settings."""
    if not settings.persistence.enabled:
        return NullTurnRecorder()
    return JsonlTurnRecorder(settings.persistence.turn_log_path)
