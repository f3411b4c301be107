"""Shared test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from realty_assistant.conversation.session_manager import ChatSession, SessionManager
from realty_assistant.schemas.context_schema import ConversationContext
from realty_assistant.schemas.conversation_schema import Intent, TurnRecord


class RecordingTurnRecorder:
    """Keeps every record it receives."""

    def __init__(self) -> None:
        self.records: list[TurnRecord] = []

    async def record_turn(self, record: TurnRecord) -> None:
        self.records.append(record)


class FailingTurnRecorder:
    """Raises on every write, like an unreachable backend."""

    def __init__(self) -> None:
        self.calls = 0

    async def record_turn(self, record: TurnRecord) -> None:
        self.calls += 1
        raise ConnectionError("backend unavailable")


@pytest.fixture
def empty_context():
    return ConversationContext()


@pytest.fixture
def recorder():
    return RecordingTurnRecorder()


@pytest.fixture
def guest_session(recorder):
    return ChatSession(recorder=recorder, thinking_delay=0)


@pytest.fixture
def user_session(recorder):
    return ChatSession(user_id="user-42", recorder=recorder, thinking_delay=0)


@pytest.fixture
def session_manager(recorder):
    return SessionManager(recorder=recorder, thinking_delay=0)


def make_record(
    session_id: str = "CHAT-001",
    intent: Intent = Intent.GENERAL,
    user_text: str = "hello",
    reply_text: str = "Thanks for your message!",
    entities: Optional[dict[str, Any]] = None,
) -> TurnRecord:
    """Helper to create a TurnRecord with sensible defaults."""
    return TurnRecord(
        session_id=session_id,
        user_text=user_text,
        reply_text=reply_text,
        classified_intent=intent,
        timestamp=datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc),
        extracted_entities=entities or {},
    )
