"""
Per-session orchestration of chat turns.

A ChatSession owns one user's context and transcript. Each turn appends
the user message, waits out a short "thinking" pause, then runs
extraction, classification, context update and synthesis before
appending the assistant reply. The turn summary is handed to the
recorder in a detached task whose failure is logged and otherwise
ignored.

Usage:
    manager = SessionManager()
    session = manager.start_session()
    reply = await manager.submit_user_text(session.session_id, "budget 5 lakh")
"""

import asyncio
import uuid
from typing import Callable, Optional

from realty_assistant.config import settings
from realty_assistant.conversation.context_store import add_interest, apply_entities
from realty_assistant.conversation.entity_extractor import extract
from realty_assistant.conversation.intent_classifier import classify
from realty_assistant.conversation.response_synthesizer import GENERAL_ACTIONS, synthesize
from realty_assistant.logging_context import get_session_logger, set_session_id
from realty_assistant.schemas.context_schema import ConversationContext
from realty_assistant.schemas.conversation_schema import (
    ChatAction,
    ChatMessage,
    Reply,
    Role,
    TurnRecord,
)
from realty_assistant.tools.navigation import resolve_target
from realty_assistant.tools.turn_recorder import TurnRecorder, build_default_recorder

logger = get_session_logger(__name__)

Navigator = Callable[[str], None]


class SessionClosedError(Exception):
    """Raised when a closed session receives a new turn."""


class TurnInProgressError(Exception):
    """Raised when a turn is submitted before the previous one finished."""


class UnknownSessionError(Exception):
    """Raised when a session id is not registered with the manager."""


def greeting_for(surface: str) -> str:
    """Opening line for the surface the chat widget was opened from."""
    greetings = {
        "general": settings.assistant.greeting,
        "services": settings.assistant.services_greeting,
        "properties": settings.assistant.properties_greeting,
    }
    return greetings.get(surface, settings.assistant.greeting)


class ChatSession:
    """
    One user's conversation: context, transcript and pending turn log writes.

    Sessions share nothing with each other. The transcript is append-only
    and the context is replaced, never mutated, so a recorder still
    running from an earlier turn cannot observe later changes.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
        surface: str = "general",
        recorder: Optional[TurnRecorder] = None,
        thinking_delay: Optional[float] = None,
        navigator: Optional[Navigator] = None,
    ) -> None:
        self.session_id = session_id or f"CHAT-{uuid.uuid4().hex[:12]}"
        self.user_id = user_id
        self._recorder = recorder if recorder is not None else build_default_recorder()
        self._thinking_delay = (
            settings.assistant.thinking_delay_sec if thinking_delay is None else thinking_delay
        )
        self._navigator = navigator
        self._context = ConversationContext()
        self._transcript: list[ChatMessage] = []
        self._pending_writes: set[asyncio.Task] = set()
        self._thinking: Optional[asyncio.Future] = None
        self._closed = False

        self._transcript.append(ChatMessage(
            role=Role.ASSISTANT,
            text=greeting_for(surface),
            actions=GENERAL_ACTIONS,
        ))
        logger.info("Chat session %s started (surface: %s)", self.session_id, surface)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def context(self) -> ConversationContext:
        return self._context

    @property
    def transcript(self) -> list[ChatMessage]:
        return list(self._transcript)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def turn_in_progress(self) -> bool:
        return self._thinking is not None

    async def submit_user_text(self, text: str) -> Reply:
        """
        Process one user turn.

        Raises:
            SessionClosedError: If the session was closed, including mid-wait;
                the reply is then never produced.
            TurnInProgressError: If the previous turn is still thinking.
            asyncio.CancelledError: Only if the calling task itself is cancelled.
        """
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")
        if self._thinking is not None:
            raise TurnInProgressError(
                f"Session {self.session_id} is still answering the previous message"
            )

        set_session_id(self.session_id)
        self._transcript.append(ChatMessage(role=Role.USER, text=text))

        await self._think()
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} closed during the turn")

        reply, record = self._complete_turn(text)
        self._schedule_record(record)
        return reply

    async def _think(self) -> None:
        self._thinking = asyncio.ensure_future(asyncio.sleep(self._thinking_delay))
        try:
            await self._thinking
        except asyncio.CancelledError:
            # close() cancels the wait, not the caller; report that as a closed session
            caller = asyncio.current_task()
            if self._closed and not (caller is not None and caller.cancelling()):
                raise SessionClosedError(
                    f"Session {self.session_id} closed during the turn"
                ) from None
            raise
        finally:
            self._thinking = None

    def _complete_turn(self, text: str) -> tuple[Reply, TurnRecord]:
        entities = extract(text)
        intent = classify(text)
        self._context = add_interest(apply_entities(self._context, entities), intent)

        synthesized = synthesize(intent, entities, self._context, self.is_authenticated)
        self._transcript.append(ChatMessage(
            role=Role.ASSISTANT,
            text=synthesized.text,
            actions=synthesized.actions,
        ))
        logger.debug(
            "Turn answered: intent=%s entities=%s", intent.value, entities.to_dict()
        )

        reply = Reply(reply_text=synthesized.text, actions=synthesized.actions)
        record = TurnRecord(
            session_id=self.session_id,
            user_text=text,
            reply_text=synthesized.text,
            classified_intent=intent,
            extracted_entities=entities.to_dict(),
        )
        return reply, record

    def _schedule_record(self, record: TurnRecord) -> None:
        task = asyncio.create_task(self._record(record))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _record(self, record: TurnRecord) -> None:
        try:
            await self._recorder.record_turn(record)
        except Exception as e:
            logger.warning(
                "Failed to record turn for %s: %s", record.session_id, e, exc_info=True
            )

    async def drain(self) -> None:
        """Wait for outstanding turn log writes to finish."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    def invoke_action(self, action: ChatAction) -> str:
        """Resolve a picked action to its navigation target. Engine state is untouched."""
        target = resolve_target(action.kind)
        logger.info("Action '%s' (%s) -> %s", action.label, action.kind.value, target)
        if self._navigator is not None:
            self._navigator(target)
        return target

    def close(self) -> None:
        """Abandon the session. A reply still thinking is never delivered."""
        self._closed = True
        if self._thinking is not None:
            self._thinking.cancel()
        logger.info("Chat session %s closed", self.session_id)


class SessionManager:
    """Registry of independent chat sessions keyed by session id."""

    def __init__(
        self,
        recorder: Optional[TurnRecorder] = None,
        thinking_delay: Optional[float] = None,
        navigator: Optional[Navigator] = None,
    ) -> None:
        self._recorder = recorder if recorder is not None else build_default_recorder()
        self._thinking_delay = thinking_delay
        self._navigator = navigator
        self._sessions: dict[str, ChatSession] = {}

    def start_session(
        self, user_id: Optional[str] = None, surface: str = "general"
    ) -> ChatSession:
        session = ChatSession(
            user_id=user_id,
            surface=surface,
            recorder=self._recorder,
            thinking_delay=self._thinking_delay,
            navigator=self._navigator,
        )
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> ChatSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise UnknownSessionError(f"Unknown session: {session_id}") from None

    async def submit_user_text(self, session_id: str, text: str) -> Reply:
        return await self.get_session(session_id).submit_user_text(text)

    def invoke_action(self, session_id: str, action: ChatAction) -> str:
        return self.get_session(session_id).invoke_action(action)

    def end_session(self, session_id: str) -> None:
        """Close and forget a session. Pending turn log writes still complete."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise UnknownSessionError(f"Unknown session: {session_id}")
        session.close()

    @property
    def active_session_ids(self) -> list[str]:
        return list(self._sessions)
