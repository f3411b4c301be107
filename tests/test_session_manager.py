"""Tests for chat session turns, persistence isolation and the session registry."""

import asyncio

import pytest

from realty_assistant.config import settings
from realty_assistant.conversation.response_synthesizer import (
    GENERAL_ACTIONS,
    LEAD_CAPTURE_SUFFIX,
)
from realty_assistant.conversation.session_manager import (
    ChatSession,
    SessionClosedError,
    TurnInProgressError,
    UnknownSessionError,
)
from realty_assistant.schemas.conversation_schema import (
    ActionKind,
    ChatAction,
    Intent,
    Role,
)
from tests.conftest import FailingTurnRecorder, RecordingTurnRecorder


class TestSessionStart:
    def test_seed_greeting(self, guest_session):
        transcript = guest_session.transcript
        assert len(transcript) == 1
        assert transcript[0].role == Role.ASSISTANT
        assert transcript[0].text == settings.assistant.greeting
        assert transcript[0].actions == GENERAL_ACTIONS

    def test_surface_specific_greeting(self, recorder):
        session = ChatSession(surface="properties", recorder=recorder, thinking_delay=0)
        assert session.transcript[0].text == settings.assistant.properties_greeting

    def test_unknown_surface_falls_back_to_general(self, recorder):
        session = ChatSession(surface="blog", recorder=recorder, thinking_delay=0)
        assert session.transcript[0].text == settings.assistant.greeting

    def test_context_starts_empty(self, guest_session):
        ctx = guest_session.context
        assert ctx.budget is None and ctx.timeline is None and ctx.location is None
        assert ctx.lead_captured is False

    def test_authentication_follows_user_id(self, guest_session, user_session):
        assert guest_session.is_authenticated is False
        assert user_session.is_authenticated is True

    def test_sessions_are_independent(self, recorder):
        a = ChatSession(recorder=recorder, thinking_delay=0)
        b = ChatSession(recorder=recorder, thinking_delay=0)
        assert a.session_id != b.session_id


class TestTurns:
    @pytest.mark.asyncio
    async def test_end_to_end_budget_turn(self, guest_session):
        reply = await guest_session.submit_user_text(
            "What's the cost for a 2BHK near Whitefield, budget is around 40 lakh"
        )
        assert "₹40.0L" in reply.reply_text
        assert [a.label for a in reply.actions] == [
            "Get Cost Estimation", "View Pricing Services",
        ]
        ctx = guest_session.context
        assert ctx.budget.value_in_base_units == 4_000_000
        assert ctx.location == "Whitefield"
        assert ctx.interests == frozenset({"budget_inquiry"})

    @pytest.mark.asyncio
    async def test_transcript_order(self, guest_session):
        await guest_session.submit_user_text("hello")
        await guest_session.submit_user_text("I need a contractor")
        roles = [m.role for m in guest_session.transcript]
        assert roles == [Role.ASSISTANT, Role.USER, Role.ASSISTANT, Role.USER, Role.ASSISTANT]
        texts = [m.text for m in guest_session.transcript]
        assert texts[1] == "hello"
        assert texts[3] == "I need a contractor"
        times = [m.created_at for m in guest_session.transcript]
        assert times == sorted(times)

    @pytest.mark.asyncio
    async def test_user_messages_have_no_actions(self, guest_session):
        await guest_session.submit_user_text("hello")
        assert guest_session.transcript[1].actions == ()

    @pytest.mark.asyncio
    async def test_assistant_messages_always_have_actions(self, guest_session):
        for text in ["", "hello", "budget", "design", "build", "help", "flat"]:
            await guest_session.submit_user_text(text)
        for message in guest_session.transcript:
            if message.role == Role.ASSISTANT:
                assert message.actions

    @pytest.mark.asyncio
    async def test_context_accumulates(self, guest_session):
        await guest_session.submit_user_text("budget 5 lakh")
        await guest_session.submit_user_text("near Pune")
        ctx = guest_session.context
        assert ctx.budget.value_in_base_units == 500_000
        assert ctx.location == "Pune"

    @pytest.mark.asyncio
    async def test_empty_input_gets_general_reply(self, user_session):
        reply = await user_session.submit_user_text("")
        assert reply.actions == GENERAL_ACTIONS
        assert user_session.context.budget is None

    @pytest.mark.asyncio
    async def test_guest_suffix_repeats_every_turn(self, guest_session):
        for text in ["hi", "design please", "budget 3 crore"]:
            reply = await guest_session.submit_user_text(text)
            assert reply.reply_text.endswith(LEAD_CAPTURE_SUFFIX)
        assert guest_session.context.lead_captured is False

    @pytest.mark.asyncio
    async def test_signed_in_user_gets_no_suffix(self, user_session):
        reply = await user_session.submit_user_text("hi")
        assert LEAD_CAPTURE_SUFFIX not in reply.reply_text

    @pytest.mark.asyncio
    async def test_reply_matches_last_message(self, guest_session):
        reply = await guest_session.submit_user_text("I need an architect")
        last = guest_session.transcript[-1]
        assert last.text == reply.reply_text
        assert last.actions == reply.actions


class TestPersistence:
    @pytest.mark.asyncio
    async def test_turn_record_written(self, guest_session, recorder):
        await guest_session.submit_user_text("budget 5 lakh near Pune")
        await guest_session.drain()
        assert len(recorder.records) == 1
        record = recorder.records[0]
        assert record.session_id == guest_session.session_id
        assert record.user_text == "budget 5 lakh near Pune"
        assert record.classified_intent == Intent.BUDGET_INQUIRY
        assert record.reply_text == guest_session.transcript[-1].text
        assert record.extracted_entities == {"budget": 500_000, "location": "Pune"}

    @pytest.mark.asyncio
    async def test_recorder_failure_does_not_affect_reply(self):
        failing = FailingTurnRecorder()
        session = ChatSession(recorder=failing, thinking_delay=0)
        reply = await session.submit_user_text("budget 5 lakh")
        await session.drain()
        assert failing.calls == 1
        assert "₹5.0L" in reply.reply_text
        assert session.context.budget.value_in_base_units == 500_000

    @pytest.mark.asyncio
    async def test_recorder_failure_is_logged(self, caplog):
        session = ChatSession(recorder=FailingTurnRecorder(), thinking_delay=0)
        await session.submit_user_text("hi")
        await session.drain()
        assert "Failed to record turn" in caplog.text
        failure = next(r for r in caplog.records if "Failed to record turn" in r.getMessage())
        assert failure.exc_info is not None
        assert failure.exc_info[0] is ConnectionError

    @pytest.mark.asyncio
    async def test_record_is_a_snapshot(self, guest_session, recorder):
        await guest_session.submit_user_text("budget 5 lakh")
        await guest_session.submit_user_text("actually 1 crore")
        await guest_session.drain()
        assert recorder.records[0].extracted_entities == {"budget": 500_000}
        assert recorder.records[1].extracted_entities == {"budget": 10_000_000}

    @pytest.mark.asyncio
    async def test_slow_recorder_does_not_block_next_turn(self):
        release = asyncio.Event()

        class SlowRecorder(RecordingTurnRecorder):
            async def record_turn(self, record):
                await release.wait()
                await super().record_turn(record)

        slow = SlowRecorder()
        session = ChatSession(recorder=slow, thinking_delay=0)
        await session.submit_user_text("hi")
        reply = await session.submit_user_text("budget 5 lakh")
        assert "₹5.0L" in reply.reply_text
        assert slow.records == []
        release.set()
        await session.drain()
        assert len(slow.records) == 2


class TestThinkingAndClose:
    @pytest.mark.asyncio
    async def test_close_mid_wait_never_delivers_reply(self, recorder):
        session = ChatSession(recorder=recorder, thinking_delay=30)
        task = asyncio.create_task(session.submit_user_text("budget 5 lakh"))
        await asyncio.sleep(0)
        assert session.turn_in_progress
        session.close()
        with pytest.raises(SessionClosedError):
            await task
        assert not task.cancelled()
        roles = [m.role for m in session.transcript]
        assert roles == [Role.ASSISTANT, Role.USER]
        assert session.context.budget is None
        assert recorder.records == []

    @pytest.mark.asyncio
    async def test_close_mid_wait_does_not_cancel_caller(self, recorder):
        session = ChatSession(recorder=recorder, thinking_delay=30)

        async def ui_handler():
            try:
                await session.submit_user_text("budget 5 lakh")
            except SessionClosedError:
                return "closed"
            return "answered"

        task = asyncio.create_task(ui_handler())
        await asyncio.sleep(0)
        session.close()
        assert await task == "closed"
        assert not task.cancelled()
        assert not session.turn_in_progress
        assert session.context.budget is None

    @pytest.mark.asyncio
    async def test_cancelling_caller_still_cancels(self, recorder):
        session = ChatSession(recorder=recorder, thinking_delay=30)
        task = asyncio.create_task(session.submit_user_text("hi"))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()
        assert not session.turn_in_progress
        assert len(session.transcript) == 2

    @pytest.mark.asyncio
    async def test_second_turn_while_thinking_is_rejected(self, recorder):
        session = ChatSession(recorder=recorder, thinking_delay=30)
        task = asyncio.create_task(session.submit_user_text("hi"))
        await asyncio.sleep(0)
        with pytest.raises(TurnInProgressError):
            await session.submit_user_text("hello?")
        session.close()
        with pytest.raises(SessionClosedError):
            await task

    @pytest.mark.asyncio
    async def test_closed_session_rejects_turns(self, guest_session):
        guest_session.close()
        assert guest_session.is_closed
        with pytest.raises(SessionClosedError):
            await guest_session.submit_user_text("hi")


class TestActions:
    def test_invoke_action_returns_target(self, guest_session):
        action = ChatAction(kind=ActionKind.SCHEDULE_CONSULTATION, label="Free Consultation")
        assert guest_session.invoke_action(action) == settings.navigation.consultation_url

    def test_invoke_action_calls_navigator(self, recorder):
        opened = []
        session = ChatSession(recorder=recorder, thinking_delay=0, navigator=opened.append)
        session.invoke_action(ChatAction(kind=ActionKind.VIEW_SERVICES, label="Explore"))
        assert opened == [settings.navigation.services_url]

    def test_invoke_action_leaves_state_alone(self, guest_session):
        before_ctx = guest_session.context
        before_len = len(guest_session.transcript)
        guest_session.invoke_action(
            ChatAction(kind=ActionKind.SUBMIT_REQUIREMENTS, label="Submit Requirements")
        )
        assert guest_session.context is before_ctx
        assert len(guest_session.transcript) == before_len


class TestSessionManager:
    @pytest.mark.asyncio
    async def test_submit_by_session_id(self, session_manager):
        session = session_manager.start_session()
        reply = await session_manager.submit_user_text(session.session_id, "6 months to build")
        assert "180 day timeline" in reply.reply_text

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_context(self, session_manager):
        a = session_manager.start_session()
        b = session_manager.start_session()
        await session_manager.submit_user_text(a.session_id, "budget 5 lakh")
        assert b.context.budget is None

    def test_user_id_marks_session_authenticated(self, session_manager):
        session = session_manager.start_session(user_id="user-1")
        assert session.is_authenticated

    @pytest.mark.asyncio
    async def test_unknown_session(self, session_manager):
        with pytest.raises(UnknownSessionError):
            await session_manager.submit_user_text("CHAT-missing", "hi")

    def test_end_session_forgets_and_closes(self, session_manager):
        session = session_manager.start_session()
        session_manager.end_session(session.session_id)
        assert session.is_closed
        assert session.session_id not in session_manager.active_session_ids
        with pytest.raises(UnknownSessionError):
            session_manager.get_session(session.session_id)

    def test_end_unknown_session(self, session_manager):
        with pytest.raises(UnknownSessionError):
            session_manager.end_session("CHAT-missing")

    def test_invoke_action_by_session_id(self, session_manager):
        session = session_manager.start_session()
        action = ChatAction(kind=ActionKind.SUBMIT_REQUIREMENTS, label="Submit Requirements")
        target = session_manager.invoke_action(session.session_id, action)
        assert target == settings.navigation.requirements_url
