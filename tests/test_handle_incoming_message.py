from __future__ import annotations

from datetime import date

from app.application.exceptions import LLMUpstreamError
from app.application.use_cases.generate_reply import GenerateReplyUseCase
from app.application.use_cases.handle_incoming_message import (
    EMPTY_MESSAGE_REPLY,
    ERROR_REPLY,
    THINKING_REPLY,
    HandleIncomingMessageUseCase,
)
from app.application.use_cases.send_reply import SendReplyUseCase
from app.domain.entities.appointment import AppointmentStatus
from app.domain.entities.booking_state import AwaitingDate, AwaitingService, Idle
from app.domain.entities.message import Message
from app.domain.entities.session import ChatTurn, Session
from app.infrastructure.store.memory_store import MemorySessionStore

from conftest import NOW, ScriptedLLM

USER = "whatsapp:+15550001111"


def _msg(text: str, user_id: str = USER) -> Message:
    return Message(id="SM123", user_id=user_id, text=text, timestamp=NOW.timestamp())


class FlakySessionStore(MemorySessionStore):
    """Fails the first `failures` upserts."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def upsert(self, session: Session) -> None:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise RuntimeError("write failed")
        super().upsert(session)


class FailingLLM(ScriptedLLM):
    def respond(self, history):
        raise LLMUpstreamError("provider down")


def _build(session_store, booking, llm, platform, **kwargs) -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        session_store=session_store,
        booking_use_case=booking,
        generate_reply=GenerateReplyUseCase(llm=llm),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=True),
        clock=lambda: NOW.timestamp(),
        **kwargs,
    )


def test_full_booking_round_trip(use_case, session_store, appointment_store, platform, llm):
    replies = [
        use_case.handle(_msg(text))
        for text in ("book appointment", "Dental Check-up", "Jane Doe", "tomorrow", "10:00 AM", "yes")
    ]

    assert "What type of service" in replies[0]
    assert "General Consultation" in replies[0]
    assert "patient's full name" in replies[1]
    assert "provide a date" in replies[2]
    assert "What time would you prefer" in replies[3]
    for fragment in ("Dental Check-up", "Jane Doe", "20 October 2026", "10:00 AM"):
        assert fragment in replies[4]

    records = appointment_store.list_for_user(USER)
    assert len(records) == 1
    record = records[0]
    assert record.status is AppointmentStatus.PENDING
    assert (record.service, record.patient_name, record.appointment_date, record.appointment_time) == (
        "Dental Check-up",
        "Jane Doe",
        date(2026, 10, 20),
        "10:00 AM",
    )
    assert "successfully booked" in replies[5]

    session = session_store.find(USER)
    assert session.booking == Idle()
    assert session.history == ()
    assert llm.calls == []
    assert [text for _, text in platform.sent] == replies


def test_booking_reply_contains_generated_identifier(use_case, session_store, appointment_store):
    session_store.upsert(Session(user_id=USER, booking=AwaitingService()))
    for text in ("Vaccination", "Sam", "next friday", "2:30 pm"):
        use_case.handle(_msg(text))
    reply = use_case.handle(_msg("Yes"))

    appointment_id = reply.rsplit("Your appointment ID is: ", 1)[1].rstrip(".")
    record = appointment_store.get(appointment_id)
    assert record is not None
    assert record.appointment_date == date(2026, 10, 23)
    assert record.appointment_time == "2:30 PM"


def test_no_at_confirmation_cancels(use_case, session_store, appointment_store):
    for text in ("schedule appointment", "physiotherapy", "Jane", "today", "9:00 AM"):
        use_case.handle(_msg(text))

    reply = use_case.handle(_msg("no"))

    assert "cancelled" in reply
    assert session_store.find(USER).booking == Idle()
    assert appointment_store.list_for_user(USER) == []


def test_booking_intent_matches_case_insensitive_substring(use_case, session_store, llm):
    reply = use_case.handle(_msg("Hi, can I MAKE AN APPOINTMENT for my son?"))
    assert "What type of service" in reply
    assert session_store.find(USER).booking == AwaitingService()
    assert llm.calls == []


def test_booking_advances_one_state_per_message(use_case, session_store):
    use_case.handle(_msg("set up appointment"))
    use_case.handle(_msg("Vaccination"))
    use_case.handle(_msg("Jane"))
    assert isinstance(session_store.find(USER).booking, AwaitingDate)


def test_mid_booking_messages_never_reach_ai(use_case, session_store, llm):
    session_store.upsert(Session(user_id=USER, booking=AwaitingDate(service="Vaccination", patient_name="Jane")))
    for _ in range(3):
        reply = use_case.handle(_msg("whenever suits you"))
        assert "couldn't understand that date" in reply
    assert session_store.find(USER).booking == AwaitingDate(service="Vaccination", patient_name="Jane")
    assert llm.calls == []


def test_ai_chat_receives_full_ordered_history(use_case, session_store, llm):
    use_case.handle(_msg("What are your hours?"))
    llm.reply = "We also offer vaccinations."
    reply = use_case.handle(_msg("Do you vaccinate kids?"))

    assert reply == "We also offer vaccinations."
    assert llm.calls[1] == (
        ChatTurn(role="user", content="What are your hours?"),
        ChatTurn(role="assistant", content="Hello from the assistant."),
        ChatTurn(role="user", content="Do you vaccinate kids?"),
    )
    assert session_store.find(USER).history == llm.calls[1] + (
        ChatTurn(role="assistant", content="We also offer vaccinations."),
    )


def test_new_session_is_created_idle(use_case, session_store):
    assert session_store.find(USER) is None
    use_case.handle(_msg("hello"))
    session = session_store.find(USER)
    assert session.booking == Idle()
    assert session.created_at == NOW.timestamp()
    assert len(session.history) == 2


def test_sessions_are_independent_per_user(use_case, session_store):
    use_case.handle(_msg("book appointment", user_id="whatsapp:+1"))
    use_case.handle(_msg("hello", user_id="whatsapp:+2"))
    assert session_store.find("whatsapp:+1").booking == AwaitingService()
    assert session_store.find("whatsapp:+2").booking == Idle()


def test_empty_message_prompts_without_touching_session(use_case, session_store, platform):
    reply = use_case.handle(_msg("   "))
    assert reply == EMPTY_MESSAGE_REPLY
    assert platform.sent == [(USER, EMPTY_MESSAGE_REPLY)]
    assert session_store.find(USER) is None


def test_ai_failure_returns_apology(session_store, booking, platform):
    use_case = _build(session_store, booking, FailingLLM(), platform)
    reply = use_case.handle(_msg("hello"))
    assert reply == ERROR_REPLY
    assert platform.sent == [(USER, ERROR_REPLY)]
    assert session_store.find(USER).booking == Idle()


def test_failure_mid_booking_resets_to_idle(booking, llm, platform):
    store = FlakySessionStore(failures=1)
    store._sessions[USER] = Session(user_id=USER, booking=AwaitingDate(service="Vaccination", patient_name="Jane"))
    use_case = _build(store, booking, llm, platform)

    reply = use_case.handle(_msg("tomorrow"))

    assert reply == ERROR_REPLY
    assert store.find(USER).booking == Idle()


def test_secondary_save_failure_is_swallowed(booking, llm, platform, caplog):
    store = FlakySessionStore(failures=10)
    use_case = _build(store, booking, llm, platform)

    reply = use_case.handle(_msg("book appointment"))

    assert reply == ERROR_REPLY
    assert store.attempts == 2
    assert platform.sent == [(USER, ERROR_REPLY)]
    assert "Error saving session after failure" in caplog.text


def test_long_ai_reply_is_split_in_order(session_store, booking, platform):
    text = "a" * 1500 + "b" * 1500 + "c" * 200
    use_case = _build(session_store, booking, ScriptedLLM(reply=text), platform)

    reply = use_case.handle(_msg("tell me everything"))

    assert reply == text
    assert [len(chunk) for _, chunk in platform.sent] == [1500, 1500, 200]
    assert "".join(chunk for _, chunk in platform.sent) == text


def test_thinking_indicator_is_sent_first(session_store, booking, llm, platform):
    use_case = _build(session_store, booking, llm, platform, thinking_indicator_enabled=True)
    use_case.handle(_msg("hello"))
    assert [text for _, text in platform.sent] == [THINKING_REPLY, "Hello from the assistant."]


def test_respond_does_not_touch_store(booking, llm, platform):
    store = FlakySessionStore(failures=10)
    use_case = _build(store, booking, llm, platform)

    reply, updated = use_case.respond(Session(user_id=USER), "book appointment")

    assert "What type of service" in reply
    assert updated.booking == AwaitingService()
    assert store.attempts == 0
