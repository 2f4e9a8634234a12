from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from app.application.ports.llm import ChatLLMPort
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.generate_reply import GenerateReplyUseCase
from app.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from app.application.use_cases.send_reply import SendReplyUseCase
from app.domain.entities.session import ChatTurn
from app.infrastructure.store.memory_store import MemoryAppointmentStore, MemorySessionStore
from app.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform

UTC = ZoneInfo("UTC")
# A Monday
NOW = datetime(2026, 10, 19, 9, 30, tzinfo=UTC)


class ScriptedLLM(ChatLLMPort):
    """Returns a fixed reply and records every history it was given."""

    def __init__(self, reply: str = "Hello from the assistant.") -> None:
        self.reply = reply
        self.calls: list[tuple[ChatTurn, ...]] = []

    def respond(self, history: Sequence[ChatTurn]) -> str:
        self.calls.append(tuple(history))
        return self.reply


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def appointment_store() -> MemoryAppointmentStore:
    return MemoryAppointmentStore()


@pytest.fixture
def platform() -> MockWhatsAppPlatform:
    return MockWhatsAppPlatform()


@pytest.fixture
def llm() -> ScriptedLLM:
    return ScriptedLLM()


@pytest.fixture
def booking(appointment_store) -> BookingUseCase:
    return BookingUseCase(appointment_store=appointment_store, timezone=UTC, clock=lambda: NOW)


@pytest.fixture
def use_case(session_store, booking, llm, platform) -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        session_store=session_store,
        booking_use_case=booking,
        generate_reply=GenerateReplyUseCase(llm=llm),
        send_reply=SendReplyUseCase(platform=platform, auto_reply_enabled=True, max_message_length=1500),
        clock=lambda: NOW.timestamp(),
    )
