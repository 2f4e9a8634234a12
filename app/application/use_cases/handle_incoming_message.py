from __future__ import annotations

import logging
import time
from collections.abc import Callable

from app.application.ports.session_store import SessionStorePort
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.generate_reply import GenerateReplyUseCase
from app.application.use_cases.send_reply import SendReplyUseCase
from app.application.utils.message_rules import is_booking_request
from app.domain.entities.booking_state import BookingState, Idle
from app.domain.entities.message import Message
from app.domain.entities.session import Session

EMPTY_MESSAGE_REPLY = "I didn't receive a message. Please send something!"
ERROR_REPLY = "I'm sorry, I encountered an error trying to process your request. Please try again later."
THINKING_REPLY = "Thinking..."


class HandleIncomingMessageUseCase:
    def __init__(
        self,
        session_store: SessionStorePort,
        booking_use_case: BookingUseCase,
        generate_reply: GenerateReplyUseCase,
        send_reply: SendReplyUseCase,
        thinking_indicator_enabled: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session_store = session_store
        self._booking_use_case = booking_use_case
        self._generate_reply = generate_reply
        self._send_reply = send_reply
        self._thinking_indicator_enabled = thinking_indicator_enabled
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def handle(self, message: Message) -> str:
        """Process one inbound message end to end and deliver the reply. Returns the reply text."""
        user_id = message.user_id
        text = (message.text or "").strip()

        self._logger.info("Incoming message", extra={"user_id": user_id, "message_id": message.id})

        if not text:
            self._send_reply.execute(user_id, EMPTY_MESSAGE_REPLY)
            return EMPTY_MESSAGE_REPLY

        if self._thinking_indicator_enabled:
            self._send_reply.execute(user_id, THINKING_REPLY)

        session: Session | None = None
        try:
            session = self._session_store.find(user_id)
            if session is None:
                session = Session.new(user_id, now_ts=self._clock())
                self._logger.info("Created new conversation session", extra={"user_id": user_id})

            reply_text, session = self.respond(session, text)
            session = _with_booking(session, session.booking, updated_at=self._clock())
            self._session_store.upsert(session)
            self._logger.info(
                "Session saved",
                extra={"user_id": user_id, "booking_status": session.booking.status},
            )
        except Exception as e:
            self._logger.exception(
                "Error processing message", extra={"user_id": user_id, "message_id": message.id, "reason": str(e)}
            )
            reply_text = ERROR_REPLY
            if session is not None:
                # Never leave the user stranded mid-booking after an unrelated failure.
                session = _with_booking(session, Idle(), updated_at=self._clock())
                try:
                    self._session_store.upsert(session)
                except Exception:
                    self._logger.exception("Error saving session after failure", extra={"user_id": user_id})

        self._send_reply.execute(user_id, reply_text)
        return reply_text

    def respond(self, session: Session, text: str) -> tuple[str, Session]:
        """
        Decide the reply for one message given the caller's session.

        Returns the reply text and the updated session; persisting it is left
        to the caller.
        """
        if session.is_booking:
            result = self._booking_use_case.advance(session.booking, session.user_id, text)
            self._logger.info(
                "Booking step",
                extra={"user_id": session.user_id, "action": result.action, "booking_status": result.updated_state.status},
            )
            return result.message, _with_booking(session, result.updated_state)

        if is_booking_request(text):
            result = self._booking_use_case.start()
            self._logger.info("Booking intent detected", extra={"user_id": session.user_id, "action": result.action})
            return result.message, _with_booking(session, result.updated_state)

        return self._generate_reply.execute(session, text)


def _with_booking(session: Session, booking: BookingState, updated_at: float | None = None) -> Session:
    return Session(
        user_id=session.user_id,
        history=session.history,
        booking=booking,
        created_at=session.created_at,
        updated_at=updated_at if updated_at is not None else session.updated_at,
    )
