from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

from app.application.ports.appointment_store import AppointmentStorePort
from app.application.utils.date_parser import format_display_date, interpret_date, validate_time
from app.application.utils.message_rules import is_confirmation, is_rejection
from app.domain.entities.appointment import AppointmentRecord, AppointmentStatus
from app.domain.entities.booking_state import (
    AwaitingConfirmation,
    AwaitingDate,
    AwaitingPatientName,
    AwaitingService,
    AwaitingTime,
    BookingState,
    Idle,
)
from app.domain.entities.service_catalog import CLINIC_SERVICES, match_service


@dataclass(frozen=True)
class BookingResult:
    action: str
    message: str
    updated_state: BookingState
    appointment_id: str | None = None


class BookingUseCase:
    """
    Multi-turn appointment collection.

    Each call to `advance` performs exactly one transition and returns the
    reply text together with the next state. Entering and leaving Idle from
    outside a booking is the orchestrator's job; `start` is the only way in.
    """

    def __init__(
        self,
        appointment_store: AppointmentStorePort,
        timezone: ZoneInfo,
        services: tuple[str, ...] = CLINIC_SERVICES,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._appointment_store = appointment_store
        self._timezone = timezone
        self._services = services
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def start(self) -> BookingResult:
        return BookingResult(
            action="ask_service",
            message=(
                "Okay, let's book an appointment. What type of service are you looking for? "
                f"(e.g., {self._services_list()})"
            ),
            updated_state=AwaitingService(),
        )

    def advance(self, state: BookingState, user_id: str, message_text: str) -> BookingResult:
        if isinstance(state, AwaitingService):
            return self._process_service_input(message_text, state)

        if isinstance(state, AwaitingPatientName):
            return self._process_name_input(message_text, state)

        if isinstance(state, AwaitingDate):
            return self._process_date_input(message_text, state)

        if isinstance(state, AwaitingTime):
            return self._process_time_input(message_text, state)

        if isinstance(state, AwaitingConfirmation):
            return self._process_confirmation(message_text, state, user_id)

        self._logger.error(
            "Unexpected booking state, resetting",
            extra={"user_id": user_id, "booking_status": getattr(state, "status", repr(state))},
        )
        return BookingResult(
            action="reset",
            message=(
                "An unexpected error occurred in the booking process. "
                "Please try starting over by saying 'book appointment'."
            ),
            updated_state=Idle(),
        )

    def _process_service_input(self, message_text: str, state: AwaitingService) -> BookingResult:
        service = match_service(message_text, self._services)
        if service is None:
            return BookingResult(
                action="ask_service",
                message=(
                    f'I\'m sorry, "{message_text}" is not a recognized service. '
                    f"Please choose from: {self._services_list()}."
                ),
                updated_state=state,
            )
        return BookingResult(
            action="ask_name",
            message=f"Got it. You want {service}. What is the patient's full name?",
            updated_state=AwaitingPatientName(service=service),
        )

    def _process_name_input(self, message_text: str, state: AwaitingPatientName) -> BookingResult:
        return BookingResult(
            action="ask_date",
            message=(
                f"Thanks, {message_text}. When would you like to book the appointment? "
                "Please provide a date (e.g., 2025-06-15, today, tomorrow, next Monday)."
            ),
            updated_state=AwaitingDate(service=state.service, patient_name=message_text),
        )

    def _process_date_input(self, message_text: str, state: AwaitingDate) -> BookingResult:
        parsed_date = interpret_date(message_text, self._today())
        if parsed_date is None:
            return BookingResult(
                action="ask_date",
                message=(
                    "I couldn't understand that date or it's in the past. Please try again with formats "
                    "like 2025-06-15, 06/15/2025, 15-06-2025, or words like 'today', 'tomorrow', 'next Monday'."
                ),
                updated_state=state,
            )
        return BookingResult(
            action="ask_time",
            message=(
                f"Okay, {format_display_date(parsed_date)}. What time would you prefer? "
                "(e.g., 10:00 AM, 2:30 PM)"
            ),
            updated_state=AwaitingTime(
                service=state.service,
                patient_name=state.patient_name,
                appointment_date=parsed_date,
            ),
        )

    def _process_time_input(self, message_text: str, state: AwaitingTime) -> BookingResult:
        normalized_time = validate_time(message_text)
        if normalized_time is None:
            return BookingResult(
                action="ask_time",
                message="I couldn't understand that time. Please use a format like 10:00 AM or 2:30 PM.",
                updated_state=state,
            )
        next_state = AwaitingConfirmation(
            service=state.service,
            patient_name=state.patient_name,
            appointment_date=state.appointment_date,
            appointment_time=normalized_time,
        )
        return BookingResult(
            action="confirm",
            message=self._build_confirmation_prompt(next_state),
            updated_state=next_state,
        )

    def _process_confirmation(self, message_text: str, state: AwaitingConfirmation, user_id: str) -> BookingResult:
        if is_confirmation(message_text):
            return self._confirm_booking(state, user_id)

        if is_rejection(message_text):
            return BookingResult(
                action="cancelled",
                message="No problem. Your appointment booking has been cancelled. How else can I assist you?",
                updated_state=Idle(),
            )

        return BookingResult(
            action="confirm",
            message="Please reply 'Yes' to confirm or 'No' to cancel.",
            updated_state=state,
        )

    def _confirm_booking(self, state: AwaitingConfirmation, user_id: str) -> BookingResult:
        record = AppointmentRecord(
            user_id=user_id,
            service=state.service,
            patient_name=state.patient_name,
            appointment_date=state.appointment_date,
            appointment_time=state.appointment_time,
            status=AppointmentStatus.PENDING,
            created_at=datetime.now(dt_timezone.utc),
        )
        try:
            appointment_id = self._appointment_store.insert(record)
        except Exception:
            self._logger.exception("Error saving appointment", extra={"user_id": user_id})
            return BookingResult(
                action="failed",
                message=(
                    "I'm sorry, there was an error saving your appointment. "
                    "Please try again or contact the clinic directly."
                ),
                updated_state=Idle(),
            )

        self._logger.info(
            "Appointment booked",
            extra={"user_id": user_id, "appointment_id": appointment_id, "service": state.service},
        )
        return BookingResult(
            action="booked",
            message=(
                f"Appointment for {state.patient_name} for {state.service} on "
                f"{format_display_date(state.appointment_date)} at {state.appointment_time} "
                f"has been successfully booked! Your appointment ID is: {appointment_id}."
            ),
            updated_state=Idle(),
            appointment_id=appointment_id,
        )

    def _build_confirmation_prompt(self, state: AwaitingConfirmation) -> str:
        return (
            "Please confirm your appointment details:\n\n"
            f"*Service:* {state.service}\n"
            f"*Patient Name:* {state.patient_name}\n"
            f"*Date:* {format_display_date(state.appointment_date)}\n"
            f"*Time:* {state.appointment_time}\n\n"
            "Is this correct? (Yes/No)"
        )

    def _services_list(self) -> str:
        return ", ".join(self._services)

    def _today(self) -> date:
        return self._clock().date()
