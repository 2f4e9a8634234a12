from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Idle:
    status: str = field(default="idle", init=False)


@dataclass(frozen=True)
class AwaitingService:
    status: str = field(default="awaiting_service", init=False)


@dataclass(frozen=True)
class AwaitingPatientName:
    service: str
    status: str = field(default="awaiting_patient_name", init=False)


@dataclass(frozen=True)
class AwaitingDate:
    service: str
    patient_name: str
    status: str = field(default="awaiting_date", init=False)


@dataclass(frozen=True)
class AwaitingTime:
    service: str
    patient_name: str
    appointment_date: date
    status: str = field(default="awaiting_time", init=False)


@dataclass(frozen=True)
class AwaitingConfirmation:
    service: str
    patient_name: str
    appointment_date: date
    appointment_time: str  # normalized, e.g. "10:00 AM"
    status: str = field(default="awaiting_confirmation", init=False)


BookingState = Idle | AwaitingService | AwaitingPatientName | AwaitingDate | AwaitingTime | AwaitingConfirmation