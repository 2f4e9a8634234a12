from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class AppointmentRecord:
    user_id: str
    service: str
    patient_name: str
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    created_at: datetime
    notes: str | None = None
