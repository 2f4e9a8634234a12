from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.appointment import AppointmentRecord


class AppointmentStorePort(ABC):
    @abstractmethod
    def insert(self, record: AppointmentRecord) -> str:
        """Persist a new appointment. Returns the generated appointment id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, appointment_id: str) -> AppointmentRecord | None:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[AppointmentRecord]:
        raise NotImplementedError
