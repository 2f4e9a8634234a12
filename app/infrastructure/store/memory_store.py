from __future__ import annotations

import threading
import uuid

from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.session_store import SessionStorePort
from app.domain.entities.appointment import AppointmentRecord
from app.domain.entities.session import Session


class MemorySessionStore(SessionStorePort):
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def find(self, user_id: str) -> Session | None:
        return self._sessions.get(user_id)

    def upsert(self, session: Session) -> None:
        self._sessions[session.user_id] = session


class MemoryAppointmentStore(AppointmentStorePort):
    def __init__(self) -> None:
        self._appointments: dict[str, AppointmentRecord] = {}
        self._lock = threading.Lock()

    def insert(self, record: AppointmentRecord) -> str:
        appointment_id = uuid.uuid4().hex
        with self._lock:
            self._appointments[appointment_id] = record
        return appointment_id

    def get(self, appointment_id: str) -> AppointmentRecord | None:
        return self._appointments.get(appointment_id)

    def list_for_user(self, user_id: str) -> list[AppointmentRecord]:
        with self._lock:
            records = list(self._appointments.values())
        return [r for r in records if r.user_id == user_id]
