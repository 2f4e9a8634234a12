from __future__ import annotations

import hashlib
import json
import logging
import threading
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any

from app.application.exceptions import StoreError
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.session_store import SessionStorePort
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
from app.domain.entities.session import ChatTurn, Session


logger = logging.getLogger(__name__)


LOCK_STRIPES = 64


class JsonSessionStore(SessionStorePort):
    """One JSON file per user under data_dir, written atomically."""

    def __init__(self, data_dir: str = "./data/sessions") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        # Fixed pool: users sharing a stripe serialize, memory stays bounded
        self._locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))

    def _digest(self, user_id: str) -> str:
        return hashlib.sha256(user_id.encode("utf-8")).hexdigest()

    def _get_lock(self, user_id: str) -> threading.Lock:
        return self._locks[int(self._digest(user_id), 16) % len(self._locks)]

    def _get_file_path(self, user_id: str) -> Path:
        # user ids look like "whatsapp:+15551234567"; hash them into safe file names
        return self._data_dir / f"{self._digest(user_id)}.json"

    def find(self, user_id: str) -> Session | None:
        file_path = self._get_file_path(user_id)
        with self._get_lock(user_id):
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError:
                # Corrupted file: start over rather than block the user forever
                logger.warning("Corrupted session file, starting fresh", extra={"user_id": user_id})
                return None
            except OSError as e:
                raise StoreError(f"Failed to read session for {user_id}: {e}") from e
        try:
            return deserialize_session(data)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            logger.warning("Malformed session file, starting fresh", extra={"user_id": user_id, "reason": str(e)})
            return None

    def upsert(self, session: Session) -> None:
        file_path = self._get_file_path(session.user_id)
        with self._get_lock(session.user_id):
            _write_json_atomic(file_path, serialize_session(session))


class JsonAppointmentStore(AppointmentStorePort):
    """One JSON file per appointment under data_dir, named by its id."""

    def __init__(self, data_dir: str = "./data/appointments") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def insert(self, record: AppointmentRecord) -> str:
        appointment_id = uuid.uuid4().hex
        data = serialize_appointment(record)
        data["id"] = appointment_id
        _write_json_atomic(self._data_dir / f"{appointment_id}.json", data)
        return appointment_id

    def get(self, appointment_id: str) -> AppointmentRecord | None:
        file_path = self._data_dir / f"{appointment_id}.json"
        if not file_path.exists():
            return None
        return deserialize_appointment(_read_json(file_path))

    def list_for_user(self, user_id: str) -> list[AppointmentRecord]:
        records = [deserialize_appointment(_read_json(p)) for p in sorted(self._data_dir.glob("*.json"))]
        return sorted(
            (r for r in records if r.user_id == user_id),
            key=lambda r: r.created_at,
        )


def serialize_session(session: Session) -> dict[str, Any]:
    return {
        "user_id": session.user_id,
        "history": [{"role": turn.role, "content": turn.content} for turn in session.history],
        "booking_state": serialize_booking_state(session.booking),
        "created_at": session.created_at,
        "updated_at": session.updated_at,
        "version": 1,
    }


def deserialize_session(data: dict[str, Any]) -> Session:
    history = tuple(
        ChatTurn(role=str(item.get("role", "")), content=str(item.get("content", "")))
        for item in data.get("history", [])
    )
    return Session(
        user_id=data["user_id"],
        history=history,
        booking=deserialize_booking_state(data.get("booking_state") or {}),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )


def serialize_booking_state(state: BookingState) -> dict[str, Any]:
    """Serialize a booking state variant to a flat dict keyed by status."""
    result: dict[str, Any] = {"status": state.status}
    for field_name in ("service", "patient_name", "appointment_time"):
        if hasattr(state, field_name):
            result[field_name] = getattr(state, field_name)
    if hasattr(state, "appointment_date"):
        result["appointment_date"] = state.appointment_date.isoformat()
    return result


def deserialize_booking_state(data: dict[str, Any]) -> BookingState:
    """
    Rebuild the variant named by `status`.

    Unknown statuses and records missing a field their status requires fall
    back to Idle, which drops any half-collected draft.
    """
    status = data.get("status", "idle")
    try:
        if status == "idle":
            return Idle()
        if status == "awaiting_service":
            return AwaitingService()
        if status == "awaiting_patient_name":
            return AwaitingPatientName(service=data["service"])
        if status == "awaiting_date":
            return AwaitingDate(service=data["service"], patient_name=data["patient_name"])
        if status == "awaiting_time":
            return AwaitingTime(
                service=data["service"],
                patient_name=data["patient_name"],
                appointment_date=date.fromisoformat(data["appointment_date"]),
            )
        if status == "awaiting_confirmation":
            return AwaitingConfirmation(
                service=data["service"],
                patient_name=data["patient_name"],
                appointment_date=date.fromisoformat(data["appointment_date"]),
                appointment_time=data["appointment_time"],
            )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Inconsistent booking state, resetting", extra={"booking_status": status, "reason": str(e)})
        return Idle()

    logger.warning("Unknown booking status, resetting", extra={"booking_status": status})
    return Idle()


def serialize_appointment(record: AppointmentRecord) -> dict[str, Any]:
    return {
        "user_id": record.user_id,
        "service": record.service,
        "patient_name": record.patient_name,
        "appointment_date": record.appointment_date.isoformat(),
        "appointment_time": record.appointment_time,
        "status": record.status.value,
        "created_at": record.created_at.isoformat(),
        "notes": record.notes,
    }


def deserialize_appointment(data: dict[str, Any]) -> AppointmentRecord:
    return AppointmentRecord(
        user_id=data["user_id"],
        service=data["service"],
        patient_name=data["patient_name"],
        appointment_date=date.fromisoformat(data["appointment_date"]),
        appointment_time=data["appointment_time"],
        status=AppointmentStatus(data.get("status", "pending")),
        created_at=datetime.fromisoformat(data["created_at"]),
        notes=data.get("notes"),
    )


def _read_json(file_path: Path) -> dict[str, Any]:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise StoreError(f"Failed to read {file_path.name}: {e}") from e


def _write_json_atomic(file_path: Path, data: dict[str, Any]) -> None:
    """Write JSON to a temp file, then rename over the target."""
    temp_path = file_path.with_suffix(".json.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path.replace(file_path)
    except OSError as e:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.warning("Failed to remove temp file", extra={"reason": str(temp_path)})
        raise StoreError(f"Failed to write {file_path.name}: {e}") from e
