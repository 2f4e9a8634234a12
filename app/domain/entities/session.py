from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.booking_state import BookingState, Idle


@dataclass(frozen=True)
class ChatTurn:
    role: str  # "user" | "assistant"
    content: str


@dataclass(frozen=True)
class Session:
    user_id: str
    history: tuple[ChatTurn, ...] = ()
    booking: BookingState = field(default_factory=Idle)
    created_at: float | None = None
    updated_at: float | None = None

    @property
    def is_booking(self) -> bool:
        return not isinstance(self.booking, Idle)

    @staticmethod
    def new(user_id: str, now_ts: float | None = None) -> "Session":
        return Session(user_id=user_id, created_at=now_ts, updated_at=now_ts)
