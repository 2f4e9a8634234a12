from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.message import Message


class TwilioInboundDTO(BaseModel):
    """Form fields of a Twilio WhatsApp delivery. Unused fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message_sid: str | None = Field(None, alias="MessageSid")
    from_: str = Field(..., alias="From", min_length=1)
    to: str | None = Field(None, alias="To")
    body: str = Field("", alias="Body")

    def to_message(self, received_at: float | None = None) -> Message:
        return Message(
            id=self.message_sid or "",
            user_id=self.from_,
            text=self.body.strip(),
            timestamp=received_at if received_at is not None else time.time(),
            platform="whatsapp",
        )
