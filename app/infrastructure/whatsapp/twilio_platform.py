from __future__ import annotations

import logging

from app.application.ports.message_platform import MessagePlatformPort
from app.infrastructure.whatsapp.twilio_client import TwilioClient


class TwilioWhatsAppPlatform(MessagePlatformPort):
    def __init__(self, client: TwilioClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        sid = self._client.send_message(to=recipient_id, body=text)
        self._logger.info("Sent WhatsApp message", extra={"user_id": recipient_id, "message_id": sid})
