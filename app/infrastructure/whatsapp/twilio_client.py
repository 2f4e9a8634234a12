from __future__ import annotations

import logging
from typing import Any

from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from app.application.exceptions import MessageDeliveryError


class TwilioClient:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        client: Any | None = None,
    ) -> None:
        self._from_number = from_number
        self._client = client or Client(account_sid, auth_token, http_client=TwilioHttpClient(timeout=10.0))
        self._logger = logging.getLogger(__name__)

    def send_message(self, to: str, body: str) -> str:
        """Create an outbound message. Returns the Twilio message SID."""
        try:
            message = self._client.messages.create(from_=self._from_number, to=to, body=body)
        except TwilioRestException as e:
            self._logger.error(
                "Twilio send failed",
                extra={
                    "status": e.status,
                    "error_code": e.code,
                    "error_message": e.msg,
                    "user_id": to,
                    "text_length": len(body),
                },
            )
            raise MessageDeliveryError(f"Twilio rejected message ({e.status}): {e.msg}") from e
        except (TwilioException, OSError) as e:
            # requests' connection errors are OSError subclasses
            self._logger.error("Twilio request failed", extra={"user_id": to, "reason": str(e)})
            raise MessageDeliveryError(f"Twilio request failed: {e}") from e

        return str(message.sid)
