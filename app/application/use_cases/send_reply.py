from __future__ import annotations

import logging

from app.application.ports.message_platform import MessagePlatformPort
from app.application.utils.message_rules import DEFAULT_MAX_MESSAGE_LENGTH, split_message


class SendReplyUseCase:
    def __init__(
        self,
        platform: MessagePlatformPort,
        auto_reply_enabled: bool = True,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
    ) -> None:
        self._platform = platform
        self._auto_reply_enabled = auto_reply_enabled
        self._max_message_length = max_message_length
        self._logger = logging.getLogger(__name__)

    def execute(self, recipient_id: str, text: str) -> bool:
        """Send a reply, split into chunks if long. Returns True only if every chunk was sent."""
        if not self._auto_reply_enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"user_id": recipient_id, "reply_text": text})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False

        chunks = split_message(text, self._max_message_length)
        if len(chunks) > 1:
            self._logger.info(
                "Splitting reply into parts", extra={"user_id": recipient_id, "chunk_count": len(chunks)}
            )

        all_sent = True
        for index, chunk in enumerate(chunks):
            try:
                self._platform.send_text(recipient_id=recipient_id, text=chunk)
            except Exception:
                # Remaining chunks are still attempted.
                all_sent = False
                self._logger.exception(
                    "Failed to send reply chunk",
                    extra={"user_id": recipient_id, "chunk_index": index, "chunk_count": len(chunks)},
                )
        return all_sent
