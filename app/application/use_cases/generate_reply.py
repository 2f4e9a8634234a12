from __future__ import annotations

import logging

from app.application.ports.llm import ChatLLMPort
from app.domain.entities.session import ChatTurn, Session


class GenerateReplyUseCase:
    """Free-form AI chat used whenever no booking is in progress."""

    def __init__(self, llm: ChatLLMPort) -> None:
        self._llm = llm
        self._logger = logging.getLogger(__name__)

    def execute(self, session: Session, user_text: str) -> tuple[str, Session]:
        history = session.history + (ChatTurn(role="user", content=user_text),)

        self._logger.info(
            "Sending message to chat model",
            extra={"user_id": session.user_id, "history_length": len(history)},
        )
        reply_text = self._llm.respond(history)
        self._logger.info(
            "Received chat model reply",
            extra={"user_id": session.user_id, "reply_length": len(reply_text)},
        )

        history = history + (ChatTurn(role="assistant", content=reply_text),)
        return reply_text, Session(
            user_id=session.user_id,
            history=history,
            booking=session.booking,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )
