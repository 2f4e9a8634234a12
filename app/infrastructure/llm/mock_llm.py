from __future__ import annotations

from collections.abc import Sequence

from app.application.ports.llm import ChatLLMPort
from app.domain.entities.session import ChatTurn


class MockChatLLM(ChatLLMPort):
    def respond(self, history: Sequence[ChatTurn]) -> str:
        last_user = next((turn.content for turn in reversed(history) if turn.role == "user"), "")
        normalized = last_user.lower()
        words = set(normalized.replace("!", " ").replace(",", " ").split())
        if words & {"hi", "hello", "hey"}:
            return "Hello! How can I help you today? To book a visit, send 'book appointment'."
        if any(word in normalized for word in ("hours", "open")):
            return "We are open Monday to Friday, 9:00 AM to 5:00 PM."
        return f"(mock) You said: {last_user}"
