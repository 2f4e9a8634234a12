from __future__ import annotations

from collections.abc import Sequence

from openai import OpenAI

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import ChatLLMPort
from app.core.config import settings
from app.domain.entities.session import ChatTurn
from app.infrastructure.llm.prompts import build_system_prompt

ROLE_MAP = {"user": "user", "assistant": "assistant"}


class OpenAIChatLLM(ChatLLMPort):
    """
    OpenAI-backed adapter implementing ChatLLMPort.

    The whole history is sent on every call, preceded by the clinic system
    prompt.

    Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: empty response or unknown history role
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)

    def respond(self, history: Sequence[ChatTurn]) -> str:
        messages = [{"role": "system", "content": build_system_prompt(settings.CLINIC_NAME)}]
        for turn in history:
            role = ROLE_MAP.get(turn.role)
            if role is None:
                raise LLMContractError(f"Unknown history role: {turn.role!r}")
            messages.append({"role": role, "content": turn.content})

        try:
            resp = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL_CHAT,
                messages=messages,
                temperature=settings.OPENAI_TEMPERATURE_CHAT,
                max_tokens=settings.OPENAI_MAX_TOKENS,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return content
