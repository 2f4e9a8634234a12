from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.domain.entities.session import ChatTurn


class ChatLLMPort(ABC):
    @abstractmethod
    def respond(self, history: Sequence[ChatTurn]) -> str:
        """
        Produce the assistant's next reply.

        Requirements:
        - `history` is the full ordered conversation; its last turn is the user
          message being answered
        - Adapters keep no state between calls
        - Return non-empty text

        Raises:
            LLMUpstreamError: networking/provider failures
            LLMContractError: empty or malformed provider response
        """
        raise NotImplementedError
