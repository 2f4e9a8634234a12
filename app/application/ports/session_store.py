from abc import ABC, abstractmethod

from app.domain.entities.session import Session


class SessionStorePort(ABC):
    @abstractmethod
    def find(self, user_id: str) -> Session | None:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, session: Session) -> None:
        """Insert or replace the session keyed by session.user_id."""
        raise NotImplementedError
