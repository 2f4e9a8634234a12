from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    id: str
    user_id: str
    text: str
    timestamp: float
    platform: str = "whatsapp"
