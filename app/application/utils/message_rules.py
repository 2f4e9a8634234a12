from __future__ import annotations

BOOKING_INTENT_PHRASES = (
    "book appointment",
    "schedule appointment",
    "make an appointment",
    "set up appointment",
)

DEFAULT_MAX_MESSAGE_LENGTH = 1500


def is_booking_request(text: str) -> bool:
    """Check if the user explicitly asks to start booking an appointment."""
    normalized = text.lower()
    return any(phrase in normalized for phrase in BOOKING_INTENT_PHRASES)


def is_confirmation(text: str) -> bool:
    return text.strip().lower() == "yes"


def is_rejection(text: str) -> bool:
    return text.strip().lower() == "no"


def split_message(text: str, max_length: int = DEFAULT_MAX_MESSAGE_LENGTH) -> list[str]:
    """
    Split text into consecutive chunks of at most max_length characters.

    Character order is preserved and words may be cut in the middle.
    Text at or under the limit comes back as a single chunk.
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    if len(text) <= max_length:
        return [text]
    return [text[i : i + max_length] for i in range(0, len(text), max_length)]
