from __future__ import annotations

# Order matters: the first service found in the user's text wins.
CLINIC_SERVICES: tuple[str, ...] = (
    "General Consultation",
    "Dental Check-up",
    "Physiotherapy",
    "Vaccination",
)


def match_service(text: str, services: tuple[str, ...] = CLINIC_SERVICES) -> str | None:
    """Return the canonical service whose name appears in text (case-insensitive)."""
    normalized = text.lower()
    for service in services:
        if service.lower() in normalized:
            return service
    return None
