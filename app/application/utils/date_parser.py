from __future__ import annotations

import re
from datetime import date, datetime, timedelta

DAY_NAMES = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

# strptime's %m and %d accept unpadded values, so the M/d/yyyy and d/M/yyyy
# entries behave like their padded counterparts. Kept for ordering parity.
EXPLICIT_DATE_FORMATS = (
    "%Y-%m-%d",  # yyyy-MM-dd
    "%m/%d/%Y",  # MM/dd/yyyy
    "%d/%m/%Y",  # dd/MM/yyyy
    "%d-%m-%Y",  # dd-MM-yyyy
    "%m/%d/%Y",  # M/d/yyyy
    "%d/%m/%Y",  # d/M/yyyy
)

MONTH_DAY_FORMATS = (
    "%b %d %Y",  # Jun 3
    "%B %d %Y",  # June 3
)

TIME_PATTERN = re.compile(r"(0?[1-9]|1[0-2]):[0-5]\d\s?(AM|PM)", re.IGNORECASE)


def interpret_date(text: str, reference_date: date | datetime) -> date | None:
    """
    Parse a free-form date expression relative to reference_date.

    Returns None when nothing matches or the result lies before the
    reference day.
    """
    today = _start_of_day(reference_date)
    normalized = text.lower().strip()

    parsed = _parse_keyword(normalized, today)
    if parsed is None:
        parsed = _parse_explicit(text.strip())
    if parsed is None:
        parsed = _parse_month_day(text.strip(), today)

    if parsed is None or parsed < today:
        return None
    return parsed


def validate_time(text: str) -> str | None:
    """Validate a 12-hour clock time like "2:30 pm". Returns it with AM/PM upper-cased."""
    if not TIME_PATTERN.fullmatch(text):
        return None
    return text.upper()


def format_display_date(value: date) -> str:
    """Long display form, e.g. "15 June 2025"."""
    return f"{value.day} {value.strftime('%B %Y')}"


def _start_of_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _parse_keyword(normalized: str, today: date) -> date | None:
    if "today" in normalized:
        return today

    if "tomorrow" in normalized:
        return today + timedelta(days=1)

    for day_name, day_num in DAY_NAMES.items():
        if f"next {day_name}" in normalized:
            days_ahead = (day_num - today.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7
            return today + timedelta(days=days_ahead)

    return None


def _parse_explicit(text: str) -> date | None:
    for fmt in EXPLICIT_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _parse_month_day(text: str, today: date) -> date | None:
    for fmt in MONTH_DAY_FORMATS:
        try:
            parsed = datetime.strptime(f"{text} {today.year}", fmt).date()
        except ValueError:
            continue
        if parsed < today:
            try:
                parsed = parsed.replace(year=parsed.year + 1)
            except ValueError:
                # Feb 29 has no counterpart next year
                return None
        return parsed
    return None
