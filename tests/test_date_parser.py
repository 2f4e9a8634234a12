from __future__ import annotations

from datetime import date, datetime

import pytest

from app.application.utils.date_parser import format_display_date, interpret_date, validate_time

# Monday
REF = date(2026, 10, 19)


def test_today_and_tomorrow_are_relative_to_reference():
    assert interpret_date("today", REF) == REF
    assert interpret_date("Tomorrow", REF) == date(2026, 10, 20)


def test_keywords_match_as_substrings():
    assert interpret_date("can we do it tomorrow please", REF) == date(2026, 10, 20)
    assert interpret_date("TODAY if possible", REF) == REF


def test_reference_datetime_is_normalized_to_start_of_day():
    late_evening = datetime(2026, 10, 19, 23, 59)
    assert interpret_date("today", late_evening) == REF
    assert interpret_date("2026-10-19", late_evening) == REF


@pytest.mark.parametrize(
    "text,expected",
    [
        ("next monday", date(2026, 10, 26)),
        ("next Tuesday", date(2026, 10, 20)),
        ("NEXT FRIDAY", date(2026, 10, 23)),
        ("how about next sunday?", date(2026, 10, 25)),
    ],
)
def test_next_weekday_is_strictly_after_reference(text, expected):
    assert interpret_date(text, REF) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2026-12-01", date(2026, 12, 1)),
        ("12/25/2026", date(2026, 12, 25)),
        ("25/12/2026", date(2026, 12, 25)),
        ("25-12-2026", date(2026, 12, 25)),
        ("1/2/2027", date(2027, 1, 2)),
        ("  2026-11-05 ", date(2026, 11, 5)),
    ],
)
def test_explicit_formats(text, expected):
    assert interpret_date(text, REF) == expected


def test_explicit_formats_prefer_month_first_when_ambiguous():
    assert interpret_date("11/12/2026", REF) == date(2026, 11, 12)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("December 25", date(2026, 12, 25)),
        ("Dec 25", date(2026, 12, 25)),
        ("Oct 19", date(2026, 10, 19)),
        ("Jun 3", date(2027, 6, 3)),
        ("june 3", date(2027, 6, 3)),
    ],
)
def test_month_day_rolls_forward_when_already_past(text, expected):
    assert interpret_date(text, REF) == expected


@pytest.mark.parametrize("text", ["2020-01-01", "10/18/2026", "18-10-2026"])
def test_past_dates_are_rejected(text):
    assert interpret_date(text, REF) is None


@pytest.mark.parametrize("text", ["", "someday", "the 5th", "2026-13-01", "31/31/2026", "Feb 30"])
def test_unrecognized_text_is_rejected(text):
    assert interpret_date(text, REF) is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10:00 AM", "10:00 AM"),
        ("2:30 PM", "2:30 PM"),
        ("12:59 am", "12:59 AM"),
        ("09:15pm", "09:15PM"),
        ("1:05 Pm", "1:05 PM"),
    ],
)
def test_validate_time_accepts_twelve_hour_times(text, expected):
    assert validate_time(text) == expected


@pytest.mark.parametrize(
    "text",
    ["25:00", "10:00", "10:60 AM", "13:00 PM", "0:30 AM", "10:5 AM", "10:00  AM", "at 10:00 AM", "10 AM", ""],
)
def test_validate_time_rejects_other_shapes(text):
    assert validate_time(text) is None


def test_format_display_date():
    assert format_display_date(date(2025, 6, 15)) == "15 June 2025"
    assert format_display_date(date(2026, 10, 1)) == "1 October 2026"
