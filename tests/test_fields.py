from datetime import date

import pytest

from attendguard.validation.fields import (
    validate_calendar_date,
    validate_clock_time,
    validate_identifier,
    validate_time_range,
)

TODAY = date(2025, 3, 10)


def test_identifier_required_and_shaped():
    assert validate_identifier("", "Student ID").errors == ["Student ID is required"]
    assert validate_identifier(None, "Student ID").errors == ["Student ID is required"]
    assert validate_identifier("abc", "Student ID").errors == ["Student ID must be a valid UUID format"]
    assert validate_identifier("6f1c2b1e-8a2d-4c5e-9f00-1234567890ab", "Student ID").is_valid


@pytest.mark.parametrize("value,message", [
    ("2024-02-30", "Session date has invalid day for the month"),
    ("2024-13-01", "Session date has invalid month"),
    ("2024-00-10", "Session date has invalid month"),
    ("2024-1-05", "Session date must be in YYYY-MM-DD format"),
    ("05/01/2024", "Session date must be in YYYY-MM-DD format"),
    ("2024-04-31", "Session date has invalid day for the month"),
])
def test_calendar_date_errors(value, message):
    result = validate_calendar_date(value, "Session date", TODAY)
    assert not result.is_valid
    assert result.errors == [message]


def test_february_29_is_rejected_even_in_leap_years():
    result = validate_calendar_date("2024-02-29", "Session date", TODAY)
    assert result.errors == ["Session date has invalid day for the month"]


def test_calendar_date_future_horizon():
    assert validate_calendar_date("2026-03-10", "Session date", TODAY).is_valid
    result = validate_calendar_date("2026-03-11", "Session date", TODAY)
    assert result.errors == ["Session date cannot be more than 1 year in the future"]
    assert validate_calendar_date("2019-06-01", "Session date", TODAY).is_valid


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "12:5", "noon", ""])
def test_clock_time_rejects(value):
    assert not validate_clock_time(value, "Start time").is_valid


@pytest.mark.parametrize("value", ["00:00", "09:05", "23:59"])
def test_clock_time_accepts(value):
    assert validate_clock_time(value, "Start time").is_valid


@pytest.mark.parametrize("start,end", [("09:00", "09:15"), ("09:00", "17:00"), ("00:00", "07:59")])
def test_time_range_valid_durations(start, end):
    assert validate_time_range(start, end, "2025-03-10", TODAY).is_valid


@pytest.mark.parametrize("start,end,message", [
    ("09:00", "09:10", "Session duration must be at least 15 minutes"),
    ("09:00", "17:01", "Session duration cannot exceed 8 hours"),
    ("10:00", "09:00", "End time must be after start time"),
    ("10:00", "10:00", "End time must be after start time"),
])
def test_time_range_distinct_messages(start, end, message):
    result = validate_time_range(start, end, "2025-03-10", TODAY)
    assert not result.is_valid
    assert result.errors == [message]


def test_time_range_collects_every_part():
    result = validate_time_range("9am", "10:00", "2024-02-30", TODAY)
    assert result.errors == [
        "Start time must be in HH:MM format (24-hour) with leading zeros",
        "Session date has invalid day for the month",
    ]


def test_non_string_values_are_malformed_not_missing():
    assert validate_identifier(123, "Student ID").errors == ["Student ID must be a valid UUID format"]
    assert validate_calendar_date(20250310, "Session date").errors == ["Session date must be in YYYY-MM-DD format"]
    assert validate_clock_time(930, "Start time").errors == [
        "Start time must be in HH:MM format (24-hour) with leading zeros"
    ]
