"""
Tests for cycle day arithmetic.
"""
import time
import pytest
from datetime import date, datetime, timedelta, timezone

from src.services.cycle import (
    calculate_cycle_day,
    calculate_milestone_date,
    get_cycle_type_label,
    get_estimated_cycle_length
)

def test_start_date_is_day_one():
    """The start date itself is day 1."""
    for start in (date(2024, 1, 1), date(2024, 2, 29), date(2023, 12, 31)):
        assert calculate_cycle_day(start, start) == 1

@pytest.mark.parametrize("offset", [0, 1, 5, 27, 60, 400])
def test_day_number_follows_offset(offset):
    """Day number is the offset from the start plus one."""
    start = date(2024, 3, 20)
    assert calculate_cycle_day(start, start + timedelta(days=offset)) == offset + 1

def test_time_of_day_is_ignored():
    """
    Regression test:
    A start recorded late in the evening and a reference early in the morning
    must not lose a day.
    """
    start = datetime(2024, 3, 30, 23, 59)
    reference = datetime(2024, 3, 31, 0, 1)
    assert calculate_cycle_day(start, reference) == 2

    # Across the March DST change in many zones
    assert calculate_cycle_day("2024-03-30", datetime(2024, 4, 2, 12, 0)) == 4

@pytest.fixture
def dst_timezone(monkeypatch):
    """Run in a zone with a daylight saving change."""
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()

@pytest.mark.skipif(not hasattr(time, "tzset"), reason="requires time.tzset")
def test_aware_dates_ignore_server_timezone(dst_timezone):
    """
    Regression test:
    A fixed-offset start just before the March DST change must count one
    day per 24 hours in a DST server zone.
    """
    start = datetime(2024, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    for offset in range(0, 5):
        assert calculate_cycle_day(start, start + timedelta(days=offset)) == offset + 1

    assert calculate_cycle_day("2024-03-09T23:30:00-05:00", "2024-03-10T23:30:00-05:00") == 2

def test_aware_dates_use_their_own_calendar_date():
    """Offsets are dropped, not converted."""
    start = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=14)))
    reference = datetime(2024, 1, 1, 22, 0, tzinfo=timezone(timedelta(hours=-10)))
    assert calculate_cycle_day(start, reference) == 1
    assert calculate_cycle_day("2024-01-01T23:00:00Z", "2024-01-02T00:30:00+09:00") == 2

def test_string_dates_are_accepted():
    """Persisted date strings are parsed."""
    assert calculate_cycle_day("2024-01-01", "2024-01-10") == 10
    assert calculate_cycle_day("2024-01-01T08:00:00", date(2024, 1, 3)) == 3

def test_missing_start_date_returns_zero():
    """No start date means no active cycle."""
    assert calculate_cycle_day(None, date(2024, 1, 1)) == 0
    assert calculate_cycle_day("", date(2024, 1, 1)) == 0
    assert calculate_cycle_day(None) == 0

def test_unparsable_start_date_returns_zero():
    """Garbage input is treated like a missing start date."""
    assert calculate_cycle_day("not-a-date", date(2024, 1, 1)) == 0
    assert calculate_cycle_day("2024-13-45", date(2024, 1, 1)) == 0

def test_reference_before_start_is_clamped():
    """Dates before the start never go negative."""
    assert calculate_cycle_day(date(2024, 1, 10), date(2024, 1, 9)) == 0
    assert calculate_cycle_day(date(2024, 1, 10), date(2023, 6, 1)) == 0

def test_defaults_to_today():
    """Reference date defaults to today."""
    assert calculate_cycle_day(date.today()) == 1
    assert calculate_cycle_day(date.today() - timedelta(days=4)) == 5

def test_calculate_milestone_date():
    """Milestone day N falls N-1 days after the start."""
    assert calculate_milestone_date("2024-01-01", 1) == date(2024, 1, 1)
    assert calculate_milestone_date("2024-01-01", 13) == date(2024, 1, 13)
    assert calculate_milestone_date(date(2024, 2, 20), 14) == date(2024, 3, 4)

def test_calculate_milestone_date_requires_start():
    """A milestone date cannot be computed without a start date."""
    with pytest.raises(ValueError):
        calculate_milestone_date(None, 3)

def test_milestone_date_and_cycle_day_agree():
    """Day N's calendar date is reported as day N."""
    start = date(2024, 5, 1)
    for day in (1, 2, 11, 28):
        assert calculate_cycle_day(start, calculate_milestone_date(start, day)) == day

def test_cycle_type_labels():
    """Known types use metadata, unknown types are formatted."""
    assert get_cycle_type_label("ivf_fresh") == "IVF Cycle"
    assert get_cycle_type_label("ivf-fresh", "short") == "IVF cycle"
    assert get_cycle_type_label("egg-freezing") == "Egg Freezing Cycle"
    assert get_cycle_type_label("mock_transfer") == "Mock Transfer"
    assert get_cycle_type_label("mock_transfer", "short") == "mock"
    assert get_cycle_type_label(None) == "Fertility Cycle"
    assert get_cycle_type_label("", "short") == "cycle"

def test_estimated_cycle_length():
    """Estimated length falls back to 28 days."""
    assert get_estimated_cycle_length("iui") == 14
    assert get_estimated_cycle_length("IVF-Frozen") == 21
    assert get_estimated_cycle_length("unknown") == 28
    assert get_estimated_cycle_length(None) == 28
