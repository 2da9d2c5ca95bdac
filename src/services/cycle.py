"""
Service module for treatment cycle day arithmetic.

This module converts between cycle start dates, calendar dates and 1-based
treatment day numbers, and exposes display metadata per cycle type.

Typical usage:
    day = calculate_cycle_day(cycle.start_date)
    transfer_date = calculate_milestone_date(cycle.start_date, milestone.day)
"""
from datetime import date, timedelta
from typing import Optional

from src.services.constants import CYCLE_TYPE_META, DEFAULT_CYCLE_LENGTH
from src.services.utils import normalize_cycle_type
from src.utils.dates import DateLike, parse_date_value

def calculate_cycle_day(
    start_date: Optional[DateLike],
    reference_date: Optional[DateLike] = None
) -> int:
    """
    Calculate the treatment day number for a reference date.

    Both values are reduced to their own calendar dates before differencing,
    dropping time of day and timezone, so neither the offsets nor the server
    timezone shift the result. Day 1 is the start date itself.

    Args:
        start_date: Cycle start date
        reference_date: Date to calculate for, defaults to today

    Returns:
        1-based day number, or 0 when the start date is missing or
        unparsable (callers treat 0 as "no active cycle"). Dates before the
        start also yield 0.

    Example:
        >>> calculate_cycle_day("2024-01-01", date(2024, 1, 10))
        10
    """
    if not start_date:
        return 0
    try:
        start = parse_date_value(start_date, local=False)
        reference = parse_date_value(reference_date, local=False) if reference_date else date.today()
    except ValueError:
        return 0
    if start is None or reference is None:
        return 0

    diff_days = (reference - start).days
    return max(diff_days + 1, 0)

def calculate_milestone_date(start_date: DateLike, milestone_day: int) -> date:
    """
    Calculate the calendar date a milestone day falls on.

    Args:
        start_date: Cycle start date
        milestone_day: 1-based day offset from the template

    Returns:
        Calendar date of the milestone

    Raises:
        ValueError: If the start date cannot be parsed
    """
    start = parse_date_value(start_date)
    if start is None:
        raise ValueError("Start date is required to calculate a milestone date")
    return start + timedelta(days=milestone_day - 1)

def get_cycle_type_label(cycle_type: Optional[str], variant: str = "long") -> str:
    """
    Get the display label for a cycle type.

    Unknown types are title-cased from their identifier.

    Example:
        >>> get_cycle_type_label("ivf-fresh")
        'IVF Cycle'
        >>> get_cycle_type_label("mock_transfer", "short")
        'mock'
    """
    if not cycle_type:
        return "Fertility Cycle" if variant == "long" else "cycle"

    meta = CYCLE_TYPE_META.get(normalize_cycle_type(cycle_type)) or CYCLE_TYPE_META.get(cycle_type)
    if not meta:
        formatted = " ".join(
            word[:1].upper() + word[1:]
            for word in cycle_type.replace("-", " ").replace("_", " ").split()
        )
        if variant == "long":
            return formatted
        return formatted.split(" ")[0].lower() if formatted else "cycle"
    return meta["long"] if variant == "long" else meta["short"]

def get_estimated_cycle_length(cycle_type: Optional[str]) -> int:
    """Get the expected length in days of a cycle type."""
    if not cycle_type:
        return DEFAULT_CYCLE_LENGTH
    meta = CYCLE_TYPE_META.get(normalize_cycle_type(cycle_type))
    return meta["duration"] if meta else DEFAULT_CYCLE_LENGTH
