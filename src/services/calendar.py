"""
Service module for the cycle calendar view.

Builds a Monday-first month grid with per-day presence flags and the record
lists for a selected day. All functions are pure: the caller fetches the
cycle's appointments, milestones, events and symptoms and passes them in.

Typical usage:
    calendar = CycleCalendar(cycle, appointments, milestones, events, symptoms)
    cells = calendar.build_month(2024, 3)
    summary = calendar.day_summary(date(2024, 3, 12))
"""
import calendar as month_calendar
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from aws_lambda_powertools import Logger

from src.models.calendar import Appointment, CalendarDay, DaySummary, Event, Symptom
from src.models.cycle import Cycle, CycleStatus
from src.models.milestone import UserMilestone
from src.services.constants import CYCLE_DAY_SLACK
from src.services.cycle import get_estimated_cycle_length
from src.utils.dates import is_same_day, to_timestamp_key

logger = Logger()

def filter_visible_appointments(
    appointments: Iterable[Appointment],
    active_cycle: Optional[Cycle]
) -> List[Appointment]:
    """
    Apply the cycle visibility rule to appointments.

    A cycle that is no longer active shows no appointments. An active cycle
    shows only its own appointments. Without a cycle everything supplied is
    shown, the caller having filtered server-side.
    """
    if active_cycle is None:
        return list(appointments)
    if active_cycle.status != CycleStatus.ACTIVE:
        return []
    return [apt for apt in appointments if apt.cycle_id == active_cycle.id]

def deduplicate_appointments(appointments: Iterable[Appointment]) -> List[Appointment]:
    """
    Drop duplicate appointments, keeping the first occurrence.

    Duplicates are removed by id first, then by title, exact timestamp and
    location, since upstream joins can return the same appointment under
    different ids.
    """
    seen_ids = set()
    unique = []
    for apt in appointments:
        if apt.id not in seen_ids:
            seen_ids.add(apt.id)
            unique.append(apt)

    seen_keys = set()
    result = []
    for apt in unique:
        key = (apt.title, to_timestamp_key(apt.date), apt.location or "")
        if key not in seen_keys:
            seen_keys.add(key)
            result.append(apt)

    dropped = len(unique) - len(result)
    if dropped:
        logger.debug("Dropped duplicate appointments", extra={"dropped": dropped})
    return result

def month_grid_offset(year: int, month: int) -> int:
    """Number of blank cells before day 1 in a Monday-first grid."""
    return date(year, month, 1).weekday()

def previous_month(year: int, month: int) -> Tuple[int, int]:
    """Get the (year, month) before the given month."""
    return (year - 1, 12) if month == 1 else (year, month - 1)

def next_month(year: int, month: int) -> Tuple[int, int]:
    """Get the (year, month) after the given month."""
    return (year + 1, 1) if month == 12 else (year, month + 1)

def format_symptom_details(symptom: Symptom) -> str:
    """
    Summarize a symptom log for display.

    Example:
        >>> format_symptom_details(Symptom(id="s1", date="2024-01-02", mood="tired", bloating=3))
        'Mood: tired • Bloating'
    """
    parts = []
    if symptom.mood:
        parts.append(f"Mood: {symptom.mood}")
    if symptom.fatigue:
        parts.append("Fatigue")
    if symptom.bloating:
        parts.append("Bloating")
    if symptom.nausea:
        parts.append("Nausea")
    if symptom.headache:
        parts.append("Headache")
    if symptom.mood_swings:
        parts.append("Mood swings")
    if symptom.notes:
        parts.append(symptom.notes)
    return " • ".join(parts) if parts else "Symptoms logged"


class CycleCalendar:
    """Calendar view model over one cycle's records."""

    def __init__(
        self,
        active_cycle: Optional[Cycle],
        appointments: Sequence[Appointment] = (),
        milestones: Sequence[UserMilestone] = (),
        events: Sequence[Event] = (),
        symptoms: Sequence[Symptom] = (),
        today: Optional[date] = None
    ):
        """
        Initialize the calendar.

        Args:
            active_cycle: The user's active cycle, if any
            appointments: Raw appointments, filtered and deduplicated here
            milestones: User milestones of the cycle
            events: Logged events of the cycle
            symptoms: Symptom logs of the cycle
            today: Date highlighted as today, defaults to the current date
        """
        self.active_cycle = active_cycle
        self.appointments = deduplicate_appointments(
            filter_visible_appointments(appointments, active_cycle)
        )
        self.milestones = list(milestones)
        self.events = list(events)
        self.symptoms = list(symptoms)
        self.today = today or date.today()

    def cycle_day_for(self, target: date) -> Optional[int]:
        """
        Get the cycle day shown for a calendar date.

        Returns None before the cycle start, after its end date, or when the
        cycle has no end date, beyond its estimated length plus a slack
        window.
        """
        if self.active_cycle is None:
            return None

        start = self.active_cycle.start_date
        if target < start:
            return None

        diff = (target - start).days + 1

        if self.active_cycle.end_date:
            if target > self.active_cycle.end_date:
                return None
        else:
            estimated_length = get_estimated_cycle_length(self.active_cycle.type)
            if estimated_length and diff > estimated_length + CYCLE_DAY_SLACK:
                return None

        return diff

    def has_appointment(self, target: date) -> bool:
        return any(is_same_day(apt.date, target) for apt in self.appointments)

    def has_milestone(self, target: date) -> bool:
        return any(is_same_day(m.date, target) for m in self.milestones)

    def has_logged_data(self, target: date) -> bool:
        return (
            any(is_same_day(e.date, target) for e in self.events)
            or any(is_same_day(s.date, target) for s in self.symptoms)
        )

    def build_month(self, year: int, month: int) -> List[Optional[CalendarDay]]:
        """
        Build the calendar cells for a month.

        Args:
            year: Calendar year
            month: Month number (1-12)

        Returns:
            None placeholders for the blank cells before day 1, then one
            CalendarDay per day of the month
        """
        cells: List[Optional[CalendarDay]] = [None] * month_grid_offset(year, month)
        days_in_month = month_calendar.monthrange(year, month)[1]

        for day in range(1, days_in_month + 1):
            current = date(year, month, day)
            cells.append(CalendarDay(
                day=day,
                date=current,
                is_today=current == self.today,
                cycle_day=self.cycle_day_for(current),
                has_appointment=self.has_appointment(current),
                has_milestone=self.has_milestone(current),
                has_logged_data=self.has_logged_data(current)
            ))

        logger.debug("Built calendar month", extra={
            "year": year,
            "month": month,
            "cycle_id": self.active_cycle.id if self.active_cycle else None,
            "appointments": len(self.appointments)
        })
        return cells

    def day_summary(self, target: date) -> DaySummary:
        """
        Collect every record that falls on a date.

        Returns:
            DaySummary with the matching appointments, milestones, events and
            symptoms plus the cycle day for the date
        """
        return DaySummary(
            date=target,
            cycle_day=self.cycle_day_for(target),
            appointments=[apt for apt in self.appointments if is_same_day(apt.date, target)],
            milestones=[m for m in self.milestones if is_same_day(m.date, target)],
            events=[e for e in self.events if is_same_day(e.date, target)],
            symptoms=[s for s in self.symptoms if is_same_day(s.date, target)]
        )


def build_month(
    year: int,
    month: int,
    active_cycle: Optional[Cycle],
    appointments: Sequence[Appointment] = (),
    milestones: Sequence[UserMilestone] = (),
    events: Sequence[Event] = (),
    symptoms: Sequence[Symptom] = ()
) -> List[Optional[CalendarDay]]:
    """Build the calendar cells for a month in one call."""
    return CycleCalendar(
        active_cycle, appointments, milestones, events, symptoms
    ).build_month(year, month)
