"""
Calendar record and view models.

Record models mirror the persisted appointments, events and symptoms. Dates
are kept in the representation they were stored in (date, datetime or
string) and compared with the shared same-day helper.
"""
from datetime import date as date_type, datetime
from typing import List, Optional, Union
from pydantic import BaseModel, Field

from src.models.milestone import UserMilestone

DateValue = Union[datetime, date_type, str]


class Appointment(BaseModel):
    """
    Scheduled clinic appointment.
    """
    id: str
    cycle_id: Optional[str] = None
    type: Optional[str] = None  # consultation, scan, collection, transfer
    title: str
    date: DateValue
    location: Optional[str] = None
    doctor_name: Optional[str] = None
    notes: Optional[str] = None
    completed: bool = False


class Event(BaseModel):
    """
    Logged treatment event (doctor visit, observation, note...).
    """
    id: str
    cycle_id: Optional[str] = None
    event_type: str = "general_note"
    title: str
    date: DateValue
    time: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    important: bool = False


class Symptom(BaseModel):
    """
    Daily symptom log entry.
    """
    id: str
    cycle_id: Optional[str] = None
    date: DateValue
    mood: Optional[str] = None
    bloating: Optional[int] = Field(None, ge=1, le=5)
    fatigue: Optional[int] = Field(None, ge=1, le=5)
    nausea: Optional[int] = Field(None, ge=1, le=5)
    headache: Optional[int] = Field(None, ge=1, le=5)
    mood_swings: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None


class CalendarDay(BaseModel):
    """
    Derived attributes for one calendar cell.
    """
    day: int
    date: date_type
    is_today: bool
    cycle_day: Optional[int] = None
    has_appointment: bool = False
    has_milestone: bool = False
    has_logged_data: bool = False


class DaySummary(BaseModel):
    """
    Full record lists for a selected calendar day.
    """
    date: date_type
    cycle_day: Optional[int] = None
    appointments: List[Appointment] = Field(default_factory=list)
    milestones: List[UserMilestone] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    symptoms: List[Symptom] = Field(default_factory=list)

    @property
    def has_data(self) -> bool:
        """Check if anything was recorded for the day."""
        return bool(self.appointments or self.milestones or self.events or self.symptoms)
