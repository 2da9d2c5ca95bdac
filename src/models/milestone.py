"""
Milestone model definitions.

Template milestones describe the expected sequence of a cycle type, user
milestones are the persisted instances seeded from a template when a cycle
starts.
"""
from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class MilestoneStatus(str, Enum):
    """
    Progress states of a user milestone.
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TemplateMilestone(BaseModel):
    """
    A milestone definition inside a cycle template.

    The name doubles as the join key into the ordering table and the
    milestone reference table.
    """
    name: str
    day: int
    day_end: Optional[int] = None
    day_label: Optional[str] = None
    medical_details: str = ""
    monitoring_procedures: Optional[str] = None
    patient_insights: str = ""
    tips: List[str] = Field(default_factory=list)
    summary: Optional[str] = None

    @property
    def end_day(self) -> int:
        """Last day covered by this milestone."""
        return self.day_end if self.day_end is not None else self.day


class CycleTemplate(BaseModel):
    """
    Reference template for a cycle type.
    """
    key: str
    name: str
    description: str
    duration: int
    milestones: List[TemplateMilestone] = Field(default_factory=list)


class UserMilestone(BaseModel):
    """
    A milestone belonging to one treatment cycle.
    """
    id: Optional[str] = None
    cycle_id: Optional[str] = None
    type: Optional[str] = None
    title: str
    status: MilestoneStatus = MilestoneStatus.PENDING
    date: date  # Expected/planned date
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @property
    def effective_date(self) -> date:
        """Actual start date, or the planned date when not started."""
        return self.start_date or self.date


class MilestoneReference(BaseModel):
    """
    Row of the per-cycle-type milestone name to milestone id table.
    """
    milestone_id: str
    cycle_template_id: str
    milestone_name: str
    milestone_type: Optional[str] = None
    milestone_details: Optional[str] = None
