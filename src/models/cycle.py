"""
Cycle model definitions for fertility treatment cycles.
"""
from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class CycleStatus(str, Enum):
    """
    Lifecycle states of a treatment cycle.
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Cycle(BaseModel):
    """
    Represents a treatment cycle, the aggregate root for calendar data.
    """
    id: str
    type: str  # ivf_fresh, ivf_frozen, fet, iui, egg_freezing
    status: CycleStatus = CycleStatus.ACTIVE
    start_date: date
    end_date: Optional[date] = None
    clinic: Optional[str] = None
    doctor: Optional[str] = None
    donor_conception: bool = False

    @property
    def is_active(self) -> bool:
        """Check if the cycle is still running."""
        return self.status == CycleStatus.ACTIVE
