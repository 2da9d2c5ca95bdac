"""
Lambda handler for the cycle calendar view.
"""
from datetime import date
from typing import Dict, List, Optional
import json

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError

from src.models.calendar import Appointment, CalendarDay, DaySummary, Event, Symptom
from src.models.cycle import Cycle
from src.models.milestone import UserMilestone
from src.services.calendar import CycleCalendar, next_month, previous_month
from src.utils.logging import logger
from src.utils.responses import error_response, json_response

tracer = Tracer()

class CalendarRequest(BaseModel):
    """Calendar month request model."""
    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)
    cycle: Optional[Cycle] = None
    appointments: List[Appointment] = Field(default_factory=list)
    milestones: List[UserMilestone] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    symptoms: List[Symptom] = Field(default_factory=list)
    selected_date: Optional[date] = None
    today: Optional[date] = None

class MonthRef(BaseModel):
    year: int
    month: int

class CalendarResponse(BaseModel):
    """Calendar month response model."""
    year: int
    month: int
    days: List[Optional[CalendarDay]]
    previous: MonthRef
    next: MonthRef
    summary: Optional[DaySummary] = None

@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle calendar month requests.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    try:
        request = CalendarRequest(**json.loads(event.get("body") or "{}"))
    except (ValueError, TypeError) as e:
        logger.warning("Invalid calendar request", extra={"error": str(e)})
        details = e.errors(include_url=False) if isinstance(e, ValidationError) else None
        return error_response(400, "Invalid request", details=details)

    try:
        return json_response(200, build_calendar(request))
    except Exception as e:
        logger.exception("Failed to build calendar")
        return error_response(500, str(e))

def build_calendar(request: CalendarRequest) -> CalendarResponse:
    """
    Build the month grid, and the day summary when a date is selected.
    """
    calendar = CycleCalendar(
        request.cycle,
        request.appointments,
        request.milestones,
        request.events,
        request.symptoms,
        today=request.today
    )
    days = calendar.build_month(request.year, request.month)
    summary = calendar.day_summary(request.selected_date) if request.selected_date else None

    prev_year, prev_month = previous_month(request.year, request.month)
    next_year, next_month_number = next_month(request.year, request.month)

    logger.info("Calendar built", extra={
        "year": request.year,
        "month": request.month,
        "cycle_id": request.cycle.id if request.cycle else None,
        "has_summary": summary is not None
    })

    return CalendarResponse(
        year=request.year,
        month=request.month,
        days=days,
        previous=MonthRef(year=prev_year, month=prev_month),
        next=MonthRef(year=next_year, month=next_month_number),
        summary=summary
    )
