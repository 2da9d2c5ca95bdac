"""
Lambda handler for cycle template milestones.

Returns the template milestones of a cycle type in treatment order together
with the milestone covering the current cycle day.
"""
from datetime import date
from typing import Dict, List, Optional
import json

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError

from src.models.milestone import TemplateMilestone
from src.services.cycle import (
    calculate_cycle_day,
    calculate_milestone_date,
    get_cycle_type_label,
    get_estimated_cycle_length
)
from src.services.milestone import get_milestone_for_day, get_next_milestone
from src.utils.clients import get_template_cache
from src.utils.logging import logger
from src.utils.responses import error_response, json_response

tracer = Tracer()

class MilestonesRequest(BaseModel):
    """Template milestones request model."""
    cycle_type: str = Field(..., min_length=1)
    start_date: Optional[date] = None
    current_day: Optional[int] = None
    completed_milestones: List[str] = Field(default_factory=list)
    refresh: bool = False

class ScheduledMilestone(BaseModel):
    """Template milestone with its calendar date for a cycle start."""
    milestone: TemplateMilestone
    expected_date: Optional[date] = None

class MilestonesResponse(BaseModel):
    """Template milestones response model."""
    cycle_type: str
    label: str
    estimated_length: int
    current_day: int
    milestones: List[ScheduledMilestone]
    current_milestone: Optional[TemplateMilestone] = None
    next_milestone: Optional[TemplateMilestone] = None

@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle template milestone requests.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    try:
        request = MilestonesRequest(**json.loads(event.get("body") or "{}"))
    except (ValueError, TypeError) as e:
        logger.warning("Invalid milestones request", extra={"error": str(e)})
        details = e.errors(include_url=False) if isinstance(e, ValidationError) else None
        return error_response(400, "Invalid request", details=details)

    try:
        return json_response(200, list_milestones(request))
    except Exception as e:
        logger.exception("Failed to list milestones")
        return error_response(500, str(e))

def list_milestones(request: MilestonesRequest) -> MilestonesResponse:
    """
    Build the milestone listing for a request.

    An unknown cycle type, or templates that failed to load, produce an
    empty listing.
    """
    cache = get_template_cache()
    if request.refresh:
        cache.refresh()

    milestones = cache.get_milestones_for_cycle(request.cycle_type)

    if request.current_day is not None:
        current_day = request.current_day
    else:
        current_day = calculate_cycle_day(request.start_date)

    scheduled = [
        ScheduledMilestone(
            milestone=m,
            expected_date=calculate_milestone_date(request.start_date, m.day) if request.start_date else None
        )
        for m in milestones
    ]

    return MilestonesResponse(
        cycle_type=request.cycle_type,
        label=get_cycle_type_label(request.cycle_type),
        estimated_length=get_estimated_cycle_length(request.cycle_type),
        current_day=current_day,
        milestones=scheduled,
        current_milestone=get_milestone_for_day(milestones, current_day),
        next_milestone=get_next_milestone(milestones, current_day, request.completed_milestones)
    )
