"""
Lambda handler for treatment stage detection.
"""
from typing import Dict, List, Optional
import json

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError

from src.models.cycle import Cycle
from src.models.milestone import UserMilestone
from src.models.stage import StageDetectionResult
from src.services.cycle import calculate_cycle_day
from src.services.exceptions import LookupFailureError, StageDetectionError
from src.services.stage import detect_stage
from src.utils.logging import error_context, logger
from src.utils.responses import error_response, json_response

tracer = Tracer()

class StageRequest(BaseModel):
    """Stage detection request model."""
    cycle: Optional[Cycle] = None
    milestones: List[UserMilestone] = Field(default_factory=list)
    current_day: Optional[int] = None

class StageResponse(BaseModel):
    """Stage detection response model."""
    cycle_day: int
    result: StageDetectionResult

@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle stage detection requests.

    Unknown milestone titles and missing stages are data-integrity problems
    and are returned as 422 so the UI shows an error state.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    try:
        request = StageRequest(**json.loads(event.get("body") or "{}"))
    except (ValueError, TypeError) as e:
        logger.warning("Invalid stage request", extra={"error": str(e)})
        details = e.errors(include_url=False) if isinstance(e, ValidationError) else None
        return error_response(400, "Invalid request", details=details)

    try:
        return json_response(200, analyze_stage(request))
    except LookupFailureError as e:
        logger.error("Stage reference lookup failed", extra=error_context(
            e, cycle_id=request.cycle.id if request.cycle else None
        ))
        return error_response(422, str(e), error_type=e.__class__.__name__)
    except StageDetectionError as e:
        return error_response(422, str(e), error_type=e.__class__.__name__)
    except Exception as e:
        logger.exception("Failed to detect stage")
        return error_response(500, str(e))

def analyze_stage(request: StageRequest) -> StageResponse:
    """
    Detect the stage for a request.

    The cycle day defaults to today's day of the cycle.
    """
    if request.current_day is not None:
        cycle_day = request.current_day
    elif request.cycle is not None:
        cycle_day = calculate_cycle_day(request.cycle.start_date)
    else:
        cycle_day = 0

    result = detect_stage(request.cycle, request.milestones, cycle_day)
    return StageResponse(cycle_day=cycle_day, result=result)
