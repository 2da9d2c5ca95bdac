"""
Service module for treatment stage detection.

Stage detection is deterministic: the user's latest active milestone is
resolved to a milestone id and then to a stage. Lookup failures are raised
rather than replaced with a guessed stage, since a wrong stage would show
medically incorrect phase information.

Typical usage:
    >>> result = detect_stage(cycle, user_milestones, calculate_cycle_day(cycle.start_date))
    >>> print(result.stage.name)
"""
from typing import Optional, Sequence

from aws_lambda_powertools import Logger

from src.models.cycle import Cycle
from src.models.milestone import MilestoneStatus, UserMilestone
from src.models.stage import DetectedStage, StageDetectionResult, StageInfo
from src.services.exceptions import NoActiveCycleError, UnknownCycleTypeError
from src.services.reference_data import ReferenceData, load_reference_data

logger = Logger()

def get_latest_active_milestone(
    milestones: Sequence[UserMilestone]
) -> Optional[UserMilestone]:
    """
    Get the milestone the user is currently at.

    In-progress milestones take priority over completed ones. Within the
    chosen group the most recent start date (or planned date when not
    started) wins, ties going to the earlier list entry.

    Args:
        milestones: User milestones of one cycle

    Returns:
        Latest active milestone, or None if nothing is in progress or completed
    """
    if not milestones:
        return None

    in_progress = [m for m in milestones if m.status == MilestoneStatus.IN_PROGRESS]
    completed = [m for m in milestones if m.status == MilestoneStatus.COMPLETED]

    logger.debug("Selecting latest active milestone", extra={
        "total_milestones": len(milestones),
        "in_progress": len(in_progress),
        "completed": len(completed)
    })

    for group in (in_progress, completed):
        if group:
            return max(group, key=lambda m: m.effective_date)

    return None

def _build_result(stage_info: StageInfo, source: str) -> StageDetectionResult:
    return StageDetectionResult(
        stage=DetectedStage(
            name=stage_info.name,
            description=stage_info.details,
            details=stage_info.details
        ),
        source=source,
        confidence="high"
    )

def detect_stage(
    active_cycle: Optional[Cycle],
    milestones: Sequence[UserMilestone],
    current_day: int,
    reference: Optional[ReferenceData] = None
) -> StageDetectionResult:
    """
    Detect the treatment stage of an active cycle.

    Args:
        active_cycle: The user's active cycle
        milestones: User milestones of that cycle
        current_day: Current cycle day, logged for context
        reference: Reference data snapshot, defaults to the packaged datasets

    Returns:
        StageDetectionResult with source ``first_milestone`` for cycles
        with no started milestone, ``current_milestone`` otherwise

    Raises:
        NoActiveCycleError: If no cycle is given
        UnknownCycleTypeError: If the cycle type has no reference milestones
        MilestoneLookupError: If the active milestone title is unknown for the cycle type
        StageLookupError: If the resolved milestone has no stage
    """
    if active_cycle is None:
        raise NoActiveCycleError("No active cycle provided - stage detection requires active cycle")

    reference = reference or load_reference_data()
    latest = get_latest_active_milestone(milestones)

    if latest is None:
        first_milestone = reference.get_first_milestone(active_cycle.type)
        if first_milestone is None:
            raise UnknownCycleTypeError(active_cycle.type)

        stage_info = reference.get_stage_info(first_milestone.milestone_id)
        logger.info("Detected stage from first milestone", extra={
            "cycle_id": active_cycle.id,
            "cycle_type": active_cycle.type,
            "current_day": current_day,
            "milestone_id": first_milestone.milestone_id,
            "stage": stage_info.name
        })
        return _build_result(stage_info, "first_milestone")

    milestone_id = reference.get_milestone_id_by_name(active_cycle.type, latest.title)
    stage_info = reference.get_stage_info(milestone_id)

    logger.info("Detected stage from current milestone", extra={
        "cycle_id": active_cycle.id,
        "cycle_type": active_cycle.type,
        "current_day": current_day,
        "milestone_title": latest.title,
        "milestone_id": milestone_id,
        "stage": stage_info.name
    })
    return _build_result(stage_info, "current_milestone")
