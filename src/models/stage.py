"""
Stage model definitions for treatment stage detection.
"""
from typing import Literal
from pydantic import BaseModel


class StageReference(BaseModel):
    """
    Row of the milestone id to stage table.
    """
    stage_id: str
    cycle_template_id: str
    stage_name: str
    milestone_id: str
    stage_details: str


class StageInfo(BaseModel):
    """
    Human-readable stage resolved for a milestone id.
    """
    name: str
    details: str


class DetectedStage(BaseModel):
    """
    Stage as presented to the UI layer.
    """
    name: str
    description: str
    details: str


class StageDetectionResult(BaseModel):
    """
    Outcome of stage detection for an active cycle.
    """
    stage: DetectedStage
    source: Literal["first_milestone", "current_milestone"]
    confidence: Literal["high"] = "high"
