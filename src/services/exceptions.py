"""
Service-level exceptions.

This module contains exceptions that can be raised by various services
in the application.
"""

class StageDetectionError(Exception):
    """Base exception for stage detection errors."""
    pass

class NoActiveCycleError(StageDetectionError):
    """Raised when stage detection is requested without an active cycle."""
    pass

class LookupFailureError(StageDetectionError):
    """Raised when reference data has no entry for a requested key."""
    pass

class MilestoneLookupError(LookupFailureError):
    """Raised when a milestone title does not match any known template milestone."""

    def __init__(self, cycle_type: str, title: str):
        self.cycle_type = cycle_type
        self.title = title
        super().__init__(f"No milestone ID found for title: {title} in cycle: {cycle_type}")

class StageLookupError(LookupFailureError):
    """Raised when a milestone id has no stage in the stage table."""

    def __init__(self, milestone_id: str):
        self.milestone_id = milestone_id
        super().__init__(f"No stage found for milestone ID: {milestone_id}")

class TemplateLoadError(Exception):
    """Raised when cycle templates cannot be fetched."""
    pass

class UnknownCycleTypeError(LookupFailureError):
    """Raised when reference data has no milestones for a cycle type."""

    def __init__(self, cycle_type: str):
        self.cycle_type = cycle_type
        super().__init__(f"No milestones found for cycle type: {cycle_type}")
