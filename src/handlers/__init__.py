"""
Lambda handlers package for AWS Lambda functions.
"""
from .stage import handler as stage_handler
from .calendar import handler as calendar_handler
from .milestones import handler as milestones_handler

__all__ = ["stage_handler", "calendar_handler", "milestones_handler"]
