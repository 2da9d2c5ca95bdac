"""
Service module for ordering and looking up template milestones.

Each cycle family has a canonical milestone sequence in ``MILESTONE_ORDER``.
New cycle types are supported by extending that table.

Typical usage:
    >>> ordered = sort_milestones(template.milestones, cycle.type)
    >>> current = get_milestone_for_day(ordered, calculate_cycle_day(cycle.start_date))
"""
import re
from typing import Iterable, List, Optional, Sequence

from src.models.milestone import TemplateMilestone
from src.services.constants import MAX_TEMPLATE_TIPS, MILESTONE_ORDER, MILESTONE_TYPE_MAPPING
from src.services.utils import normalize_cycle_type

def sort_milestones(
    milestones: Iterable[TemplateMilestone],
    cycle_type: Optional[str]
) -> List[TemplateMilestone]:
    """
    Sort milestones by the expected sequence of their cycle type.

    Milestones named in the canonical sequence come first, in sequence order.
    The rest follow, ordered by day. Without a canonical sequence the whole
    list is ordered by day. The sort is stable, so ties keep input order.

    Args:
        milestones: Template milestones to sort
        cycle_type: Cycle type, matched after lowercasing and replacing hyphens

    Returns:
        New sorted list
    """
    expected_order = MILESTONE_ORDER.get(normalize_cycle_type(cycle_type), [])
    if not expected_order:
        return sorted(milestones, key=lambda m: m.day)

    rank = {}
    for index, name in enumerate(expected_order):
        rank.setdefault(name, index)

    def sort_key(milestone: TemplateMilestone):
        if milestone.name in rank:
            return (0, rank[milestone.name])
        return (1, milestone.day)

    return sorted(milestones, key=sort_key)

def get_milestone_for_day(
    milestones: Sequence[TemplateMilestone],
    current_day: int
) -> Optional[TemplateMilestone]:
    """
    Find the milestone that covers a cycle day.

    Returns the first milestone whose day range contains ``current_day``.
    Failing that, the last milestone starting on or before the day, and
    finally the first milestone of the list.

    Args:
        milestones: Milestones in display order
        current_day: 1-based cycle day, any integer

    Returns:
        Matching milestone, None only when the list is empty
    """
    if not milestones:
        return None

    current = None
    for milestone in milestones:
        if milestone.day <= current_day <= milestone.end_day:
            return milestone
        if current_day >= milestone.day:
            current = milestone

    return current or milestones[0]

def get_next_milestone(
    milestones: Sequence[TemplateMilestone],
    current_day: int,
    completed_milestones: Iterable[str] = ()
) -> Optional[TemplateMilestone]:
    """
    Find the next milestone on or after a cycle day that is not yet completed.

    Args:
        milestones: Milestones in display order
        current_day: 1-based cycle day
        completed_milestones: Names of milestones already completed

    Returns:
        Next milestone or None
    """
    completed = set(completed_milestones)
    for milestone in milestones:
        if milestone.day >= current_day and milestone.name not in completed:
            return milestone
    return None

def get_milestone_by_name(
    milestones: Iterable[TemplateMilestone],
    milestone_name: str
) -> Optional[TemplateMilestone]:
    """Find a milestone by its exact name."""
    return next((m for m in milestones if m.name == milestone_name), None)

def get_milestone_by_type(
    milestones: Sequence[TemplateMilestone],
    milestone_type: str,
    milestone_title: Optional[str] = None
) -> Optional[TemplateMilestone]:
    """
    Find a milestone by type, falling back to its title.

    User milestones created before templates were loaded store the template
    name in either field.
    """
    milestone = get_milestone_by_name(milestones, milestone_type)
    if milestone is None and milestone_title:
        milestone = get_milestone_by_name(milestones, milestone_title)
    return milestone

def map_milestone_type(milestone_name: str) -> str:
    """
    Map a milestone display name to its legacy type slug.

    Example:
        >>> map_milestone_type("Egg Collection")
        'egg-collection'
        >>> map_milestone_type("Monitoring ultrasound")
        'monitoring-ultrasound'
    """
    if milestone_name in MILESTONE_TYPE_MAPPING:
        return MILESTONE_TYPE_MAPPING[milestone_name]
    return re.sub(r"\s+", "-", milestone_name.lower())

def build_tips(
    monitoring_procedures: Optional[str],
    patient_insights: Optional[str]
) -> List[str]:
    """
    Split template text into short tips.

    Sentences from the monitoring procedures come first, then the patient
    insights, capped at ``MAX_TEMPLATE_TIPS``.
    """
    tips = []
    for source in (monitoring_procedures, patient_insights):
        text = (source or "").strip()
        if not text:
            continue
        tips.extend(tip.strip() for tip in re.split(r"[.\n]+", text) if tip.strip())
    return tips[:MAX_TEMPLATE_TIPS]
