"""
Shared normalization helpers for cycle-related services.

Cycle types and milestone names arrive in several spellings (``ivf-fresh``,
``IVF_FRESH``, ``Baseline Blood-Test``). These helpers reduce them to the
keys used by the static lookup tables.
"""
from typing import Optional

from src.services.constants import CYCLE_TEMPLATE_SYNONYMS


def normalize_cycle_type(cycle_type: Optional[str]) -> str:
    """
    Normalize a cycle type to the lowercase key used by template data.

    Example:
        >>> normalize_cycle_type("IVF-Fresh")
        'ivf_fresh'
    """
    if not cycle_type:
        return ""
    return cycle_type.lower().replace("-", "_")


def normalize_cycle_template_id(cycle_type: Optional[str]) -> str:
    """
    Map a cycle type to the template id used by the milestone and stage tables.

    Unknown types are returned uppercased with hyphens replaced.

    Example:
        >>> normalize_cycle_template_id("egg-freezing")
        'EGG_FREEZ'
    """
    normalized = (cycle_type or "").upper().replace("-", "_")
    return CYCLE_TEMPLATE_SYNONYMS.get(normalized, normalized)


def normalize_milestone_name(name: str) -> str:
    """
    Normalize a milestone name for exact lookups.

    Case, whitespace, hyphens and underscores are ignored.

    Example:
        >>> normalize_milestone_name("Baseline Blood-Test")
        'baselinebloodtest'
    """
    return "".join(ch for ch in name.lower() if ch not in "-_" and not ch.isspace())
