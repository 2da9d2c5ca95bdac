"""
Cycle template reference data.

Templates are fetched from the backend, either as the grouped template map
or as raw stage template rows grouped here by ``build_template_map``, and
held by a ``CycleTemplateCache`` owned by the caller. The cache is only ever replaced wholesale: ``refresh``
reloads it and ``invalidate`` drops it so the next read reloads.

Typical usage:
    cache = CycleTemplateCache(TemplatesClient())
    milestones = cache.get_milestones_for_cycle("ivf-fresh")
    cache.refresh()
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from aws_lambda_powertools import Logger

from src.models.milestone import CycleTemplate, TemplateMilestone
from src.services.constants import CYCLE_TEMPLATE_META
from src.services.milestone import build_tips, sort_milestones
from src.services.utils import normalize_cycle_type
from src.utils.logging import log_exception

logger = Logger()

def build_template_map(rows: Iterable[Mapping[str, Any]]) -> Dict[str, CycleTemplate]:
    """
    Group stage template rows into cycle templates.

    Args:
        rows: Stage template rows with keys ``cycle_type``, ``stage``,
            ``day_label``, ``day_start``, optional ``day_end``,
            ``medical_details``, ``monitoring_procedures`` and ``patient_insights``

    Returns:
        Templates keyed by cycle type. Durations are widened to the last
        milestone day and milestones ordered by day. ``fet`` mirrors
        ``ivf_frozen`` when only the latter exists.
    """
    ordered_rows = sorted(
        rows,
        key=lambda r: (r["cycle_type"], r["day_start"], r["stage"])
    )
    grouped: Dict[str, CycleTemplate] = {}

    for row in ordered_rows:
        key = row["cycle_type"]
        if key not in grouped:
            meta = CYCLE_TEMPLATE_META.get(key)
            grouped[key] = CycleTemplate(
                key=key,
                name=meta["name"] if meta else key.replace("_", " ").title(),
                description=meta["description"] if meta else "Treatment cycle template",
                duration=meta["duration"] if meta else (row.get("day_end") or row["day_start"] or 1),
                milestones=[]
            )

        template = grouped[key]
        template.milestones.append(TemplateMilestone(
            name=row["stage"],
            day=row["day_start"],
            day_end=row.get("day_end"),
            day_label=row.get("day_label"),
            medical_details=row.get("medical_details") or "",
            monitoring_procedures=row.get("monitoring_procedures") or "",
            patient_insights=row.get("patient_insights") or "",
            tips=build_tips(row.get("monitoring_procedures"), row.get("patient_insights"))
        ))

        candidate = row.get("day_end")
        if candidate is None:
            candidate = row["day_start"]
        template.duration = max(template.duration, candidate)

    for template in grouped.values():
        template.milestones.sort(key=lambda m: m.day)

    if "ivf_frozen" in grouped and "fet" not in grouped:
        grouped["fet"] = grouped["ivf_frozen"]

    return grouped

def parse_template_map(payload: Mapping[str, Any]) -> Dict[str, CycleTemplate]:
    """
    Parse the template endpoint payload.

    The endpoint uses camelCase milestone fields (``dayEnd``,
    ``medicalDetails``...).
    """
    templates = {}
    for key, raw in payload.items():
        milestones = [
            TemplateMilestone(
                name=m["name"],
                day=m["day"],
                day_end=m.get("dayEnd"),
                day_label=m.get("dayLabel"),
                medical_details=m.get("medicalDetails") or "",
                monitoring_procedures=m.get("monitoringProcedures"),
                patient_insights=m.get("patientInsights") or "",
                tips=m.get("tips") or [],
                summary=m.get("summary")
            )
            for m in raw.get("milestones", [])
        ]
        templates[key] = CycleTemplate(
            key=raw.get("key", key),
            name=raw["name"],
            description=raw.get("description", ""),
            duration=raw["duration"],
            milestones=milestones
        )
    return templates


class CycleTemplateCache:
    """Caller-owned cache of cycle templates."""

    def __init__(self, client):
        """
        Initialize the cache.

        Args:
            client: Object with a ``fetch_templates()`` method returning either
                the endpoint's template map or the raw stage template rows,
                usually a ``TemplatesClient``
        """
        self.client = client
        self._templates: Optional[Dict[str, CycleTemplate]] = None

    @property
    def is_loaded(self) -> bool:
        return self._templates is not None

    def refresh(self) -> Dict[str, CycleTemplate]:
        """
        Reload all templates.

        Fetch or parse failures are logged and leave an empty table, so
        dependent lookups return "no data" instead of raising.

        Returns:
            Templates keyed by normalized cycle type
        """
        try:
            payload = self.client.fetch_templates()
            if isinstance(payload, list):
                templates = build_template_map(payload)
            else:
                templates = parse_template_map(payload)
        except Exception as e:
            log_exception(logger, "Error loading cycle templates", e)
            templates = {}

        self._templates = templates
        logger.info("Cycle templates loaded", extra={
            "template_count": len(templates),
            "cycle_types": sorted(templates)
        })
        return templates

    def invalidate(self) -> None:
        """Drop cached templates; the next read reloads them."""
        self._templates = None

    def get_templates(self) -> Dict[str, CycleTemplate]:
        """Get all templates, loading them on first use."""
        if self._templates is None:
            return self.refresh()
        return self._templates

    def get_cycle_info(self, cycle_type: str) -> Optional[CycleTemplate]:
        """Get the template for a cycle type, or None if unknown."""
        return self.get_templates().get(normalize_cycle_type(cycle_type))

    def get_milestones_for_cycle(self, cycle_type: str) -> List[TemplateMilestone]:
        """
        Get the ordered milestones for a cycle type.

        Returns:
            Milestones in expected treatment order, empty if the type is unknown
        """
        template = self.get_cycle_info(cycle_type)
        if template is None:
            return []
        return sort_milestones(template.milestones, cycle_type)
