"""
Static milestone and stage reference data.

Two datasets ship with the service:
    - ``milestones.json``: per cycle template, milestone name to milestone id
    - ``stages.json``: milestone id to the treatment stage shown to users

Milestone identity is derived from normalized display names, so a renamed
template milestone breaks the chain until both datasets are updated.

Typical usage:
    >>> reference = load_reference_data()
    >>> milestone_id = reference.get_milestone_id_by_name("ivf_fresh", "Egg retrieval")
    >>> stage = reference.get_stage_info(milestone_id)
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from aws_lambda_powertools import Logger

from src.models.milestone import MilestoneReference
from src.models.stage import StageInfo, StageReference
from src.services.constants import FIRST_MILESTONE_NAMES
from src.services.exceptions import MilestoneLookupError, StageLookupError
from src.services.utils import normalize_cycle_template_id, normalize_milestone_name

logger = Logger()

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class ReferenceData:
    """In-memory snapshot of the milestone and stage tables."""

    def __init__(
        self,
        milestones: Iterable[MilestoneReference],
        stages: Iterable[StageReference]
    ):
        self.milestones: List[MilestoneReference] = list(milestones)
        self.stages: List[StageReference] = list(stages)
        self._milestones_by_key: Dict[Tuple[str, str], MilestoneReference] = {
            (m.cycle_template_id, normalize_milestone_name(m.milestone_name)): m
            for m in self.milestones
        }
        self._stages_by_milestone: Dict[str, StageReference] = {
            s.milestone_id: s for s in self.stages
        }

    @classmethod
    def load(cls, data_dir: Path = DATA_DIR) -> "ReferenceData":
        """
        Load the reference datasets from JSON files.

        Args:
            data_dir: Directory containing ``milestones.json`` and ``stages.json``

        Returns:
            ReferenceData snapshot

        Raises:
            FileNotFoundError: If a dataset is missing
            pydantic.ValidationError: If a row is malformed
        """
        with open(data_dir / "milestones.json", encoding="utf-8") as f:
            milestones = [MilestoneReference(**row) for row in json.load(f)]
        with open(data_dir / "stages.json", encoding="utf-8") as f:
            stages = [StageReference(**row) for row in json.load(f)]

        logger.info("Loaded stage reference data", extra={
            "data_dir": str(data_dir),
            "milestone_count": len(milestones),
            "stage_count": len(stages)
        })
        return cls(milestones, stages)

    def get_milestone_id_by_name(self, cycle_type: str, milestone_title: str) -> str:
        """
        Resolve a milestone title to its id for a cycle type.

        Matching is exact after normalizing case, whitespace, hyphens and
        underscores. There is no fuzzy fallback.

        Raises:
            MilestoneLookupError: If the title is unknown for the cycle type
        """
        template_id = normalize_cycle_template_id(cycle_type)
        match = self._milestones_by_key.get(
            (template_id, normalize_milestone_name(milestone_title))
        )
        if match is None:
            raise MilestoneLookupError(cycle_type, milestone_title)
        return match.milestone_id

    def get_stage_info(self, milestone_id: str) -> StageInfo:
        """
        Resolve the stage for a milestone id.

        Raises:
            StageLookupError: If no stage is mapped to the milestone id
        """
        stage = self._stages_by_milestone.get(milestone_id)
        if stage is None:
            raise StageLookupError(milestone_id)
        return StageInfo(name=stage.stage_name, details=stage.stage_details)

    def get_first_milestone(self, cycle_type: str) -> Optional[MilestoneReference]:
        """
        Get the milestone a new cycle starts at.

        Tries ``FIRST_MILESTONE_NAMES`` in priority order, then falls back to
        the first row for the cycle type.
        """
        template_id = normalize_cycle_template_id(cycle_type)
        candidates = [m for m in self.milestones if m.cycle_template_id == template_id]

        for milestone_name in FIRST_MILESTONE_NAMES:
            for milestone in candidates:
                if milestone.milestone_name == milestone_name:
                    return milestone

        return candidates[0] if candidates else None

    def get_milestone_summary(
        self,
        cycle_type: str,
        milestone_id: Optional[str] = None,
        milestone_title: Optional[str] = None
    ) -> Optional[str]:
        """
        Get descriptive details for a milestone.

        Used for informational text only, so a title may match by
        containment in either direction. Stage detection never uses this.

        Args:
            cycle_type: Cycle type in any supported spelling
            milestone_id: Milestone id, tried first
            milestone_title: Milestone title, tried second

        Returns:
            Milestone details or None
        """
        template_id = normalize_cycle_template_id(cycle_type)
        candidates = [m for m in self.milestones if m.cycle_template_id == template_id]

        if milestone_id:
            normalized_id = milestone_id.upper().replace("-", "_")
            for milestone in candidates:
                if milestone.milestone_id == normalized_id:
                    return milestone.milestone_details

        if milestone_title:
            normalized_title = normalize_milestone_name(milestone_title)
            for milestone in candidates:
                normalized_name = normalize_milestone_name(milestone.milestone_name)
                if (normalized_name == normalized_title
                        or normalized_title in normalized_name
                        or normalized_name in normalized_title):
                    return milestone.milestone_details

        return None


@lru_cache(maxsize=1)
def load_reference_data() -> ReferenceData:
    """Get the packaged reference data, loaded once per process."""
    return ReferenceData.load()
