"""
Constants and shared lookup tables for cycle-related services.
"""
from typing import Dict, List

DEFAULT_CYCLE_LENGTH = 28

# Days past the estimated length still counted as part of an open-ended cycle
CYCLE_DAY_SLACK = 7

CYCLE_TYPE_META: Dict[str, Dict] = {
    "ivf_fresh": {"long": "IVF Cycle", "short": "IVF cycle", "duration": 28},
    "ivf_frozen": {"long": "FET", "short": "FET", "duration": 21},
    "fet": {"long": "FET", "short": "FET", "duration": 21},
    "iui": {"long": "IUI Cycle", "short": "IUI cycle", "duration": 14},
    "monitoring": {"long": "Monitoring Cycle", "short": "Monitoring cycle", "duration": 14},
    "natural": {"long": "Natural Cycle", "short": "Natural cycle", "duration": 28},
    "egg_freezing": {"long": "Egg Freezing Cycle", "short": "Egg freezing", "duration": 21},
}

CYCLE_TEMPLATE_META: Dict[str, Dict] = {
    "ivf_fresh": {
        "name": "IVF Cycle",
        "description": "Stimulated IVF cycle with fresh embryo transfer",
        "duration": 35,
    },
    "ivf_frozen": {
        "name": "Frozen Embryo Transfer",
        "description": "Transfer of previously frozen embryo aligned with ovulation",
        "duration": 28,
    },
    "fet": {
        "name": "Frozen Embryo Transfer",
        "description": "Transfer of previously frozen embryo aligned with ovulation",
        "duration": 28,
    },
    "egg_freezing": {
        "name": "Egg Freezing",
        "description": "Oocyte cryopreservation preparation and retrieval",
        "duration": 21,
    },
    "iui": {
        "name": "Intrauterine Insemination",
        "description": "Stimulated or natural cycle leading to insemination",
        "duration": 28,
    },
}

# Expected real-world sequence of milestones per cycle family
MILESTONE_ORDER: Dict[str, List[str]] = {
    "ivf": [
        "Cycle day 1",
        "Baseline blood test",
        "Stimulation injections start",
        "Monitoring blood test",
        "Monitoring ultrasound",
        "Antagonist injections start",
        "Trigger injection",
        "Egg retrieval",
        "Embryo transfer",
        "Embryos frozen",
        "Pregnancy blood test",
    ],
    "iui": [
        "Cycle day 1",
        "Baseline blood test",
        "Monitoring blood test",
        "Monitoring ultrasound",
        "Trigger injection",
        "Insemination (IUI)",
        "Medication starts",
        "Pregnancy blood test",
    ],
    "fet": [
        "Cycle day 1",
        "Monitoring blood test",
        "Monitoring ultrasound",
        "Ovulation detected",
        "Medication starts",
        "Embryo transfer",
        "Pregnancy blood test",
    ],
    "egg_freezing": [
        "Cycle day 1",
        "Baseline blood test",
        "Stimulation injections start",
        "Monitoring blood test",
        "Monitoring ultrasound",
        "Antagonist injections start",
        "Trigger injection",
        "Egg retrieval",
        "Eggs frozen",
    ],
}

# Reference-data template ids keyed by normalized cycle type
CYCLE_TEMPLATE_SYNONYMS: Dict[str, str] = {
    "IVF_FRESH": "IVF",
    "IVF": "IVF",
    "IVF_FROZEN": "FET",
    "FET": "FET",
    "EGG_FREEZING": "EGG_FREEZ",
    "EGG_FREEZ": "EGG_FREEZ",
    "IUI": "IUI",
}

# Candidates for the stage of a cycle with no started milestones, in priority order
FIRST_MILESTONE_NAMES: List[str] = [
    "Cycle day 1",
    "Baseline blood test",
    "Stimulation injections start",
    "Monitoring blood test",
]

MILESTONE_TYPE_MAPPING: Dict[str, str] = {
    "Stimulation Start": "stimulation-start",
    "Egg Collection": "egg-collection",
    "Fresh Embryo Transfer": "embryo-transfer",
    "Frozen Embryo Transfer": "frozen-transfer",
    "Pregnancy Blood Test (BETA)": "beta-test",
    "Pregnancy Test": "beta-test",
    "Insemination": "iui-procedure",
    "Lining Scan": "monitoring",
}

MAX_TEMPLATE_TIPS = 6
