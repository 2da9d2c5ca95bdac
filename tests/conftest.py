"""
Pytest configuration and shared fixtures.
"""
import pytest
from dataclasses import dataclass
from datetime import date
from typing import List

from src.models.cycle import Cycle, CycleStatus
from src.models.milestone import TemplateMilestone, UserMilestone
from src.models.calendar import Appointment, Event, Symptom

@dataclass
class FakeLambdaContext:
    """Minimal Lambda context for handler tests."""
    function_name: str = "test-function"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:eu-west-1:123456789012:function:test-function"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"

@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """Create a fake Lambda context."""
    return FakeLambdaContext()

@pytest.fixture
def ivf_cycle() -> Cycle:
    """Create an active IVF cycle starting 2024-01-01."""
    return Cycle(
        id="cycle-1",
        type="ivf_fresh",
        status=CycleStatus.ACTIVE,
        start_date=date(2024, 1, 1)
    )

@pytest.fixture
def ivf_template_milestones() -> List[TemplateMilestone]:
    """Create IVF template milestones in day order, as stored."""
    return [
        TemplateMilestone(name="Cycle day 1", day=1, day_end=1),
        TemplateMilestone(name="Baseline blood test", day=2, day_end=2),
        TemplateMilestone(name="Stimulation injections start", day=3, day_end=3),
        TemplateMilestone(name="Monitoring ultrasound", day=6, day_end=6),
        TemplateMilestone(name="Monitoring blood test", day=6, day_end=6),
        TemplateMilestone(name="Antagonist injections start", day=7, day_end=7),
        TemplateMilestone(name="Trigger injection", day=11, day_end=11),
        TemplateMilestone(name="Egg retrieval", day=13, day_end=13),
        TemplateMilestone(name="Embryo transfer", day=19, day_end=19),
        TemplateMilestone(name="Embryos frozen", day=20, day_end=20),
        TemplateMilestone(name="Pregnancy blood test", day=28, day_end=28),
    ]

@pytest.fixture
def ivf_user_milestones() -> List[UserMilestone]:
    """Create user milestones partway through stimulation."""
    return [
        UserMilestone(
            id="m1", cycle_id="cycle-1", title="Baseline blood test",
            status="completed", date=date(2024, 1, 2), start_date=date(2024, 1, 2)
        ),
        UserMilestone(
            id="m2", cycle_id="cycle-1", title="Stimulation injections start",
            status="in-progress", date=date(2024, 1, 3), start_date=date(2024, 1, 5)
        ),
        UserMilestone(
            id="m3", cycle_id="cycle-1", title="Egg retrieval",
            status="pending", date=date(2024, 1, 13)
        ),
    ]

@pytest.fixture
def calendar_records():
    """Create appointments, events and symptoms for January 2024."""
    appointments = [
        Appointment(
            id="a1", cycle_id="cycle-1", title="Baseline scan",
            date="2024-01-02T09:30:00", location="City Fertility"
        ),
        Appointment(
            id="a2", cycle_id="cycle-1", title="Monitoring scan",
            date="2024-01-06T08:00:00"
        ),
    ]
    events = [
        Event(id="e1", cycle_id="cycle-1", event_type="doctor_visit", title="Consult", date="2024-01-04"),
    ]
    symptoms = [
        Symptom(id="s1", cycle_id="cycle-1", date="2024-01-05", mood="tired", bloating=3),
    ]
    return appointments, events, symptoms

@pytest.fixture
def templates_payload() -> dict:
    """Create a template endpoint payload."""
    return {
        "ivf_fresh": {
            "key": "ivf_fresh",
            "name": "IVF Cycle",
            "description": "Stimulated IVF cycle with fresh embryo transfer",
            "duration": 35,
            "milestones": [
                {"name": "Egg retrieval", "day": 13, "dayEnd": 13, "dayLabel": "Day 13",
                 "medicalDetails": "Eggs are collected.", "patientInsights": "Rest.", "tips": ["Rest"]},
                {"name": "Cycle day 1", "day": 1, "dayEnd": 1, "dayLabel": "Day 1",
                 "medicalDetails": "Period starts.", "patientInsights": "Low energy.", "tips": []},
                {"name": "Stimulation injections start", "day": 3, "dayEnd": 3, "dayLabel": "Day 3",
                 "medicalDetails": "Injections begin.", "patientInsights": "Bloating.", "tips": []},
                {"name": "Baseline blood test", "day": 2, "dayEnd": 2, "dayLabel": "Day 2",
                 "medicalDetails": "Hormones checked.", "patientInsights": "Arm soreness.", "tips": []},
            ]
        },
        "iui": {
            "key": "iui",
            "name": "Intrauterine Insemination",
            "description": "Stimulated or natural cycle leading to insemination",
            "duration": 28,
            "milestones": [
                {"name": "Cycle day 1", "day": 1, "dayEnd": 1, "medicalDetails": "", "patientInsights": "", "tips": []},
            ]
        }
    }
