"""
Pytest configuration: make sure `import fairchance` and `import api` work
regardless of where pytest is invoked, plus shared fixtures.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fairchance.events import FixedClock, SimulatedResponse, SimulatedSender  # noqa: E402
from fairchance.store import MemoryFormStore  # noqa: E402
from fairchance.workflow import Workflow  # noqa: E402

# Monday morning
MONDAY = datetime(2024, 6, 3, 9, 0)


def assessment_payload(decision="rescind", **overrides):
    """A complete, valid assessment form as the browser would post it."""
    data = {
        "employerName": "Widget Industries",
        "applicantName": "Sam Taylor",
        "positionApplied": "Bookkeeper",
        "dateConditionalOffer": "2024-05-20",
        "dateAssessment": "2024-05-28",
        "dateCriminalHistory": "2024-05-24",
        "assessmentPerformer": "Robert Johnson",
        "jobDuties": ["Reconciling accounts", "", "Processing payroll"],
        "criminalConduct": "Embezzlement from a former employer",
        "convictionMonth": "02",
        "convictionYear": "2022",
        "activities": {
            "workExperience": "yes",
            "workExperienceDetails": "Retail cashier since 2023",
            "jobTraining": "no",
            "education": "unknown",
            "counseling": "no",
            "rehabilitation": "no",
            "communityService": "no",
        },
        "decision": decision,
        "rescindReason": "Direct access to company funds is a core duty",
    }
    data.update(overrides)
    return data


@pytest.fixture
def store():
    return MemoryFormStore()


@pytest.fixture
def clock():
    return FixedClock(MONDAY)


@pytest.fixture
def sender():
    return SimulatedSender(delay=0)


@pytest.fixture
def workflow(store, clock, sender):
    """Workflow whose candidate response is visible immediately after sending."""
    return Workflow(store, "case-1", clock=clock, sender=sender, responses=SimulatedResponse(delay=0))


@pytest.fixture
def today():
    return MONDAY.date()
