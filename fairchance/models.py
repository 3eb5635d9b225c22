"""
fairchance.models
=================

Enums and the partial :class:`CaseRecord` schema carried across every
stage of the fair-chance workflow.

The record is persisted as one JSON object with camelCase keys
(``applicantName``, ``convictionYear`` …).  Every field is optional: the
store validates shape and enum values, never presence.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .settings import settings

MIN_CONVICTION_YEAR = 1900

# convictions and submitted information hold at most this many entries
MAX_LIST_SLOTS = 3


class Decision(str, Enum):
    """Employer's decision on the conditional offer."""
    EXTEND = "extend"
    RESCIND = "rescind"

    def __str__(self) -> str:
        return self.value


class Answer(str, Enum):
    """Tri-state answer used by the activity questionnaire."""
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class YesNo(str, Enum):
    YES = "yes"
    NO = "no"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------
class CamelModel(BaseModel):
    """snake_case attributes, camelCase JSON keys; either accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """camelCase dict with unset/None fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def check_conviction_month(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not value.isdigit() or not 1 <= int(value) <= 12:
        raise ValueError("Conviction month must be between 01 and 12")
    return f"{int(value):02d}"


def check_conviction_year(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValueError("Conviction year must be a number") from None
    if not MIN_CONVICTION_YEAR <= year <= date.today().year:
        raise ValueError(
            f"Conviction year must be between {MIN_CONVICTION_YEAR} and {date.today().year}"
        )
    return str(year)


# ---------------------------------------------------------------------------
# Embedded records
# ---------------------------------------------------------------------------
ACTIVITY_CATEGORIES = (
    ("work_experience", "Work Experience"),
    ("job_training", "Job Training"),
    ("education", "Education"),
    ("counseling", "Counseling"),
    ("rehabilitation", "Rehabilitation"),
    ("community_service", "Community Service"),
)

EVIDENCE_CATEGORIES = (
    ("school_attendance", "School Attendance"),
    ("religious_institution", "Religious Institution Attendance"),
    ("job_training", "Job Training Participation"),
    ("counseling", "Counseling Participation"),
    ("community_involvement", "Community Involvement"),
    ("letters_of_support", "Letters of Support"),
)


class Activities(CamelModel):
    """Activities since the criminal conduct, as recorded at assessment time."""
    work_experience: Optional[Answer] = None
    work_experience_details: Optional[str] = None
    job_training: Optional[Answer] = None
    job_training_details: Optional[str] = None
    education: Optional[Answer] = None
    education_details: Optional[str] = None
    counseling: Optional[Answer] = None
    counseling_details: Optional[str] = None
    rehabilitation: Optional[Answer] = None
    rehabilitation_details: Optional[str] = None
    community_service: Optional[Answer] = None
    community_service_details: Optional[str] = None


class RehabilitationEvidence(CamelModel):
    """Evidence reviewed during reassessment."""
    school_attendance: Optional[YesNo] = None
    school_attendance_notes: Optional[str] = None
    religious_institution: Optional[YesNo] = None
    religious_institution_notes: Optional[str] = None
    job_training: Optional[YesNo] = None
    job_training_notes: Optional[str] = None
    counseling: Optional[YesNo] = None
    counseling_notes: Optional[str] = None
    community_involvement: Optional[YesNo] = None
    community_involvement_notes: Optional[str] = None
    letters_of_support: Optional[YesNo] = None
    letters_of_support_notes: Optional[str] = None
    additional_evidence: Optional[str] = None


# ---------------------------------------------------------------------------
# The case record
# ---------------------------------------------------------------------------
class CaseRecord(CamelModel):
    """
    Accumulated facts about one candidate's assessment.

    Parameters are grouped by the stage that first collects them; any
    subset may be present.
    """
    # identity
    employer_name: Optional[str] = None
    applicant_name: Optional[str] = None
    position_applied: Optional[str] = None
    assessment_performer: Optional[str] = None
    employer_company: Optional[str] = None
    employer_address: Optional[str] = None
    employer_phone: Optional[str] = None

    # dates
    date_conditional_offer: Optional[date] = None
    date_assessment: Optional[date] = None
    date_criminal_history: Optional[date] = None
    date_reassessment: Optional[date] = None
    date_of_notice: Optional[date] = None

    # assessment
    conviction_month: Optional[str] = None
    conviction_year: Optional[str] = None
    job_duties: Optional[List[str]] = None
    criminal_conduct: Optional[str] = None
    activities: Optional[Activities] = None
    decision: Optional[Decision] = None
    rescind_reason: Optional[str] = None
    store_assessment: Optional[bool] = None

    # preliminary notice
    notice_date: Optional[date] = None
    convictions: Optional[List[str]] = Field(None, max_length=MAX_LIST_SLOTS)
    conduct_seriousness: Optional[str] = None
    time_elapsed_since_conduct: Optional[str] = None
    time_elapsed_since_release: Optional[str] = None
    reasoning_for_revocation: Optional[str] = None
    response_deadline: Optional[int] = Field(None, ge=1, le=settings.max_response_days)
    response_email: Optional[str] = None
    notice_sent_at: Optional[datetime] = None

    # reassessment
    has_error: Optional[YesNo] = None
    error_description: Optional[str] = None
    rehabilitation_evidence: Optional[RehabilitationEvidence] = None

    # final notice
    final_notice_date: Optional[date] = None
    received_response: Optional[YesNo] = None
    submitted_information: Optional[List[str]] = Field(None, max_length=MAX_LIST_SLOTS)
    allows_reconsideration: Optional[YesNo] = None
    reconsideration_procedure: Optional[str] = None

    @field_validator("conviction_month")
    @classmethod
    def _month_in_range(cls, v: Optional[str]) -> Optional[str]:
        return check_conviction_month(v)

    @field_validator("conviction_year")
    @classmethod
    def _year_in_range(cls, v: Optional[str]) -> Optional[str]:
        return check_conviction_year(v)


_NESTED = {"activities": Activities, "rehabilitation_evidence": RehabilitationEvidence}


def merge_case_record(
    base: Optional[CaseRecord],
    overlay: Optional[CaseRecord],
    clear: Iterable[str] = (),
) -> CaseRecord:
    """
    Return a new record combining *base* and *overlay*.

    Precedence is field by field: any value the overlay sets (not ``None``)
    wins.  ``activities`` and ``rehabilitation_evidence`` are merged the same
    way one level down.  Lists are replaced whole.  Neither input is mutated.

    A ``None`` in the overlay never erases anything; fields named in *clear*
    (dotted for the nested records, e.g. ``"activities.counseling_details"``)
    are reset to ``None`` after the merge.
    """
    merged = base.model_dump() if base is not None else {}
    if overlay is not None:
        for name, value in overlay.model_dump(exclude_none=True).items():
            if name in _NESTED and isinstance(merged.get(name), dict):
                inner = dict(merged[name])
                inner.update({k: v for k, v in value.items() if v is not None})
                merged[name] = inner
            else:
                merged[name] = value

    for path in clear:
        name, _, field = path.partition(".")
        if not field:
            merged[name] = None
        elif isinstance(merged.get(name), dict):
            merged[name] = {**merged[name], field: None}
    return CaseRecord.model_validate(merged)
