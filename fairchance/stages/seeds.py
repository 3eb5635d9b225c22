"""
Initial form values for each stage.

Every builder is a pure function of the accumulated record and "today", so
stages hand data forward explicitly instead of reading shared state.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional

from fairchance.dates import elapsed_since
from fairchance.forms import AssessmentForm
from fairchance.models import CaseRecord, YesNo
from fairchance.settings import settings

ASSESSMENT_FIELDS = set(AssessmentForm.model_fields)
REASSESSMENT_IDENTITY = (
    "employer_name",
    "applicant_name",
    "position_applied",
    "date_conditional_offer",
    "date_criminal_history",
    "assessment_performer",
)

# keys of the reduced hand-off from reassessment to the final notice
FINAL_SEED_KEYS = (
    "applicant_name",
    "date_of_notice",
    "position",
    "employer_name",
    "employer_company",
    "time_elapsed_since_conduct",
    "job_duties",
    "reasoning_for_revocation",
)


def time_elapsed(record: CaseRecord) -> str:
    """Conviction month/year to conditional offer, or "" if any part is missing."""
    if record.conviction_month and record.conviction_year and record.date_conditional_offer:
        return str(elapsed_since(record.conviction_month, record.conviction_year,
                                 record.date_conditional_offer))
    return ""


def assessment_values(record: Optional[CaseRecord], today: date) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "conviction_month": f"{today.month:02d}",
        "conviction_year": str(today.year),
        "job_duties": [""],
        "store_assessment": False,
    }
    if record is not None:
        values.update(record.model_dump(include=ASSESSMENT_FIELDS, exclude_none=True))
    return values


def notice_values(record: CaseRecord, today: date) -> Dict[str, Any]:
    """
    Preliminary notice defaults.

    Notice fields already committed for this case take precedence over the
    assessment facts they are derived from.
    """
    return {
        "notice_date": record.notice_date or today,
        "applicant_name": record.applicant_name or "",
        "position": record.position_applied or "",
        "convictions": list(record.convictions or ["", "", ""]),
        "conduct_seriousness": record.conduct_seriousness or record.criminal_conduct or "",
        "time_elapsed_since_conduct": record.time_elapsed_since_conduct or time_elapsed(record),
        "time_elapsed_since_release": record.time_elapsed_since_release or "",
        "job_duties": list(record.job_duties or [""]),
        "reasoning_for_revocation": record.reasoning_for_revocation or record.rescind_reason or "",
        "employer_name": record.assessment_performer or "",
        "employer_company": record.employer_company or record.employer_name or "",
        "response_deadline": record.response_deadline or settings.min_response_days,
        "response_email": record.response_email or "",
    }


def reassessment_values(record: CaseRecord, today: date) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        name: getattr(record, name) for name in REASSESSMENT_IDENTITY
        if getattr(record, name) is not None
    }
    values["date_reassessment"] = today
    if record.rehabilitation_evidence is not None:
        values["rehabilitation_evidence"] = record.rehabilitation_evidence.model_dump(exclude_none=True)
    if record.has_error is not None:
        values["has_error"] = record.has_error
        values["error_description"] = record.error_description
    return values


def final_seed(record: CaseRecord) -> Dict[str, Any]:
    """The fields the reassessment hands to the final notice."""
    return {
        "applicant_name": record.applicant_name or "",
        "date_of_notice": record.date_reassessment,
        "position": record.position_applied or "",
        "employer_name": record.assessment_performer or "",
        "employer_company": record.employer_name or "",
        "time_elapsed_since_conduct": time_elapsed(record),
        "job_duties": list(record.job_duties or []),
        "reasoning_for_revocation": record.rescind_reason or "",
    }


def final_values(seed: Optional[Mapping[str, Any]], today: date) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "final_notice_date": today,
        "received_response": YesNo.NO,
        "submitted_information": ["", "", ""],
        "has_error": YesNo.NO,
        "convictions": ["", "", ""],
        "job_duties": [""],
    }
    for key in FINAL_SEED_KEYS:
        if seed and seed.get(key) not in (None, "", []):
            values[key] = seed[key]
    return values


__all__ = [
    "time_elapsed",
    "assessment_values",
    "notice_values",
    "reassessment_values",
    "final_seed",
    "final_values",
]
