"""
fairchance.forms
================

Form schemas for the four workflow stages.

Each form validates what the employer typed, reports problems per field
through :class:`FormValidationError`, and knows how to project itself onto
the shared :class:`~fairchance.models.CaseRecord` (``to_record``).

Blank strings are treated as "not filled in": a blank required field is
reported as required, a blank optional field becomes ``None``.  Blank
entries inside slot lists (duties, convictions …) are kept as-is.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import Field, StringConstraints, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_snake

from .models import (
    ACTIVITY_CATEGORIES,
    EVIDENCE_CATEGORIES,
    MAX_LIST_SLOTS,
    Activities,
    Answer,
    CamelModel,
    CaseRecord,
    Decision,
    RehabilitationEvidence,
    YesNo,
    check_conviction_month,
    check_conviction_year,
)
from .settings import settings

Required = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

F = TypeVar("F", bound="FormModel")


class FormValidationError(ValueError):
    """
    Raised when a submitted form fails validation.

    ``errors`` maps the camelCase field path (``"activities.counseling"``) to
    a human readable message.
    """

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


# messages for required fields left empty, keyed by camelCase path
REQUIRED_MESSAGES = {
    "employerName": "Employer name is required",
    "applicantName": "Applicant name is required",
    "positionApplied": "Position is required",
    "dateConditionalOffer": "Conditional offer date is required",
    "dateAssessment": "Assessment date is required",
    "dateCriminalHistory": "Criminal history date is required",
    "assessmentPerformer": "Assessment performer is required",
    "criminalConduct": "Criminal conduct description is required",
    "convictionMonth": "Conviction month is required",
    "convictionYear": "Conviction year is required",
    "decision": "Please select a decision",
    "activities": "All activity questions must be answered",
    "activities.workExperience": "Please select whether the candidate has work experience",
    "activities.jobTraining": "Please select whether the candidate has job training",
    "activities.education": "Please select whether the candidate has educational programming",
    "activities.counseling": "Please select whether the candidate has counseling",
    "activities.rehabilitation": "Please select whether the candidate has rehabilitation efforts",
    "activities.communityService": "Please select whether the candidate has community service",
    "hasError": "Please indicate whether the criminal history report contained an error",
    "noticeDate": "Date is required",
    "allowsReconsideration": "Please indicate whether reconsideration is allowed",
}


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """snake_case every key, one level into nested dicts."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            value = {to_snake(k): v for k, v in value.items()}
        out[to_snake(key)] = value
    return out


def _path(loc) -> str:
    """camelCase dotted path, whether the key was found by name or by alias."""
    return ".".join(to_camel(to_snake(p)) if isinstance(p, str) else str(p) for p in loc)


def _message(err: dict, path: str) -> str:
    if err["type"] in ("missing", "string_too_short"):
        return REQUIRED_MESSAGES.get(path, "This field is required")
    msg = err["msg"]
    return msg[len("Value error, "):] if msg.startswith("Value error, ") else msg


def validate_form(model: Type[F], data: Mapping[str, Any]) -> F:
    """Validate *data* against *model*, raising :class:`FormValidationError`."""
    try:
        return model.model_validate(normalize_keys(data))
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for err in e.errors():
            path = _path(err["loc"]) or "__root__"
            errors.setdefault(path, _message(err, path))
        raise FormValidationError(errors) from None


def _drop_blanks(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: v for k, v in data.items()
                if not (isinstance(v, str) and not v.strip())}
    return data


class FormModel(CamelModel):
    """Base form: blank top-level strings count as not provided."""

    @model_validator(mode="before")
    @classmethod
    def _blank_is_missing(cls, data: Any) -> Any:
        return _drop_blanks(data)

    def to_record(self) -> CaseRecord:
        raise NotImplementedError

    def cleared_fields(self) -> List[str]:
        """Record fields this submission switches off, for ``merge_case_record(clear=...)``."""
        return []


# ---------------------------------------------------------------------------
# Assessment
# ---------------------------------------------------------------------------
class ActivityAnswers(FormModel):
    """All six answers are required; details only survive a "yes"."""
    work_experience: Answer
    work_experience_details: Optional[str] = None
    job_training: Answer
    job_training_details: Optional[str] = None
    education: Answer
    education_details: Optional[str] = None
    counseling: Answer
    counseling_details: Optional[str] = None
    rehabilitation: Answer
    rehabilitation_details: Optional[str] = None
    community_service: Answer
    community_service_details: Optional[str] = None

    @model_validator(mode="after")
    def _details_need_yes(self) -> "ActivityAnswers":
        for field in self.dropped_details():
            setattr(self, field, None)
        return self

    def dropped_details(self) -> List[str]:
        return [f"{name}_details" for name, _ in ACTIVITY_CATEGORIES
                if getattr(self, name) is not Answer.YES]


class AssessmentForm(FormModel):
    employer_name: Required
    applicant_name: Required
    position_applied: Required
    date_conditional_offer: date
    date_assessment: date
    date_criminal_history: date
    assessment_performer: Required
    job_duties: List[str] = Field(default_factory=list)
    criminal_conduct: Required
    conviction_month: str
    conviction_year: str
    activities: ActivityAnswers
    decision: Decision
    rescind_reason: Optional[str] = None
    store_assessment: bool = False

    @field_validator("conviction_month")
    @classmethod
    def _month(cls, v: str) -> str:
        return check_conviction_month(v)

    @field_validator("conviction_year")
    @classmethod
    def _year(cls, v: str) -> str:
        return check_conviction_year(v)

    def cleared_fields(self) -> List[str]:
        return [f"activities.{f}" for f in self.activities.dropped_details()]

    def to_record(self) -> CaseRecord:
        data = self.model_dump()
        data["activities"] = Activities(**data["activities"])
        return CaseRecord(**data)


class ActivitiesDraft(Activities):
    @model_validator(mode="before")
    @classmethod
    def _blank_is_missing(cls, data: Any) -> Any:
        return _drop_blanks(data)


class AssessmentDraft(FormModel):
    """Save Draft: same fields, nothing required, types and enums still checked."""
    employer_name: Optional[str] = None
    applicant_name: Optional[str] = None
    position_applied: Optional[str] = None
    date_conditional_offer: Optional[date] = None
    date_assessment: Optional[date] = None
    date_criminal_history: Optional[date] = None
    assessment_performer: Optional[str] = None
    job_duties: Optional[List[str]] = None
    criminal_conduct: Optional[str] = None
    conviction_month: Optional[str] = None
    conviction_year: Optional[str] = None
    activities: Optional[ActivitiesDraft] = None
    decision: Optional[Decision] = None
    rescind_reason: Optional[str] = None
    store_assessment: Optional[bool] = None

    @field_validator("conviction_month")
    @classmethod
    def _month(cls, v: Optional[str]) -> Optional[str]:
        return check_conviction_month(v)

    @field_validator("conviction_year")
    @classmethod
    def _year(cls, v: Optional[str]) -> Optional[str]:
        return check_conviction_year(v)

    def to_record(self) -> CaseRecord:
        return CaseRecord(**self.model_dump(exclude_none=True))


# ---------------------------------------------------------------------------
# Preliminary notice
# ---------------------------------------------------------------------------
class PreliminaryNoticeForm(FormModel):
    """
    Fields of the preliminary decision letter.

    ``employer_name`` is the signing contact, ``employer_company`` the
    company line of the signature.
    """
    notice_date: date
    applicant_name: str = ""
    position: str = ""
    convictions: List[str] = Field(default_factory=list, max_length=MAX_LIST_SLOTS)
    conduct_seriousness: str = ""
    time_elapsed_since_conduct: str = ""
    time_elapsed_since_release: str = ""
    job_duties: List[str] = Field(default_factory=list)
    reasoning_for_revocation: str = ""
    employer_name: str = ""
    employer_company: str = ""
    response_deadline: int = 5
    response_email: str = ""

    @field_validator("response_deadline")
    @classmethod
    def _response_window(cls, v: int) -> int:
        if v < settings.min_response_days:
            raise ValueError(
                f"Minimum {settings.min_response_days} business days required"
            )
        if v > settings.max_response_days:
            raise ValueError(
                f"Maximum {settings.max_response_days} business days allowed"
            )
        return v

    def to_record(self) -> CaseRecord:
        return CaseRecord(
            notice_date=self.notice_date,
            applicant_name=self.applicant_name or None,
            position_applied=self.position or None,
            convictions=list(self.convictions),
            conduct_seriousness=self.conduct_seriousness or None,
            time_elapsed_since_conduct=self.time_elapsed_since_conduct or None,
            time_elapsed_since_release=self.time_elapsed_since_release or None,
            job_duties=list(self.job_duties),
            reasoning_for_revocation=self.reasoning_for_revocation or None,
            assessment_performer=self.employer_name or None,
            employer_company=self.employer_company or None,
            response_deadline=self.response_deadline,
            response_email=self.response_email or None,
        )


# ---------------------------------------------------------------------------
# Reassessment
# ---------------------------------------------------------------------------
class EvidenceAnswers(FormModel):
    school_attendance: YesNo = YesNo.NO
    school_attendance_notes: Optional[str] = None
    religious_institution: YesNo = YesNo.NO
    religious_institution_notes: Optional[str] = None
    job_training: YesNo = YesNo.NO
    job_training_notes: Optional[str] = None
    counseling: YesNo = YesNo.NO
    counseling_notes: Optional[str] = None
    community_involvement: YesNo = YesNo.NO
    community_involvement_notes: Optional[str] = None
    letters_of_support: YesNo = YesNo.NO
    letters_of_support_notes: Optional[str] = None
    additional_evidence: Optional[str] = None

    @model_validator(mode="after")
    def _notes_need_yes(self) -> "EvidenceAnswers":
        for field in self.dropped_notes():
            setattr(self, field, None)
        return self

    def dropped_notes(self) -> List[str]:
        return [f"{name}_notes" for name, _ in EVIDENCE_CATEGORIES
                if getattr(self, name) is not YesNo.YES]


class ReassessmentForm(FormModel):
    employer_name: Optional[str] = None
    applicant_name: Optional[str] = None
    position_applied: Optional[str] = None
    date_conditional_offer: Optional[date] = None
    date_reassessment: Optional[date] = None
    date_criminal_history: Optional[date] = None
    assessment_performer: Optional[str] = None
    has_error: YesNo
    error_description: Optional[str] = None
    rehabilitation_evidence: EvidenceAnswers = Field(default_factory=EvidenceAnswers)
    decision: Decision
    rescind_reason: Optional[str] = None

    @model_validator(mode="after")
    def _description_needs_error(self) -> "ReassessmentForm":
        if self.has_error is not YesNo.YES:
            self.error_description = None
        return self

    def cleared_fields(self) -> List[str]:
        cleared = [f"rehabilitation_evidence.{f}" for f in self.rehabilitation_evidence.dropped_notes()]
        if self.has_error is not YesNo.YES:
            cleared.append("error_description")
        return cleared

    def to_record(self) -> CaseRecord:
        data = self.model_dump(exclude_none=True)
        data["rehabilitation_evidence"] = RehabilitationEvidence(**data["rehabilitation_evidence"])
        return CaseRecord(**data)


# ---------------------------------------------------------------------------
# Final notice
# ---------------------------------------------------------------------------
class FinalNoticeForm(FormModel):
    """Fields of the final decision letter."""
    final_notice_date: date = Field(default_factory=date.today)
    applicant_name: Required
    date_of_notice: Optional[date] = None
    received_response: YesNo = YesNo.NO
    submitted_information: List[str] = Field(default_factory=list, max_length=MAX_LIST_SLOTS)
    has_error: YesNo = YesNo.NO
    convictions: List[str] = Field(default_factory=list, max_length=MAX_LIST_SLOTS)
    conduct_seriousness: str = ""
    time_elapsed_since_conduct: str = ""
    time_elapsed_since_release: str = ""
    position: str = ""
    job_duties: List[str] = Field(default_factory=list)
    reasoning_for_revocation: str = ""
    allows_reconsideration: YesNo
    reconsideration_procedure: Optional[str] = None
    employer_name: str = ""
    employer_company: str = ""
    employer_address: str = ""
    employer_phone: str = ""

    def to_record(self) -> CaseRecord:
        return CaseRecord(
            final_notice_date=self.final_notice_date,
            applicant_name=self.applicant_name,
            date_of_notice=self.date_of_notice,
            received_response=self.received_response,
            submitted_information=list(self.submitted_information),
            has_error=self.has_error,
            convictions=list(self.convictions),
            conduct_seriousness=self.conduct_seriousness or None,
            time_elapsed_since_conduct=self.time_elapsed_since_conduct or None,
            time_elapsed_since_release=self.time_elapsed_since_release or None,
            position_applied=self.position or None,
            job_duties=list(self.job_duties),
            reasoning_for_revocation=self.reasoning_for_revocation or None,
            allows_reconsideration=self.allows_reconsideration,
            reconsideration_procedure=self.reconsideration_procedure,
            assessment_performer=self.employer_name or None,
            employer_company=self.employer_company or None,
            employer_address=self.employer_address or None,
            employer_phone=self.employer_phone or None,
        )
