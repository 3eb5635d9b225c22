"""
tests/test_models.py
====================

Unit tests for the case record schema and enums in fairchance.models.

Run:  pytest -q
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from fairchance.models import (
    Activities,
    Answer,
    CaseRecord,
    Decision,
    RehabilitationEvidence,
    YesNo,
    merge_case_record,
)
from fairchance.settings import settings


def test_str_on_enums():
    """Enum __str__ returns the wire value."""
    assert str(Decision.RESCIND) == "rescind"
    assert str(Answer.UNKNOWN) == "unknown"


def test_every_field_is_optional():
    assert CaseRecord().to_json_dict() == {}


def test_json_keys_are_camel_case():
    rec = CaseRecord(applicant_name="Sam", date_conditional_offer=date(2024, 5, 20))
    assert rec.to_json_dict() == {"applicantName": "Sam", "dateConditionalOffer": "2024-05-20"}


def test_accepts_camel_case_input():
    rec = CaseRecord.model_validate({"applicantName": "Sam", "activities": {"workExperience": "yes"}})
    assert rec.applicant_name == "Sam"
    assert rec.activities.work_experience is Answer.YES


def test_conviction_month_is_zero_padded():
    assert CaseRecord(conviction_month="3").conviction_month == "03"


@pytest.mark.parametrize("month", ["0", "13", "ab"])
def test_bad_conviction_month_raises(month):
    with pytest.raises(ValidationError):
        CaseRecord(conviction_month=month)


@pytest.mark.parametrize("year", ["1899", str(date.today().year + 1), "soon"])
def test_bad_conviction_year_raises(year):
    with pytest.raises(ValidationError):
        CaseRecord(conviction_year=year)


@pytest.mark.parametrize("year", ["1900", str(date.today().year)])
def test_conviction_year_bounds_are_accepted(year):
    assert CaseRecord(conviction_year=year).conviction_year == year


def test_bad_enum_value_raises():
    with pytest.raises(ValidationError):
        CaseRecord(decision="maybe")


def test_response_deadline_must_be_positive():
    with pytest.raises(ValidationError):
        CaseRecord(response_deadline=0)


def test_response_deadline_has_upper_bound():
    assert CaseRecord(response_deadline=settings.max_response_days).response_deadline == 60
    with pytest.raises(ValidationError):
        CaseRecord(response_deadline=settings.max_response_days + 1)


@pytest.mark.parametrize("field", ["convictions", "submitted_information"])
def test_list_fields_hold_at_most_three(field):
    assert len(getattr(CaseRecord(**{field: ["a", "b", "c"]}), field)) == 3
    with pytest.raises(ValidationError):
        CaseRecord(**{field: ["a", "b", "c", "d"]})


# ---------------------------------------------------------------------------
# merge_case_record
# ---------------------------------------------------------------------------
def test_overlay_wins_field_by_field():
    base = CaseRecord(applicant_name="Sam", employer_name="Widget")
    overlay = CaseRecord(applicant_name="Samantha")
    merged = merge_case_record(base, overlay)
    assert merged.applicant_name == "Samantha"
    assert merged.employer_name == "Widget"


def test_merge_does_not_mutate_inputs():
    base = CaseRecord(applicant_name="Sam")
    merge_case_record(base, CaseRecord(applicant_name="Other"))
    assert base.applicant_name == "Sam"


def test_nested_records_merge_one_level_down():
    base = CaseRecord(activities=Activities(work_experience=Answer.YES, education=Answer.NO))
    overlay = CaseRecord(activities=Activities(education=Answer.YES))
    merged = merge_case_record(base, overlay)
    assert merged.activities.work_experience is Answer.YES
    assert merged.activities.education is Answer.YES


def test_lists_are_replaced_whole():
    base = CaseRecord(job_duties=["a", "b", "c"])
    merged = merge_case_record(base, CaseRecord(job_duties=["x"]))
    assert merged.job_duties == ["x"]


def test_merge_with_missing_sides():
    assert merge_case_record(None, None) == CaseRecord()
    rec = CaseRecord(has_error=YesNo.NO)
    assert merge_case_record(None, rec) == rec
    assert merge_case_record(rec, None) == rec


def test_evidence_merges_into_empty_base():
    merged = merge_case_record(
        CaseRecord(),
        CaseRecord(rehabilitation_evidence=RehabilitationEvidence(counseling=YesNo.YES)),
    )
    assert merged.rehabilitation_evidence.counseling is YesNo.YES


def test_none_in_overlay_keeps_base_value():
    base = CaseRecord(error_description="Wrong year")
    merged = merge_case_record(base, CaseRecord(has_error=YesNo.NO, error_description=None))
    assert merged.error_description == "Wrong year"


def test_clear_resets_named_fields():
    base = CaseRecord(
        error_description="Wrong year",
        notice_sent_at=datetime(2024, 6, 3, 9, 0),
        rehabilitation_evidence=RehabilitationEvidence(counseling=YesNo.YES, counseling_notes="12 weeks"),
    )
    merged = merge_case_record(
        base,
        CaseRecord(has_error=YesNo.NO),
        clear=["error_description", "notice_sent_at", "rehabilitation_evidence.counseling_notes"],
    )
    assert merged.has_error is YesNo.NO
    assert merged.error_description is None
    assert merged.notice_sent_at is None
    assert merged.rehabilitation_evidence.counseling is YesNo.YES
    assert merged.rehabilitation_evidence.counseling_notes is None


def test_clear_skips_missing_nested_record():
    merged = merge_case_record(CaseRecord(), None, clear=["activities.counseling_details"])
    assert merged.activities is None
