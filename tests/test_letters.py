"""
tests/test_letters.py
=====================

Rendering of the preliminary and final notice letters.
"""

from datetime import date

from fairchance.forms import FinalNoticeForm, PreliminaryNoticeForm
from fairchance.letters import (
    activity_summary,
    evidence_summary,
    format_activity,
    render_final_notice,
    render_preliminary_notice,
)
from fairchance.models import Activities, Answer, RehabilitationEvidence, YesNo


def notice_form(**overrides):
    data = dict(
        notice_date=date(2024, 6, 3),
        applicant_name="Sam Taylor",
        position="Bookkeeper",
        convictions=["Embezzlement (2022)", "", "  "],
        conduct_seriousness="Theft of employer funds",
        time_elapsed_since_conduct="2 years and 3 months",
        time_elapsed_since_release="1 year",
        job_duties=["Reconciling accounts", ""],
        reasoning_for_revocation="Direct access to company funds",
        employer_name="Robert Johnson",
        employer_company="Widget Industries",
        response_deadline=7,
        response_email="hr@widget.example",
    )
    data.update(overrides)
    return PreliminaryNoticeForm(**data)


def final_form(**overrides):
    data = dict(
        final_notice_date=date(2024, 6, 20),
        applicant_name="Sam Taylor",
        date_of_notice=date(2024, 6, 3),
        convictions=["Embezzlement (2022)"],
        position="Bookkeeper",
        job_duties=["Reconciling accounts"],
        reasoning_for_revocation="Direct access to company funds",
        allows_reconsideration=YesNo.NO,
        employer_name="Robert Johnson",
        employer_company="Widget Industries",
        employer_address="1 Main St",
        employer_phone="555-0100",
    )
    data.update(overrides)
    return FinalNoticeForm(**data)


# ---------------------------------------------------------------------------
# Activity formatting
# ---------------------------------------------------------------------------
def test_format_activity():
    assert format_activity(Answer.YES, "Forklift") == "Yes - Forklift"
    assert format_activity(Answer.YES) == "Yes"
    assert format_activity(Answer.NO, "ignored") == "No"
    assert format_activity(Answer.UNKNOWN) == "Unknown"
    assert format_activity(None) == "No"


def test_activity_summary_lists_six_categories_in_order():
    rows = activity_summary(Activities(counseling=Answer.YES, counseling_details="weekly"))
    assert [label for label, _ in rows] == [
        "Work Experience", "Job Training", "Education",
        "Counseling", "Rehabilitation", "Community Service",
    ]
    assert dict(rows)["Counseling"] == "Yes - weekly"
    assert dict(rows)["Education"] == "No"


def test_evidence_summary_appends_additional_evidence():
    rows = evidence_summary(RehabilitationEvidence(additional_evidence="Two reference letters"))
    assert len(rows) == 7
    assert rows[-1] == ("Additional Evidence", "Two reference letters")


# ---------------------------------------------------------------------------
# Preliminary notice
# ---------------------------------------------------------------------------
def test_preliminary_notice_content():
    text = render_preliminary_notice(notice_form())
    assert text.startswith("2024-06-03\n")
    assert "Dear Sam Taylor:" in text
    assert "for the position of Bookkeeper" in text
    assert "Within 7 business days*" in text
    assert "hr@widget.example" in text
    assert text.rstrip().endswith("Enclosure: Copy of conviction history report")


def test_preliminary_notice_skips_blank_slots():
    text = render_preliminary_notice(notice_form())
    assert text.count("  • Embezzlement (2022)") == 1
    assert "•  \n" not in text
    assert "       • Reconciling accounts" in text


def test_preliminary_notice_lists_activities():
    acts = Activities(work_experience=Answer.YES, work_experience_details="Cashier")
    text = render_preliminary_notice(notice_form(), acts)
    assert "Work Experience: Yes - Cashier" in text
    assert "Community Service: No" in text


def test_preliminary_notice_signature():
    text = render_preliminary_notice(notice_form())
    assert "Sincerely,\n\nRobert Johnson\nWidget Industries\n" in text


# ---------------------------------------------------------------------------
# Final notice
# ---------------------------------------------------------------------------
def test_final_notice_without_response():
    text = render_final_notice(final_form())
    assert "We did not receive a timely response" in text
    assert "after considering the information you submitted" not in text
    assert "our letter dated 2024-06-03" in text


def test_final_notice_with_response_lists_information():
    text = render_final_notice(final_form(
        received_response=YesNo.YES,
        submitted_information=["Reference letter", ""],
    ))
    assert "after considering the information you submitted" in text
    assert "• Reference letter" in text
    assert "We did not receive a timely response" not in text


def test_final_notice_error_checkboxes():
    text = render_final_notice(final_form(has_error=YesNo.YES))
    assert "there ☒ was ☐ was not an error" in text
    text = render_final_notice(final_form(has_error=YesNo.NO))
    assert "there ☐ was ☒ was not an error" in text


def test_final_notice_reconsideration_clause():
    text = render_final_notice(final_form())
    assert "We do not offer any way to challenge this decision" in text

    text = render_final_notice(final_form(
        allows_reconsideration=YesNo.YES,
        reconsideration_procedure="Email hr@widget.example within 10 days",
    ))
    assert "If you would like to challenge this decision" in text
    assert "Email hr@widget.example within 10 days" in text


def test_final_notice_signature_block():
    text = render_final_notice(final_form())
    assert text.rstrip().endswith("Robert Johnson\nWidget Industries\n1 Main St\n555-0100")
