"""
fairchance.letters
==================

Plain-text rendering of the two compliance letters.

Both letters are pure functions of their form (plus, for the preliminary
notice, the activities recorded at assessment time).  Templates live in
``fairchance/templates`` and are loaded through Jinja2's ``PackageLoader``.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from jinja2 import Environment, PackageLoader, StrictUndefined

from .forms import FinalNoticeForm, PreliminaryNoticeForm
from .models import (
    ACTIVITY_CATEGORIES,
    EVIDENCE_CATEGORIES,
    Activities,
    Answer,
    RehabilitationEvidence,
    YesNo,
)


def present(items: Optional[Iterable[str]]) -> List[str]:
    """Drop empty and whitespace-only slots, keep order."""
    return [i for i in (items or []) if i and i.strip()]


def isodate(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


_env = Environment(
    loader=PackageLoader("fairchance", "templates"),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    autoescape=False,
)
_env.filters["present"] = present
_env.filters["isodate"] = isodate


def format_activity(answer: Optional[Answer | YesNo], details: Optional[str] = None) -> str:
    """
    One line of the activity summary.

    >>> format_activity(Answer.YES, "Warehouse job since 2021")
    'Yes - Warehouse job since 2021'
    >>> format_activity(None)
    'No'
    """
    if answer is None or answer.value == "no":
        return "No"
    if answer.value == "unknown":
        return "Unknown"
    return f"Yes - {details}" if details else "Yes"


def activity_summary(activities: Optional[Activities]) -> List[Tuple[str, str]]:
    """(label, text) rows for the six assessment activity categories."""
    acts = activities or Activities()
    return [
        (label, format_activity(getattr(acts, name), getattr(acts, f"{name}_details")))
        for name, label in ACTIVITY_CATEGORIES
    ]


def evidence_summary(evidence: Optional[RehabilitationEvidence]) -> List[Tuple[str, str]]:
    """(label, text) rows for the six reassessment evidence categories."""
    ev = evidence or RehabilitationEvidence()
    rows = [
        (label, format_activity(getattr(ev, name), getattr(ev, f"{name}_notes")))
        for name, label in EVIDENCE_CATEGORIES
    ]
    if ev.additional_evidence:
        rows.append(("Additional Evidence", ev.additional_evidence))
    return rows


def render_preliminary_notice(form: PreliminaryNoticeForm, activities: Optional[Activities] = None) -> str:
    """Preliminary Decision to Revoke Job Offer letter."""
    template = _env.get_template("preliminary_notice.txt.j2")
    return template.render(form=form, activities=activity_summary(activities))


def render_final_notice(form: FinalNoticeForm) -> str:
    """Final Decision to Revoke Job Offer letter."""
    return _env.get_template("final_notice.txt.j2").render(form=form)
