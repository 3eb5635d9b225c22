"""
tests/test_lifecycle.py
=======================

Unit tests for fairchance.lifecycle.advance
"""

import pytest

from fairchance.lifecycle import RULES, TERMINAL, FlowState, Phase, advance, can_advance, require_phase
from fairchance.models import CaseRecord


def test_good_transition():
    """NOTICE_PREVIEW → NOTICE_SENT should succeed."""
    s = FlowState(Phase.NOTICE_PREVIEW)
    assert advance(s, Phase.NOTICE_SENT).phase is Phase.NOTICE_SENT


def test_illegal_transition_raises():
    """NOTICE_PREVIEW → FINAL_FORM is not allowed and should raise ValueError."""
    s = FlowState(Phase.NOTICE_PREVIEW)
    with pytest.raises(ValueError, match="illegal transition"):
        advance(s, Phase.FINAL_FORM)


def test_advance_returns_new_value():
    s = FlowState(Phase.ASSESSMENT)
    rec = CaseRecord(applicant_name="Sam")
    nxt = advance(s, Phase.NOTICE_FORM, record=rec)
    assert nxt.record is rec
    assert s.phase is Phase.ASSESSMENT
    assert s.record == CaseRecord()


def test_terminal_phases_have_no_successors():
    for phase in TERMINAL:
        assert phase not in RULES
        assert FlowState(phase).is_terminal


def test_cannot_skip_the_response_window():
    assert not can_advance(Phase.NOTICE_PREVIEW, Phase.REASSESSMENT)
    assert not can_advance(Phase.ASSESSMENT, Phase.FINAL_FORM)


def test_every_phase_is_reachable_from_assessment():
    seen, todo = {Phase.ASSESSMENT}, [Phase.ASSESSMENT]
    while todo:
        for nxt in RULES.get(todo.pop(), ()):
            if nxt not in seen:
                seen.add(nxt)
                todo.append(nxt)
    assert seen == set(Phase)


def test_require_phase():
    require_phase(FlowState(Phase.FINAL_FORM), Phase.FINAL_FORM, Phase.FINAL_PREVIEW)
    with pytest.raises(ValueError, match="not available in ASSESSMENT"):
        require_phase(FlowState(Phase.ASSESSMENT), Phase.FINAL_FORM)
