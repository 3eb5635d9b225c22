"""
fairchance.lifecycle
====================

State-transition guard for the fair-chance workflow.

A small finite-state machine describes which phases are legal successors
of each phase.  The active phase travels together with the case record and
the current form as one immutable :class:`FlowState` value; the helper
:pyfunc:`advance` validates a transition and returns the next value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .models import CaseRecord


class Phase(Enum):
    """Every screen the guided flow can be on."""
    ASSESSMENT = auto()
    ASSESSMENT_COMPLETE = auto()
    NOTICE_FORM = auto()
    NOTICE_PREVIEW = auto()
    NOTICE_SENT = auto()
    REASSESSMENT = auto()
    REASSESSMENT_COMPLETE = auto()
    FINAL_FORM = auto()
    FINAL_PREVIEW = auto()
    FINAL_SENT = auto()

    def __str__(self) -> str:        # nicer REPL display
        return self.name


# ---------------------------------------------------------------------
# Allowed transitions: source phase → set[valid target phases]
# ---------------------------------------------------------------------
RULES = {
    Phase.ASSESSMENT:          {Phase.ASSESSMENT, Phase.ASSESSMENT_COMPLETE, Phase.NOTICE_FORM},
    Phase.ASSESSMENT_COMPLETE: {Phase.ASSESSMENT},
    Phase.NOTICE_FORM:         {Phase.NOTICE_PREVIEW, Phase.ASSESSMENT},
    Phase.NOTICE_PREVIEW:      {Phase.NOTICE_FORM, Phase.NOTICE_SENT},
    Phase.NOTICE_SENT:         {Phase.REASSESSMENT},
    Phase.REASSESSMENT:        {Phase.REASSESSMENT, Phase.REASSESSMENT_COMPLETE, Phase.FINAL_FORM},
    Phase.FINAL_FORM:          {Phase.FINAL_PREVIEW},
    Phase.FINAL_PREVIEW:       {Phase.FINAL_FORM, Phase.FINAL_SENT},
}

TERMINAL = frozenset({Phase.REASSESSMENT_COMPLETE, Phase.FINAL_SENT})


@dataclass(frozen=True)
class FlowState:
    """
    Tagged union "current phase + payload".

    Parameters
    ----------
    phase : Phase
        Screen currently shown.
    record : CaseRecord
        Accumulated case record (in memory; the store holds the last commit).
    values : dict
        Current form field values (snake_case) for form phases.
    form : BaseModel | None
        Validated form behind a preview / sent phase.
    sent_at : datetime | None
        When the current notice was sent.
    case_id : str | None
        Store key of the case.
    """
    phase: Phase
    record: CaseRecord = field(default_factory=CaseRecord)
    values: Dict[str, Any] = field(default_factory=dict)
    form: Optional[BaseModel] = None
    sent_at: Optional[datetime] = None
    case_id: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL


def can_advance(current: Phase, new_phase: Phase) -> bool:
    return new_phase in RULES.get(current, set())


def advance(state: FlowState, new_phase: Phase, **changes: Any) -> FlowState:
    """
    Return a copy of *state* moved to *new_phase* with *changes* applied,
    or raise :class:`ValueError` if the transition is illegal.

    Examples
    --------
    >>> s = FlowState(Phase.NOTICE_PREVIEW)
    >>> advance(s, Phase.NOTICE_SENT).phase
    <Phase.NOTICE_SENT: 5>
    >>> advance(s, Phase.FINAL_FORM)
    Traceback (most recent call last):
        ...
    ValueError: illegal transition NOTICE_PREVIEW → FINAL_FORM
    """
    if not can_advance(state.phase, new_phase):
        raise ValueError(f"illegal transition {state.phase.name} → {new_phase.name}")
    return replace(state, phase=new_phase, **changes)


def require_phase(state: FlowState, *phases: Phase) -> None:
    """Raise :class:`ValueError` unless *state* is in one of *phases*."""
    if state.phase not in phases:
        allowed = ", ".join(p.name for p in phases)
        raise ValueError(f"action not available in {state.phase.name} (expected {allowed})")
