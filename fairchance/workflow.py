"""
fairchance.workflow
===================

:class:`Workflow` drives one case through the four stages.

It owns the current :class:`~fairchance.lifecycle.FlowState` and routes
each user action to the stage responsible for the current phase.  All
transition rules live in the stages and :pymod:`fairchance.lifecycle`; this
class only dispatches.

>>> from fairchance.store import MemoryFormStore
>>> wf = Workflow(MemoryFormStore())
>>> wf.state.phase
<Phase.ASSESSMENT: 1>
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Mapping, Optional

from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

from .dates import CountdownView
from .events import Clock, NoticeSender, ResponseSource, SystemClock
from .lifecycle import FlowState, Phase
from .stages import (
    AssessmentStage,
    FinalNoticeStage,
    LetterStage,
    PreliminaryNoticeStage,
    ReassessmentStage,
    Stage,
)
from .store import FormStore

logger = logging.getLogger(__name__)

# entry points of the guided flow, by view name
VIEWS = ("assessment", "preliminary-notice", "reassessment", "final-decision")


def camelize(values: Mapping[str, Any]) -> Dict[str, Any]:
    """JSON-ready copy of form values with camelCase keys (one level deep)."""
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, Mapping):
            value = {to_camel(k): v for k, v in value.items()}
        out[to_camel(key)] = to_jsonable_python(value)
    return out


class Workflow:
    """
    One case, one current phase.

    Parameters
    ----------
    store : FormStore
        Where the case record is committed.
    case_id : str | None
        Store key; ``None`` uses the fixed default key.
    clock, sender, responses
        Event sources; the simulated defaults are used when omitted.
    """

    def __init__(
        self,
        store: FormStore,
        case_id: Optional[str] = None,
        clock: Optional[Clock] = None,
        sender: Optional[NoticeSender] = None,
        responses: Optional[ResponseSource] = None,
    ) -> None:
        self.store = store
        self.case_id = case_id
        self.clock = clock or SystemClock()

        self.assessment = AssessmentStage(store, case_id, self.clock)
        self.preliminary = PreliminaryNoticeStage(store, case_id, self.clock, sender, responses)
        self.reassessment = ReassessmentStage(store, case_id, self.clock)
        self.final = FinalNoticeStage(store, case_id, self.clock, sender)

        self._by_phase: Dict[Phase, Stage] = {
            Phase.ASSESSMENT: self.assessment,
            Phase.ASSESSMENT_COMPLETE: self.assessment,
            Phase.NOTICE_FORM: self.preliminary,
            Phase.NOTICE_PREVIEW: self.preliminary,
            Phase.NOTICE_SENT: self.preliminary,
            Phase.REASSESSMENT: self.reassessment,
            Phase.REASSESSMENT_COMPLETE: self.reassessment,
            Phase.FINAL_FORM: self.final,
            Phase.FINAL_PREVIEW: self.final,
            Phase.FINAL_SENT: self.final,
        }
        self.state: FlowState = self.assessment.start()

    # ------------------------------------------------------------------
    # Dispatch helpers
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def stage(self) -> Stage:
        return self._by_phase[self.state.phase]

    def _letter_stage(self) -> LetterStage:
        stage = self.stage
        if not isinstance(stage, LetterStage):
            raise ValueError(f"no letter in {self.state.phase.name}")
        return stage

    @property
    def is_sending(self) -> bool:
        return self.preliminary.is_sending or self.final.is_sending

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def start(self, view: str = "assessment") -> FlowState:
        """Enter the flow at one of :data:`VIEWS` (direct navigation)."""
        entries = {
            "assessment": self.assessment,
            "preliminary-notice": self.preliminary,
            "reassessment": self.reassessment,
            "final-decision": self.final,
        }
        if view not in entries:
            raise ValueError(f"unknown view {view!r}")
        logger.debug(f"Case {self.case_id or self.store.default_key}: entering {view}")
        self.state = entries[view].start()
        return self.state

    def submit(self, data: Mapping[str, Any]) -> FlowState:
        self.state = self.stage.submit(self.state, data)
        return self.state

    def save_draft(self, data: Mapping[str, Any]) -> FlowState:
        self.state = self.stage.save_draft(self.state, data)
        return self.state

    def edit(self) -> FlowState:
        self.state = self._letter_stage().edit(self.state)
        return self.state

    def back(self) -> FlowState:
        if self.state.phase is Phase.ASSESSMENT_COMPLETE:
            self.state = self.assessment.back(self.state)
        elif self.state.phase is Phase.NOTICE_FORM:
            self.state = self.assessment.reopen(self.state)
        else:
            raise ValueError(f"cannot go back from {self.state.phase.name}")
        return self.state

    async def send(self) -> FlowState:
        self.state = await self._letter_stage().send(self.state)
        return self.state

    def view_response(self) -> FlowState:
        self.state = self.preliminary.view_response(self.state)
        return self.state

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def letter(self) -> str:
        return self._letter_stage().render(self.state)

    def countdown(self, accuracy_challenged: bool = False,
                  now: Optional[datetime] = None) -> CountdownView:
        return self.preliminary.countdown(self.state, accuracy_challenged, now)

    def ticks(self, accuracy_challenged: bool = False,
              interval: Optional[float] = None) -> AsyncIterator[CountdownView]:
        return self.preliminary.ticks(self.state, accuracy_challenged, interval)

    def response_available(self) -> bool:
        return self.preliminary.response_available(self.state)

    def summary(self) -> Dict[str, Any]:
        if self.state.phase is not Phase.REASSESSMENT:
            raise ValueError(f"no assessment summary in {self.state.phase.name}")
        return self.reassessment.summary(self.state)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready description of where the case is."""
        s = self.state
        return {
            "caseId": self.case_id or self.store.default_key,
            "phase": s.phase.name,
            "terminal": s.is_terminal,
            "values": camelize(s.values),
            "record": s.record.to_json_dict(),
            "sentAt": s.sent_at.isoformat() if s.sent_at else None,
            "sending": self.is_sending,
            "responseAvailable": self.response_available(),
        }
