"""
Preliminary notice of intent to revoke.

Form → preview → (simulated) send → response window.  Sending records
``noticeSentAt`` so the countdown survives a reload.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Mapping, Optional

from fairchance.dates import CountdownView, remaining_time
from fairchance.events import Clock, NoticeSender, ResponseSource, SimulatedResponse, countdown_ticks
from fairchance.forms import PreliminaryNoticeForm, normalize_keys, validate_form
from fairchance.letters import render_preliminary_notice
from fairchance.lifecycle import FlowState, Phase, advance, require_phase
from fairchance.models import CaseRecord, merge_case_record
from fairchance.store import FormStore

from .base import LetterStage
from .seeds import notice_values, reassessment_values

logger = logging.getLogger(__name__)


class PreliminaryNoticeStage(LetterStage):
    form_phase = Phase.NOTICE_FORM
    preview_phase = Phase.NOTICE_PREVIEW
    sent_phase = Phase.NOTICE_SENT

    def __init__(
        self,
        store: FormStore,
        case_id: Optional[str] = None,
        clock: Optional[Clock] = None,
        sender: Optional[NoticeSender] = None,
        responses: Optional[ResponseSource] = None,
    ) -> None:
        super().__init__(store, case_id, clock, sender)
        self.responses = responses or SimulatedResponse()

    def start(self, handoff: Optional[CaseRecord] = None) -> FlowState:
        """
        Open the notice form.

        The stored record fills gaps in *handoff*.  If the notice for this
        case was already sent, resume in the waiting phase instead.
        """
        record = merge_case_record(self.load_stored(), handoff)
        values = notice_values(record, self.clock.today())
        state = FlowState(Phase.NOTICE_FORM, record=record, values=values, case_id=self.case_id)

        if record.notice_sent_at is not None:
            form = validate_form(PreliminaryNoticeForm, values)
            logger.info(f"Notice already sent at {record.notice_sent_at.isoformat()}; resuming countdown")
            state = advance(state, Phase.NOTICE_PREVIEW, form=form)
            state = advance(state, Phase.NOTICE_SENT, sent_at=record.notice_sent_at)
        return state

    def submit(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        require_phase(state, Phase.NOTICE_FORM)
        values = {**state.values, **normalize_keys(data)}
        form = validate_form(PreliminaryNoticeForm, values)
        record = merge_case_record(state.record, form.to_record())
        return advance(state, Phase.NOTICE_PREVIEW, record=record, values=values, form=form)

    def render(self, state: FlowState) -> str:
        require_phase(state, Phase.NOTICE_PREVIEW, Phase.NOTICE_SENT)
        return render_preliminary_notice(state.form, state.record.activities)

    def after_send(self, state: FlowState) -> FlowState:
        sent_at = self.clock.now()
        record = merge_case_record(state.record, CaseRecord(notice_sent_at=sent_at))
        self.commit(record)
        logger.info(f"Preliminary notice sent to {state.form.applicant_name}")
        return advance(state, Phase.NOTICE_SENT, record=record, sent_at=sent_at)

    async def send(self, state: FlowState, recipient: Optional[str] = None) -> FlowState:
        if recipient is None and state.form is not None:
            recipient = state.form.applicant_name or None
        return await super().send(state, recipient)

    # ------------------------------------------------------------------
    # Response window
    # ------------------------------------------------------------------
    def countdown(
        self,
        state: FlowState,
        accuracy_challenged: bool = False,
        now: Optional[datetime] = None,
    ) -> CountdownView:
        require_phase(state, Phase.NOTICE_SENT)
        return remaining_time(
            state.form.response_deadline,
            state.sent_at,
            accuracy_challenged,
            now=now or self.clock.now(),
        )

    def ticks(
        self,
        state: FlowState,
        accuracy_challenged: bool = False,
        interval: Optional[float] = None,
    ) -> AsyncIterator[CountdownView]:
        require_phase(state, Phase.NOTICE_SENT)
        return countdown_ticks(
            state.form.response_deadline,
            state.sent_at,
            accuracy_challenged,
            clock=self.clock,
            interval=interval,
        )

    def response_available(self, state: FlowState) -> bool:
        if state.phase is not Phase.NOTICE_SENT or state.sent_at is None:
            return False
        return self.responses.has_responded(state.sent_at, self.clock.now())

    def view_response(self, state: FlowState) -> FlowState:
        """Move to the reassessment once the candidate's response is in."""
        require_phase(state, Phase.NOTICE_SENT)
        if not self.response_available(state):
            raise ValueError("candidate response not yet received")
        return advance(
            state,
            Phase.REASSESSMENT,
            values=reassessment_values(state.record, self.clock.today()),
            form=None,
            sent_at=None,
        )
