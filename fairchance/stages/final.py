"""Final notice of revocation: form → preview → send."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from fairchance.forms import FinalNoticeForm, normalize_keys, validate_form
from fairchance.letters import render_final_notice
from fairchance.lifecycle import FlowState, Phase, advance, require_phase
from fairchance.models import merge_case_record

from .base import LetterStage
from .seeds import final_values

logger = logging.getLogger(__name__)


class FinalNoticeStage(LetterStage):
    form_phase = Phase.FINAL_FORM
    preview_phase = Phase.FINAL_PREVIEW
    sent_phase = Phase.FINAL_SENT

    def start(self, handoff: Optional[Mapping[str, Any]] = None) -> FlowState:
        """Open the form from a reassessment seed (or empty when entered directly)."""
        record = merge_case_record(self.load_stored(), None)
        return FlowState(
            Phase.FINAL_FORM,
            record=record,
            values=final_values(handoff, self.clock.today()),
            case_id=self.case_id,
        )

    def submit(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        require_phase(state, Phase.FINAL_FORM)
        values = {**state.values, **normalize_keys(data)}
        form = validate_form(FinalNoticeForm, values)
        return advance(state, Phase.FINAL_PREVIEW, values=values, form=form)

    def render(self, state: FlowState) -> str:
        require_phase(state, Phase.FINAL_PREVIEW, Phase.FINAL_SENT)
        return render_final_notice(state.form)

    async def send(self, state: FlowState, recipient: Optional[str] = None) -> FlowState:
        if recipient is None and state.form is not None:
            recipient = state.form.applicant_name
        return await super().send(state, recipient)

    def after_send(self, state: FlowState) -> FlowState:
        record = merge_case_record(state.record, state.form.to_record())
        self.commit(record)
        logger.info(f"Final notice sent to {state.form.applicant_name}")
        return advance(state, Phase.FINAL_SENT, record=record, sent_at=self.clock.now())
