"""
Initial individualized assessment.

The employer records who is being assessed, the conviction, the
activities since then, and a decision.  Submitting persists the record.
*extend* ends the flow; *rescind* hands the record to the preliminary
notice.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from fairchance.forms import AssessmentDraft, AssessmentForm, normalize_keys, validate_form
from fairchance.lifecycle import FlowState, Phase, advance, require_phase
from fairchance.models import CaseRecord, Decision, merge_case_record

from .base import Stage
from .seeds import assessment_values, notice_values

logger = logging.getLogger(__name__)


class AssessmentStage(Stage):
    form_phase = Phase.ASSESSMENT

    def start(self, handoff: Optional[CaseRecord] = None) -> FlowState:
        """Open the form, prefilled from the stored record when there is one."""
        record = merge_case_record(self.load_stored(), handoff)
        return FlowState(
            Phase.ASSESSMENT,
            record=record,
            values=assessment_values(record, self.clock.today()),
            case_id=self.case_id,
        )

    def submit(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        require_phase(state, Phase.ASSESSMENT)
        values = {**state.values, **normalize_keys(data)}
        form = validate_form(AssessmentForm, values)

        # a new assessment starts a new notice cycle
        clear = ["notice_sent_at", *form.cleared_fields()]
        record = merge_case_record(state.record, form.to_record(), clear=clear)
        self.commit(record)

        if form.decision is Decision.EXTEND:
            if form.store_assessment:
                logger.info(f"Assessment for {form.applicant_name} flagged for the admin profile")
            logger.info(f"Offer extended to {form.applicant_name}")
            return advance(state, Phase.ASSESSMENT_COMPLETE, record=record, values=values, form=form)

        logger.info(f"Offer to {form.applicant_name} rescinded; preparing preliminary notice")
        return advance(
            state,
            Phase.NOTICE_FORM,
            record=record,
            values=notice_values(record, self.clock.today()),
            form=None,
        )

    def save_draft(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        """
        Persist whatever has been typed so far.

        Nothing is required, but dates, enums and the conviction month/year
        range are still checked.  The phase does not change.
        """
        require_phase(state, Phase.ASSESSMENT)
        values = {**state.values, **normalize_keys(data)}
        draft = validate_form(AssessmentDraft, values)
        record = merge_case_record(state.record, draft.to_record())
        self.commit(record)
        return replace(state, record=record, values=values)

    def back(self, state: FlowState) -> FlowState:
        """Return to the form from the completion screen."""
        require_phase(state, Phase.ASSESSMENT_COMPLETE)
        return advance(state, Phase.ASSESSMENT, form=None)

    def reopen(self, state: FlowState) -> FlowState:
        """Back from the notice form: rebuild the assessment values from the record."""
        return advance(
            state,
            Phase.ASSESSMENT,
            values=assessment_values(state.record, self.clock.today()),
            form=None,
        )
