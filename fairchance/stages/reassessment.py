"""
Reassessment after the candidate responds.

Shows the initial assessment for reference, collects the accuracy and
rehabilitation review, and decides again.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from fairchance.forms import ReassessmentForm, normalize_keys, validate_form
from fairchance.letters import activity_summary, evidence_summary, present
from fairchance.lifecycle import FlowState, Phase, advance, require_phase
from fairchance.models import CaseRecord, Decision, merge_case_record

from .base import Stage
from .seeds import final_seed, final_values, reassessment_values, time_elapsed

logger = logging.getLogger(__name__)


def summary(record: CaseRecord) -> Dict[str, Any]:
    """Read-only view of the initial assessment and any evidence already on file."""
    return {
        "criminal_conduct": record.criminal_conduct or "",
        "time_elapsed": time_elapsed(record),
        "job_duties": present(record.job_duties),
        "activities": activity_summary(record.activities),
        "evidence": evidence_summary(record.rehabilitation_evidence),
        "original_reasoning": record.rescind_reason or "",
    }


class ReassessmentStage(Stage):
    form_phase = Phase.REASSESSMENT

    def start(self, handoff: Optional[CaseRecord] = None) -> FlowState:
        record = merge_case_record(self.load_stored(), handoff)
        return FlowState(
            Phase.REASSESSMENT,
            record=record,
            values=reassessment_values(record, self.clock.today()),
            case_id=self.case_id,
        )

    def summary(self, state: FlowState) -> Dict[str, Any]:
        return summary(state.record)

    def submit(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        require_phase(state, Phase.REASSESSMENT)
        values = {**state.values, **normalize_keys(data)}
        form = validate_form(ReassessmentForm, values)

        # the newly entered fields win over what was persisted
        base = merge_case_record(self.load_stored(), state.record)
        record = merge_case_record(base, form.to_record(), clear=form.cleared_fields())
        self.commit(record)

        if form.decision is Decision.EXTEND:
            logger.info(f"Offer to {record.applicant_name} reinstated after reassessment")
            return advance(state, Phase.REASSESSMENT_COMPLETE, record=record, values=values, form=form)

        logger.info(f"Rescission of {record.applicant_name} confirmed; preparing final notice")
        return advance(
            state,
            Phase.FINAL_FORM,
            record=record,
            values=final_values(final_seed(record), self.clock.today()),
            form=None,
        )
