"""
fairchance.stages.base
======================

Shared abstract base class for the four workflow stages.

Concrete subclasses implement ``start(handoff)`` and ``submit(state, data)``.
Stages that end in a letter extend :class:`LetterStage`, which owns the
simulated send and its in-flight guard.
"""

from __future__ import annotations

__all__ = ["Stage", "LetterStage", "SendInProgressError", "NoticeSendError"]

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Mapping, Optional

from fairchance.events import Clock, DeliveryError, NoticeSender, SimulatedSender, SystemClock
from fairchance.forms import normalize_keys
from fairchance.lifecycle import FlowState, Phase, advance, require_phase
from fairchance.models import CaseRecord
from fairchance.store import FormStore

logger = logging.getLogger(__name__)


class SendInProgressError(RuntimeError):
    """A send for this stage is already pending."""


class NoticeSendError(RuntimeError):
    """Delivery failed; the preview stays open so the user can resend."""


class Stage(ABC):
    """
    Abstract base for workflow stages.

    The store is injected and every read/write goes through the stage's
    *case_id* so several cases can coexist in one store.
    """

    #: phase of this stage's form
    form_phase: Phase

    def __init__(
        self,
        store: FormStore,
        case_id: Optional[str] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.case_id = case_id
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def load_stored(self) -> Optional[CaseRecord]:
        return self.store.load(self.case_id)

    def commit(self, record: CaseRecord) -> None:
        self.store.save(record, self.case_id)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @abstractmethod
    def start(self, handoff: Any = None) -> FlowState:
        """Enter the stage's form phase."""

    @abstractmethod
    def submit(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        """Validate the form and move on."""

    def save_draft(self, state: FlowState, data: Mapping[str, Any]) -> FlowState:
        """Keep the typed values on screen; nothing is validated or stored."""
        require_phase(state, self.form_phase)
        return replace(state, values={**state.values, **normalize_keys(data)})


class LetterStage(Stage):
    """
    Stage whose preview can be sent to the candidate.

    A send cannot be cancelled once started; while it is pending a second
    send or an edit raises :class:`SendInProgressError`.
    """

    preview_phase: Phase
    sent_phase: Phase

    def __init__(
        self,
        store: FormStore,
        case_id: Optional[str] = None,
        clock: Optional[Clock] = None,
        sender: Optional[NoticeSender] = None,
    ) -> None:
        super().__init__(store, case_id, clock)
        self.sender = sender or SimulatedSender()
        self._sending = False

    @property
    def is_sending(self) -> bool:
        return self._sending

    @abstractmethod
    def render(self, state: FlowState) -> str:
        """Letter text for the preview (also what "print" shows)."""

    def edit(self, state: FlowState) -> FlowState:
        """Back from the preview to the form, keeping the entered values."""
        require_phase(state, self.preview_phase)
        if self._sending:
            raise SendInProgressError("Cannot edit while the notice is being sent")
        return advance(state, self.form_phase, form=None)

    def after_send(self, state: FlowState) -> FlowState:
        """Hook run once delivery succeeded; returns the sent state."""
        return advance(state, self.sent_phase, sent_at=self.clock.now())

    async def send(self, state: FlowState, recipient: Optional[str] = None) -> FlowState:
        require_phase(state, self.preview_phase)
        if self._sending:
            raise SendInProgressError("A send is already in progress")

        letter = self.render(state)
        self._sending = True
        try:
            await self.sender.deliver(letter, recipient)
        except DeliveryError as e:
            logger.error(f"Failed to send notice: {e}")
            raise NoticeSendError("Failed to send notice. Please try again.") from e
        finally:
            self._sending = False
        return self.after_send(state)
