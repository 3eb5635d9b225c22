"""
fairchance.events
=================

Event sources the workflow consumes instead of ad hoc timers.

* :class:`Clock` – where "now" comes from (:class:`SystemClock`,
  :class:`FixedClock` for tests).
* :class:`NoticeSender` – delivers a rendered letter.  The shipped
  :class:`SimulatedSender` only waits a fixed delay.
* :class:`ResponseSource` – says whether the candidate has responded.  The
  shipped :class:`SimulatedResponse` reports a response once a fixed
  observation delay has passed since the send.
* :func:`countdown_ticks` – async producer of countdown views, one per tick.

Swapping a simulated source for real delivery does not touch the stage
transition logic.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import AsyncIterator, Optional

from .dates import CountdownView, remaining_time
from .settings import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------
class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current local time."""

    def today(self):
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, at: datetime) -> None:
        self._now = at

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta) -> None:
        self._now = self._now + timedelta(**delta)


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------
class DeliveryError(Exception):
    """The sender could not deliver the letter."""


class NoticeSender(ABC):
    @abstractmethod
    async def deliver(self, letter: str, recipient: Optional[str] = None) -> None:
        """Deliver *letter*; raise :class:`DeliveryError` on failure."""


class SimulatedSender(NoticeSender):
    """Stands in for an email gateway: sleeps, then succeeds."""

    def __init__(self, delay: Optional[float] = None) -> None:
        self.delay = settings.send_delay if delay is None else delay
        self.sent: list[tuple[Optional[str], str]] = []

    async def deliver(self, letter: str, recipient: Optional[str] = None) -> None:
        logger.info(f"Simulating delivery to {recipient or 'candidate'} ({len(letter)} chars)")
        await asyncio.sleep(self.delay)
        self.sent.append((recipient, letter))


# ---------------------------------------------------------------------------
# Candidate response
# ---------------------------------------------------------------------------
class ResponseSource(ABC):
    @abstractmethod
    def has_responded(self, sent_at: datetime, now: datetime) -> bool:
        """True once the candidate's response can be reviewed."""


class SimulatedResponse(ResponseSource):
    def __init__(self, delay: Optional[float] = None) -> None:
        self.delay = settings.response_observation_delay if delay is None else delay

    def has_responded(self, sent_at: datetime, now: datetime) -> bool:
        return now - sent_at >= timedelta(seconds=self.delay)


# ---------------------------------------------------------------------------
# Countdown
# ---------------------------------------------------------------------------
async def countdown_ticks(
    deadline_days: int,
    start: datetime,
    accuracy_challenged: bool = False,
    clock: Optional[Clock] = None,
    interval: Optional[float] = None,
) -> AsyncIterator[CountdownView]:
    """
    Yield a fresh :class:`~fairchance.dates.CountdownView` every *interval*
    seconds.  Stops after the first expired view.  Closing the generator (or
    cancelling the task iterating it) stops the schedule.
    """
    clock = clock or SystemClock()
    interval = settings.countdown_tick if interval is None else interval
    while True:
        view = remaining_time(deadline_days, start, accuracy_challenged, now=clock.now())
        yield view
        if view.expired:
            return
        await asyncio.sleep(interval)
