"""
fairchance.dates
================

Calendar helpers for the fair-chance workflow.

* :pyfunc:`elapsed_since` – whole months between a conviction month and a
  reference date, rendered as "3 years", "5 months" or "2 years and 3 months".
* :pyfunc:`add_business_days` / :pyfunc:`business_days_until` – Monday–Friday
  arithmetic.  There is no holiday calendar.
* :pyfunc:`remaining_time` – the response-window countdown shown after the
  preliminary notice has been sent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, TypeVar, Union

from .settings import settings

logger = logging.getLogger(__name__)

D = TypeVar("D", date, datetime)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


@dataclass(frozen=True)
class HumanDuration:
    """Elapsed time split into whole years and remaining months."""
    years: int
    months: int

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    def __str__(self) -> str:
        if self.years == 0:
            return _plural(self.months, "month")
        if self.months == 0:
            return _plural(self.years, "year")
        return f"{_plural(self.years, 'year')} and {_plural(self.months, 'month')}"


def _as_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def elapsed_since(
    month: Union[str, int],
    year: Union[str, int],
    reference: Union[str, date],
) -> HumanDuration:
    """
    Return the time between the first day of *month*/*year* and *reference*.

    Only the year and month of *reference* are used, so
    ``elapsed_since("03", "2020", "2023-03-15")`` is exactly three years.

    A reference date that falls before the conviction month clamps to zero
    months.

    Examples
    --------
    >>> str(elapsed_since("06", "2021", "2023-09-15"))
    '2 years and 3 months'
    """
    ref = _as_date(reference)
    total = (ref.year - int(year)) * 12 + (ref.month - int(month))
    if total < 0:
        logger.warning(
            f"Reference date {ref.isoformat()} precedes conviction {int(month):02d}/{year}; clamping to zero"
        )
        total = 0
    return HumanDuration(years=total // 12, months=total % 12)


def is_business_day(day: Union[date, datetime]) -> bool:
    """Monday to Friday."""
    return day.weekday() < 5


def add_business_days(start: D, count: int) -> D:
    """
    Advance *start* one calendar day at a time until *count* business days
    have been added.  ``add_business_days(d, 0) == d``.
    """
    result = start
    added = 0
    while added < count:
        result = result + timedelta(days=1)
        if is_business_day(result):
            added += 1
    return result


def business_days_until(end: datetime, now: Optional[datetime] = None) -> int:
    """Count business days from *now* while the cursor is still before *end*."""
    cursor = now or datetime.now()
    days = 0
    while cursor < end:
        if is_business_day(cursor):
            days += 1
        cursor = cursor + timedelta(days=1)
    return days


@dataclass(frozen=True)
class CountdownView:
    """One evaluation of the response-window countdown."""
    deadline: datetime
    expired: bool
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    business_days: int = 0

    def as_dict(self) -> dict:
        return {
            "deadline": self.deadline.isoformat(),
            "expired": self.expired,
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "business_days": self.business_days,
        }


def response_deadline(
    deadline_days: int,
    start: datetime,
    accuracy_challenged: bool = False,
) -> datetime:
    """End of the response window: *deadline_days* (+5 if challenged) business days after *start*."""
    total = deadline_days + (settings.accuracy_extension_days if accuracy_challenged else 0)
    return add_business_days(start, total)


def remaining_time(
    deadline_days: int,
    start: datetime,
    accuracy_challenged: bool = False,
    now: Optional[datetime] = None,
) -> CountdownView:
    """
    Evaluate the countdown at *now*.

    Once the end instant has passed the view is ``expired`` and every counter
    is zero.
    """
    now = now or datetime.now()
    end = response_deadline(deadline_days, start, accuracy_challenged)
    left = end - now
    if left <= timedelta(0):
        return CountdownView(deadline=end, expired=True)

    secs = int(left.total_seconds())
    return CountdownView(
        deadline=end,
        expired=False,
        days=secs // 86400,
        hours=(secs // 3600) % 24,
        minutes=(secs // 60) % 60,
        seconds=secs % 60,
        business_days=business_days_until(end, now),
    )
