"""
tests/test_dates.py
===================

Unit tests for fairchance.dates: elapsed time, business days and the
response-window countdown.
"""

from datetime import date, datetime, timedelta

import pytest

from fairchance.dates import (
    HumanDuration,
    add_business_days,
    business_days_until,
    elapsed_since,
    is_business_day,
    remaining_time,
    response_deadline,
)


# ---------------------------------------------------------------------------
# elapsed_since
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "month, year, reference, expected",
    [
        ("03", "2020", "2023-03-15", "3 years"),
        ("06", "2021", "2023-09-15", "2 years and 3 months"),
        ("01", "2023", "2023-02-01", "1 month"),
        ("01", "2022", "2023-02-28", "1 year and 1 month"),
        ("05", "2024", "2024-05-31", "0 months"),
        ("11", "2019", "2024-01-10", "4 years and 2 months"),
    ],
)
def test_elapsed_since_phrases(month, year, reference, expected):
    assert str(elapsed_since(month, year, reference)) == expected


def test_elapsed_since_accepts_date_objects():
    assert elapsed_since(6, 2020, date(2021, 6, 1)) == HumanDuration(years=1, months=0)


def test_elapsed_since_ignores_day_of_month():
    """Only year and month of the reference count."""
    assert elapsed_since("03", "2020", "2020-03-31").total_months == 0
    assert elapsed_since("03", "2020", "2020-04-01").total_months == 1


def test_reference_before_conviction_clamps_to_zero(caplog):
    with caplog.at_level("WARNING"):
        d = elapsed_since("12", "2024", "2024-01-05")
    assert str(d) == "0 months"
    assert "clamping" in caplog.text


def test_plural_forms():
    assert str(HumanDuration(1, 1)) == "1 year and 1 month"
    assert str(HumanDuration(2, 0)) == "2 years"
    assert str(HumanDuration(0, 11)) == "11 months"


# ---------------------------------------------------------------------------
# Business days
# ---------------------------------------------------------------------------
def test_weekends_are_not_business_days():
    assert is_business_day(date(2024, 6, 7))      # Friday
    assert not is_business_day(date(2024, 6, 8))  # Saturday
    assert not is_business_day(date(2024, 6, 9))  # Sunday


def test_add_zero_business_days_is_identity():
    d = date(2024, 6, 8)
    assert add_business_days(d, 0) == d


def test_friday_plus_one_is_monday():
    assert add_business_days(date(2024, 6, 7), 1) == date(2024, 6, 10)


def test_monday_plus_five_is_next_monday():
    assert add_business_days(date(2024, 6, 3), 5) == date(2024, 6, 10)


def test_weekend_start_plus_one_is_monday():
    assert add_business_days(date(2024, 6, 8), 1) == date(2024, 6, 10)


def test_add_business_days_keeps_time_of_day():
    start = datetime(2024, 6, 6, 14, 30)  # Thursday
    assert add_business_days(start, 2) == datetime(2024, 6, 10, 14, 30)


@pytest.mark.parametrize("start", [date(2024, 6, 3) + timedelta(days=i) for i in range(7)])
@pytest.mark.parametrize("count", [0, 1, 4, 5, 10])
def test_result_is_weekday_with_exact_business_day_count(start, count):
    result = add_business_days(start, count)
    if count:
        assert is_business_day(result)
    span = [start + timedelta(days=i) for i in range(1, (result - start).days + 1)]
    assert sum(is_business_day(d) for d in span) == count


def test_business_days_until_counts_weekdays_before_end():
    monday = datetime(2024, 6, 3, 9, 0)
    end = datetime(2024, 6, 10, 9, 0)
    assert business_days_until(end, monday) == 5


def test_business_days_until_past_end_is_zero():
    assert business_days_until(datetime(2024, 6, 3), datetime(2024, 6, 4)) == 0


# ---------------------------------------------------------------------------
# Countdown
# ---------------------------------------------------------------------------
def test_response_deadline_extends_when_challenged():
    start = datetime(2024, 6, 3, 9, 0)
    assert response_deadline(5, start) == datetime(2024, 6, 10, 9, 0)
    assert response_deadline(5, start, accuracy_challenged=True) == datetime(2024, 6, 17, 9, 0)


def test_remaining_time_at_send():
    start = datetime(2024, 6, 3, 9, 0)
    view = remaining_time(5, start, now=start)
    assert not view.expired
    assert (view.days, view.hours, view.minutes, view.seconds) == (7, 0, 0, 0)
    assert view.business_days == 5


def test_remaining_time_breaks_down_components():
    start = datetime(2024, 6, 3, 9, 0)
    now = start + timedelta(days=2, hours=3, minutes=4, seconds=5)
    view = remaining_time(5, start, now=now)
    assert (view.days, view.hours, view.minutes, view.seconds) == (4, 20, 55, 55)


def test_remaining_time_expired_is_all_zero():
    start = datetime(2024, 6, 3, 9, 0)
    view = remaining_time(5, start, now=datetime(2024, 6, 10, 9, 0))
    assert view.expired
    assert (view.days, view.hours, view.minutes, view.seconds, view.business_days) == (0, 0, 0, 0, 0)


def test_countdown_as_dict_is_json_ready():
    start = datetime(2024, 6, 3, 9, 0)
    d = remaining_time(5, start, now=start).as_dict()
    assert d["deadline"] == "2024-06-10T09:00:00"
    assert d["business_days"] == 5
