from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from paycycle.errors import ValidationError
from paycycle.utils import (
    friday_on_or_before,
    month_bounds,
    pay_period_window,
    to_decimal,
    to_utc_datetime,
    weekday_name,
)


def test_friday_on_or_before():
    assert friday_on_or_before(date(2018, 9, 28)) == date(2018, 9, 28)
    assert friday_on_or_before(date(2018, 9, 29)) == date(2018, 9, 28)
    assert friday_on_or_before(date(2018, 10, 4)) == date(2018, 9, 28)
    assert friday_on_or_before(date(2018, 10, 5)) == date(2018, 10, 5)


def test_month_bounds_handles_leap_years():
    assert month_bounds(date(2020, 2, 10)) == (date(2020, 2, 1), date(2020, 2, 29))
    assert month_bounds(date(2019, 2, 10)) == (date(2019, 2, 1), date(2019, 2, 28))
    assert month_bounds(date(2018, 12, 31)) == (date(2018, 12, 1), date(2018, 12, 31))


@pytest.mark.parametrize(
    "anchor, expected",
    [
        # Friday start, Thursday spills into October
        (date(2018, 9, 28), (date(2018, 9, 28), date(2018, 9, 30))),
        (date(2018, 9, 30), (date(2018, 9, 28), date(2018, 9, 30))),
        # Friday falls in September
        (date(2018, 10, 1), (date(2018, 10, 1), date(2018, 10, 4))),
        # Full week inside the month
        (date(2019, 2, 5), (date(2019, 2, 1), date(2019, 2, 7))),
        (date(2019, 2, 14), (date(2019, 2, 8), date(2019, 2, 14))),
        # Year rollover on both sides
        (date(2018, 12, 30), (date(2018, 12, 28), date(2018, 12, 31))),
        (date(2019, 1, 2), (date(2019, 1, 1), date(2019, 1, 3))),
        (date(2020, 2, 29), (date(2020, 2, 28), date(2020, 2, 29))),
    ],
)
def test_pay_period_window(anchor, expected):
    assert pay_period_window(anchor) == expected


def test_pay_period_window_always_contains_anchor():
    day = date(2018, 1, 1)
    while day < date(2020, 1, 1):
        start, end = pay_period_window(day)
        assert start <= day <= end
        assert start.month == end.month == day.month
        assert (end - start).days <= 6
        day += timedelta(days=1)


def test_weekday_name():
    assert weekday_name(date(2018, 9, 28)) == "Friday"
    assert weekday_name(date(2018, 9, 30)) == "Sunday"
    assert weekday_name(date(2018, 10, 1)) == "Monday"


def test_to_utc_datetime_variants():
    utc = timezone.utc
    assert to_utc_datetime("2018-09-28") == datetime(2018, 9, 28, tzinfo=utc)
    assert to_utc_datetime("2018-09-28T10:15:00Z") == datetime(2018, 9, 28, 10, 15, tzinfo=utc)
    assert to_utc_datetime(date(2018, 9, 28)) == datetime(2018, 9, 28, tzinfo=utc)
    assert to_utc_datetime(datetime(2018, 9, 28, 10)) == datetime(2018, 9, 28, 10, tzinfo=utc)

    shifted = to_utc_datetime("2018-10-01T02:00:00+05:00")
    assert shifted == datetime(2018, 9, 30, 21, tzinfo=utc)
    assert shifted.tzinfo == utc


def test_to_utc_datetime_defaults_to_now():
    before = datetime.now(timezone.utc)
    value = to_utc_datetime(None)
    after = datetime.now(timezone.utc)
    assert before <= value <= after


def test_to_utc_datetime_rejects_garbage():
    with pytest.raises(ValidationError):
        to_utc_datetime("next tuesday")
    with pytest.raises(ValidationError):
        to_utc_datetime(12345)


def test_to_decimal():
    assert to_decimal(10.22) == Decimal("10.22")
    assert to_decimal("  -3.50 ") == Decimal("-3.50")
    assert to_decimal(7) == Decimal("7")
    assert to_decimal(Decimal("1.1")) == Decimal("1.1")


@pytest.mark.parametrize("value", [None, True, "abc", "", "NaN", float("inf")])
def test_to_decimal_rejects_non_numbers(value):
    with pytest.raises(ValidationError):
        to_decimal(value)
