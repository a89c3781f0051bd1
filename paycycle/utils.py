# paycycle/utils.py
from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation

from paycycle.errors import ValidationError

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_FRIDAY = 4


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_datetime(value) -> datetime:
    """
    Normalize a transaction date to an aware UTC datetime.
    Accepts datetimes (naive ones are taken as UTC), dates and ISO strings.
    ``None`` means "now".
    """
    if value is None:
        return utcnow()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Could not parse date '{value}'")
        return to_utc_datetime(parsed)
    raise ValidationError(f"Unrecognized date value: {value!r}")


def to_decimal(value) -> Decimal:
    """Coerce an amount to Decimal; floats go through their repr."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Amount must be a number, got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"Could not parse amount '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Amount must be finite, got '{value}'")
    return amount


def friday_on_or_before(day: date) -> date:
    return day - timedelta(days=(day.weekday() - _FRIDAY) % 7)


def month_bounds(day: date) -> tuple[date, date]:
    last = monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def pay_period_window(anchor: date) -> tuple[date, date]:
    """
    Return the inclusive (start, end) of the pay-period week holding ``anchor``.

    The week runs Friday through Thursday. A boundary that falls outside the
    anchor's month is clamped to the first or last day of that month, so the
    cadence restarts at every month.
    """
    friday = friday_on_or_before(anchor)
    thursday = friday + timedelta(days=6)
    first_day, last_day = month_bounds(anchor)
    start = friday if friday.month == anchor.month else first_day
    end = thursday if thursday.month == anchor.month else last_day
    return start, end
