"""Calendar helpers. Every boundary is computed in the current Django timezone."""
from datetime import date, datetime, time, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


def parse_day(value) -> date:
    """Parse a date, datetime or ISO string into a calendar day."""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        parsed = parse_date(text)
        if parsed is not None:
            return parsed
        parsed_dt = parse_datetime(text)
        if parsed_dt is not None:
            return parse_day(parsed_dt)
    raise ValueError(f"Invalid date: {value!r}")


def today() -> date:
    return timezone.localdate()


def start_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.max))


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    next_month = (day.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)


def shift_months(day: date, months: int) -> date:
    """First day of the month `months` away from day's month (negative goes back)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)
