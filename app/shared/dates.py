"""Date helpers for weekly reporting.

All helpers work on calendar dates. Inputs may be ``date``/``datetime`` objects
or ISO ``YYYY-MM-DD`` strings; outputs that feed the data model are ISO strings.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import NamedTuple, Optional, Union

DateLike = Union[date, datetime, str]


class Granularity(str, Enum):
    day = "day"
    week = "week"


class TrendRange(str, Enum):
    """Named trend windows, valued by their period count."""

    week = "week"
    month = "month"
    quarter = "quarter"
    two_quarters = "2quarters"
    year = "year"

    @property
    def periods(self) -> int:
        return _TREND_PERIODS[self]


_TREND_PERIODS = {
    TrendRange.week: 1,
    TrendRange.month: 4,
    TrendRange.quarter: 13,
    TrendRange.two_quarters: 26,
    TrendRange.year: 52,
}


class DateOption(NamedTuple):
    value: str
    label: str


def parse_date(value: DateLike) -> date:
    """Normalize a date-like value to a ``date`` (time of day is discarded)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Accept full ISO timestamps too, only the date part matters
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Unsupported date value: {value!r}")


def to_iso(value: DateLike) -> str:
    return parse_date(value).isoformat()


def today() -> date:
    """Local calendar day."""
    return date.today()


def current_day() -> str:
    return today().isoformat()


def current_week_monday() -> str:
    return week_monday(today())


def week_monday(value: DateLike) -> str:
    """Return the Monday on or before ``value`` (weeks start on Monday)."""
    d = parse_date(value)
    return (d - timedelta(days=d.weekday())).isoformat()


def shift_days(value: DateLike, n: int) -> str:
    return (parse_date(value) + timedelta(days=n)).isoformat()


def shift_weeks(value: DateLike, n: int) -> str:
    return (parse_date(value) + timedelta(weeks=n)).isoformat()


def previous_week(monday: DateLike) -> str:
    return shift_weeks(monday, -1)


def next_week(monday: DateLike) -> str:
    return shift_weeks(monday, 1)


def format_short_date(value: DateLike) -> str:
    """Format as ``Jan 8``."""
    d = parse_date(value)
    return f"{d:%b} {d.day}"


def format_date(value: DateLike) -> str:
    """Format as ``Jan 8, 2024``."""
    d = parse_date(value)
    return f"{format_short_date(d)}, {d.year}"


def format_range(week_start: DateLike) -> str:
    """Human label for the seven days starting at ``week_start``."""
    start = parse_date(week_start)
    end = start + timedelta(days=6)
    return f"{format_short_date(start)} - {format_date(end)}"


def is_future(value: DateLike, reference: Optional[DateLike] = None) -> bool:
    """True when ``value`` falls strictly after today (or ``reference``)."""
    ref = parse_date(reference) if reference is not None else today()
    return parse_date(value) > ref


def is_future_week(monday: DateLike, reference: Optional[DateLike] = None) -> bool:
    ref = reference if reference is not None else today()
    return parse_date(monday) > parse_date(week_monday(ref))


def is_date_in_week(value: DateLike, week_start: DateLike) -> bool:
    return is_date_in_span(value, week_start, 7)


def is_date_in_span(value: DateLike, start: DateLike, days: int) -> bool:
    """True when ``start <= value <= start + days - 1``."""
    d = parse_date(value)
    first = parse_date(start)
    return first <= d <= first + timedelta(days=days - 1)


def recent_options(
    count: int = 12,
    unit: Granularity = Granularity.week,
    reference: Optional[DateLike] = None,
) -> list[DateOption]:
    """Selectable dates going back from today, most recent first.

    ``week`` options start at this week's Monday and are labelled with the
    week range; ``day`` options start at today and use the long date label.
    """
    ref = parse_date(reference) if reference is not None else today()
    unit = Granularity(unit)

    if unit == Granularity.week:
        start = week_monday(ref)
        values = [shift_weeks(start, -i) for i in range(count)]
        return [DateOption(value=v, label=format_range(v)) for v in values]

    values = [shift_days(ref, -i) for i in range(count)]
    return [DateOption(value=v, label=format_date(v)) for v in values]


def period_start(value: DateLike, granularity: Granularity) -> str:
    """First day of the period containing ``value``."""
    if Granularity(granularity) == Granularity.week:
        return week_monday(value)
    return to_iso(value)


def period_length(granularity: Granularity) -> int:
    return 7 if Granularity(granularity) == Granularity.week else 1
