"""Business-week helpers.

A tracking week runs from Monday 00:00:00.000 to Friday 23:59:59.999.
Saturday belongs to the week that just ended and Sunday is rolled back to
the previous Monday as well, so every calendar date maps to exactly one
week.

Week boundaries are stored as naive wall-clock times of one configured
zone (``dashboard.timezone``). Naive inputs are taken to be in that zone
already; aware inputs are converted to it first, so the same instant
always lands in the same week whatever offset the client sent.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

# Short month names used by the es-MX date format.
_MONTHS_ES = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]

WEEK_SPAN = timedelta(days=4, hours=23, minutes=59, seconds=59, microseconds=999000)


@dataclass(frozen=True)
class WeekRange:
    """Monday start and Friday end of a tracking week."""

    monday: datetime
    friday: datetime

    @property
    def label(self) -> str:
        return get_week_label(self.monday)


def resolve_timezone(name: str) -> tzinfo:
    """Return the zone for an IANA name such as ``America/Mexico_City``.

    Raises:
        ValueError: If the name is not a known zone.
    """
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def to_local(value: date | datetime, tz: tzinfo | None = None) -> datetime:
    """Naive datetime in ``tz`` (UTC when omitted); naive input passes through."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(tz or timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def get_week_dates(value: date | datetime | None = None, tz: tzinfo | None = None) -> WeekRange:
    """Return the Monday/Friday boundaries of the week containing ``value``.

    Args:
        value: Any date or datetime. Defaults to now.
        tz: Zone that aware values (and "now") are read in.

    Returns:
        WeekRange with Monday 00:00:00.000 and Friday 23:59:59.999.
    """
    if value is None:
        value = datetime.now(tz) if tz is not None else datetime.now()
    current = to_local(value, tz)
    # weekday(): Monday=0 ... Sunday=6; Sunday rolls back 6 days
    monday = datetime.combine(current.date() - timedelta(days=current.weekday()), time.min)
    return WeekRange(monday=monday, friday=monday + WEEK_SPAN)


def shift_week(value: date | datetime | None, weeks: int, tz: tzinfo | None = None) -> WeekRange:
    """Return the week ``weeks`` weeks after (negative: before) the week of ``value``."""
    current = get_week_dates(value, tz)
    return get_week_dates(current.monday + timedelta(weeks=weeks))


def is_well_formed_week(week_start: datetime, week_end: datetime) -> bool:
    """Check that the pair is a canonical Monday-to-Friday week."""
    start = to_local(week_start)
    end = to_local(week_end)
    return start == get_week_dates(start).monday and end - start == WEEK_SPAN


def format_date(value: date | datetime) -> str:
    """Format a date as a short es-MX date, e.g. ``13 oct 2025``."""
    return f"{value.day} {_MONTHS_ES[value.month - 1]} {value.year}"


def get_week_label(monday: date | datetime) -> str:
    """Human-readable label ``"<Mon date> - <Fri date>"`` for a week."""
    start = to_local(monday)
    return f"{format_date(start)} - {format_date(start + timedelta(days=4))}"
