"""
Parsing of human-entered dates for scheduled alerts.

Accepts ISO 8601 input as well as the short human forms editors tend to type
on the command line, e.g. "tomorrow 13:45", "Saturday", "October 22, 2020",
"+6 hours" or "2 hours 30 minutes".
"""
import re
from datetime import datetime, time, timedelta, tzinfo
from typing import Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime, parse_time

from .conf import DATETIME_STORAGE_FORMAT

WEEKDAYS = {
    'monday': 0,
    'tuesday': 1,
    'wednesday': 2,
    'thursday': 3,
    'friday': 4,
    'saturday': 5,
    'sunday': 6,
}

DAY_KEYWORDS = {
    'today': 0,
    'midnight': 0,
    'noon': 0,
    'tomorrow': 1,
    'yesterday': -1,
}

NAMED_TIMES = {
    'midnight': time(0, 0),
    'noon': time(12, 0),
}

MONTH_FORMATS = (
    '%B %d, %Y',
    '%b %d, %Y',
    '%B %d %Y',
    '%b %d %Y',
    '%d %B %Y',
    '%d %b %Y',
)

UNIT_PATTERN = r'(?:seconds?|secs?|minutes?|mins?|hours?|hrs?|days?|weeks?)'
RELATIVE_PART_RE = re.compile(rf'([+-]?\d+)\s*({UNIT_PATTERN})(?![a-z])\s*')

UNIT_SECONDS = (
    ('sec', 1),
    ('min', 60),
    ('h', 3600),
    ('day', 86400),
    ('week', 604800),
)


def _unit_seconds(unit: str) -> int:
    for prefix, seconds in UNIT_SECONDS:
        if unit.startswith(prefix):
            return seconds
    raise ValueError(f"Unknown time unit '{unit}'")


def _safe(parser, value):
    """Run a django.utils.dateparse parser, treating bad values as no match."""
    try:
        return parser(value)
    except ValueError:
        return None


def _parse_relative(value: str) -> Optional[timedelta]:
    ago = value.endswith(' ago')
    if ago:
        value = value[:-len(' ago')].strip()
    if not value:
        return None

    # Parts must cover the whole value, back to back.
    seconds = 0
    pos = 0
    while pos < len(value):
        match = RELATIVE_PART_RE.match(value, pos)
        if match is None:
            return None
        amount, unit = match.groups()
        seconds += int(amount) * _unit_seconds(unit)
        pos = match.end()
    return timedelta(seconds=-seconds if ago else seconds)


def _time_of_day(value: str) -> Optional[time]:
    if value in NAMED_TIMES:
        return NAMED_TIMES[value]
    return _safe(parse_time, value)


def _parse_day_keyword(value: str, local_now: datetime) -> Optional[datetime]:
    head, _, rest = value.partition(' ')
    rest = rest.strip()

    if head in DAY_KEYWORDS:
        day = local_now.date() + timedelta(days=DAY_KEYWORDS[head])
        default_time = NAMED_TIMES.get(head, time(0, 0))
    elif head in WEEKDAYS:
        days_ahead = (WEEKDAYS[head] - local_now.weekday()) % 7
        day = local_now.date() + timedelta(days=days_ahead)
        default_time = time(0, 0)
    else:
        return None

    if rest:
        at = _time_of_day(rest)
        if at is None:
            return None
    else:
        at = default_time
    return datetime.combine(day, at)


def _parse_month_name(value: str) -> Optional[datetime]:
    for fmt in MONTH_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_datetime_input(value: str, tz: tzinfo, now: Optional[datetime] = None) -> datetime:
    """
    Parse a free-form date/time string into an aware datetime.

    Naive input is interpreted in ``tz``. Raises ``ValueError`` when the
    value cannot be understood.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError('Empty date value')

    raw = value.strip()
    lowered = ' '.join(raw.lower().split())
    now = now or timezone.now()
    local_now = now.astimezone(tz)

    if lowered == 'now':
        return local_now

    parsed = _safe(parse_datetime, raw)
    if parsed is None:
        day = _safe(parse_date, raw)
        if day is not None:
            parsed = datetime.combine(day, time(0, 0))

    if parsed is None:
        delta = _parse_relative(lowered)
        if delta is not None:
            return local_now + delta

    if parsed is None:
        parsed = _parse_day_keyword(lowered, local_now)

    if parsed is None:
        at = _safe(parse_time, raw)
        if at is not None:
            parsed = datetime.combine(local_now.date(), at)

    if parsed is None:
        parsed = _parse_month_name(raw)

    if parsed is None:
        raise ValueError(f"Unrecognised date format: '{value}'")

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, tz)
    return parsed.astimezone(tz)


def format_for_storage(value: datetime, tz: tzinfo) -> str:
    """Format an aware datetime in the canonical storage format."""
    return value.astimezone(tz).strftime(DATETIME_STORAGE_FORMAT)


def parse_storage_value(value: str, tz: tzinfo) -> datetime:
    """Inverse of :func:`format_for_storage`."""
    return timezone.make_aware(datetime.strptime(value, DATETIME_STORAGE_FORMAT), tz)


def to_storage_format(value: str, tz: tzinfo, now: Optional[datetime] = None) -> str:
    """Parse human input and return it in canonical storage format."""
    return format_for_storage(parse_datetime_input(value, tz, now=now), tz)
