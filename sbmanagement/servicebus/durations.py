"""
ISO 8601 Durations

Conversion between ``datetime.timedelta`` and the XML schema duration form
(``PnDTnHnMnS``) the management endpoint uses for every time span.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import re
from datetime import timedelta

from .constants import BROKER_MAX_DURATION, INFINITE

_DURATION_PATTERN = re.compile(
    r'^(?P<sign>-)?P'
    r'(?:(?P<years>\d+)Y)?'
    r'(?:(?P<months>\d+)M)?'
    r'(?:(?P<days>\d+)D)?'
    r'(?:T'
    r'(?:(?P<hours>\d+)H)?'
    r'(?:(?P<minutes>\d+)M)?'
    r'(?:(?P<seconds>\d+)(?:\.(?P<fraction>\d+))?S)?'
    r')?$'
)

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30


def parse_duration(duration_str: str) -> timedelta:
    """
    Parse an ISO 8601 duration string into a timedelta.

    Supports formats like:
    - PT60S (60 seconds)
    - PT1M (60 seconds)
    - PT1H30M (5400 seconds)
    - P14D (1209600 seconds)
    - P1Y (365 days)
    - PT0.5S (half a second)

    Values at or beyond the broker's largest representable duration are
    returned as ``INFINITE``.

    Args:
        duration_str: ISO 8601 duration string

    Returns:
        Parsed duration

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = (duration_str or "").strip()
    match = _DURATION_PATTERN.match(text)
    if not match or text.endswith(('P', 'T')):
        raise ValueError(f"Invalid ISO 8601 duration: {duration_str!r}")

    parts = match.groupdict()
    fraction = parts["fraction"] or ""
    # timedelta resolution is microseconds; extra digits are truncated
    microseconds = int(fraction[:6].ljust(6, "0")) if fraction else 0

    days = (
        int(parts["years"] or 0) * DAYS_PER_YEAR
        + int(parts["months"] or 0) * DAYS_PER_MONTH
        + int(parts["days"] or 0)
    )

    try:
        value = timedelta(
            days=days,
            hours=int(parts["hours"] or 0),
            minutes=int(parts["minutes"] or 0),
            seconds=int(parts["seconds"] or 0),
            microseconds=microseconds,
        )
    except OverflowError:
        value = INFINITE

    if value >= BROKER_MAX_DURATION:
        value = INFINITE

    if parts["sign"]:
        return -value
    return value


def format_duration(value: timedelta) -> str:
    """
    Format a timedelta as an ISO 8601 duration string.

    Examples: ``PT1M``, ``P1DT2H``, ``PT0.5S``, ``PT0S``.
    """
    if value < timedelta(0):
        return "-" + format_duration(-value)

    hours, remainder = divmod(value.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    result = "P"
    if value.days:
        result += f"{value.days}D"

    time_part = ""
    if hours:
        time_part += f"{hours}H"
    if minutes:
        time_part += f"{minutes}M"
    if value.microseconds:
        time_part += f"{seconds}.{value.microseconds:06d}".rstrip("0") + "S"
    elif seconds:
        time_part += f"{seconds}S"

    if time_part:
        result += "T" + time_part

    if result == "P":
        return "PT0S"
    return result


def is_infinite(value: timedelta) -> bool:
    """Return True if the duration is the "never" sentinel."""
    return value == INFINITE
