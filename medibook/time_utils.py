"""12-hour clock parsing and formatting for schedule and slot labels."""

import re

from medibook.errors import FormatError

MINUTES_PER_DAY = 24 * 60

# "9:00 AM", "09:30 PM" - one optional leading zero on the hour
CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2}) (AM|PM)$")


def parse_clock_time(value: str) -> int:
    """Parse an "H:MM AM|PM" string into a minute-of-day in [0, 1440)."""
    if not isinstance(value, str):
        raise FormatError(f"Invalid clock time: {value!r}")

    match = CLOCK_PATTERN.match(value.strip())
    if not match:
        raise FormatError(f"Invalid clock time: {value!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    period = match.group(3)

    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise FormatError(f"Clock time out of range: {value!r}")

    # 12 AM is midnight, 12 PM is noon
    hour = hour % 12
    if period == "PM":
        hour += 12

    return hour * 60 + minute


def format_clock_time(minute_of_day: int) -> str:
    """Format a minute-of-day as canonical "H:MM AM|PM"."""
    if not 0 <= minute_of_day < MINUTES_PER_DAY:
        raise FormatError(f"Minute of day out of range: {minute_of_day}")

    hour, minute = divmod(minute_of_day, 60)
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def canonical_clock_time(value: str) -> str:
    """Normalize a clock string, e.g. "09:00 AM" -> "9:00 AM"."""
    return format_clock_time(parse_clock_time(value))
