import datetime
import re

# Canonical clock strings are "H:MM am" / "H:MM pm".
_CLOCK_PATTERN = re.compile(r'^\s*(\d{1,2}):(\d{2})\s*(am|pm)\s*$', re.IGNORECASE)

# SalahHour marks the meridiem as "%am%" / "%pm%".
_PERCENT_MERIDIEM_PATTERN = re.compile(r'%\s*(am|pm)\s*%', re.IGNORECASE)

# AlAdhan appends the zone abbreviation, e.g. "05:12 (CDT)".
_TZ_SUFFIX_PATTERN = re.compile(r'\s*\([^)]*\)\s*$')

MINUTES_PER_DAY = 24 * 60


class FormatError(ValueError):
    """Raised when a clock string does not match the expected pattern."""


def parse_clock(clock_str):
    """
    Parses an "H:MM am|pm" string into a (hour24, minute) tuple.
    12 am becomes hour 0, 12 pm stays 12, other pm hours add 12.
    Raises FormatError if the string is not a valid 12-hour clock time.
    """
    if not isinstance(clock_str, str):
        raise FormatError(f"Expected a clock string, got {clock_str!r}")

    match = _CLOCK_PATTERN.match(clock_str)
    if not match:
        raise FormatError(f"Invalid clock string: {clock_str!r}")

    hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3).lower()
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise FormatError(f"Clock value out of range: {clock_str!r}")

    if meridiem == 'am':
        hour24 = 0 if hour == 12 else hour
    else:
        hour24 = 12 if hour == 12 else hour + 12
    return hour24, minute


def format_clock(hour24, minute):
    """Formats a 24-hour (hour, minute) pair as "H:MM am|pm" without a leading zero on the hour."""
    if not 0 <= hour24 <= 23 or not 0 <= minute <= 59:
        raise FormatError(f"Clock value out of range: {hour24}:{minute}")
    meridiem = 'am' if hour24 < 12 else 'pm'
    display_hour = hour24 % 12 or 12
    return f"{display_hour}:{minute:02d} {meridiem}"


def normalize_clock(clock_str):
    """Returns the canonical spacing and case of a valid clock string."""
    return format_clock(*parse_clock(clock_str))


def add_minutes(clock_str, offset_minutes):
    """
    Adds offset_minutes to a clock string and returns the new clock-face time.
    Offsets that cross midnight wrap around, the date is not tracked.
    """
    hour24, minute = parse_clock(clock_str)
    total = (hour24 * 60 + minute + int(offset_minutes)) % MINUTES_PER_DAY
    return format_clock(total // 60, total % 60)


def strip_meridiem(clock_str):
    """Returns only the "H:MM" part of a clock string, for compact table cells."""
    match = _CLOCK_PATTERN.match(clock_str or '')
    if not match:
        raise FormatError(f"Invalid clock string: {clock_str!r}")
    return f"{int(match.group(1))}:{match.group(2)}"


def to_clock_string(raw_time):
    """
    Converts a provider time string to the canonical "H:MM am|pm" form.

    Understands "HH:MM", "HH:MM:SS", AlAdhan's "HH:MM (TZ)" and SalahHour's
    "H:MM%am%" formats, as well as strings that are already canonical.
    Returns None for empty input and raises FormatError for anything else.
    """
    if raw_time is None:
        return None
    raw_time = str(raw_time).strip()
    if not raw_time or raw_time.lower() == "n/a":
        return None

    percent_match = _PERCENT_MERIDIEM_PATTERN.search(raw_time)
    if percent_match:
        cleaned = _PERCENT_MERIDIEM_PATTERN.sub('', raw_time).strip()
        return normalize_clock(f"{cleaned} {percent_match.group(1)}")

    if _CLOCK_PATTERN.match(raw_time):
        return normalize_clock(raw_time)

    cleaned = _TZ_SUFFIX_PATTERN.sub('', raw_time)
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            time_obj = datetime.datetime.strptime(cleaned, fmt).time()
            return format_clock(time_obj.hour, time_obj.minute)
        except ValueError:
            continue

    raise FormatError(f"Unrecognized provider time format: {raw_time!r}")
