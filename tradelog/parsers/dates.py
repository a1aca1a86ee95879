"""Date and time normalization for broker exports.

Broker statements write dates in several shapes (``01/02/24``,
``1/2/2024``, ``2024-01-02``, ``02-JAN-24``), sometimes with the time
of day in the same column (``2024-01-02 09:31:00``). These helpers turn them
into ISO 8601 strings so trades can be grouped by calendar date.
"""

import re
from datetime import date, datetime, time
from typing import Optional

MONTH_NAMES = ["jan", "feb", "mar", "apr", "may", "jun",
               "jul", "aug", "sep", "oct", "nov", "dec"]

_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_NAMED_MONTH = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{2}|\d{4})$")
_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
# A date followed by "T" or whitespace and a time; fractions and offsets are dropped
_DATE_TIME = re.compile(
    r"^(\S+?)(?:T|\s+)(\d{1,2}:\d{2}(?::\d{2})?)(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?$"
)


def _expand_year(year: int) -> int:
    """Expand a two-digit year (00-49 => 20xx, 50-99 => 19xx)."""
    if year < 100:
        return year + (1900 if year >= 50 else 2000)
    return year


def split_date_time(text: str) -> tuple[str, Optional[str]]:
    """Split ``2024-01-02T09:31:00`` or ``01/02/24 09:31`` into date and time text.

    Text without a trailing time comes back unchanged with None.
    """
    value = text.strip()
    match = _DATE_TIME.match(value)
    if not match:
        return value, None
    return match.group(1), match.group(2)


def parse_broker_date(text: Optional[str]) -> Optional[date]:
    """Parse a date in any of the supported export formats.

    Args:
        text: Raw date text.

    Returns:
        The parsed date, or None if the text is not a recognizable date.
    """
    if not text:
        return None
    value, _ = split_date_time(text)

    try:
        if match := _US_DATE.match(value):
            month, day, year = (int(g) for g in match.groups())
            return date(_expand_year(year), month, day)

        if match := _ISO_DATE.match(value):
            year, month, day = (int(g) for g in match.groups())
            return date(year, month, day)

        if match := _NAMED_MONTH.match(value):
            day, month_name, year = match.groups()
            month_name = month_name.lower()
            if month_name not in MONTH_NAMES:
                return None
            return date(_expand_year(int(year)), MONTH_NAMES.index(month_name) + 1, int(day))
    except ValueError:
        return None

    return None


def parse_broker_time(text: Optional[str]) -> Optional[time]:
    """Parse an ``HH:MM`` or ``HH:MM:SS`` time of day."""
    if not text:
        return None
    match = _TIME.match(text.strip())
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    try:
        return time(int(hours), int(minutes), int(seconds or 0))
    except ValueError:
        return None


def to_entry_date(date_text: str, time_text: Optional[str] = None) -> str:
    """Build the ISO entry timestamp for a trade.

    Falls back to the raw date text when it cannot be parsed, so the
    record still groups under whatever the export wrote.

    Args:
        date_text: Raw date text.
        time_text: Optional raw time text. When missing or unreadable, a
            time written in the date column is used.

    Returns:
        ``YYYY-MM-DDTHH:MM:SS``, ``YYYY-MM-DD`` when no time is known,
        or the stripped raw date.
    """
    parsed_date = parse_broker_date(date_text)
    if parsed_date is None:
        return date_text.strip()

    parsed_time = parse_broker_time(time_text) or parse_broker_time(split_date_time(date_text)[1])
    if parsed_time is None:
        return parsed_date.isoformat()
    return datetime.combine(parsed_date, parsed_time).isoformat()
