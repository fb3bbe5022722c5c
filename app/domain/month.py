"""
Calendar month arithmetic.

A calendar month (year, month) is mapped to an integer ordinal
year * 12 + (month - 1). Ordinals of consecutive months differ by exactly 1,
so month windows and overlap checks reduce to integer ranges and
day-of-month never takes part in billing.

Accepted textual month formats:
  MM-YYYY      07-2025
  YYYY-MM      2025-07
  YYYY-MM-DD   2025-07-15 (day is truncated)
  ISO datetime 2025-07-01T00:00:00Z (day and time are truncated)
"""
import re
from datetime import date, datetime

_MM_YYYY = re.compile(r"^(\d{1,2})-(\d{4})$")
_YYYY_MM = re.compile(r"^(\d{4})-(\d{1,2})$")


def month_ordinal(year: int, month: int) -> int:
    """Ordinal of a calendar month. Raises ValueError if month is outside 1..12."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return year * 12 + (month - 1)


def month_from_ordinal(ordinal: int) -> tuple[int, int]:
    """Inverse of month_ordinal: ordinal -> (year, month)."""
    year, month0 = divmod(ordinal, 12)
    return year, month0 + 1


def ordinal_of_date(d: date) -> int:
    """Ordinal of the month containing d."""
    return month_ordinal(d.year, d.month)


def date_of_ordinal(ordinal: int) -> date:
    """First day of the month with the given ordinal."""
    year, month = month_from_ordinal(ordinal)
    return date(year, month, 1)


def truncate_to_month(d: date) -> date:
    """First day of the month containing d."""
    return date(d.year, d.month, 1)


def month_range(start_ordinal: int, end_ordinal: int) -> range:
    """
    Inclusive sequence of month ordinals start..end.

    Empty if start > end; a single element if start == end.
    """
    return range(start_ordinal, end_ordinal + 1)


def parse_month(value: str | date) -> date:
    """
    Parse a month value into the first day of that month.

    Args:
        value: "MM-YYYY", "YYYY-MM", ISO date or datetime string, or a date

    Returns:
        date(year, month, 1)

    Raises:
        ValueError: unknown format or month outside 1..12

    Example:
        >>> parse_month("07-2025")
        datetime.date(2025, 7, 1)
        >>> parse_month("2025-07-15")
        datetime.date(2025, 7, 1)
    """
    if isinstance(value, datetime):
        return truncate_to_month(value.date())
    if isinstance(value, date):
        return truncate_to_month(value)

    text = value.strip()

    m = _MM_YYYY.match(text)
    if m:
        month, year = int(m.group(1)), int(m.group(2))
        month_ordinal(year, month)
        return date(year, month, 1)

    m = _YYYY_MM.match(text)
    if m:
        year, month = int(m.group(1)), int(m.group(2))
        month_ordinal(year, month)
        return date(year, month, 1)

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Некорректный месяц: {value!r} (ожидается MM-YYYY)") from None
    return date(parsed.year, parsed.month, 1)


def format_month(d: date) -> str:
    """date -> "MM-YYYY"."""
    return f"{d.month:02d}-{d.year:04d}"
