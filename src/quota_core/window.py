"""Rolling projection window of calendar months.

Months are handled as "YYYY-MM" labels. A window is always generated from a
reference date, so moving the reference shifts the whole window without any
separate notion of "current" and "future" months.

Examples:
    >>> from datetime import date
    >>> projection_window(date(2025, 11, 20), months=3)
    ['2025-11', '2025-12', '2026-01']
    >>> month_offset("2025-11", "2026-02")
    3
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Union

from quota_core.exceptions import ValidationError

MonthLike = Union[date, datetime, str]

MONTH_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})(?:-\d{2})?$")


def parse_month(value: MonthLike) -> date:
    """Normalize a month-like value to the first day of its month.

    Args:
        value: A date, datetime, or string in YYYY-MM or YYYY-MM-DD format.

    Returns:
        date for the first day of that month.

    Raises:
        ValidationError: If the string is not a valid month.

    Examples:
        >>> parse_month("2025-03")
        datetime.date(2025, 3, 1)
        >>> parse_month("2025-03-17")
        datetime.date(2025, 3, 1)
    """
    if isinstance(value, datetime):
        return date(value.year, value.month, 1)
    if isinstance(value, date):
        return date(value.year, value.month, 1)

    match = MONTH_RE.match(str(value).strip())
    if not match:
        raise ValidationError(f"Invalid month '{value}': expected YYYY-MM")
    month = int(match.group("month"))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month '{value}': month out of range")
    return date(int(match.group("year")), month, 1)


def format_month(value: MonthLike) -> str:
    """Format a month-like value as a YYYY-MM label."""
    d = parse_month(value)
    return f"{d.year:04d}-{d.month:02d}"


def add_months(value: MonthLike, months: int) -> date:
    """Shift a month by a number of calendar months (may be negative).

    Returns:
        First day of the resulting month.
    """
    d = parse_month(value)
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def projection_window(reference_date: MonthLike, months: int = 12) -> list[str]:
    """Generate contiguous YYYY-MM labels starting at the reference month.

    Args:
        reference_date: Date whose own year-month opens the window.
        months: Number of labels to produce (default: 12).

    Returns:
        List of month labels, one calendar month apart, wrapping years.
    """
    start = parse_month(reference_date)
    return [format_month(add_months(start, i)) for i in range(months)]


def month_offset(shipment_month: MonthLike, target_month: MonthLike) -> int:
    """Whole months from shipment_month to target_month.

    Negative when the target precedes the shipment month; such offsets never
    carry an installment.
    """
    start = parse_month(shipment_month)
    target = parse_month(target_month)
    return (target.year - start.year) * 12 + (target.month - start.month)
