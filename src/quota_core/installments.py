"""Payment-term parsing and installment allocation.

An order's total value is split into equal slices, one per payment term, and
each slice lands in the month offset (counted from the shipment month) that
the term falls into. Every 30 days of term count as one commercial month.

Term strings are free text typed by buyers, e.g. "90/120/150", "30,60,90" or
"30 60 90". Parsing is forgiving by policy: tokens that are not positive
integers are dropped without error, so a string with no valid terms yields
an order with no installments.

Examples:
    >>> parse_payment_terms("90/120/150")
    [90, 120, 150]
    >>> allocate_installments(9000.0, [90, 120, 150])
    {3: 3000.0, 4: 3000.0, 5: 3000.0}
    >>> allocate_installments(9000.0, [90, 100])
    {3: 9000.0}
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence

from quota_core.window import MonthLike, add_months, format_month

# Separators accepted between terms: slash, comma, dash and any whitespace
TERM_SEPARATOR_RE = re.compile(r"[/,\-\s]+")

DAYS_PER_MONTH = 30


def parse_payment_terms(text: str | None) -> list[int]:
    """Tokenize a free-text payment-term string into day counts.

    Args:
        text: Raw term string. None or blank yields an empty list.

    Returns:
        Positive integer day counts in input order, duplicates kept.
    """
    if not text:
        return []

    terms: list[int] = []
    for token in TERM_SEPARATOR_RE.split(text.strip()):
        if not token:
            continue
        try:
            days = int(token)
        except ValueError:
            continue
        if days > 0:
            terms.append(days)
    return terms


def term_offset(days: int, days_per_month: int = DAYS_PER_MONTH) -> int:
    """Month offset of a term, rounding half up (45 days -> 2 months)."""
    return math.floor(days / days_per_month + 0.5)


def allocate_installments(
    total_value: float,
    terms_days: Sequence[int],
    days_per_month: int = DAYS_PER_MONTH,
) -> dict[int, float]:
    """Split a total value across month offsets according to payment terms.

    Args:
        total_value: Order value to amortize. Not validated here.
        terms_days: Ordered term day counts, duplicates allowed.
        days_per_month: Days per commercial month (default: 30).

    Returns:
        Dictionary {month_offset: amount}. Slices whose terms round to the
        same offset are summed into one bucket. Empty when there are no
        terms or the total is zero.
    """
    if not terms_days or total_value == 0:
        return {}

    slice_value = total_value / len(terms_days)
    result: dict[int, float] = {}
    for days in terms_days:
        offset = term_offset(days, days_per_month)
        result[offset] = result.get(offset, 0.0) + slice_value
    return result


def installment_keys_to_int(installments: Mapping[object, float] | None) -> dict[int, float]:
    """Normalize a persisted installments mapping to int offset keys.

    The hosted store keeps installments as JSON, so offsets come back as
    strings ("3"). Values are coerced to float.
    """
    if not installments:
        return {}
    return {int(key): float(value) for key, value in installments.items()}


def installments_by_month(
    shipment_month: MonthLike,
    installments: Mapping[int, float],
) -> dict[str, float]:
    """Map offset-keyed installments to YYYY-MM labels.

    Examples:
        >>> installments_by_month("2025-11", {3: 3000.0, 4: 3000.0})
        {'2026-02': 3000.0, '2026-03': 3000.0}
    """
    return {
        format_month(add_months(shipment_month, offset)): value
        for offset, value in sorted(installments.items())
    }
