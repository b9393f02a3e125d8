"""Tests for the rolling projection window and month helpers."""

from datetime import date, datetime

import pytest

from quota_core.exceptions import ValidationError
from quota_core.window import (
    add_months,
    format_month,
    month_offset,
    parse_month,
    projection_window,
)


def test_window_has_twelve_contiguous_months() -> None:
    """Test window length, start month and contiguity."""
    window = projection_window(date(2025, 3, 17))

    assert len(window) == 12
    assert window[0] == "2025-03"
    assert window[-1] == "2026-02"
    assert len(set(window)) == 12
    for previous, current in zip(window, window[1:]):
        assert month_offset(previous, current) == 1


def test_window_wraps_year_boundary() -> None:
    """Test December rolls into January of the next year."""
    assert projection_window(date(2025, 12, 31), months=3) == ["2025-12", "2026-01", "2026-02"]


def test_window_shifts_with_reference_date() -> None:
    """Test that advancing the reference shifts the whole window."""
    first = projection_window("2025-01")
    second = projection_window("2025-02")
    assert first[1:] == second[:-1]


def test_parse_month_accepts_dates_and_strings() -> None:
    """Test the accepted month-like inputs."""
    assert parse_month(date(2025, 7, 19)) == date(2025, 7, 1)
    assert parse_month(datetime(2025, 7, 19, 10, 30)) == date(2025, 7, 1)
    assert parse_month("2025-07") == date(2025, 7, 1)
    assert parse_month("2025-07-01") == date(2025, 7, 1)


@pytest.mark.parametrize("bad", ["2025-13", "2025/07", "July", ""])
def test_parse_month_rejects_invalid(bad: str) -> None:
    """Test invalid month labels raise ValidationError."""
    with pytest.raises(ValidationError):
        parse_month(bad)


def test_month_offset() -> None:
    """Test whole-month differences, including negatives."""
    assert month_offset("2025-11", "2025-11") == 0
    assert month_offset("2025-11", "2026-02") == 3
    assert month_offset("2025-11", "2025-09") == -2


def test_add_months_and_format() -> None:
    """Test month arithmetic in both directions."""
    assert add_months("2025-01", -1) == date(2024, 12, 1)
    assert format_month(add_months("2025-11", 14)) == "2027-01"
