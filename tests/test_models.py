"""Tests for role/status normalization and row mapping."""

from datetime import date, datetime, timezone

import pytest

from quota_core.exceptions import ValidationError
from quota_core.models import (
    Order,
    OrderInput,
    OrderStatus,
    Role,
    debt_from_row,
    normalize_role,
    normalize_status,
    order_from_row,
    order_input_to_row,
    setting_from_row,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("BUYER", Role.BUYER),
        ("comprador", Role.BUYER),
        ("ADMIN", Role.BUYER),
        (" Gerente ", Role.MANAGER),
        ("manager", Role.MANAGER),
        (None, Role.BUYER),
        (Role.MANAGER, Role.MANAGER),
    ],
)
def test_normalize_role_aliases(raw, expected) -> None:
    """Test role aliases resolve to the canonical enum."""
    assert normalize_role(raw) == expected


def test_normalize_role_rejects_unknown() -> None:
    """Test that roles outside the two budget shares are rejected."""
    with pytest.raises(ValidationError, match="CASHIER"):
        normalize_role("CASHIER")


def test_normalize_status() -> None:
    """Test status normalization, including legacy and missing values."""
    assert normalize_status(None) == OrderStatus.PENDING
    assert normalize_status("ABERTA") == OrderStatus.PENDING
    assert normalize_status("Validated") == OrderStatus.VALIDATED
    with pytest.raises(ValidationError):
        normalize_status("shipped")


def test_order_from_row() -> None:
    """Test mapping a cotas row with JSON offset keys."""
    order = order_from_row(
        {
            "id": 17,
            "store_id": "store-1",
            "brand": "Vizzano",
            "classification": "Feminino - Sandália",
            "total_value": "9000.00",
            "shipment_date": "2025-11-01",
            "payment_terms": "90/120/150",
            "pairs": 120,
            "installments": {"3": 3000, "4": 3000, "5": 3000},
            "created_at": "2025-10-20T13:45:00+00:00",
            "created_by_role": "GERENTE",
            "status": None,
        }
    )

    assert order.id == "17"
    assert order.total_value == 9000.0
    assert order.shipment_date == date(2025, 11, 1)
    assert order.installments == {3: 3000.0, 4: 3000.0, 5: 3000.0}
    assert order.created_by_role == Role.MANAGER
    assert order.status == OrderStatus.PENDING
    assert isinstance(order.created_at, datetime)
    assert order.payment_terms_days == [90, 120, 150]
    assert order.installment_for("2026-02") == 3000.0
    assert order.installment_for("2025-10") == 0.0


def test_order_from_row_with_month_list_installments() -> None:
    """Test rows that stored installments as month/value entries."""
    order = order_from_row(
        {
            "id": "x",
            "store_id": "store-1",
            "total_value": 600,
            "shipment_date": "2025-11",
            "installments": [
                {"month": "2025-12", "value": 300},
                {"month": "2026-01", "value": 300},
            ],
        }
    )
    assert order.installments == {1: 300.0, 2: 300.0}
    assert order.created_at is None


def test_order_input_to_row() -> None:
    """Test the insert payload sent for a new order."""
    order_input = OrderInput(
        brand="Moleca",
        total_value=600.0,
        shipment_date=date(2025, 11, 14),
        payment_terms="30/60",
        created_by_role="COMPRADOR",
    )
    row = order_input_to_row(order_input, "store-2", {1: 300.0, 2: 300.0})

    assert row["store_id"] == "store-2"
    assert row["shipment_date"] == "2025-11-01"
    assert row["installments"] == {"1": 300.0, "2": 300.0}
    assert row["created_by_role"] == "BUYER"
    assert row["status"] == "pending"


def test_setting_and_debt_rows() -> None:
    """Test mapping settings and debts rows."""
    setting = setting_from_row({"store_id": 5, "budget_value": "10000", "manager_percent": 30})
    assert setting.store_id == "5"
    assert setting.monthly_budget_value == 10000.0
    assert setting.buyer_percent == 70

    debt = debt_from_row({"id": 9, "store_id": "5", "month": "2026-02-01", "value": 150.5})
    assert debt.id == "9"
    assert debt.month == "2026-02"
    assert debt.value == 150.5

    unset = setting_from_row({"store_id": "6", "budget_value": 10000, "manager_percent": None})
    assert unset.manager_percent == 30
    assert unset.buyer_percent == 70

    explicit_zero = setting_from_row({"store_id": "7", "budget_value": 10000, "manager_percent": 0})
    assert explicit_zero.manager_percent == 0


def test_created_at_is_normalized_to_utc() -> None:
    """Test naive timestamps are read as UTC, aware ones are kept."""
    naive = Order(
        id="a",
        store_id="store-1",
        brand="Vizzano",
        total_value=100.0,
        shipment_date=date(2025, 11, 1),
        created_at=datetime(2025, 10, 20, 13, 45),
    )
    assert naive.created_at == datetime(2025, 10, 20, 13, 45, tzinfo=timezone.utc)

    row = order_from_row(
        {
            "id": "b",
            "store_id": "store-1",
            "total_value": 100,
            "shipment_date": "2025-11",
            "created_at": "2025-10-20T13:45:00",
        }
    )
    assert row.created_at.tzinfo is not None
    assert row.created_at == naive.created_at
