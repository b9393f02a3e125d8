"""Shared fixtures for quota_core tests."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from quota_core.installments import allocate_installments, parse_payment_terms
from quota_core.models import BudgetSetting, Debt, Order, OrderStatus, Role


@pytest.fixture
def make_order():
    """Factory building orders with installments derived from their terms."""
    counter = {"n": 0}

    def _make(
        store_id: str = "store-1",
        total_value: float = 9000.0,
        shipment_date: date = date(2025, 11, 1),
        payment_terms: str = "90/120/150",
        role: Role = Role.BUYER,
        status: OrderStatus = OrderStatus.PENDING,
        brand: str = "Vizzano",
        classification: str = "Feminino - Sandália",
        created_at: datetime | None = None,
        order_id: str | None = None,
    ) -> Order:
        counter["n"] += 1
        return Order(
            id=order_id or f"order-{counter['n']}",
            store_id=store_id,
            brand=brand,
            classification=classification,
            total_value=total_value,
            shipment_date=shipment_date,
            payment_terms=payment_terms,
            installments=allocate_installments(total_value, parse_payment_terms(payment_terms)),
            created_at=created_at or datetime(2025, 10, counter["n"] % 28 + 1, 12, 0),
            created_by_role=role,
            status=status,
        )

    return _make


@pytest.fixture
def setting() -> BudgetSetting:
    return BudgetSetting(store_id="store-1", monthly_budget_value=10000.0, manager_percent=30)


@pytest.fixture
def debt() -> Debt:
    return Debt(store_id="store-1", month="2026-02", value=2000.0, id="debt-1")
