"""Smoke tests for QuotaService over the in-memory repository.

These exercise the full flow: configure budgets, register orders, move them
through the lifecycle and read the ledger back after every mutation.
"""

from datetime import date

import pytest

from quota_core import (
    AdmissionDeclined,
    BudgetExceededError,
    BudgetSetting,
    Debt,
    MissingBudgetError,
    OrderInput,
    OrderNotFoundError,
    OrderStatus,
    QuotaService,
    Role,
    ValidationError,
)
from quota_core.ledger import LEDGER_COLUMNS
from quota_core.store import InMemoryRepository

REFERENCE = date(2026, 2, 10)


def _order(total_value: float = 9000.0, role: Role = Role.BUYER, terms: str = "90/120/150"):
    return OrderInput(
        brand="Vizzano",
        classification="Feminino - Sandália",
        total_value=total_value,
        shipment_date=date(2025, 11, 1),
        payment_terms=terms,
        created_by_role=role,
        pairs=120,
    )


@pytest.fixture
def service() -> QuotaService:
    service = QuotaService(InMemoryRepository())
    service.settings.upsert_setting("store-1", 10000.0, 30)
    service.settings.upsert_setting("store-2", 8000.0, 50)
    service.debts.upsert_debts("store-1", {"2026-02": 2000.0})
    return service


def test_create_orders_fans_out_per_store(service) -> None:
    """Test one order is created per selected store."""
    orders, warnings = service.create_orders(_order(3000.0), ["store-1", "store-2"])

    assert warnings == []
    assert [o.store_id for o in orders] == ["store-1", "store-2"]
    assert all(o.status == OrderStatus.PENDING for o in orders)
    assert orders[0].installments == {3: 1000.0, 4: 1000.0, 5: 1000.0}
    assert orders[0].id != orders[1].id


def test_ledger_reflects_every_mutation(service) -> None:
    """Test the ledger is recomputed after create/validate/reactivate/delete."""
    rows = service.store_ledger("store-1", REFERENCE)
    assert rows[0].month == "2026-02"
    assert rows[0].net_budget == 8000.0
    assert rows[0].available_buyer == pytest.approx(5600.0)

    (order,), _ = service.create_orders(_order(3000.0), ["store-1"])
    row = service.store_ledger("store-1", REFERENCE)[0]
    assert row.consumed_buyer == pytest.approx(1000.0)
    assert row.available_buyer == pytest.approx(4600.0)

    service.validate_order(order.id)
    row = service.store_ledger("store-1", REFERENCE)[0]
    assert row.validated_buyer_total == pytest.approx(1000.0)
    assert row.available_buyer == pytest.approx(4600.0)

    service.reactivate_order(order.id)
    row = service.store_ledger("store-1", REFERENCE)[0]
    assert row.validated_buyer_total == 0.0
    assert row.pending_buyer_total == pytest.approx(1000.0)

    service.delete_order(order.id)
    row = service.store_ledger("store-1", REFERENCE)[0]
    assert row.consumed_buyer == 0.0
    assert row.total_available == pytest.approx(8000.0)


def test_lifecycle_is_idempotent(service) -> None:
    """Test repeated transitions are no-ops."""
    (order,), _ = service.create_orders(_order(3000.0), ["store-1"])

    first = service.validate_order(order.id)
    second = service.validate_order(order.id)
    assert first.status == second.status == OrderStatus.VALIDATED

    service.reactivate_order(order.id)
    assert service.reactivate_order(order.id).status == OrderStatus.PENDING


def test_unknown_order_operations_raise(service) -> None:
    """Test lifecycle calls on missing orders are reported."""
    with pytest.raises(OrderNotFoundError):
        service.validate_order("missing")
    with pytest.raises(OrderNotFoundError):
        service.reactivate_order("missing")
    with pytest.raises(OrderNotFoundError):
        service.delete_order("missing")


def test_invalid_orders_are_not_created(service) -> None:
    """Test validation failures leave the repository untouched."""
    with pytest.raises(ValidationError):
        service.create_orders(_order(0.0), ["store-1"])
    with pytest.raises(MissingBudgetError):
        service.create_orders(_order(100.0), ["store-3"])
    with pytest.raises(BudgetExceededError):
        service.create_orders(_order(12000.0, terms="90"), ["store-1"])

    assert service.repository.list_orders() == []


def test_warnings_need_confirmation(service) -> None:
    """Test negative-balance warnings can decline the order."""
    # Feb: 10000 budget, 2000 debt, new 9000 -> usage 11000, balance -1000
    with pytest.raises(AdmissionDeclined) as exc_info:
        service.create_orders(_order(9000.0, terms="90"), ["store-1"], confirm_warnings=False)
    assert len(exc_info.value.warnings) == 1
    assert service.repository.list_orders() == []

    orders, warnings = service.create_orders(_order(9000.0, terms="90"), ["store-1"])
    assert len(orders) == 1
    assert len(warnings) == 1

    row = service.store_ledger("store-1", REFERENCE)[0]
    assert row.total_available == pytest.approx(-1000.0)
    assert row.available_buyer == 0.0


def test_unparsable_terms_create_order_without_installments(service) -> None:
    """Test forgiving term parsing end to end."""
    (order,), _ = service.create_orders(_order(500.0, terms="a vista"), ["store-1"])

    assert order.installments == {}
    rows = service.store_ledger("store-1", REFERENCE)
    assert all(r.consumed_buyer == 0.0 for r in rows)


def test_ledger_frames(service) -> None:
    """Test DataFrame views for one store and for the chain."""
    service.create_orders(_order(3000.0, role=Role.MANAGER), ["store-2"])

    store_df = service.store_ledger_frame("store-2", REFERENCE)
    assert list(store_df.columns) == LEDGER_COLUMNS
    assert len(store_df) == 12
    assert store_df.loc[0, "consumed_manager"] == pytest.approx(1000.0)
    assert store_df.loc[0, "available_manager"] == pytest.approx(3000.0)

    chain_df = service.chain_ledger_frame(["store-1", "store-2"], REFERENCE)
    assert len(chain_df) == 24
    assert set(chain_df["store_id"]) == {"store-1", "store-2"}


def test_seeded_debt_reaches_ledger_and_admission() -> None:
    """Test debts seeded with a full date deduct in the ledger and block orders."""
    repository = InMemoryRepository(
        settings=[BudgetSetting("store-1", 10000.0, 30)],
        debts=[Debt("store-1", "2026-02-01", 2000.0)],
    )
    service = QuotaService(repository)

    row = service.store_ledger("store-1", REFERENCE)[0]
    assert row.month == "2026-02"
    assert row.debt_value == 2000.0
    assert row.net_budget == 8000.0

    # 2000 debt + 9500 order passes the 11000 overdraft limit
    with pytest.raises(BudgetExceededError):
        service.create_orders(_order(9500.0, terms="90"), ["store-1"])
