"""Budget ledger: month-by-month, role-by-role availability per store.

Every figure is recomputed from the order, setting and debt snapshots passed
in. Nothing is cached between calls, so the result is correct after any
mutation (new, validated, reactivated or deleted orders; changed settings or
debts) as long as the caller supplies a fresh snapshot.

Budget arithmetic for one store and month:

    net_budget      = gross_budget - debt_value        (may be negative)
    buyer_share     = net_budget * (100 - manager_percent) / 100
    manager_share   = net_budget * manager_percent / 100
    available_<r>   = max(0, <r>_share - consumed(<r>, pending + validated))
    total_available = net_budget - consumed(all roles)  (not clamped)

Per-role availability is floored at zero while the store total is not, so
over-commitment shows up as a negative total.

Examples:
    >>> from quota_core.ledger import ledger_window, ledger_frame
    >>> rows = ledger_window("store-1", "2025-11", orders, setting, debts)
    >>> ledger_frame(rows)[["month", "available_buyer", "total_available"]]
"""

from __future__ import annotations

import dataclasses
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from quota_core.models import (
    ALL_STATUSES,
    DEFAULT_MANAGER_PERCENT,
    BudgetSetting,
    Debt,
    Order,
    OrderStatus,
    Role,
)
from quota_core.window import MonthLike, format_month, projection_window


@dataclass(frozen=True)
class LedgerRow:
    """Derived availability figures for one store and one month.

    Attributes:
        store_id: Store the row belongs to.
        month: Month label (YYYY-MM).
        gross_budget: Configured monthly budget (0 without a setting).
        debt_value: Debt recorded for the month (0 without a debt).
        net_budget: gross_budget - debt_value, unclamped.
        manager_percent: Manager share percentage applied.
        buyer_share: Buyer portion of net_budget.
        manager_share: Manager portion of net_budget.
        consumed_buyer: Buyer installments due this month, all statuses.
        consumed_manager: Manager installments due this month, all statuses.
        pending_buyer_total: Buyer installments of pending orders (display only).
        pending_manager_total: Manager installments of pending orders (display only).
        validated_buyer_total: Buyer installments of validated orders (display only).
        validated_manager_total: Manager installments of validated orders (display only).
        available_buyer: Buyer room left, floored at 0.
        available_manager: Manager room left, floored at 0.
        total_available: Store room left, negative when over-committed.
    """

    store_id: str
    month: str
    gross_budget: float
    debt_value: float
    net_budget: float
    manager_percent: int
    buyer_share: float
    manager_share: float
    consumed_buyer: float
    consumed_manager: float
    pending_buyer_total: float
    pending_manager_total: float
    validated_buyer_total: float
    validated_manager_total: float
    available_buyer: float
    available_manager: float
    total_available: float


LEDGER_COLUMNS = [f.name for f in dataclasses.fields(LedgerRow)]


def consumed(
    orders: Iterable[Order],
    store_id: str,
    month: MonthLike,
    role: Role,
    statuses: Collection[OrderStatus] = ALL_STATUSES,
) -> float:
    """Sum of installments due in a month for one store, role and status set."""
    label = format_month(month)
    total = 0.0
    for order in orders:
        if order.store_id != store_id:
            continue
        if order.created_by_role != role or order.status not in statuses:
            continue
        total += order.installment_for(label)
    return total


def projection(
    store_id: str,
    month: MonthLike,
    orders: Iterable[Order],
    setting: Optional[BudgetSetting],
    debt: Optional[Debt],
    default_manager_percent: int = DEFAULT_MANAGER_PERCENT,
) -> LedgerRow:
    """Compute the ledger row for one store and month.

    Missing settings or debts count as zero; this function never raises for
    absent configuration.

    Args:
        store_id: Store to compute.
        month: Target month.
        orders: Order snapshot (may contain other stores; they are skipped).
        setting: The store's budget setting, or None.
        debt: The store's debt for this month, or None.
        default_manager_percent: Split used when setting is None.

    Returns:
        LedgerRow with all derived figures.
    """
    label = format_month(month)
    orders = list(orders)

    gross_budget = setting.monthly_budget_value if setting is not None else 0.0
    manager_percent = setting.manager_percent if setting is not None else default_manager_percent
    debt_value = debt.value if debt is not None else 0.0
    net_budget = gross_budget - debt_value

    buyer_share = net_budget * (100 - manager_percent) / 100
    manager_share = net_budget * manager_percent / 100

    pending = {OrderStatus.PENDING}
    validated = {OrderStatus.VALIDATED}
    pending_buyer = consumed(orders, store_id, label, Role.BUYER, pending)
    pending_manager = consumed(orders, store_id, label, Role.MANAGER, pending)
    validated_buyer = consumed(orders, store_id, label, Role.BUYER, validated)
    validated_manager = consumed(orders, store_id, label, Role.MANAGER, validated)
    consumed_buyer = pending_buyer + validated_buyer
    consumed_manager = pending_manager + validated_manager

    return LedgerRow(
        store_id=store_id,
        month=label,
        gross_budget=gross_budget,
        debt_value=debt_value,
        net_budget=net_budget,
        manager_percent=manager_percent,
        buyer_share=buyer_share,
        manager_share=manager_share,
        consumed_buyer=consumed_buyer,
        consumed_manager=consumed_manager,
        pending_buyer_total=pending_buyer,
        pending_manager_total=pending_manager,
        validated_buyer_total=validated_buyer,
        validated_manager_total=validated_manager,
        available_buyer=max(0.0, buyer_share - consumed_buyer),
        available_manager=max(0.0, manager_share - consumed_manager),
        total_available=net_budget - consumed_buyer - consumed_manager,
    )


def ledger_window(
    store_id: str,
    reference_date: MonthLike,
    orders: Iterable[Order],
    setting: Optional[BudgetSetting],
    debts: Iterable[Debt],
    months: int = 12,
    default_manager_percent: int = DEFAULT_MANAGER_PERCENT,
) -> list[LedgerRow]:
    """Compute ledger rows for every month of the projection window.

    Args:
        store_id: Store to compute.
        reference_date: Date whose month opens the window.
        orders: Order snapshot.
        setting: The store's budget setting, or None.
        debts: Debts of any store; only this store's are used.
        months: Window length (default: 12).
        default_manager_percent: Split used when setting is None.

    Returns:
        One LedgerRow per month, in chronological order.
    """
    store_orders = [order for order in orders if order.store_id == store_id]
    debt_by_month = {debt.month: debt for debt in debts if debt.store_id == store_id}

    return [
        projection(
            store_id,
            month,
            store_orders,
            setting,
            debt_by_month.get(month),
            default_manager_percent=default_manager_percent,
        )
        for month in projection_window(reference_date, months)
    ]


def partition_by_store(orders: Iterable[Order]) -> dict[str, list[Order]]:
    """Group orders by store_id in a single pass."""
    partitions: dict[str, list[Order]] = {}
    for order in orders:
        partitions.setdefault(order.store_id, []).append(order)
    return partitions


def chain_ledger(
    store_ids: Iterable[str],
    reference_date: MonthLike,
    orders: Iterable[Order],
    settings: Iterable[BudgetSetting],
    debts: Iterable[Debt],
    months: int = 12,
    default_manager_percent: int = DEFAULT_MANAGER_PERCENT,
) -> list[LedgerRow]:
    """Compute the projection window for several stores.

    Orders are partitioned by store once, so the cost is linear in the number
    of orders times the window length rather than per store.
    """
    partitions = partition_by_store(orders)
    setting_by_store = {setting.store_id: setting for setting in settings}
    debts = list(debts)

    rows: list[LedgerRow] = []
    for store_id in store_ids:
        rows.extend(
            ledger_window(
                store_id,
                reference_date,
                partitions.get(store_id, []),
                setting_by_store.get(store_id),
                debts,
                months=months,
                default_manager_percent=default_manager_percent,
            )
        )
    return rows


def ledger_frame(rows: Iterable[LedgerRow]) -> pd.DataFrame:
    """Convert ledger rows to a DataFrame sorted by store and month.

    Returns:
        DataFrame with one column per LedgerRow field.
    """
    records = [dataclasses.asdict(row) for row in rows]
    if not records:
        return pd.DataFrame(columns=LEDGER_COLUMNS)

    df = pd.DataFrame(records, columns=LEDGER_COLUMNS)
    return df.sort_values(["store_id", "month"]).reset_index(drop=True)
