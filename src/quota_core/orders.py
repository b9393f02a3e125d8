"""Order entry checks and order listings.

Before an order is persisted it must pass boundary validation (positive
value, non-empty brand) and a budget admission check against the current
snapshot of every target store:

- a store without a positive monthly budget cannot receive orders;
- a month whose projected usage (existing installments of all roles and
  statuses, plus debt, plus the new installment) exceeds the budget by more
  than the overdraft tolerance blocks the order;
- a month left with a negative balance inside the tolerance produces a
  warning the caller must confirm.

The listing helpers reproduce the order views of the quota screen.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from quota_core.config import QuotaConfig
from quota_core.exceptions import BudgetExceededError, MissingBudgetError, ValidationError
from quota_core.installments import allocate_installments, installments_by_month
from quota_core.models import (
    BudgetSetting,
    Debt,
    Order,
    OrderInput,
    OrderStatus,
    Role,
    normalize_role,
)

logger = logging.getLogger(__name__)

# Root categories of the classification picker, in display order
CATEGORY_ROOTS = ["Feminino", "Masculino", "Infantil", "Acessórios"]
DEFAULT_SUBCATEGORY = "Geral"
CATEGORY_COLUMNS = ["category", "subcategory", "total_value"]


@dataclass
class AdmissionResult:
    """Outcome of an admission check that did not block the order.

    Attributes:
        installments: {month_offset: amount} the new order will carry.
        warnings: One message per store-month left with a negative balance.
    """

    installments: dict[int, float]
    warnings: list[str] = field(default_factory=list)


def validate_order_input(order_input: OrderInput) -> None:
    """Reject orders with a non-positive value, an empty brand or an unknown role.

    Raises:
        ValidationError: If the order must not be created.
    """
    if not order_input.brand or not order_input.brand.strip():
        raise ValidationError("Order brand must not be empty")
    if order_input.total_value is None or order_input.total_value <= 0:
        raise ValidationError(f"Order total value must be positive, got {order_input.total_value}")
    normalize_role(order_input.created_by_role)


def build_installments(
    order_input: OrderInput, config: Optional[QuotaConfig] = None
) -> dict[int, float]:
    """Allocate an order's value over month offsets from its term string."""
    config = config or QuotaConfig()
    return allocate_installments(
        order_input.total_value,
        order_input.payment_terms_days,
        days_per_month=config.days_per_month,
    )


def check_admission(
    order_input: OrderInput,
    store_ids: Sequence[str],
    orders: Iterable[Order],
    settings: Iterable[BudgetSetting],
    debts: Iterable[Debt],
    config: Optional[QuotaConfig] = None,
) -> AdmissionResult:
    """Check whether an order may be registered for the given stores.

    Args:
        order_input: The order to register (one copy per store).
        store_ids: Target stores.
        orders: Current order snapshot.
        settings: Current budget settings.
        debts: Current debts.
        config: Business parameters (overdraft tolerance, month length).

    Returns:
        AdmissionResult with the derived installments and any warnings.

    Raises:
        ValidationError: If no store is given.
        MissingBudgetError: If any target store has no positive budget.
        BudgetExceededError: If any store-month would pass the overdraft limit.
    """
    config = config or QuotaConfig()
    if not store_ids:
        raise ValidationError("Select at least one store for the order")

    setting_by_store = {setting.store_id: setting for setting in settings}
    missing = [
        store_id
        for store_id in store_ids
        if store_id not in setting_by_store
        or setting_by_store[store_id].monthly_budget_value <= 0
    ]
    if missing:
        raise MissingBudgetError(missing)

    installments = build_installments(order_input, config)
    new_by_month = installments_by_month(order_input.shipment_date, installments)

    orders = list(orders)
    debt_by_key = {(debt.store_id, debt.month): debt.value for debt in debts}
    warnings: list[str] = []

    for store_id in store_ids:
        budget = setting_by_store[store_id].monthly_budget_value
        limit = budget * (1 + config.overdraft_tolerance)
        store_orders = [order for order in orders if order.store_id == store_id]

        for month, value in new_by_month.items():
            existing = sum(order.installment_for(month) for order in store_orders)
            usage = existing + debt_by_key.get((store_id, month), 0.0)
            new_usage = usage + value
            balance = budget - new_usage

            if new_usage > limit:
                logger.warning(
                    f"Blocked order for store {store_id} in {month}: "
                    f"usage {new_usage:.2f} over limit {limit:.2f}"
                )
                raise BudgetExceededError(store_id, month, budget, new_usage)

            if balance < 0:
                warnings.append(
                    f"Store {store_id} ({month}): balance would be {balance:.2f} "
                    f"(budget {budget:.2f})"
                )

    return AdmissionResult(installments=installments, warnings=warnings)


def sort_orders(orders: Iterable[Order]) -> list[Order]:
    """Manager orders first, then newest first; undated orders last."""
    by_date = sorted(
        orders,
        key=lambda o: (o.created_at is not None, o.created_at if o.created_at is not None else 0),
        reverse=True,
    )
    return sorted(by_date, key=lambda o: 0 if o.created_by_role == Role.MANAGER else 1)


def received_orders(orders: Iterable[Order], store_id: str) -> list[Order]:
    """Validated orders of a store, newest first."""
    validated = [
        o for o in orders if o.store_id == store_id and o.status == OrderStatus.VALIDATED
    ]
    return sorted(
        validated,
        key=lambda o: (o.created_at is not None, o.created_at if o.created_at is not None else 0),
        reverse=True,
    )


def known_brands(orders: Iterable[Order]) -> list[str]:
    """Distinct non-empty brands, sorted (brand autocomplete)."""
    return sorted({order.brand for order in orders if order.brand})


def category_totals(orders: Iterable[Order]) -> pd.DataFrame:
    """Total committed value per root category and sub-category.

    Classifications follow "Group - SubGroup"; a missing sub-group counts as
    "Geral". Orders outside the known root categories are ignored.

    Returns:
        DataFrame with columns: category, subcategory, total_value
    """
    rows = []
    for order in orders:
        parts = order.classification.split(" - ")
        root = parts[0].strip()
        if root not in CATEGORY_ROOTS:
            continue
        subcategory = parts[1].strip() if len(parts) > 1 and parts[1].strip() else DEFAULT_SUBCATEGORY
        rows.append({"category": root, "subcategory": subcategory, "total_value": order.total_value})

    if not rows:
        return pd.DataFrame(columns=CATEGORY_COLUMNS)

    df = pd.DataFrame(rows)
    grouped = df.groupby(["category", "subcategory"], as_index=False)["total_value"].sum()
    grouped["_rank"] = grouped["category"].map(CATEGORY_ROOTS.index)
    grouped = grouped.sort_values(["_rank", "subcategory"]).drop(columns="_rank")
    return grouped.reset_index(drop=True)[CATEGORY_COLUMNS]
