"""In-memory repository.

Keeps orders, settings and debts in plain dicts guarded by a lock. Used by
the test suite and for local experiments without a hosted store.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Optional

from quota_core.exceptions import OrderNotFoundError
from quota_core.lifecycle import delete_order, find_order, replace_order, transition
from quota_core.models import (
    BudgetSetting,
    Debt,
    Order,
    OrderInput,
    OrderStatus,
    normalize_role,
)
from quota_core.window import format_month, parse_month

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRepository:
    """QuotaRepository backed by process memory.

    Args:
        orders: Optional initial orders.
        settings: Optional initial budget settings.
        debts: Optional initial debts (ids are assigned when missing).
        clock: Callable returning the creation timestamp for new orders.
    """

    def __init__(
        self,
        orders: Iterable[Order] = (),
        settings: Iterable[BudgetSetting] = (),
        debts: Iterable[Debt] = (),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._orders: list[Order] = list(orders)
        self._settings: dict[str, BudgetSetting] = {s.store_id: s for s in settings}
        self._debts: dict[tuple[str, str], Debt] = {}
        for debt in debts:
            if debt.id is None:
                debt = dataclasses.replace(debt, id=self._new_id())
            self._debts[(debt.store_id, debt.month)] = debt

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    # Orders

    def list_orders(self, store_id: Optional[str] = None) -> list[Order]:
        with self._lock:
            return [o for o in self._orders if store_id is None or o.store_id == store_id]

    def create_order(
        self,
        order_input: OrderInput,
        store_id: str,
        installments: Mapping[int, float],
    ) -> Order:
        order = Order(
            id=self._new_id(),
            store_id=store_id,
            brand=order_input.brand,
            classification=order_input.classification,
            total_value=order_input.total_value,
            shipment_date=parse_month(order_input.shipment_date),
            payment_terms=order_input.payment_terms,
            pairs=order_input.pairs,
            installments=dict(installments),
            created_at=self._clock(),
            created_by_role=normalize_role(order_input.created_by_role),
            status=OrderStatus.PENDING,
        )
        with self._lock:
            self._orders.append(order)
        logger.debug(f"Created order {order.id} for store {store_id}")
        return order

    def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        with self._lock:
            updated = transition(find_order(self._orders, order_id), status)
            self._orders = replace_order(self._orders, updated)
        return updated

    def delete_order(self, order_id: str) -> None:
        with self._lock:
            self._orders = delete_order(self._orders, order_id)

    # Budget settings

    def get_setting(self, store_id: str) -> Optional[BudgetSetting]:
        with self._lock:
            return self._settings.get(store_id)

    def list_settings(self) -> list[BudgetSetting]:
        with self._lock:
            return list(self._settings.values())

    def upsert_setting(
        self, store_id: str, monthly_budget_value: float, manager_percent: int
    ) -> BudgetSetting:
        setting = BudgetSetting(
            store_id=store_id,
            monthly_budget_value=monthly_budget_value,
            manager_percent=manager_percent,
        )
        with self._lock:
            self._settings[store_id] = setting
        return setting

    # Debts

    def list_debts(self, store_id: Optional[str] = None) -> list[Debt]:
        with self._lock:
            debts = [d for d in self._debts.values() if store_id is None or d.store_id == store_id]
        return sorted(debts, key=lambda d: (d.store_id, d.month))

    def upsert_debts(self, store_id: str, values_by_month: Mapping[str, float]) -> None:
        with self._lock:
            for month, value in values_by_month.items():
                label = format_month(month)
                existing = self._debts.get((store_id, label))
                debt_id = existing.id if existing is not None else self._new_id()
                self._debts[(store_id, label)] = Debt(
                    store_id=store_id, month=label, value=value, id=debt_id
                )

    def delete_debt(self, debt_id: str) -> None:
        with self._lock:
            for key, debt in list(self._debts.items()):
                if debt.id == debt_id:
                    del self._debts[key]
                    return
        logger.warning(f"Debt {debt_id} not found; nothing deleted")
