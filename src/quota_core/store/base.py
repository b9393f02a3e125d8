"""Repository protocol consumed by QuotaService."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional, Protocol

from quota_core.models import BudgetSetting, Debt, Order, OrderInput, OrderStatus


class QuotaRepository(Protocol):
    """Storage surface for orders, budget settings and debts.

    Implementations assign order ids and creation timestamps, create orders
    as pending, and raise OrderNotFoundError for status updates or deletes
    of unknown orders. Storage failures propagate to the caller.
    """

    def list_orders(self, store_id: Optional[str] = None) -> list[Order]: ...

    def create_order(
        self,
        order_input: OrderInput,
        store_id: str,
        installments: Mapping[int, float],
    ) -> Order: ...

    def update_order_status(self, order_id: str, status: OrderStatus) -> Order: ...

    def delete_order(self, order_id: str) -> None: ...

    def get_setting(self, store_id: str) -> Optional[BudgetSetting]: ...

    def list_settings(self) -> list[BudgetSetting]: ...

    def upsert_setting(
        self, store_id: str, monthly_budget_value: float, manager_percent: int
    ) -> BudgetSetting: ...

    def list_debts(self, store_id: Optional[str] = None) -> list[Debt]: ...

    def upsert_debts(self, store_id: str, values_by_month: Mapping[str, float]) -> None: ...

    def delete_debt(self, debt_id: str) -> None: ...
