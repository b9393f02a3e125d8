"""Budget settings and debt accessors.

Thin wrappers over the repository for the two small keyed records the ledger
consumes. Both use create-or-replace semantics and keep no history. Values
are not range-checked here: a manager_percent outside 0-100 or a negative
debt is stored as given.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from quota_core.models import BudgetSetting, Debt
from quota_core.store.base import QuotaRepository

logger = logging.getLogger(__name__)


class BudgetSettingsManager:
    """Per-store monthly budget and manager/buyer split."""

    def __init__(self, repository: QuotaRepository) -> None:
        self.repository = repository

    def get_setting(self, store_id: str) -> Optional[BudgetSetting]:
        return self.repository.get_setting(store_id)

    def list_settings(self) -> list[BudgetSetting]:
        return self.repository.list_settings()

    def upsert_setting(
        self, store_id: str, monthly_budget_value: float, manager_percent: int
    ) -> BudgetSetting:
        """Replace the budget setting of a store.

        Args:
            store_id: Store to configure.
            monthly_budget_value: Monthly spending allowance.
            manager_percent: Manager share in percent; the rest is the buyer's.

        Returns:
            The stored BudgetSetting.
        """
        logger.info(
            f"Setting budget for store {store_id}: {monthly_budget_value} "
            f"({manager_percent}% manager)"
        )
        return self.repository.upsert_setting(store_id, monthly_budget_value, manager_percent)


class DebtManager:
    """Manually recorded deductions per store and month."""

    def __init__(self, repository: QuotaRepository) -> None:
        self.repository = repository

    def list_debts(self, store_id: Optional[str] = None) -> list[Debt]:
        return self.repository.list_debts(store_id)

    def debts_by_month(self, store_id: str) -> dict[str, float]:
        """Debt values of a store keyed by YYYY-MM."""
        return {debt.month: debt.value for debt in self.repository.list_debts(store_id)}

    def upsert_debts(self, store_id: str, values_by_month: Mapping[str, float]) -> None:
        """Insert or replace debts for the given months only.

        Months absent from values_by_month keep their current debt.
        """
        logger.info(f"Upserting {len(values_by_month)} debt month(s) for store {store_id}")
        self.repository.upsert_debts(store_id, values_by_month)

    def delete_debt(self, debt_id: str) -> None:
        logger.info(f"Deleting debt {debt_id}")
        self.repository.delete_debt(debt_id)
