"""Public API for quota tracking.

QuotaService composes a persistence collaborator with the pure allocation,
lifecycle and ledger functions. Each ledger query fetches a fresh snapshot
of orders, settings and debts and recomputes from scratch; the service keeps
no state of its own besides its collaborators.

This module:
- does NOT retry failed storage calls (the repository's session may),
- does NOT print (logging only),
- raises the domain exceptions from quota_core.exceptions.

Example:
    >>> from datetime import date
    >>> from quota_core import QuotaService, OrderInput, Role
    >>> from quota_core.store import InMemoryRepository
    >>>
    >>> service = QuotaService(InMemoryRepository())
    >>> service.settings.upsert_setting("store-1", 10000.0, 30)
    >>> orders, warnings = service.create_orders(
    ...     OrderInput(brand="Vizzano", total_value=9000.0,
    ...                shipment_date=date(2025, 11, 1), payment_terms="90/120/150",
    ...                created_by_role=Role.BUYER),
    ...     store_ids=["store-1"],
    ... )
    >>> service.store_ledger_frame("store-1", date(2026, 2, 1)).head()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

import pandas as pd

from quota_core.budget import BudgetSettingsManager, DebtManager
from quota_core.config import QuotaConfig
from quota_core.exceptions import AdmissionDeclined
from quota_core.ledger import LedgerRow, chain_ledger, ledger_frame, ledger_window
from quota_core.lifecycle import find_order, reactivate, validate
from quota_core.models import Order, OrderInput, normalize_role
from quota_core.orders import check_admission, validate_order_input
from quota_core.store.base import QuotaRepository
from quota_core.window import MonthLike

logger = logging.getLogger(__name__)


class QuotaService:
    """Order entry, lifecycle and ledger queries over a repository.

    Args:
        repository: Persistence collaborator for orders, settings and debts.
        config: Business parameters. Defaults to QuotaConfig().
    """

    def __init__(self, repository: QuotaRepository, config: Optional[QuotaConfig] = None) -> None:
        self.repository = repository
        self.config = config or QuotaConfig()
        self.settings = BudgetSettingsManager(repository)
        self.debts = DebtManager(repository)

    # Order entry

    def create_orders(
        self,
        order_input: OrderInput,
        store_ids: Sequence[str],
        confirm_warnings: bool = True,
    ) -> tuple[list[Order], list[str]]:
        """Register one copy of an order for each target store.

        Args:
            order_input: Order fields shared by all copies.
            store_ids: Stores to register the order for.
            confirm_warnings: Whether negative-balance warnings are accepted.
                When False and warnings exist, nothing is created.

        Returns:
            Tuple of (created orders, negative-balance warnings).

        Raises:
            ValidationError: If the order value or brand is invalid.
            MissingBudgetError: If a target store has no budget configured.
            BudgetExceededError: If a store-month would pass the overdraft limit.
            AdmissionDeclined: If warnings exist and confirm_warnings is False.
        """
        validate_order_input(order_input)

        admission = check_admission(
            order_input,
            store_ids,
            orders=self.repository.list_orders(),
            settings=self.repository.list_settings(),
            debts=self.repository.list_debts(),
            config=self.config,
        )
        if admission.warnings and not confirm_warnings:
            raise AdmissionDeclined(admission.warnings)
        for warning in admission.warnings:
            logger.warning(warning)

        created = [
            self.repository.create_order(order_input, store_id, admission.installments)
            for store_id in store_ids
        ]
        role = normalize_role(order_input.created_by_role).value
        logger.info(f"Registered {len(created)} order(s) for {order_input.brand} ({role} share)")
        return created, admission.warnings

    # Lifecycle

    def get_order(self, order_id: str) -> Order:
        """Fetch one order. Raises OrderNotFoundError if it does not exist."""
        return find_order(self.repository.list_orders(), order_id)

    def validate_order(self, order_id: str) -> Order:
        """Mark an order as validated (goods received / order confirmed)."""
        order = self.get_order(order_id)
        target = validate(order)
        if target is order:
            return order
        logger.info(f"Validated order {order_id} ({order.brand})")
        return self.repository.update_order_status(order_id, target.status)

    def reactivate_order(self, order_id: str) -> Order:
        """Move a validated order back to pending."""
        order = self.get_order(order_id)
        target = reactivate(order)
        if target is order:
            return order
        logger.info(f"Reactivated order {order_id} ({order.brand})")
        return self.repository.update_order_status(order_id, target.status)

    def delete_order(self, order_id: str) -> None:
        """Remove an order from all further ledger computations."""
        self.repository.delete_order(order_id)
        logger.info(f"Deleted order {order_id}")

    # Ledger

    def store_ledger(self, store_id: str, reference_date: MonthLike) -> list[LedgerRow]:
        """Projection window of ledger rows for one store."""
        return ledger_window(
            store_id,
            reference_date,
            self.repository.list_orders(store_id),
            self.repository.get_setting(store_id),
            self.repository.list_debts(store_id),
            months=self.config.projection_months,
            default_manager_percent=self.config.default_manager_percent,
        )

    def store_ledger_frame(self, store_id: str, reference_date: MonthLike) -> pd.DataFrame:
        """store_ledger() as a DataFrame."""
        return ledger_frame(self.store_ledger(store_id, reference_date))

    def chain_ledger_frame(self, store_ids: Sequence[str], reference_date: MonthLike) -> pd.DataFrame:
        """Projection windows of several stores in one DataFrame."""
        rows = chain_ledger(
            store_ids,
            reference_date,
            self.repository.list_orders(),
            self.repository.list_settings(),
            self.repository.list_debts(),
            months=self.config.projection_months,
            default_manager_percent=self.config.default_manager_percent,
        )
        return ledger_frame(rows)
