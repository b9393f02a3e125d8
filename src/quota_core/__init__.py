"""Quota Core - purchase quota allocation and budget ledger.

This package tracks purchase commitments ("cotas") of a retail chain
against per-store monthly budgets:

- **Allocation**: an order's value is split over future months from its
  payment terms (e.g. "90/120/150")
- **Lifecycle**: orders move between pending and validated, or are deleted
- **Ledger**: per store, month and role (buyer / manager), how much budget
  is left after debts and committed installments

Module Structure:
    quota_core.installments: Payment-term parsing and allocation
    quota_core.window: Projection window and month offsets
    quota_core.lifecycle: Order status transitions and deletion
    quota_core.ledger: Ledger rows, windows and DataFrame views
    quota_core.budget: Budget settings and debt accessors
    quota_core.orders: Order entry checks and listings
    quota_core.store: Repositories (in-memory, hosted REST store)
    quota_core.api: QuotaService facade

Quick Start:
    >>> from datetime import date
    >>> from quota_core import QuotaService, OrderInput, Role, StoreConfig
    >>> from quota_core.store import RestRepository
    >>>
    >>> service = QuotaService(RestRepository(StoreConfig.from_env()))
    >>> service.create_orders(
    ...     OrderInput(brand="Vizzano", total_value=9000.0,
    ...                shipment_date=date(2025, 11, 1), payment_terms="90/120/150",
    ...                created_by_role=Role.MANAGER),
    ...     store_ids=["store-1", "store-2"],
    ... )
    >>> ledger = service.store_ledger_frame("store-1", date.today())
    >>> print(ledger[["month", "available_buyer", "available_manager", "total_available"]])
"""

__version__ = "0.1.0"

from quota_core.api import QuotaService
from quota_core.config import QuotaConfig, StoreConfig
from quota_core.exceptions import (
    AdmissionDeclined,
    BudgetExceededError,
    ConfigError,
    MissingBudgetError,
    OrderNotFoundError,
    PersistenceError,
    QuotaAPIError,
    ValidationError,
)
from quota_core.ledger import LedgerRow
from quota_core.models import BudgetSetting, Debt, Order, OrderInput, OrderStatus, Role

__all__ = [
    "AdmissionDeclined",
    "BudgetExceededError",
    "BudgetSetting",
    "ConfigError",
    "Debt",
    "LedgerRow",
    "MissingBudgetError",
    "Order",
    "OrderInput",
    "OrderNotFoundError",
    "OrderStatus",
    "PersistenceError",
    "QuotaAPIError",
    "QuotaConfig",
    "QuotaService",
    "Role",
    "StoreConfig",
    "ValidationError",
    "__version__",
]
