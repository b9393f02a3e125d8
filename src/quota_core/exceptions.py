"""Domain-specific exceptions for Quota Core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from QuotaAPIError for easy catching.
"""

from __future__ import annotations


class QuotaAPIError(Exception):
    """Base exception for all Quota Core errors.

    This is the base class for all domain-specific exceptions in the package.
    Users can catch this exception to handle any Quota Core error.
    """

    pass


class ConfigError(QuotaAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Required configuration is missing (e.g. store URL or API key)
    """

    pass


class ValidationError(QuotaAPIError):
    """Raised when input fails boundary validation.

    This exception is raised when:
    - An order has a non-positive total value or an empty brand
    - A role or status value cannot be normalized
    - A month label is not in YYYY-MM format
    """

    pass


class OrderNotFoundError(QuotaAPIError):
    """Raised when a lifecycle operation targets an unknown order.

    Never silently ignored: a missing order may mean a lost financial
    commitment.
    """

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order '{order_id}' not found")
        self.order_id = order_id


class MissingBudgetError(QuotaAPIError):
    """Raised when an order targets stores with no monthly budget configured."""

    def __init__(self, store_ids: list[str]) -> None:
        joined = ", ".join(store_ids)
        super().__init__(f"Cannot register order: no budget configured for store(s) {joined}")
        self.store_ids = store_ids


class BudgetExceededError(QuotaAPIError):
    """Raised when an order would push a store-month past the overdraft limit.

    Attributes:
        store_id: Store whose budget would be exceeded.
        month: Month label (YYYY-MM) where the limit is crossed.
        budget: Configured monthly budget value.
        projected_usage: Usage including the new order.
    """

    def __init__(self, store_id: str, month: str, budget: float, projected_usage: float) -> None:
        super().__init__(
            f"Order blocked: store {store_id} in {month} would use {projected_usage:.2f} "
            f"against a budget of {budget:.2f}, beyond the allowed overdraft"
        )
        self.store_id = store_id
        self.month = month
        self.budget = budget
        self.projected_usage = projected_usage


class AdmissionDeclined(QuotaAPIError):
    """Raised when an order would leave a negative balance and the caller
    did not confirm the warnings.
    """

    def __init__(self, warnings: list[str]) -> None:
        super().__init__("Order would leave a negative balance: " + "; ".join(warnings))
        self.warnings = warnings


class PersistenceError(QuotaAPIError):
    """Raised when the hosted data store rejects a request.

    This exception is raised when:
    - The store returns a non-2xx HTTP status
    - The store returns an unexpected payload
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
