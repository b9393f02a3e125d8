"""Domain types for purchase quotas, budget settings and debts.

Records are immutable dataclasses. Role and status values coming from the
hosted store or from user input are normalized here, at the boundary, so the
ledger only ever compares canonical enum members.

Row mapping helpers translate between these types and the snake_case rows of
the hosted store tables (cotas, cota_settings, cota_debts).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

import pandas as pd

from quota_core.exceptions import ValidationError
from quota_core.installments import installment_keys_to_int, parse_payment_terms
from quota_core.window import format_month, month_offset, parse_month


class Role(str, Enum):
    """Budget share an order draws against."""

    BUYER = "BUYER"
    MANAGER = "MANAGER"


class OrderStatus(str, Enum):
    """Workflow status of an order. Both states consume budget."""

    PENDING = "pending"
    VALIDATED = "validated"


ALL_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.VALIDATED})

# Manager share used when a store has no setting or the setting leaves it unset
DEFAULT_MANAGER_PERCENT = 30

# Orders entered from the admin screen belong to the buyer share
ROLE_ALIASES = {
    "BUYER": Role.BUYER,
    "COMPRADOR": Role.BUYER,
    "ADMIN": Role.BUYER,
    "MANAGER": Role.MANAGER,
    "GERENTE": Role.MANAGER,
}

# ABERTA is the legacy "open" status written by older dashboard versions
STATUS_ALIASES = {
    "PENDING": OrderStatus.PENDING,
    "ABERTA": OrderStatus.PENDING,
    "VALIDATED": OrderStatus.VALIDATED,
}


def normalize_role(value: Role | str | None) -> Role:
    """Resolve a role value or alias to a canonical Role.

    Args:
        value: Role member, alias string (case-insensitive) or None.
            None and blank strings map to Role.BUYER.

    Raises:
        ValidationError: If the value is not a known role or alias.
    """
    if isinstance(value, Role):
        return value
    if value is None or not str(value).strip():
        return Role.BUYER
    key = str(value).strip().upper()
    if key not in ROLE_ALIASES:
        raise ValidationError(f"Unknown role '{value}'. Expected one of {sorted(ROLE_ALIASES)}")
    return ROLE_ALIASES[key]


def normalize_status(value: OrderStatus | str | None) -> OrderStatus:
    """Resolve a status value to a canonical OrderStatus (None -> pending)."""
    if isinstance(value, OrderStatus):
        return value
    if value is None or not str(value).strip():
        return OrderStatus.PENDING
    key = str(value).strip().upper()
    if key not in STATUS_ALIASES:
        raise ValidationError(f"Unknown order status '{value}'")
    return STATUS_ALIASES[key]


@dataclass(frozen=True)
class OrderInput:
    """Caller-supplied fields of a new order.

    The store assigns id, created_at and status when the order is created;
    installments are derived from payment_terms.
    """

    brand: str
    total_value: float
    shipment_date: date
    payment_terms: str
    created_by_role: Role = Role.BUYER
    classification: str = ""
    pairs: int = 0
    store_id: Optional[str] = None

    @property
    def payment_terms_days(self) -> list[int]:
        return parse_payment_terms(self.payment_terms)


@dataclass(frozen=True)
class Order:
    """A purchase commitment ("cota") against a store's monthly budget.

    Attributes:
        id: Store-assigned identifier.
        store_id: Store whose budget the order consumes.
        brand: Supplier brand (free text).
        classification: "Group - SubGroup" category label (free text).
        total_value: Committed value.
        shipment_date: First day of the shipment month (amortization epoch).
        payment_terms: Raw term string as typed.
        installments: {month_offset: amount} derived from the terms.
        created_at: Creation timestamp.
        created_by_role: Budget share the order draws against.
        status: Workflow status.
        pairs: Informational pair count.
    """

    id: str
    store_id: str
    brand: str
    total_value: float
    shipment_date: date
    payment_terms: str = ""
    installments: dict[int, float] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    created_by_role: Role = Role.BUYER
    status: OrderStatus = OrderStatus.PENDING
    classification: str = ""
    pairs: int = 0

    def __post_init__(self) -> None:
        # Persisted installments come back keyed by offset strings ("3")
        object.__setattr__(self, "installments", installment_keys_to_int(self.installments))
        object.__setattr__(self, "created_at", _as_utc(self.created_at))

    @property
    def payment_terms_days(self) -> list[int]:
        return parse_payment_terms(self.payment_terms)

    @property
    def shipment_month(self) -> str:
        return format_month(self.shipment_date)

    def installment_for(self, month: str) -> float:
        """Amount this order pays in the given month (0 outside its terms)."""
        offset = month_offset(self.shipment_date, month)
        if offset < 0:
            return 0.0
        return self.installments.get(offset, 0.0)


@dataclass(frozen=True)
class BudgetSetting:
    """Monthly budget of a store and its manager/buyer split."""

    store_id: str
    monthly_budget_value: float
    manager_percent: int

    @property
    def buyer_percent(self) -> int:
        return 100 - self.manager_percent


@dataclass(frozen=True)
class Debt:
    """Manual deduction against one store-month budget."""

    store_id: str
    month: str
    value: float
    id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "month", format_month(self.month))


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken as UTC so orders from any source sort together."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    return _as_utc(pd.Timestamp(value).to_pydatetime())


def _parse_installments(raw: Any, shipment_date: date) -> dict[int, float]:
    # Older rows carry [{"month": "YYYY-MM", "value": x}, ...] instead of offsets
    if isinstance(raw, list):
        result: dict[int, float] = {}
        for entry in raw:
            offset = month_offset(shipment_date, entry["month"])
            result[offset] = result.get(offset, 0.0) + float(entry["value"])
        return result
    return installment_keys_to_int(raw)


def order_from_row(row: Mapping[str, Any]) -> Order:
    """Build an Order from a cotas table row."""
    shipment_date = parse_month(row["shipment_date"])
    return Order(
        id=str(row["id"]),
        store_id=str(row["store_id"]),
        brand=row.get("brand") or "",
        classification=row.get("classification") or "",
        total_value=float(row.get("total_value") or 0.0),
        shipment_date=shipment_date,
        payment_terms=row.get("payment_terms") or "",
        pairs=int(row.get("pairs") or 0),
        installments=_parse_installments(row.get("installments"), shipment_date),
        created_at=_parse_timestamp(row.get("created_at")),
        created_by_role=normalize_role(row.get("created_by_role")),
        status=normalize_status(row.get("status")),
    )


def order_input_to_row(
    order_input: OrderInput,
    store_id: str,
    installments: Mapping[int, float],
) -> dict[str, Any]:
    """Build a cotas insert payload; installments are keyed by offset strings."""
    return {
        "store_id": store_id,
        "brand": order_input.brand,
        "classification": order_input.classification,
        "total_value": order_input.total_value,
        "shipment_date": parse_month(order_input.shipment_date).isoformat(),
        "payment_terms": order_input.payment_terms,
        "pairs": order_input.pairs,
        "installments": {str(offset): value for offset, value in installments.items()},
        "created_by_role": normalize_role(order_input.created_by_role).value,
        "status": OrderStatus.PENDING.value,
    }


def setting_from_row(row: Mapping[str, Any]) -> BudgetSetting:
    """Build a BudgetSetting from a cota_settings row."""
    return BudgetSetting(
        store_id=str(row["store_id"]),
        monthly_budget_value=float(row.get("budget_value") or 0.0),
        manager_percent=(
            DEFAULT_MANAGER_PERCENT
            if row.get("manager_percent") is None
            else int(row["manager_percent"])
        ),
    )


def debt_from_row(row: Mapping[str, Any]) -> Debt:
    """Build a Debt from a cota_debts row."""
    return Debt(
        id=str(row["id"]) if row.get("id") is not None else None,
        store_id=str(row["store_id"]),
        month=format_month(row["month"]),
        value=float(row.get("value") or 0.0),
    )
