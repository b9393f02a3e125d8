"""Example: Quota ledger for one store

This example registers a few orders against a store budget and prints the
12-month availability ledger, before and after validating and deleting
orders.

It runs against the in-memory repository. To use the hosted store instead,
set QUOTA_STORE_URL and QUOTA_STORE_KEY and swap the repository:

    from quota_core import StoreConfig
    from quota_core.store import RestRepository
    repository = RestRepository(StoreConfig.from_env())
"""

import logging
from datetime import date

from quota_core import OrderInput, QuotaService, Role
from quota_core.orders import category_totals
from quota_core.store import InMemoryRepository

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

service = QuotaService(InMemoryRepository())

# Budget: 10.000 per month, 30% for the store manager
service.settings.upsert_setting("loja-01", 10000.0, 30)
service.debts.upsert_debts("loja-01", {"2026-02": 2000.0})

# Buyer order paid at 90/120/150 days
(buyer_order,), _ = service.create_orders(
    OrderInput(
        brand="Vizzano",
        classification="Feminino - Sandália",
        total_value=9000.0,
        shipment_date=date(2025, 11, 1),
        payment_terms="90/120/150",
        created_by_role=Role.BUYER,
        pairs=240,
    ),
    store_ids=["loja-01"],
)

# Manager order paid at 60/90 days
(manager_order,), warnings = service.create_orders(
    OrderInput(
        brand="Moleca",
        classification="Feminino - Rasteira",
        total_value=3000.0,
        shipment_date=date(2025, 12, 1),
        payment_terms="60/90",
        created_by_role="GERENTE",
    ),
    store_ids=["loja-01"],
)
for warning in warnings:
    print(f"Warning: {warning}")

columns = ["month", "net_budget", "available_buyer", "available_manager", "total_available"]

print("\nLedger (next 12 months):")
print(service.store_ledger_frame("loja-01", date(2026, 1, 1))[columns])

# Goods received: validation changes the status, not the budget consumption
service.validate_order(buyer_order.id)
ledger = service.store_ledger_frame("loja-01", date(2026, 1, 1))
print("\nValidated buyer installments per month:")
print(ledger[["month", "validated_buyer_total", "pending_buyer_total"]])

# Deleting an order releases its installments
service.delete_order(manager_order.id)
print("\nLedger after deleting the manager order:")
print(service.store_ledger_frame("loja-01", date(2026, 1, 1))[columns])

print("\nCommitted value per category:")
print(category_totals(service.repository.list_orders("loja-01")))
