"""Persistence collaborators for orders, budget settings and debts.

The ledger itself is pure; these repositories supply the snapshots it
computes from and apply mutations requested through QuotaService.

Module Structure:
    quota_core.store.base: QuotaRepository protocol
    quota_core.store.memory: InMemoryRepository (tests, local use)
    quota_core.store.rest: RestRepository (hosted PostgREST store)
"""

from quota_core.store.base import QuotaRepository
from quota_core.store.memory import InMemoryRepository
from quota_core.store.rest import RestRepository

__all__ = ["InMemoryRepository", "QuotaRepository", "RestRepository"]
