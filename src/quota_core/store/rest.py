"""REST repository for the hosted data store.

The dashboard keeps its data in a hosted Postgres exposed through a
PostgREST-style API (one endpoint per table under /rest/v1/). This module
maps the quota tables onto QuotaRepository:

    cotas          -> Order
    cota_settings  -> BudgetSetting (unique on store_id)
    cota_debts     -> Debt (unique on store_id, month)

Transient HTTP failures on idempotent requests are retried by the session;
everything else propagates to the caller. Non-2xx responses raise
PersistenceError.

Examples:
    >>> from quota_core.config import StoreConfig
    >>> repo = RestRepository(StoreConfig.from_env())
    >>> orders = repo.list_orders("store-1")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from quota_core.config import DEFAULT_RETRIES, DEFAULT_TIMEOUT, StoreConfig
from quota_core.exceptions import OrderNotFoundError, PersistenceError
from quota_core.models import (
    BudgetSetting,
    Debt,
    Order,
    OrderInput,
    OrderStatus,
    debt_from_row,
    order_from_row,
    order_input_to_row,
    setting_from_row,
)
from quota_core.window import format_month

logger = logging.getLogger(__name__)

ORDERS_TABLE = "cotas"
SETTINGS_TABLE = "cota_settings"
DEBTS_TABLE = "cota_debts"


def make_session(
    timeout: float = DEFAULT_TIMEOUT, retries: int = DEFAULT_RETRIES
) -> requests.Session:
    """Create a requests Session with retry logic and default timeout.

    Configures the session with:
    - Retry adapter for HTTP/HTTPS with exponential backoff
    - Retries only idempotent methods, on 429, 500, 502, 503, 504
    - Default timeout for all requests

    Args:
        timeout: Default timeout in seconds for all requests.
        retries: Number of retry attempts.

    Returns:
        Configured requests.Session object.
    """
    s = requests.Session()
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=0.8,  # 0.8, 1.6, 3.2, ...
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "HEAD", "OPTIONS", "DELETE"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    # Default timeouts via a wrapper
    orig_request = s.request

    def timed_request(method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return orig_request(method, url, **kwargs)

    s.request = timed_request  # type: ignore[method-assign,assignment]
    return s


class RestRepository:
    """QuotaRepository backed by the hosted PostgREST store.

    Args:
        config: Store URL, key, timeout and retry settings.
        session: Optional pre-built session (defaults to make_session()).
    """

    def __init__(self, config: StoreConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session or make_session(config.timeout, config.retries)
        self.session.headers.update(
            {
                "apikey": config.api_key,
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, str]] = None,
        payload: Any = None,
        prefer: str = "return=representation",
    ) -> list[dict[str, Any]]:
        url = f"{self.config.rest_url}/{table}"
        logger.debug(f"{method} {url} params={params}")
        resp = self.session.request(
            method, url, params=params, json=payload, headers={"Prefer": prefer}
        )
        if not resp.ok:
            raise PersistenceError(
                f"{method} {table} failed with HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        if not resp.content:
            return []
        data = resp.json()
        if not isinstance(data, list):
            raise PersistenceError(f"{method} {table} returned unexpected payload: {data!r}")
        return data

    # Orders

    def list_orders(self, store_id: Optional[str] = None) -> list[Order]:
        params = {"select": "*", "order": "created_at.desc"}
        if store_id is not None:
            params["store_id"] = f"eq.{store_id}"
        rows = self._request("GET", ORDERS_TABLE, params=params)
        return [order_from_row(row) for row in rows]

    def create_order(
        self,
        order_input: OrderInput,
        store_id: str,
        installments: Mapping[int, float],
    ) -> Order:
        payload = [order_input_to_row(order_input, store_id, installments)]
        rows = self._request("POST", ORDERS_TABLE, payload=payload)
        if not rows:
            raise PersistenceError(f"Insert into {ORDERS_TABLE} returned no rows")
        order = order_from_row(rows[0])
        logger.info(f"Created order {order.id} for store {store_id}")
        return order

    def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        rows = self._request(
            "PATCH",
            ORDERS_TABLE,
            params={"id": f"eq.{order_id}"},
            payload={"status": status.value},
        )
        if not rows:
            raise OrderNotFoundError(order_id)
        return order_from_row(rows[0])

    def delete_order(self, order_id: str) -> None:
        rows = self._request("DELETE", ORDERS_TABLE, params={"id": f"eq.{order_id}"})
        if not rows:
            raise OrderNotFoundError(order_id)

    # Budget settings

    def get_setting(self, store_id: str) -> Optional[BudgetSetting]:
        rows = self._request(
            "GET", SETTINGS_TABLE, params={"select": "*", "store_id": f"eq.{store_id}"}
        )
        return setting_from_row(rows[0]) if rows else None

    def list_settings(self) -> list[BudgetSetting]:
        rows = self._request("GET", SETTINGS_TABLE, params={"select": "*"})
        return [setting_from_row(row) for row in rows]

    def upsert_setting(
        self, store_id: str, monthly_budget_value: float, manager_percent: int
    ) -> BudgetSetting:
        payload = [
            {
                "store_id": store_id,
                "budget_value": monthly_budget_value,
                "manager_percent": manager_percent,
            }
        ]
        rows = self._request(
            "POST",
            SETTINGS_TABLE,
            params={"on_conflict": "store_id"},
            payload=payload,
            prefer="resolution=merge-duplicates,return=representation",
        )
        if not rows:
            raise PersistenceError(f"Upsert into {SETTINGS_TABLE} returned no rows")
        return setting_from_row(rows[0])

    # Debts

    def list_debts(self, store_id: Optional[str] = None) -> list[Debt]:
        params = {"select": "*", "order": "month.asc"}
        if store_id is not None:
            params["store_id"] = f"eq.{store_id}"
        rows = self._request("GET", DEBTS_TABLE, params=params)
        return [debt_from_row(row) for row in rows]

    def upsert_debts(self, store_id: str, values_by_month: Mapping[str, float]) -> None:
        if not values_by_month:
            return
        payload = [
            {"store_id": store_id, "month": format_month(month), "value": value}
            for month, value in values_by_month.items()
        ]
        self._request(
            "POST",
            DEBTS_TABLE,
            params={"on_conflict": "store_id,month"},
            payload=payload,
            prefer="resolution=merge-duplicates,return=minimal",
        )

    def delete_debt(self, debt_id: str) -> None:
        rows = self._request("DELETE", DEBTS_TABLE, params={"id": f"eq.{debt_id}"})
        if not rows:
            logger.warning(f"Debt {debt_id} not found; nothing deleted")
