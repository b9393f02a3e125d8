"""Configuration for Quota Core.

This module provides the two configuration objects used across the package:

- QuotaConfig: business parameters of the allocation and admission rules
- StoreConfig: connection settings for the hosted data store

Environment (optional):
  QUOTA_STORE_URL: Base URL of the hosted store (e.g. https://xyz.supabase.co)
  QUOTA_STORE_KEY: API key sent as apikey and bearer token
  QUOTA_TIMEOUT=30   # seconds
  QUOTA_RETRIES=3
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from quota_core.exceptions import ConfigError
from quota_core.models import DEFAULT_MANAGER_PERCENT

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3


@dataclass(frozen=True)
class QuotaConfig:
    """Business parameters for installment allocation and budget checks.

    Attributes:
        projection_months: Number of months in a projection window (default: 12).
        days_per_month: Commercial month length used to bucket payment terms
            into month offsets (default: 30).
        default_manager_percent: Manager share applied when a store has no
            budget setting yet (default: 30).
        overdraft_tolerance: Fraction of the monthly budget an order may
            overshoot before it is blocked (default: 0.10).
    """

    projection_months: int = 12
    days_per_month: int = 30
    default_manager_percent: int = DEFAULT_MANAGER_PERCENT
    overdraft_tolerance: float = 0.10

    def __post_init__(self) -> None:
        if self.projection_months <= 0:
            raise ConfigError(f"projection_months must be positive, got {self.projection_months}")
        if self.days_per_month <= 0:
            raise ConfigError(f"days_per_month must be positive, got {self.days_per_month}")
        if self.overdraft_tolerance < 0:
            raise ConfigError(
                f"overdraft_tolerance must not be negative, got {self.overdraft_tolerance}"
            )


@dataclass(frozen=True)
class StoreConfig:
    """Connection settings for the hosted data store.

    Attributes:
        base_url: Root URL of the store; REST tables live under /rest/v1/.
        api_key: Key sent in the apikey header and as bearer token.
        timeout: Default request timeout in seconds.
        retries: Retry attempts for transient HTTP failures.
    """

    base_url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Build a StoreConfig from QUOTA_* environment variables.

        Returns:
            StoreConfig instance.

        Raises:
            ConfigError: If QUOTA_STORE_URL or QUOTA_STORE_KEY is missing, or
                QUOTA_TIMEOUT / QUOTA_RETRIES are not numbers.

        Examples:
            >>> os.environ["QUOTA_STORE_URL"] = "https://example.supabase.co"
            >>> os.environ["QUOTA_STORE_KEY"] = "secret"
            >>> StoreConfig.from_env().rest_url
            'https://example.supabase.co/rest/v1'
        """
        base_url = os.environ.get("QUOTA_STORE_URL")
        api_key = os.environ.get("QUOTA_STORE_KEY")
        if not base_url or not api_key:
            raise ConfigError("QUOTA_STORE_URL and QUOTA_STORE_KEY must be set")

        try:
            timeout = float(os.environ.get("QUOTA_TIMEOUT", str(DEFAULT_TIMEOUT)))
            retries = int(os.environ.get("QUOTA_RETRIES", str(DEFAULT_RETRIES)))
        except ValueError as e:
            raise ConfigError(f"Invalid QUOTA_TIMEOUT/QUOTA_RETRIES value: {e}") from e

        return cls(base_url=base_url, api_key=api_key, timeout=timeout, retries=retries)

    @property
    def rest_url(self) -> str:
        """REST root for table endpoints."""
        return self.base_url.rstrip("/") + "/rest/v1"
