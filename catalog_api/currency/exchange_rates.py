"""
==============================================================================
Exchange Rate Cache Module
==============================================================================

Read-through cache over the exchange-rate provider.

Per base currency key:

    Absent ──fetch ok──▶ Cached ──TTL elapses──▶ Absent

- Hit: stored body is parsed and its rates returned. A body that no longer
  parses counts as a miss and is re-fetched.
- Miss: the provider is called, its body stored verbatim with the TTL.
- Provider failure: RateProviderError propagates, nothing is stored.

Concurrent misses on the same key may each call the provider; entries are
replaced wholesale, never edited in place.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from catalog_api.core import exceptions
from catalog_api.currency.cache_store import CacheStore
from catalog_api.currency.rate_provider import ExchangeRateProvider


# Module logger
logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "exchange_rate_"


@dataclass(frozen=True)
class ExchangeRateSnapshot:
    """Rate table for one base currency as returned by the provider."""

    base_currency: str
    rates: Dict[str, float] = field(default_factory=dict)
    fetched_at: Optional[datetime] = None


def cache_key(base_currency: str) -> str:
    """Cache key for a base currency."""
    return f"{CACHE_KEY_PREFIX}{base_currency}"


class ExchangeRateCache:
    """
    Read-through exchange-rate cache.

    Attributes:
        _store: Injected CacheStore
        _provider: Injected ExchangeRateProvider
        _ttl: Entry lifetime in seconds

    Example:
        >>> rates = ExchangeRateCache(store, provider, ttl_seconds=3600)
        >>> rates.get_rates("EUR")["USD"]
        1.1
    """

    def __init__(self, store: CacheStore, provider: ExchangeRateProvider, ttl_seconds: int) -> None:
        self._store = store
        self._provider = provider
        self._ttl = ttl_seconds

    def get_rates(self, base_currency: str) -> Dict[str, float]:
        """
        Rates for base_currency: target code -> multiplier.

        Raises:
            RateProviderError: On a miss when the provider fails
        """
        return self.get_snapshot(base_currency).rates

    def get_snapshot(self, base_currency: str) -> ExchangeRateSnapshot:
        """
        Full snapshot for base_currency, fetched on miss.

        Raises:
            RateProviderError: On a miss when the provider fails
        """
        base = base_currency.strip().upper()
        key = cache_key(base)

        cached = self._store.get(key)
        if cached is not None:
            snapshot = self._load(base, cached)
            if snapshot is not None:
                logger.debug(f"Exchange rate cache hit: {key}")
                return snapshot
            logger.warning(f"Corrupt exchange rate cache entry {key}, re-fetching")
        else:
            logger.debug(f"Exchange rate cache miss: {key}")

        body = self._provider.fetch(base)
        snapshot = self._build_snapshot(base, body)
        self._store.set(key, body, self._ttl)
        logger.info(f"Cached exchange rates for {base} ({len(snapshot.rates)} currencies, ttl={self._ttl}s)")
        return snapshot

    def _load(self, base: str, payload: str) -> Optional[ExchangeRateSnapshot]:
        try:
            return self._build_snapshot(base, payload)
        except exceptions.RateProviderError:
            return None

    @staticmethod
    def _build_snapshot(base: str, body: str) -> ExchangeRateSnapshot:
        rates = ExchangeRateProvider.parse_rates(body, base)

        fetched_at = None
        timestamp = json.loads(body).get("time_last_update_unix")
        if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
            try:
                fetched_at = datetime.fromtimestamp(timestamp, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                fetched_at = None

        return ExchangeRateSnapshot(base_currency=base, rates=rates, fetched_at=fetched_at)
