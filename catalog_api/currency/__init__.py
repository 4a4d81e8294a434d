"""
==============================================================================
Currency Package
==============================================================================

Cached exchange rates and price conversion.

Classes:
--------
- CacheStore / InMemoryCacheStore / RedisCacheStore: TTL key-value storage
- ExchangeRateProvider: HTTP client for the rate API
- ExchangeRateCache: Read-through cache keyed by base currency
- CurrencyConverter: Decimal price conversion

==============================================================================
"""

from .cache_store import CacheStore, InMemoryCacheStore, RedisCacheStore, create_cache_store
from .converter import CurrencyConverter
from .exchange_rates import ExchangeRateCache, ExchangeRateSnapshot, cache_key
from .rate_provider import ExchangeRateProvider

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "create_cache_store",
    "CurrencyConverter",
    "ExchangeRateCache",
    "ExchangeRateSnapshot",
    "cache_key",
    "ExchangeRateProvider",
]
