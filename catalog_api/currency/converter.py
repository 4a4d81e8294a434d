"""
==============================================================================
Currency Converter Module
==============================================================================

Converts stored prices into a display currency using cached rates.

Rounding:
---------
Converted amounts are quantized to 2 decimal places with ROUND_HALF_UP
(halves round away from zero). Same-currency amounts are returned as-is.

==============================================================================
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from catalog_api.core import exceptions
from catalog_api.currency.exchange_rates import ExchangeRateCache


# Module logger
logger = logging.getLogger(__name__)

DISPLAY_QUANTUM = Decimal("0.01")


class CurrencyConverter:
    """
    Price converter backed by an ExchangeRateCache.

    Example:
        >>> converter = CurrencyConverter(rate_cache)
        >>> converter.convert(Decimal("100.00"), "EUR", "USD")
        Decimal('110.00')
    """

    def __init__(self, rate_cache: ExchangeRateCache) -> None:
        self._rates = rate_cache

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert amount from one currency to another.

        Args:
            amount: Price in from_currency
            from_currency: Currency of amount (case-insensitive)
            to_currency: Display currency (case-insensitive)

        Returns:
            amount unchanged when currencies match, else amount * rate
            rounded to 2 decimal places

        Raises:
            CurrencyNotSupported: If to_currency is absent from the rate table
            RateProviderError: If rates are not cached and cannot be fetched
        """
        source = from_currency.strip().upper()
        target = to_currency.strip().upper()

        if source == target:
            return amount

        rates = self._rates.get_rates(source)
        rate = rates.get(target)
        if rate is None:
            logger.warning(f"Currency {target} not found in {source} exchange rates")
            raise exceptions.currency_not_supported(target, source)

        # str() keeps the float's shortest repr instead of its binary expansion
        converted = (Decimal(amount) * Decimal(str(rate))).quantize(
            DISPLAY_QUANTUM, rounding=ROUND_HALF_UP
        )
        logger.debug(f"Converted {amount} {source} -> {converted} {target} (rate={rate})")
        return converted
