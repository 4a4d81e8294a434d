"""
==============================================================================
Exchange Rate Provider Module
==============================================================================

HTTP client for the external exchange-rate API.

Request:
--------
    GET {EXCHANGE_RATE_API_ENDPOINT}/{BASE}

Expected Response:
-----------------
    {
      "result": "success",
      "base_code": "EUR",
      "time_last_update_unix": 1735689601,
      "rates": {"EUR": 1, "USD": 1.1, ...}
    }

Any transport error, timeout, non-2xx status, non-JSON body, "result" other
than "success", or a "rates" mapping that is missing or holds a rate that is
not a finite positive number raises RateProviderError.

==============================================================================
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Optional

import httpx

from catalog_api.config import Settings
from catalog_api.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


class ExchangeRateProvider:
    """
    Synchronous exchange-rate API client.

    Attributes:
        _endpoint: Base URL, the base currency is appended as a path segment
        _client: httpx.Client with the configured timeout

    Example:
        >>> provider = ExchangeRateProvider("https://open.er-api.com/v6/latest", timeout=5)
        >>> body = provider.fetch("EUR")
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            endpoint: Provider base URL
            timeout: Request timeout in seconds
            client: Optional preconfigured client (tests pass a MockTransport client)
        """
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExchangeRateProvider":
        return cls(settings.exchange_rate_api_endpoint, settings.exchange_rate_timeout)

    def fetch(self, base_currency: str) -> str:
        """
        Fetch the rate table for base_currency.

        Args:
            base_currency: Upper-case currency code

        Returns:
            Response body text, unmodified

        Raises:
            RateProviderError: On any provider failure
        """
        url = f"{self._endpoint}/{base_currency}"
        logger.debug(f"Fetching exchange rates: {url}")

        try:
            response = self._client.get(url, timeout=self._timeout)
        except httpx.TimeoutException as e:
            logger.error(f"Exchange rate request timed out for {base_currency}: {e}")
            raise exceptions.rate_provider_error(
                "Exchange rate provider timed out", base_currency=base_currency
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Exchange rate request failed for {base_currency}: {e}")
            raise exceptions.rate_provider_error(
                "Exchange rate provider unreachable", base_currency=base_currency
            ) from e

        if not response.is_success:
            logger.error(
                f"Exchange rate provider returned HTTP {response.status_code} for {base_currency}"
            )
            raise exceptions.rate_provider_error(
                "Exchange rate provider returned an error status",
                base_currency=base_currency,
                status_code=response.status_code,
            )

        body = response.text
        self.parse_rates(body, base_currency)
        return body

    @staticmethod
    def parse_rates(body: str, base_currency: str) -> Dict[str, float]:
        """
        Validate a provider body and extract the rate mapping.

        Raises:
            RateProviderError: If the body is not a successful rate table
        """
        try:
            data: Any = json.loads(body)
        except (TypeError, ValueError) as e:
            logger.error(f"Exchange rate response for {base_currency} is not JSON")
            raise exceptions.rate_provider_error(
                "Malformed exchange rate response", base_currency=base_currency
            ) from e

        if not isinstance(data, dict):
            raise exceptions.rate_provider_error(
                "Malformed exchange rate response", base_currency=base_currency
            )

        if "result" in data and data["result"] != "success":
            error_type = data.get("error-type", "unknown")
            logger.error(f"Exchange rate provider error for {base_currency}: {error_type}")
            raise exceptions.rate_provider_error(
                "Error fetching exchange rates because result is not success",
                base_currency=base_currency,
                error_type=error_type,
            )

        rates = data.get("rates")
        if not isinstance(rates, dict) or not all(
            isinstance(rate, (int, float))
            and not isinstance(rate, bool)
            and math.isfinite(rate)
            and rate > 0
            for rate in rates.values()
        ):
            raise exceptions.rate_provider_error(
                "Exchange rate response has no valid rates table",
                base_currency=base_currency,
            )

        return {str(code).upper(): float(rate) for code, rate in rates.items()}

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
