"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for catalog input data.

This module implements:
- CurrencyCodeValidator: Validates ISO 4217 style currency codes

Validation Rules for Currency Codes:
-----------------------------------
- Exactly 3 ASCII letters
- Surrounding whitespace ignored
- Stored and compared as uppercase

==============================================================================
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from catalog_api.core import exceptions


class CurrencyCodeValidator:
    """
    Validator for currency codes.

    Example:
        >>> validator = CurrencyCodeValidator()
        >>> validator.validate(" usd ")
        (True, 'USD', None)
        >>> validator.validate("dollars")
        (False, None, 'Currency code must be exactly 3 letters')
    """

    PATTERN = re.compile(r"^[A-Z]{3}$")

    def validate(self, code: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a currency code.

        Args:
            code: Raw currency code input

        Returns:
            Tuple of (is_valid, normalized_code, error_message)
        """
        if not isinstance(code, str) or not code.strip():
            return False, None, "Currency code is required"

        normalized = code.strip().upper()

        if not self.PATTERN.match(normalized):
            return False, None, "Currency code must be exactly 3 letters"

        return True, normalized, None

    def normalize(self, code: str) -> str:
        """
        Return the normalized code or raise.

        Raises:
            InvalidArgument: If the code is malformed
        """
        is_valid, normalized, _ = self.validate(code)
        if not is_valid:
            raise exceptions.invalid_currency_code(code)
        return normalized


def normalize_currency(code: Optional[str]) -> Optional[str]:
    """Normalize an optional currency code, passing None through."""
    if code is None:
        return None
    return CurrencyCodeValidator().normalize(code)
