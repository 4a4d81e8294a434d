"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the application.

Modules:
--------
- validators: Currency code validation

==============================================================================
"""

from .validators import CurrencyCodeValidator, normalize_currency

__all__ = [
    "CurrencyCodeValidator",
    "normalize_currency",
]
