"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from catalog_api.config import get_settings, Settings

    settings = get_settings()
    print(settings.exchange_rate_api_endpoint)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
