"""
==============================================================================
Filter Criteria Module
==============================================================================

Request-scoped description of a product listing: filters, page, sort and
display currency.

==============================================================================
"""

from __future__ import annotations

import enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog_api.core import exceptions


class SortKey(str, enum.Enum):
    """
    Allow-listed sort fields.

    Anything outside this list is rejected instead of being passed to the
    data store.
    """

    NAME = "name"
    PRICE = "price"
    ADDED_TIME = "added_time"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def allowed(cls) -> List[str]:
        """Accepted sort key names."""
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SortKey"]:
        """
        Resolve a requested sort key.

        Args:
            value: Sort key name, or None/empty for insertion order

        Returns:
            SortKey, or None when no sort was requested

        Raises:
            InvalidArgument: If the key is not allow-listed
        """
        if value is None or value == "":
            return None
        try:
            return cls(value)
        except ValueError:
            raise exceptions.invalid_sort_key(value, cls.allowed()) from None


class FilterCriteria(BaseModel):
    """
    Filters and paging for a product listing.

    Attributes:
        search: Substring matched against name or description
        attributes: Attribute name -> required value (all must match)
        categories: Category names (any may match)
        page: Requested page; clamped into range by the pagination calculator
        page_size: Items per page; None uses the configured default
        sort: Sort key name, validated against SortKey
        currency: Display currency for prices; None keeps stored currency
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    search: Optional[str] = Field(default=None, max_length=255)
    attributes: Dict[str, str] = Field(default_factory=dict)
    categories: List[str] = Field(default_factory=list)
    page: int = Field(default=1)
    page_size: Optional[int] = Field(default=None)
    sort: Optional[str] = Field(default=None)
    currency: Optional[str] = Field(default=None)

    @field_validator("search")
    @classmethod
    def strip_search(cls, value: Optional[str]) -> Optional[str]:
        """Treat blank search text as no search."""
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("categories")
    @classmethod
    def dedupe_categories(cls, value: List[str]) -> List[str]:
        """Categories are a set; keep first occurrence order."""
        return list(dict.fromkeys(value))

    @property
    def sort_key(self) -> Optional[SortKey]:
        """Validated sort key (raises InvalidArgument when not allow-listed)."""
        return SortKey.parse(self.sort)
