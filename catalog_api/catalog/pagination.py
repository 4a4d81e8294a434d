"""
==============================================================================
Pagination Module
==============================================================================

Page arithmetic for product listings.

Out-of-range page numbers are clamped into [1, max(total_pages, 1)] instead
of being rejected, so a client asking for page 0 or page 99 of a 5-page
result gets page 1 or page 5.

==============================================================================
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from catalog_api.core import exceptions


class PaginationInfo(BaseModel):
    """Derived pagination metadata for one listing response."""

    model_config = ConfigDict(frozen=True)

    total_items: int = Field(ge=0, description="Items matching the filters")
    current_page: int = Field(ge=1, description="Page actually served")
    page_size: int = Field(ge=1, description="Items per page")
    total_pages: int = Field(ge=0, description="Number of non-empty pages")
    items_on_current_page: int = Field(ge=0, description="Items on the served page")
    is_next_page_exists: bool
    is_previous_page_exists: bool

    @property
    def offset(self) -> int:
        """Row offset of the first item on the current page."""
        return (self.current_page - 1) * self.page_size


def compute_pagination(total_items: int, requested_page: int, page_size: int) -> PaginationInfo:
    """
    Compute pagination metadata.

    Args:
        total_items: Number of matching items (>= 0)
        requested_page: Page asked for, any integer
        page_size: Items per page (> 0)

    Returns:
        PaginationInfo with the page clamped into range

    Raises:
        InvalidArgument: If page_size <= 0 or total_items < 0

    Example:
        >>> info = compute_pagination(95, 3, 20)
        >>> info.total_pages, info.items_on_current_page
        (5, 20)
    """
    if page_size <= 0:
        raise exceptions.invalid_argument(
            f"Page size must be positive, got {page_size}", page_size=page_size
        )
    if total_items < 0:
        raise exceptions.invalid_argument(
            f"Total item count must not be negative, got {total_items}",
            total_items=total_items,
        )

    total_pages = -(-total_items // page_size)
    current_page = min(max(requested_page, 1), max(total_pages, 1))

    items_on_page = max(
        0,
        min(current_page * page_size, total_items) - (current_page - 1) * page_size,
    )

    return PaginationInfo(
        total_items=total_items,
        current_page=current_page,
        page_size=page_size,
        total_pages=total_pages,
        items_on_current_page=items_on_page,
        is_next_page_exists=current_page < total_pages,
        is_previous_page_exists=current_page > 1,
    )
