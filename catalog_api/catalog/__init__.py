"""
==============================================================================
Catalog Package - Product Query Building Blocks
==============================================================================

Filter predicates, pagination arithmetic and the SQL product store.

Classes:
--------
- FilterCriteria / SortKey: Listing request description
- And / Or / Contains / Equals / HasAllAttributes / InCategories: Predicate nodes
- PaginationInfo: Derived pagination metadata
- SqlProductStore: Predicate-driven product reads

==============================================================================
"""

from .criteria import FilterCriteria, SortKey
from .pagination import PaginationInfo, compute_pagination
from .predicates import (
    And,
    Contains,
    Equals,
    HasAllAttributes,
    InCategories,
    Or,
    Predicate,
    build_predicate,
)
from .store import PredicateCompiler, SqlProductStore

__all__ = [
    "FilterCriteria",
    "SortKey",
    "PaginationInfo",
    "compute_pagination",
    "And",
    "Contains",
    "Equals",
    "HasAllAttributes",
    "InCategories",
    "Or",
    "Predicate",
    "build_predicate",
    "PredicateCompiler",
    "SqlProductStore",
]
