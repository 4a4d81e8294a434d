"""
==============================================================================
Product Predicate Module
==============================================================================

Composable filter expressions for product listings.

A predicate is a small immutable tree of tagged nodes. It describes which
products match; it does not run a query. The SQL product store compiles the
tree into SQLAlchemy expressions (see catalog_api.catalog.store).

Node Types:
-----------
- And(*children)           all children match (no children: matches all)
- Or(*children)            at least one child matches
- Contains(field, text)    case-insensitive substring on a text field
- Equals(field, value)     exact equality on a scalar field
- HasAllAttributes(pairs)  product carries every (name, value) pair
- InCategories(names)      product belongs to at least one named category

Filter Semantics:
-----------------
Attribute filters are AND across all pairs, category filters are OR across
the named categories:

    build_predicate(
        search="lamp",
        attribute_filters={"Color": "Red", "Size": "10"},
        category_names={"Home", "Garden"},
    )
    # And(
    #     Equals("active", True),
    #     Or(Contains("name", "lamp"), Contains("description", "lamp")),
    #     HasAllAttributes((("Color", "Red"), ("Size", "10"))),
    #     InCategories(frozenset({"Home", "Garden"})),
    # )

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple, Union


# =============================================================================
# NODES
# =============================================================================

@dataclass(frozen=True)
class And:
    """Conjunction. An empty And matches every product."""

    children: Tuple["Predicate", ...] = ()

    def __init__(self, *children: "Predicate") -> None:
        object.__setattr__(self, "children", tuple(children))


@dataclass(frozen=True)
class Or:
    """Disjunction. An empty Or matches nothing."""

    children: Tuple["Predicate", ...] = ()

    def __init__(self, *children: "Predicate") -> None:
        object.__setattr__(self, "children", tuple(children))


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match on a text field."""

    field: str
    text: str


@dataclass(frozen=True)
class Equals:
    """Exact equality on a scalar field."""

    field: str
    value: Any


@dataclass(frozen=True)
class HasAllAttributes:
    """
    Product has an attribute record for every (name, value) pair.

    Values compare as strings. Matching is enforced by counting distinct
    matched attribute names per product and requiring the count to equal
    len(pairs), so extra attributes on the product do not disqualify it.
    """

    pairs: Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class InCategories:
    """Product belongs to at least one of the named categories."""

    names: frozenset


Predicate = Union[And, Or, Contains, Equals, HasAllAttributes, InCategories]

# Text fields the search term is matched against
SEARCH_FIELDS = ("name", "description")


# =============================================================================
# BUILDER
# =============================================================================

def build_predicate(
    search: Optional[str] = None,
    attribute_filters: Optional[Mapping[str, str]] = None,
    category_names: Optional[Iterable[str]] = None,
    active_only: bool = True,
) -> And:
    """
    Build the listing predicate from request filters.

    Pure function: no I/O and no side effects. Empty or missing filters are
    left out of the tree, so build_predicate(active_only=False) matches
    every product.

    Args:
        search: Substring looked up in name or description (case-insensitive)
        attribute_filters: Attribute name -> required value, all must match
        category_names: Categories of which at least one must match
        active_only: Restrict to products with the active flag set

    Returns:
        And node combining the requested conditions
    """
    clauses = []

    if active_only:
        clauses.append(Equals("active", True))

    if search:
        clauses.append(Or(*(Contains(field, search) for field in SEARCH_FIELDS)))

    if attribute_filters:
        # Sorted so equal filter maps yield equal predicates
        pairs = tuple(sorted((str(name), str(value)) for name, value in attribute_filters.items()))
        clauses.append(HasAllAttributes(pairs))

    if category_names:
        names = frozenset(str(name) for name in category_names)
        if names:
            clauses.append(InCategories(names))

    return And(*clauses)
