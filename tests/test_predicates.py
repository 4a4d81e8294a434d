"""
==============================================================================
Predicate and Product Store Tests
==============================================================================

Tests for predicate construction and its evaluation by the SQL store.

==============================================================================
"""

from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql, sqlite

from catalog_api.catalog.criteria import SortKey
from catalog_api.catalog.predicates import (
    And,
    Contains,
    Equals,
    HasAllAttributes,
    InCategories,
    Or,
    build_predicate,
)
from catalog_api.catalog.store import PredicateCompiler, SqlProductStore
from catalog_api.db.models import Product


def names(products):
    return [product.name for product in products]


class TestBuildPredicate:
    """Tests for build_predicate (no database)."""

    def test_no_filters_active_only(self):
        assert build_predicate() == And(Equals("active", True))

    def test_no_filters_matches_all(self):
        assert build_predicate(active_only=False) == And()

    def test_search_covers_name_and_description(self):
        predicate = build_predicate(search="lamp", active_only=False)
        assert predicate == And(Or(Contains("name", "lamp"), Contains("description", "lamp")))

    def test_attribute_pairs_are_sorted(self):
        first = build_predicate(attribute_filters={"Size": "10", "Color": "Red"})
        second = build_predicate(attribute_filters={"Color": "Red", "Size": "10"})
        assert first == second
        assert HasAllAttributes((("Color", "Red"), ("Size", "10"))) in first.children

    def test_categories_become_a_set(self):
        predicate = build_predicate(category_names=["Home", "Garden", "Home"], active_only=False)
        assert predicate == And(InCategories(frozenset({"Home", "Garden"})))

    def test_empty_filters_are_left_out(self):
        predicate = build_predicate(search="", attribute_filters={}, category_names=[], active_only=False)
        assert predicate == And()

    def test_all_filters(self):
        predicate = build_predicate(
            search="lamp",
            attribute_filters={"Color": "Red"},
            category_names={"Home"},
        )
        assert len(predicate.children) == 4
        assert predicate.children[0] == Equals("active", True)

    def test_nodes_are_hashable(self):
        predicate = build_predicate(search="x", attribute_filters={"Color": "Red"}, category_names={"Home"})
        assert hash(predicate) == hash(build_predicate(search="x", attribute_filters={"Color": "Red"}, category_names={"Home"}))


class TestStoreFiltering:
    """Tests for predicate evaluation against the catalog fixture."""

    def test_attribute_filters_require_every_pair(self, store: SqlProductStore, catalog):
        """Product B has only Color=Red and is excluded."""
        predicate = build_predicate(attribute_filters={"Color": "Red", "Size": "10"})
        assert names(store.find(predicate)) == ["Desk Lamp"]
        assert store.count(predicate) == 1

    def test_extra_attributes_do_not_disqualify(self, store: SqlProductStore, catalog):
        predicate = build_predicate(attribute_filters={"Color": "Red"})
        assert names(store.find(predicate)) == ["Desk Lamp", "Garden Lamp"]

    def test_every_result_matches_all_pairs(self, store: SqlProductStore, catalog):
        filters = {"Color": "Red", "Size": "10"}
        for product in store.find(build_predicate(attribute_filters=filters, active_only=False)):
            values = product.attribute_values
            assert all(values.get(name) == value for name, value in filters.items())

    def test_attribute_value_mismatch(self, store: SqlProductStore, catalog):
        predicate = build_predicate(attribute_filters={"Color": "Red", "Size": "12"})
        assert store.find(predicate) == []

    def test_unknown_attribute_yields_no_results(self, store: SqlProductStore, catalog):
        predicate = build_predicate(attribute_filters={"Weight": "1kg"})
        assert store.find(predicate) == []
        assert store.count(predicate) == 0

    def test_values_compare_as_strings(self, store: SqlProductStore, catalog):
        predicate = build_predicate(attribute_filters={"Size": "10.0"})
        assert store.count(predicate) == 0

    def test_categories_match_any(self, store: SqlProductStore, catalog):
        predicate = build_predicate(category_names={"Home", "Garden"})
        assert names(store.find(predicate)) == ["Desk Lamp", "Garden Lamp"]

    def test_active_only(self, store: SqlProductStore, catalog):
        assert store.count(build_predicate()) == 3
        assert store.count(build_predicate(active_only=False)) == 4

    def test_search_is_case_insensitive(self, store: SqlProductStore, catalog):
        predicate = build_predicate(search="LAMP")
        assert names(store.find(predicate)) == ["Desk Lamp", "Garden Lamp"]

    def test_search_matches_description(self, store: SqlProductStore, catalog):
        assert names(store.find(build_predicate(search="solar"))) == ["Garden Lamp"]

    def test_search_folds_non_ascii_letters(self, db, store: SqlProductStore, catalog):
        db.add(Product(
            name="ÉCLAIR Lamp",
            description="Pâtisserie-shaped night light",
            price=Decimal("15.00"),
            price_currency="EUR",
            active=True,
        ))
        db.commit()
        assert names(store.find(build_predicate(search="éclair"))) == ["ÉCLAIR Lamp"]
        assert names(store.find(build_predicate(search="PÂTISSERIE"))) == ["ÉCLAIR Lamp"]

    def test_search_wildcards_are_literal(self, store: SqlProductStore, catalog):
        assert names(store.find(build_predicate(search="%"))) == ["Tennis Racket"]
        assert store.find(build_predicate(search="L_mp")) == []

    def test_filters_combine(self, store: SqlProductStore, catalog):
        predicate = build_predicate(
            search="lamp",
            attribute_filters={"Color": "Red"},
            category_names={"Garden", "Sports"},
        )
        assert names(store.find(predicate)) == ["Garden Lamp"]

    def test_empty_or_matches_nothing(self, store: SqlProductStore, catalog):
        assert store.count(Or()) == 0

    def test_empty_and_matches_everything(self, store: SqlProductStore, catalog):
        assert store.count(And()) == 4


class TestStoreSortingAndPaging:
    """Tests for sort, offset and limit."""

    def test_default_order_is_insertion(self, store: SqlProductStore, catalog):
        assert names(store.find(And())) == ["Desk Lamp", "Garden Lamp", "Tennis Racket", "Old Lamp"]

    def test_sort_by_price(self, store: SqlProductStore, catalog):
        products = store.find(build_predicate(), sort=SortKey.PRICE)
        assert names(products) == ["Garden Lamp", "Tennis Racket", "Desk Lamp"]

    def test_sort_by_name(self, store: SqlProductStore, catalog):
        products = store.find(build_predicate(), sort=SortKey.NAME)
        assert names(products) == ["Desk Lamp", "Garden Lamp", "Tennis Racket"]

    def test_sort_by_added_time(self, store: SqlProductStore, catalog):
        products = store.find(build_predicate(), sort=SortKey.ADDED_TIME)
        assert names(products) == ["Tennis Racket", "Garden Lamp", "Desk Lamp"]

    def test_offset_and_limit(self, store: SqlProductStore, catalog):
        products = store.find(build_predicate(), sort=SortKey.NAME, offset=1, limit=1)
        assert names(products) == ["Garden Lamp"]

    def test_get(self, store: SqlProductStore, catalog):
        product = catalog["Old Lamp"]
        assert store.get(product.id).name == "Old Lamp"
        assert store.get(9999) is None
        assert store.get(2 ** 70) is None
        assert store.get(0) is None


class TestStoreMetadata:
    """Tests for catalog metadata reads."""

    def test_count_by_active(self, store: SqlProductStore, catalog):
        assert store.count_by_active() == {True: 3, False: 1}

    def test_category_names(self, store: SqlProductStore, catalog):
        assert store.category_names() == ["Garden", "Home", "Sports"]

    def test_attribute_names(self, store: SqlProductStore, catalog):
        assert store.attribute_names() == ["Color", "Size"]


class TestPredicateCompiler:
    """Tests for compiler guards."""

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            PredicateCompiler().compile(Equals("password", "x"))

    def test_unknown_node_rejected(self):
        with pytest.raises(ValueError):
            PredicateCompiler().compile("active")

    def test_case_folding_per_dialect(self):
        expression = PredicateCompiler().compile(Contains("name", "Lamp"))
        assert "py_lower(products.name)" in str(expression.compile(dialect=sqlite.dialect()))
        assert "lower(products.name)" in str(expression.compile(dialect=postgresql.dialect()))
        assert "py_lower" not in str(expression.compile(dialect=postgresql.dialect()))
