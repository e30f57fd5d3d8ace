"""Tests for catalog filtering and grouping."""

import pytest

from snapcatalog.models import Category, Product
from snapcatalog.query import (
    CollapseState,
    filter_products,
    format_price,
    group_by_category,
    matches_search,
    uncategorized,
)


@pytest.fixture
def categories():
    return [Category(id="A", name="Drinks"), Category(id="B", name="Snacks")]


@pytest.fixture
def products():
    return [
        Product(id="p1", name="Coca Cola", brand="Coca-Cola", category_id="A", price=10000),
        Product(id="p2", name="Potato Chips", brand="Lay's", category_id="B", price=15000),
        Product(id="p3", name="Green Tea", brand="", category_id="A", price=8000),
    ]


class TestSearch:
    def test_empty_term_matches_everything(self, products):
        assert filter_products(products, "") == products

    def test_matches_name_case_insensitive(self, products):
        assert [p.id for p in filter_products(products, "cola")] == ["p1"]

    def test_matches_brand(self, products):
        assert [p.id for p in filter_products(products, "LAY")] == ["p2"]

    def test_substring_not_tokenized(self, products):
        assert matches_search(products[2], "en te")
        assert not matches_search(products[2], "tea green")

    def test_no_match(self, products):
        assert filter_products(products, "beer") == []


class TestGroupByCategory:
    def test_groups_in_category_order(self, products, categories):
        groups = group_by_category(products, categories)
        assert [g.category.id for g in groups] == ["A", "B"]
        assert [len(g) for g in groups] == [2, 1]
        assert [p.id for p in groups[0].items] == ["p1", "p3"]

    def test_follows_reordered_categories(self, products, categories):
        groups = group_by_category(products, list(reversed(categories)))
        assert [g.category.id for g in groups] == ["B", "A"]

    def test_empty_group_omitted_after_search(self, products, categories):
        groups = group_by_category(products, categories, search_term="tea")
        assert [g.category.id for g in groups] == ["A"]
        assert [p.id for p in groups[0].items] == ["p3"]

    def test_dangling_category_excluded(self, products, categories):
        products.append(Product(id="p4", name="Cola Zero", category_id="gone", price=1))
        groups = group_by_category(products, categories, search_term="cola")
        assert [p.id for g in groups for p in g.items] == ["p1"]

    def test_deleted_category_hides_its_products(self, products, categories):
        groups = group_by_category(products, categories[1:])
        assert [g.category.id for g in groups] == ["B"]
        assert products[0].category_id == "A"

    def test_collapsed_flag(self, products, categories):
        groups = group_by_category(products, categories, collapsed={"B"})
        assert [g.collapsed for g in groups] == [False, True]

    def test_collapsed_from_state(self, products, categories):
        state = CollapseState()
        state.toggle("A")
        groups = group_by_category(products, categories, collapsed=state)
        assert [g.collapsed for g in groups] == [True, False]

    def test_no_products(self, categories):
        assert group_by_category([], categories) == []


class TestCollapseState:
    def test_toggle(self):
        state = CollapseState()
        assert state.toggle("A") is True
        assert state.is_collapsed("A")
        assert state.toggle("A") is False
        assert not state.is_collapsed("A")

    def test_independent_per_category(self):
        state = CollapseState()
        state.toggle("A")
        state.toggle("B")
        state.toggle("A")
        assert not state.is_collapsed("A")
        assert state.is_collapsed("B")

    def test_collapse_expand_idempotent(self):
        state = CollapseState()
        state.collapse("A")
        state.collapse("A")
        assert state.collapsed == {"A"}
        state.expand("A")
        state.expand("A")
        assert state.collapsed == set()


def test_uncategorized(products, categories):
    products.append(Product(id="p4", name="Orphan", category_id="gone", price=1))
    assert [p.id for p in uncategorized(products, categories)] == ["p4"]


def test_format_price():
    assert format_price(15000) == "15,000đ"
    assert format_price(0) == "0đ"
