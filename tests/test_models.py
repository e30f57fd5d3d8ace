"""Tests for catalog data types and their persisted shape."""

import pytest

from snapcatalog.errors import CorruptCatalogError
from snapcatalog.models import Category, MatchResult, Product, ProductDraft


class TestProduct:
    def test_from_dict(self):
        product = Product.from_dict(
            {"id": "p1", "name": "Cola", "brand": "Coca-Cola", "categoryId": "c1", "price": 10000, "images": ["a", "b"]}
        )
        assert product == Product(
            id="p1", name="Cola", brand="Coca-Cola", category_id="c1", price=10000, images=["a", "b"]
        )
        assert product.cover_image == "a"

    def test_legacy_image_url(self):
        product = Product.from_dict({"id": "p1", "name": "Cola", "categoryId": "c1", "price": 1, "imageUrl": "x"})
        assert product.images == ["x"]
        assert "imageUrl" not in product.to_dict()

    def test_legacy_without_any_image(self):
        product = Product.from_dict({"id": "p1", "name": "Cola", "categoryId": "c1", "price": 1})
        assert product.images == []
        assert product.cover_image is None
        assert product.brand == ""

    def test_images_take_precedence_over_legacy_field(self):
        product = Product.from_dict(
            {"id": "p1", "name": "Cola", "categoryId": "c1", "price": 1, "images": [], "imageUrl": "x"}
        )
        assert product.images == []

    def test_missing_id(self):
        with pytest.raises(CorruptCatalogError, match="id"):
            Product.from_dict({"name": "Cola"})

    def test_bad_price(self):
        with pytest.raises(CorruptCatalogError):
            Product.from_dict({"id": "p1", "name": "Cola", "price": "cheap"})

    def test_from_draft_copies_images(self):
        draft = ProductDraft(name="Cola", category_id="c1", price=1, images=["a"])
        product = Product.from_draft("p1", draft)
        draft.images.append("b")
        assert product.images == ["a"]


class TestCategory:
    def test_round_trip(self):
        category = Category(id="c1", name="Drinks")
        assert Category.from_dict(category.to_dict()) == category

    def test_not_an_object(self):
        with pytest.raises(CorruptCatalogError):
            Category.from_dict(["c1", "Drinks"])


class TestMatchResult:
    def test_to_dict_hides_error_kind(self):
        result = MatchResult(None, "Error connecting to AI service.", error_kind="service")
        assert result.to_dict() == {"matchedProductId": None, "reason": "Error connecting to AI service."}
        assert result.failed
        assert not result.matched

    def test_error_kind_not_compared(self):
        assert MatchResult(None, "r", error_kind="service") == MatchResult(None, "r")
