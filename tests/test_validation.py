"""Tests for new-product and category validation."""

import pytest

from snapcatalog.config import CatalogRulesConfig
from snapcatalog.errors import ValidationError
from snapcatalog.images import to_data_url
from snapcatalog.models import ProductDraft
from snapcatalog.store import CatalogStore, MemoryBackend
from snapcatalog.validation import (
    ProductRules,
    create_product,
    parse_price_input,
    validate_category_name,
    validate_product_draft,
)

IMAGE = to_data_url(b"\xff\xd8\xff\xe0fake-jpeg")


def _draft(images=5, **kwargs):
    defaults = {"name": "Cola", "category_id": "cat_1", "price": 10000, "brand": ""}
    defaults.update(kwargs)
    return ProductDraft(images=[IMAGE] * images, **defaults)


@pytest.fixture
def store():
    return CatalogStore(MemoryBackend(), seed_defaults=False)


class TestCreationGate:
    def test_four_images_rejected(self, store):
        with pytest.raises(ValidationError, match="At least 5 images"):
            create_product(store, _draft(images=4))
        assert store.get_products() == []

    def test_five_images_accepted(self, store):
        product = create_product(store, _draft(images=5))
        assert store.get_products() == [product]

    def test_ten_images_accepted(self):
        validate_product_draft(_draft(images=10))

    def test_eleven_images_rejected(self):
        with pytest.raises(ValidationError, match="At most 10"):
            validate_product_draft(_draft(images=11))

    def test_brand_optional(self):
        validate_product_draft(_draft(brand=""))

    @pytest.mark.parametrize("field", ["name", "category_id"])
    def test_required_fields(self, field):
        with pytest.raises(ValidationError, match="Missing required"):
            validate_product_draft(_draft(**{field: "  "}))

    def test_negative_price(self):
        with pytest.raises(ValidationError, match="negative"):
            validate_product_draft(_draft(price=-1))

    def test_non_integer_price(self):
        with pytest.raises(ValidationError, match="integer"):
            validate_product_draft(_draft(price=10.5))

    def test_oversized_image(self):
        rules = ProductRules(max_image_bytes=4)
        with pytest.raises(ValidationError, match="too large"):
            validate_product_draft(_draft(), rules)

    def test_unreadable_image(self):
        draft = _draft()
        draft.images[2] = "data:image/jpeg;base64,%%%"
        with pytest.raises(ValidationError, match="Image 3"):
            validate_product_draft(draft)

    def test_rules_from_config(self):
        rules = ProductRules.from_config(CatalogRulesConfig(min_images=2))
        validate_product_draft(_draft(images=2), rules)


class TestParsePriceInput:
    def test_thousands(self):
        assert parse_price_input("15") == 15000

    def test_fraction(self):
        assert parse_price_input("2.5") == 2500

    def test_custom_multiplier(self):
        assert parse_price_input("15", multiplier=1) == 15

    @pytest.mark.parametrize("text", ["", "  ", "abc", "-3", "nan", "inf", "-inf", "1e400"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_price_input(text)


class TestCategoryName:
    def test_trims(self):
        assert validate_category_name("  Frozen ") == "Frozen"

    def test_blank_rejected(self):
        with pytest.raises(ValidationError):
            validate_category_name("   ")
