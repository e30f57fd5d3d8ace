"""Creation-time checks for new catalog records.

The store accepts anything it is given; these rules are applied by the
calling layer before a new product or category is handed to it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ValidationError
from .images import decode_image_payload
from .models import Product, ProductDraft

if TYPE_CHECKING:
    from .config import CatalogRulesConfig
    from .store import CatalogStore

MIN_IMAGES = 5
MAX_IMAGES = 10
MAX_IMAGE_BYTES = 1024 * 1024


@dataclass
class ProductRules:
    min_images: int = MIN_IMAGES
    max_images: int = MAX_IMAGES
    max_image_bytes: int = MAX_IMAGE_BYTES
    price_multiplier: int = 1000

    @classmethod
    def from_config(cls, config: CatalogRulesConfig) -> ProductRules:
        return cls(
            min_images=config.min_images,
            max_images=config.max_images,
            max_image_bytes=config.max_image_bytes,
            price_multiplier=config.price_multiplier,
        )


def validate_category_name(name: str) -> str:
    """Return the trimmed name, rejecting blank input."""
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Category name must not be empty.")
    return cleaned


def parse_price_input(text: str, multiplier: int = 1000) -> int:
    """Convert a price typed in thousands (``"15"``) to minor units (``15000``)."""
    cleaned = text.strip()
    if not cleaned:
        raise ValidationError("Price is required.")
    try:
        value = float(cleaned)
    except ValueError:
        raise ValidationError(f"Price is not a number: {text!r}") from None
    if not math.isfinite(value):
        raise ValidationError(f"Price is not a finite number: {text!r}")
    if value < 0:
        raise ValidationError("Price must not be negative.")
    return round(value * multiplier)


def validate_product_draft(
    draft: ProductDraft, rules: ProductRules | None = None
) -> None:
    """Raise ValidationError if the draft may not be created.

    Name, category and price are required; brand is optional. A new
    product needs between ``min_images`` and ``max_images`` photos so the
    vision service has enough angles to compare against.
    """
    rules = rules or ProductRules()

    missing = []
    if not draft.name.strip():
        missing.append("name")
    if not draft.category_id.strip():
        missing.append("category")
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")

    if isinstance(draft.price, bool) or not isinstance(draft.price, int):
        raise ValidationError(f"Price must be an integer, got {draft.price!r}.")
    if draft.price < 0:
        raise ValidationError("Price must not be negative.")

    count = len(draft.images)
    if count < rules.min_images:
        raise ValidationError(
            f"At least {rules.min_images} images are required "
            f"for reliable identification (currently {count}/{rules.min_images})."
        )
    if count > rules.max_images:
        raise ValidationError(
            f"At most {rules.max_images} images are allowed (got {count})."
        )

    for index, image in enumerate(draft.images):
        try:
            size = len(decode_image_payload(image))
        except ValueError as e:
            raise ValidationError(f"Image {index + 1} is not readable: {e}") from None
        if size > rules.max_image_bytes:
            raise ValidationError(
                f"Image {index + 1} is too large "
                f"({size} bytes, limit {rules.max_image_bytes})."
            )


def create_product(
    store: CatalogStore, draft: ProductDraft, rules: ProductRules | None = None
) -> Product:
    """Validate a draft and add it to the store."""
    validate_product_draft(draft, rules)
    return store.add_product(draft)
