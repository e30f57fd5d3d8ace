"""Catalog data types and their persisted JSON shape."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import CorruptCatalogError


@dataclass
class Category:
    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Any) -> Category:
        if not isinstance(data, dict):
            raise CorruptCatalogError(f"Category record is not an object: {data!r}")
        return cls(
            id=_field(data, "id", "Category"),
            name=_field(data, "name", "Category"),
        )


@dataclass
class ProductDraft:
    """A product that has not been assigned an id yet."""

    name: str
    category_id: str
    price: int
    brand: str = ""
    images: list[str] = field(default_factory=list)


@dataclass
class Product:
    id: str
    name: str
    category_id: str
    price: int
    brand: str = ""
    images: list[str] = field(default_factory=list)  # data URLs, first is the cover

    @property
    def cover_image(self) -> str | None:
        return self.images[0] if self.images else None

    @classmethod
    def from_draft(cls, product_id: str, draft: ProductDraft) -> Product:
        return cls(
            id=product_id,
            name=draft.name,
            category_id=draft.category_id,
            price=draft.price,
            brand=draft.brand,
            images=list(draft.images),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "categoryId": self.category_id,
            "price": self.price,
            "images": list(self.images),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Product:
        """Build a Product from a persisted record.

        Records written before multi-image support carry a single
        ``imageUrl`` instead of ``images``; they are upgraded here, in
        memory only.
        """
        if not isinstance(data, dict):
            raise CorruptCatalogError(f"Product record is not an object: {data!r}")

        if "images" in data:
            images = data["images"]
            if not isinstance(images, list):
                raise CorruptCatalogError(
                    f"Product images must be a list, got {type(images).__name__}"
                )
        else:
            legacy = _field(data, "imageUrl", "Product", required=False)
            images = [legacy] if legacy else []
        for img in images:
            if not isinstance(img, str):
                raise CorruptCatalogError(f"Product image is not a string: {img!r}")

        price = data.get("price", 0)
        if isinstance(price, bool) or not isinstance(price, int):
            raise CorruptCatalogError(f"Product price must be an integer: {price!r}")

        return cls(
            id=_field(data, "id", "Product"),
            name=_field(data, "name", "Product"),
            brand=_field(data, "brand", "Product", required=False),
            category_id=_field(data, "categoryId", "Product", required=False),
            price=price,
            images=list(images),
        )


@dataclass
class MatchResult:
    """Outcome of one identification call.

    ``error_kind`` is set only when the call failed (``service``,
    ``malformed_response``, ``unknown_product``); it is not part of the
    serialized result so failures and true non-matches look the same to
    callers that only read ``to_dict()``.
    """

    matched_product_id: str | None
    reason: str
    error_kind: str | None = field(default=None, compare=False)

    @property
    def matched(self) -> bool:
        return self.matched_product_id is not None

    @property
    def failed(self) -> bool:
        return self.error_kind is not None

    def to_dict(self) -> dict[str, Any]:
        return {"matchedProductId": self.matched_product_id, "reason": self.reason}


def _field(data: dict, key: str, record: str, required: bool = True) -> str:
    """Return a string field; optional fields may be absent or null."""
    value = data.get(key)
    if value is None:
        if required:
            raise CorruptCatalogError(f"{record} record missing field {key!r}")
        return ""
    if not isinstance(value, str):
        raise CorruptCatalogError(
            f"{record} field {key!r} must be a string, got {type(value).__name__}"
        )
    return value
