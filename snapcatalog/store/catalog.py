"""Catalog CRUD operations over an injected storage backend."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from ..errors import CorruptCatalogError
from ..models import Category, Product, ProductDraft
from .backends import StorageBackend

logger = logging.getLogger(__name__)

CATEGORIES_KEY = "categories"
PRODUCTS_KEY = "products"

DEFAULT_CATEGORIES = [
    Category(id="cat_1", name="Drinks"),
    Category(id="cat_2", name="Snacks"),
    Category(id="cat_3", name="Condiments"),
]

DEFAULT_PRODUCTS = [
    Product(id="prod_1", name="Coca Cola", brand="Coca-Cola", category_id="cat_1", price=10000),
    Product(id="prod_2", name="Potato Chips", brand="Lay's", category_id="cat_2", price=15000),
    Product(id="prod_3", name="Soy Sauce", brand="Chin-su", category_id="cat_3", price=22000),
]

T = TypeVar("T", Category, Product)


class IdGenerator:
    """Timestamp ids that stay unique when the clock does not advance.

    Ids look like ``prod_1718000000123``. If two calls land in the same
    millisecond the second one gets ``last + 1``, so ids are strictly
    increasing within one generator.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def next_id(self, prefix: str) -> str:
        stamp = int(self._clock() * 1000)
        if stamp <= self._last:
            stamp = self._last + 1
        self._last = stamp
        return f"{prefix}_{stamp}"

    def observe(self, ids: Iterable[str]) -> None:
        """Never hand out a suffix at or below one already in use."""
        for existing in ids:
            suffix = existing.rpartition("_")[2]
            if suffix.isdigit():
                self._last = max(self._last, int(suffix))


class CatalogStore:
    """Sole owner of the persisted Category and Product collections.

    Every read decodes a fresh snapshot from the backend, so returned
    objects can be mutated freely without affecting persisted state.
    Every write replaces a whole collection.
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        seed_defaults: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._seed_defaults = seed_defaults
        self._ids = IdGenerator(clock)

    def close(self) -> None:
        self._backend.close()

    # ── Categories ──

    def get_categories(self) -> list[Category]:
        """Return categories in display order, seeding defaults on first access."""
        records = self._load(CATEGORIES_KEY)
        if records is None:
            seed = list(DEFAULT_CATEGORIES) if self._seed_defaults else []
            logger.info("Seeding %d default categories", len(seed))
            self.save_categories(seed)
            return [Category(id=c.id, name=c.name) for c in seed]
        return [Category.from_dict(r) for r in records]

    def save_categories(self, categories: Iterable[Category]) -> None:
        self._store(CATEGORIES_KEY, categories)

    def add_category(self, name: str) -> Category:
        categories = self.get_categories()
        self._ids.observe(c.id for c in categories)
        category = Category(id=self._ids.next_id("cat"), name=name)
        self.save_categories([*categories, category])
        return category

    def delete_category(self, category_id: str) -> None:
        """Remove a category. Products referencing it are left untouched."""
        categories = self.get_categories()
        remaining = [c for c in categories if c.id != category_id]
        if len(remaining) != len(categories):
            self.save_categories(remaining)

    def move_category(self, from_index: int, to_index: int) -> list[Category]:
        """Move one category to a new position and persist the new order.

        Raises:
            IndexError: If either index is outside the category list.
        """
        categories = self.get_categories()
        for index in (from_index, to_index):
            if not 0 <= index < len(categories):
                raise IndexError(f"Category position out of range: {index}")
        if from_index == to_index:
            return categories

        moved = categories.pop(from_index)
        categories.insert(to_index, moved)
        self.save_categories(categories)
        return categories

    # ── Products ──

    def get_products(self) -> list[Product]:
        """Return all products, upgrading legacy single-image records on read."""
        records = self._load(PRODUCTS_KEY)
        if records is None:
            if not self._seed_defaults:
                return []
            logger.info("Seeding %d demo products", len(DEFAULT_PRODUCTS))
            self.save_products(DEFAULT_PRODUCTS)
            return [Product.from_dict(p.to_dict()) for p in DEFAULT_PRODUCTS]
        return [Product.from_dict(r) for r in records]

    def get_product(self, product_id: str) -> Product | None:
        return next((p for p in self.get_products() if p.id == product_id), None)

    def save_products(self, products: Iterable[Product]) -> None:
        self._store(PRODUCTS_KEY, products)

    def add_product(self, draft: ProductDraft) -> Product:
        """Persist a new product.

        The image minimum is not checked here; callers validate drafts
        with :func:`snapcatalog.validation.validate_product_draft` first.
        """
        products = self.get_products()
        self._ids.observe(p.id for p in products)
        product = Product.from_draft(self._ids.next_id("prod"), draft)
        self.save_products([*products, product])
        return product

    def update_product(self, product: Product) -> None:
        """Replace the product with the same id. No-op if it doesn't exist."""
        products = self.get_products()
        for i, existing in enumerate(products):
            if existing.id == product.id:
                products[i] = product
                self.save_products(products)
                return

    def delete_product(self, product_id: str) -> None:
        products = self.get_products()
        remaining = [p for p in products if p.id != product_id]
        if len(remaining) != len(products):
            self.save_products(remaining)

    # ── Serialization ──

    def _load(self, key: str) -> list[Any] | None:
        payload = self._backend.read(key)
        if payload is None:
            return None
        try:
            records = json.loads(payload)
        except json.JSONDecodeError as e:
            raise CorruptCatalogError(f"Stored {key} are not valid JSON: {e}") from e
        if not isinstance(records, list):
            raise CorruptCatalogError(
                f"Stored {key} must be a JSON array, got {type(records).__name__}"
            )
        return records

    def _store(self, key: str, items: Iterable[T]) -> None:
        payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False)
        self._backend.write(key, payload)
