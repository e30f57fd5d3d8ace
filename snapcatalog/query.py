"""Filtered and grouped views over a catalog snapshot.

Everything here is a pure function of its arguments. The only state is
:class:`CollapseState`, which belongs to whichever surface renders the
list and is never persisted.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field

from .models import Category, Product


@dataclass
class CategoryGroup:
    category: Category
    items: list[Product]
    collapsed: bool = False

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class CollapseState:
    """Per-category collapsed/expanded flags."""

    collapsed: set[str] = field(default_factory=set)

    def is_collapsed(self, category_id: str) -> bool:
        return category_id in self.collapsed

    def toggle(self, category_id: str) -> bool:
        """Flip one category and return its new collapsed state."""
        if category_id in self.collapsed:
            self.collapsed.discard(category_id)
            return False
        self.collapsed.add(category_id)
        return True

    def collapse(self, category_id: str) -> None:
        self.collapsed.add(category_id)

    def expand(self, category_id: str) -> None:
        self.collapsed.discard(category_id)


def matches_search(product: Product, term: str) -> bool:
    """Case-insensitive substring match on name or brand."""
    if not term:
        return True
    needle = term.casefold()
    return needle in product.name.casefold() or needle in product.brand.casefold()


def filter_products(products: Iterable[Product], term: str = "") -> list[Product]:
    return [p for p in products if matches_search(p, term)]


def group_by_category(
    products: Iterable[Product],
    categories: Sequence[Category],
    search_term: str = "",
    collapsed: Collection[str] | CollapseState = (),
) -> list[CategoryGroup]:
    """Group matching products under their category, in category order.

    Categories left with no matching products are omitted. Products whose
    category no longer exists are not shown in any group.
    """
    if isinstance(collapsed, CollapseState):
        collapsed = collapsed.collapsed

    by_category: dict[str, list[Product]] = {c.id: [] for c in categories}
    for product in filter_products(products, search_term):
        bucket = by_category.get(product.category_id)
        if bucket is not None:
            bucket.append(product)

    groups: list[CategoryGroup] = []
    for category in categories:
        items = by_category[category.id]
        if items:
            groups.append(
                CategoryGroup(
                    category=category,
                    items=items,
                    collapsed=category.id in collapsed,
                )
            )
    return groups


def uncategorized(
    products: Iterable[Product], categories: Iterable[Category]
) -> list[Product]:
    """Products whose category id doesn't resolve to an existing category."""
    known = {c.id for c in categories}
    return [p for p in products if p.category_id not in known]


def format_price(price: int, currency: str = "đ") -> str:
    """Format a minor-unit price, e.g. ``15000`` → ``15,000đ``."""
    return f"{price:,}{currency}"
