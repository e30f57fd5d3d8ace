"""CLI entry point for snapcatalog."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .camera import ShopCamera
from .config import AppConfig, load_config
from .engine import IdentificationEngine
from .errors import PersistenceError, ValidationError
from .images import load_image_file
from .models import ProductDraft
from .query import format_price, group_by_category, uncategorized
from .scanner import ScanSession
from .store import CatalogStore, open_store
from .validation import (
    ProductRules,
    create_product,
    parse_price_input,
    validate_category_name,
)
from .vision import create_backend


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="snapcatalog",
        description="Snap a product photo and look it up in the shop catalog",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="List available cameras")

    # categories
    cats_parser = sub.add_parser("categories", help="List categories in display order")
    cats_parser.add_argument("--json", action="store_true", help="Output as JSON")

    cat_add = sub.add_parser("category-add", help="Add a category")
    cat_add.add_argument("name", type=str)

    cat_del = sub.add_parser("category-delete", help="Delete a category")
    cat_del.add_argument("id", type=str)

    cat_move = sub.add_parser("category-move", help="Move a category to a new position")
    cat_move.add_argument("from_pos", type=int, metavar="FROM", help="Current position (1-based)")
    cat_move.add_argument("to_pos", type=int, metavar="TO", help="New position (1-based)")

    # products
    prods_parser = sub.add_parser("products", help="List products grouped by category")
    prods_parser.add_argument("--search", "-s", type=str, default="", help="Filter by name or brand")
    prods_parser.add_argument("--json", action="store_true", help="Output as JSON")

    prod_add = sub.add_parser("product-add", help="Add a product")
    prod_add.add_argument("--name", required=True)
    prod_add.add_argument("--category", required=True, help="Category id")
    prod_add.add_argument("--price", required=True, help="Price in thousands (15 = 15,000)")
    prod_add.add_argument("--brand", default="")
    prod_add.add_argument(
        "--image", type=str, nargs="+", required=True,
        help="Product photos (first one is the cover)",
    )

    prod_del = sub.add_parser("product-delete", help="Delete a product")
    prod_del.add_argument("id", type=str)

    # scan
    scan_parser = sub.add_parser("scan", help="Take a photo and identify the product")
    scan_parser.add_argument("--image", type=str, default=None, help="Use an existing image file")
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "cameras":
        _cmd_cameras()
        return

    store = open_store(config)
    try:
        match args.command:
            case "categories":
                _cmd_categories(store, args)
            case "category-add":
                _cmd_category_add(store, args)
            case "category-delete":
                store.delete_category(args.id)
                print(f"Deleted category {args.id}")
            case "category-move":
                _cmd_category_move(store, args)
            case "products":
                _cmd_products(store, args)
            case "product-add":
                _cmd_product_add(store, config, args)
            case "product-delete":
                store.delete_product(args.id)
                print(f"Deleted product {args.id}")
            case "scan":
                asyncio.run(_cmd_scan(store, config, args))
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except PersistenceError as e:
        print(f"Catalog storage error: {e}", file=sys.stderr)
        sys.exit(1)
    except RuntimeError as e:
        print(f"Camera error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()


def _cmd_cameras() -> None:
    cameras = ShopCamera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


def _cmd_categories(store: CatalogStore, args) -> None:
    categories = store.get_categories()
    if args.json:
        print(json.dumps([c.to_dict() for c in categories], ensure_ascii=False, indent=2))
        return
    for pos, c in enumerate(categories, start=1):
        print(f"  {pos:>2}. {c.name}  [{c.id}]")


def _cmd_category_add(store: CatalogStore, args) -> None:
    name = validate_category_name(args.name)
    category = store.add_category(name)
    print(f"Added category {category.name} [{category.id}]")


def _cmd_category_move(store: CatalogStore, args) -> None:
    try:
        categories = store.move_category(args.from_pos - 1, args.to_pos - 1)
    except IndexError as e:
        raise ValidationError(str(e)) from None
    for pos, c in enumerate(categories, start=1):
        print(f"  {pos:>2}. {c.name}")


def _cmd_products(store: CatalogStore, args) -> None:
    products = store.get_products()
    categories = store.get_categories()
    groups = group_by_category(products, categories, search_term=args.search)

    if args.json:
        data = [
            {
                "category": g.category.to_dict(),
                "items": [
                    {k: v for k, v in p.to_dict().items() if k != "images"}
                    | {"imageCount": len(p.images)}
                    for p in g.items
                ],
            }
            for g in groups
        ]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not groups:
        print("No products yet.")
    for g in groups:
        print(f"\n{g.category.name} ({len(g)})")
        for p in g.items:
            brand = f" · {p.brand}" if p.brand else ""
            print(f"  {p.name}{brand}  {format_price(p.price)}  [{p.id}, {len(p.images)} photos]")

    orphans = uncategorized(products, categories)
    if orphans:
        print(f"\n({len(orphans)} product(s) belong to deleted categories and are hidden)")


def _cmd_product_add(store: CatalogStore, config: AppConfig, args) -> None:
    rules = ProductRules.from_config(config.catalog)
    draft = ProductDraft(
        name=args.name.strip(),
        brand=args.brand.strip(),
        category_id=args.category,
        price=parse_price_input(args.price, rules.price_multiplier),
        images=[load_image_file(path) for path in args.image],
    )
    product = create_product(store, draft, rules)
    print(f"Added product {product.name} [{product.id}] {format_price(product.price)}")


async def _cmd_scan(store: CatalogStore, config: AppConfig, args) -> None:
    engine = IdentificationEngine(create_backend(config))
    camera = None
    if not args.image:
        camera = ShopCamera(
            camera_index=config.camera.index,
            save_dir=config.camera.save_dir or None,
            jpeg_quality=config.camera.jpeg_quality,
        )
    session = ScanSession(store, engine, capture=camera.capture if camera else None)

    if args.image:
        image = load_image_file(args.image)
    else:
        print("Capturing...")
        image = None

    print("Identifying product...")
    outcome = await session.scan(image)

    if args.json:
        print(json.dumps(outcome.result.to_dict(), ensure_ascii=False, indent=2))
        return

    if outcome.product is not None:
        p = outcome.product
        print(f"\nMatch: {p.name} ({p.brand or 'no brand'})  {format_price(p.price)}")
    else:
        print("\nNo match found.")
    print(f"Reason: {outcome.reason}")
