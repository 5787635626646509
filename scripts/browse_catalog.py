#!/usr/bin/env python3
"""
Catalog Browser

Filters the catalog by facet, price and stock, prints facet option counts
and the matching products, and optionally writes them to CSV or the public
storefront feed to JSON.

Usage:
    python3 scripts/browse_catalog.py
    python3 scripts/browse_catalog.py --brand Apple --color Blue --color Black
    python3 scripts/browse_catalog.py --category phones --min-price 100 --max-price 500 --in-stock
    python3 scripts/browse_catalog.py --brand Samsung --output samsung.csv
    python3 scripts/browse_catalog.py --public-feed output/products.json
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from catalog.common.csv_utils import write_csv
from catalog.common.log_config import setup_logging
from catalog.filters import FACETS, FacetCountMode, FilterEngine
from catalog.store import JsonFileCatalogStore, build_public_feed

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = "data/catalog.json"
CSV_FIELDS = [
    "id", "name", "brand", "model", "category", "price", "stockCount",
    "inStock", "color", "storage", "carrier", "lockStatus", "grade", "imageUrl",
]


def product_row(product) -> dict:
    specs = product.specs.to_dict()
    return {
        "id": product.id,
        "name": product.name,
        "brand": product.brand,
        "model": product.model,
        "category": product.category,
        "price": f"{product.price:.2f}",
        "stockCount": product.stock_count,
        "inStock": product.in_stock,
        "color": specs.get("color", ""),
        "storage": specs.get("storage", ""),
        "carrier": specs.get("carrier", ""),
        "lockStatus": specs.get("lockStatus", ""),
        "grade": specs.get("grade", ""),
        "imageUrl": product.image_url,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Browse and filter the product catalog"
    )
    parser.add_argument(
        "--store", "-s",
        default=os.environ.get("CATALOG_STORE_PATH", DEFAULT_STORE_PATH),
        help=f"Catalog JSON file (default: $CATALOG_STORE_PATH or {DEFAULT_STORE_PATH})"
    )
    for facet in FACETS:
        parser.add_argument(
            "--" + facet.key.replace("_", "-"),
            dest=facet.key,
            action="append",
            default=[],
            metavar="VALUE",
            help=f"{facet.title} to include (repeatable)"
        )
    parser.add_argument("--min-price", type=float, help="Lowest price (inclusive)")
    parser.add_argument("--max-price", type=float, help="Highest price (inclusive)")

    stock = parser.add_mutually_exclusive_group()
    stock.add_argument("--in-stock", dest="in_stock", action="store_const", const=True,
                       help="Only products in stock")
    stock.add_argument("--out-of-stock", dest="in_stock", action="store_const", const=False,
                       help="Only products out of stock")

    parser.add_argument(
        "--count-mode",
        choices=[mode.value for mode in FacetCountMode],
        default=FacetCountMode.FACETED.value,
        help="How option counts are computed (default: faceted)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Write matching products to this CSV file"
    )
    parser.add_argument(
        "--public-feed",
        help="Write the public storefront feed (in-stock products) to this JSON file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    store = JsonFileCatalogStore(args.store)
    engine = FilterEngine(store.list(), count_mode=FacetCountMode(args.count_mode))
    if not engine.products:
        logger.warning("Catalog %s is empty", args.store)

    for facet in FACETS:
        values = getattr(args, facet.key)
        if values:
            engine.update_selection(facet.key, values)

    if args.min_price is not None or args.max_price is not None:
        low, high = engine.price_bounds()
        engine.set_price_range(
            args.min_price if args.min_price is not None else low,
            args.max_price if args.max_price is not None else high,
        )

    if args.in_stock is not None:
        engine.set_stock_filter(args.in_stock)

    low, high = engine.price_bounds()
    print("=" * 60)
    print("Catalog")
    print("=" * 60)
    print(f"  Store:            {args.store}")
    print(f"  Products:         {len(engine.products)}")
    print(f"  Price range:      {low:.2f} - {high:.2f}")
    print(f"  Active filters:   {engine.active_filter_count()}")
    print(f"  Matching:         {len(engine.filtered)}")

    for title, labels in engine.summary().items():
        print(f"\n  {title}:")
        for label in labels:
            print(f"     {label}")

    print("\n" + "-" * 60)
    for product in engine.filtered:
        stock_label = f"{product.stock_count} in stock" if product.in_stock else "out of stock"
        print(f"  {product.name:<45} {product.price:>9.2f}  {stock_label}")

    if args.output:
        written = write_csv(args.output, [product_row(p) for p in engine.filtered], CSV_FIELDS)
        print(f"\nWrote {written} products to {args.output}")

    if args.public_feed:
        feed = build_public_feed(store.list())
        os.makedirs(os.path.dirname(args.public_feed) or ".", exist_ok=True)
        with open(args.public_feed, "w", encoding="utf-8") as f:
            json.dump({"products": feed}, f, indent=2, ensure_ascii=False)
        print(f"Wrote {len(feed)} public products to {args.public_feed}")


if __name__ == "__main__":
    main()
