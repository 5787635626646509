#!/usr/bin/env python3
"""
Catalog Enrichment Script

Backfills images and/or technical specifications for products already in
the catalog store.

Usage:
    python3 scripts/enrich_catalog.py --images
    python3 scripts/enrich_catalog.py --specs --id pm-product_3f9c2a7b41de
    python3 scripts/enrich_catalog.py --images --specs --delay 5
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from catalog.common.log_config import setup_logging
from catalog.enrichment import CatalogEnricher, ImageFetcher, SpecFetcher
from catalog.store import JsonFileCatalogStore

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = "data/catalog.json"


def main():
    parser = argparse.ArgumentParser(
        description="Fetch missing images and specifications for stored products"
    )
    parser.add_argument(
        "--store", "-s",
        default=os.environ.get("CATALOG_STORE_PATH", DEFAULT_STORE_PATH),
        help=f"Catalog JSON file (default: $CATALOG_STORE_PATH or {DEFAULT_STORE_PATH})"
    )
    parser.add_argument(
        "--images",
        action="store_true",
        help="Fetch images for products without one"
    )
    parser.add_argument(
        "--specs",
        action="store_true",
        help="Fetch missing specifications and refresh descriptions"
    )
    parser.add_argument(
        "--id",
        dest="product_ids",
        action="append",
        metavar="PRODUCT_ID",
        help="Only enrich this product (repeatable, default: all)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        help="Seconds between batches (default: 2 for images, 3 for specs)"
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

    if not args.images and not args.specs:
        parser.error("Choose at least one of --images or --specs")

    store = JsonFileCatalogStore(args.store)
    if len(store) == 0:
        logger.error("Catalog %s is empty", args.store)
        sys.exit(1)

    delays = {}
    if args.delay is not None:
        delays = {"image_delay": args.delay, "spec_delay": args.delay}

    print("=" * 60)
    print("Catalog Enrichment")
    print("=" * 60)
    print(f"  Store:            {args.store} ({len(store)} products)")
    print(f"  Images:           {args.images}")
    print(f"  Specs:            {args.specs}")
    print(f"  Products:         {', '.join(args.product_ids) if args.product_ids else 'all'}")
    print()

    with ImageFetcher() as image_fetcher, SpecFetcher() as spec_fetcher:
        enricher = CatalogEnricher(
            store,
            image_fetcher=image_fetcher,
            spec_fetcher=spec_fetcher,
            **delays,
        )

        summaries = []
        if args.images:
            summaries.append(enricher.fetch_missing_images(args.product_ids))
        if args.specs:
            summaries.append(enricher.fetch_missing_specs(args.product_ids))

    print("=" * 60)
    print("Enrichment Summary")
    print("=" * 60)
    for summary in summaries:
        print(f"  {summary.message}")


if __name__ == "__main__":
    main()
