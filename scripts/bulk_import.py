#!/usr/bin/env python3
"""
Bulk Inventory Import Script

Imports a supplier inventory file (TSV/TXT export, CSV or Excel) into the
catalog store, optionally looking up product images and specifications.

Usage:
    python3 scripts/bulk_import.py --file data/inventory.tsv
    python3 scripts/bulk_import.py --file inventory.xlsx --fetch-images --fetch-specs
    python3 scripts/bulk_import.py --file inventory.csv --test-mode --store data/test.json
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

from catalog.common.log_config import setup_logging
from catalog.enrichment import ImageFetcher, SpecFetcher
from catalog.importing import BulkImporter, ImportFileError
from catalog.store import JsonFileCatalogStore

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = "data/catalog.json"
MAX_ERRORS_SHOWN = 10


def main():
    parser = argparse.ArgumentParser(
        description="Import a supplier inventory file into the catalog"
    )
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="Inventory file (.tsv, .txt, .csv, .xlsx, .xls)"
    )
    parser.add_argument(
        "--store", "-s",
        default=os.environ.get("CATALOG_STORE_PATH", DEFAULT_STORE_PATH),
        help=f"Catalog JSON file (default: $CATALOG_STORE_PATH or {DEFAULT_STORE_PATH})"
    )
    parser.add_argument(
        "--fetch-images",
        action="store_true",
        help="Look up an image for each product"
    )
    parser.add_argument(
        "--fetch-specs",
        action="store_true",
        help="Look up technical specifications for each product"
    )
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Import only the first rows of the file"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the import result as JSON"
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

    if not os.path.exists(args.file):
        print(f"Inventory file not found: {args.file}")
        sys.exit(1)

    store = JsonFileCatalogStore(args.store)

    print("=" * 60)
    print("Bulk Inventory Import")
    print("=" * 60)
    print(f"  Input file:       {args.file}")
    print(f"  Catalog store:    {args.store} ({len(store)} products)")
    print(f"  Fetch images:     {args.fetch_images}")
    print(f"  Fetch specs:      {args.fetch_specs}")
    print(f"  Test mode:        {args.test_mode}")
    print()

    with ImageFetcher() as image_fetcher, SpecFetcher() as spec_fetcher:
        importer = BulkImporter(store, image_fetcher=image_fetcher, spec_fetcher=spec_fetcher)
        try:
            result = importer.import_file(
                args.file,
                fetch_images=args.fetch_images,
                fetch_specs=args.fetch_specs,
                test_mode=args.test_mode,
            )
        except ImportFileError as e:
            logger.error("Import failed: %s", e)
            sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    print("=" * 60)
    print("Import Summary")
    print("=" * 60)
    print(f"  Rows in file:     {result.total_rows}")
    print(f"  Rows processed:   {result.processed_rows}")
    print(f"  Imported:         {result.imported}")
    print(f"  Errors:           {len(result.errors)}")
    print(f"  Catalog size:     {len(store)}")

    if result.errors:
        print("\n  First errors:")
        for error in result.errors[:MAX_ERRORS_SHOWN]:
            print(f"     {error}")

    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
