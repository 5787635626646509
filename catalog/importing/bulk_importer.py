"""
Bulk Importer

Imports a supplier inventory file into the catalog store.

Features:
- Tab/comma exports parsed positionally, CSV and Excel read by header
- Optional image and spec enrichment per row
- Per-row validation; bad rows are reported and skipped
- Test mode (first N rows only)
- Batching with a pause between batches while enriching
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from ..common.config_loader import load_import_settings
from ..enrichment.image_fetcher import ImageFetcher
from ..enrichment.spec_fetcher import SpecFetcher
from ..models import ImportResult, Product
from ..store import CatalogStore
from .derivation import ProductDeriver
from .inventory_parser import COMMA, detect_delimiter, parse_inventory_data, split_line
from .spreadsheet import (
    EXCEL_EXTENSIONS,
    RecordMapper,
    SpreadsheetRow,
    read_csv_records,
    read_excel_records,
)
from .validator import validation_error

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ('.csv', '.tsv', '.txt')

# Errors confined to a single row
ROW_ERRORS = (ValueError, KeyError, TypeError, AttributeError, RuntimeError)

DeriverFactory = Callable[[bool, bool], ProductDeriver]


class ImportFileError(Exception):
    """The import input could not be read at all."""


class BulkImporter:
    """
    Import inventory files into a catalog store.

    Usage:
        importer = BulkImporter(JsonFileCatalogStore("data/catalog.json"))
        result = importer.import_file("inventory.tsv", fetch_images=True)
        print(result.imported, result.errors)
    """

    def __init__(
        self,
        store: CatalogStore,
        settings: Optional[Mapping[str, Any]] = None,
        image_fetcher: Optional[ImageFetcher] = None,
        spec_fetcher: Optional[SpecFetcher] = None,
        deriver_factory: Optional[DeriverFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the importer.

        Args:
            store: Catalog store receiving the products
            settings: Import settings (defaults to config/import_settings.yaml)
            image_fetcher: Shared image fetcher for enrichment
            spec_fetcher: Shared spec fetcher for enrichment
            deriver_factory: Builds a ProductDeriver from (fetch_images, fetch_specs)
            sleep: Pause function used between batches
        """
        self.store = store
        self.settings = dict(settings) if settings is not None else load_import_settings()
        self.batch_size = max(int(self.settings.get('batch_size', 5)), 1)
        self.batch_delay = float(self.settings.get('batch_delay', 0.1))
        self.test_mode_limit = int(self.settings.get('test_mode_limit', 10))
        self.mapper = RecordMapper.from_settings(self.settings)
        self.image_fetcher = image_fetcher
        self.spec_fetcher = spec_fetcher
        self.deriver_factory = deriver_factory or self._default_deriver
        self.sleep = sleep

    def _default_deriver(self, fetch_images: bool, fetch_specs: bool) -> ProductDeriver:
        return ProductDeriver(
            fetch_images=fetch_images,
            fetch_specs=fetch_specs,
            image_fetcher=self.image_fetcher,
            spec_fetcher=self.spec_fetcher,
        )

    # ── Entry points ─────────────────────────────────────────────────────

    def import_file(
        self,
        path: str | Path,
        fetch_images: bool = False,
        fetch_specs: bool = False,
        test_mode: bool = False,
    ) -> ImportResult:
        """
        Import a file from disk.

        Raises:
            ImportFileError: If the file cannot be read or holds no rows
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImportFileError(f"Cannot read {path}: {e}") from e
        return self.import_bytes(data, path.name, fetch_images, fetch_specs, test_mode)

    def import_bytes(
        self,
        data: bytes,
        filename: str,
        fetch_images: bool = False,
        fetch_specs: bool = False,
        test_mode: bool = False,
    ) -> ImportResult:
        """
        Import uploaded file content; the format follows the file extension.

        Raises:
            ImportFileError: On an unsupported extension, unreadable content
                or no rows
        """
        suffix = Path(filename).suffix.lower()

        if suffix in EXCEL_EXTENSIONS:
            try:
                records = read_excel_records(data)
            except Exception as e:
                raise ImportFileError(f"Cannot read workbook {filename}: {e}") from e
            rows = self.mapper.map_records(records)
        elif suffix in TEXT_EXTENSIONS:
            rows = self.load_text_rows(self._decode(data, filename))
        else:
            raise ImportFileError(
                f"Unsupported file format: {filename}. Use CSV, TSV, TXT or Excel files."
            )

        return self._import_rows(rows, fetch_images, fetch_specs, test_mode)

    def import_text(
        self,
        text: str,
        fetch_images: bool = False,
        fetch_specs: bool = False,
        test_mode: bool = False,
    ) -> ImportResult:
        """Import pasted inventory text (tab- or comma-delimited, header first)."""
        return self._import_rows(self.load_text_rows(text), fetch_images, fetch_specs, test_mode)

    # ── Reading ──────────────────────────────────────────────────────────

    @staticmethod
    def _decode(data: bytes, filename: str) -> str:
        try:
            return data.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise ImportFileError(f"{filename} is not UTF-8 text: {e}") from e

    def load_text_rows(self, text: str) -> List[SpreadsheetRow]:
        """
        Turn delimited text into rows.

        A comma-delimited file whose header names the manufacturer and model
        columns is read by header name; anything else is treated as a
        positional inventory export.
        """
        stripped = text.strip(' \r\n\ufeff')
        if not stripped:
            return []

        header = stripped.splitlines()[0]
        if detect_delimiter(header) == COMMA and self.mapper.recognizes(split_line(header, COMMA)):
            logger.debug("Reading CSV by header: %s", header)
            return self.mapper.map_records(read_csv_records(stripped))

        return [SpreadsheetRow(item=item) for item in parse_inventory_data(stripped)]

    # ── Processing ───────────────────────────────────────────────────────

    def _import_rows(
        self,
        rows: List[SpreadsheetRow],
        fetch_images: bool,
        fetch_specs: bool,
        test_mode: bool,
    ) -> ImportResult:
        if not rows:
            raise ImportFileError("No data found in file")

        total_rows = len(rows)
        if test_mode:
            rows = rows[:self.test_mode_limit]

        logger.info(
            "Importing %d of %d rows (images=%s, specs=%s, test_mode=%s)",
            len(rows), total_rows, fetch_images, fetch_specs, test_mode,
        )

        deriver = self.deriver_factory(fetch_images, fetch_specs)
        enriching = fetch_images or fetch_specs
        result = ImportResult(total_rows=total_rows, test_mode=test_mode)

        for start in range(0, len(rows), self.batch_size):
            if start and enriching and self.batch_delay > 0:
                self.sleep(self.batch_delay)

            batch = rows[start:start + self.batch_size]
            for offset, row in enumerate(batch):
                row_number = start + offset + 1
                result.processed_rows += 1
                self._import_row(deriver, row, row_number, result)

        logger.info("Imported %d products, %d errors", result.imported, len(result.errors))
        return result

    def _import_row(
        self,
        deriver: ProductDeriver,
        row: SpreadsheetRow,
        row_number: int,
        result: ImportResult,
    ) -> None:
        try:
            product = deriver.build(row.item, row.extras)

            error = validation_error(row_number, product)
            if error:
                logger.debug("%s", error)
                result.errors.append(error)
                return

            for failure in deriver.enrich(product):
                logger.debug("Row %d enrichment: %s", row_number, failure)

            stored, created = self.store.upsert(product)
            _record_product(result, stored)
            result.imported += 1
            logger.debug("Row %d: %s %s", row_number, "created" if created else "updated", stored.name)

        except ROW_ERRORS as e:
            logger.error("Row %d failed: %s", row_number, e)
            result.errors.append(f"Row {row_number}: {e}")


def _record_product(result: ImportResult, product: Product) -> None:
    """Append, or replace the entry a repeated row in the same file produced."""
    for index, existing in enumerate(result.products):
        if existing.id == product.id:
            result.products[index] = product
            return
    result.products.append(product)
