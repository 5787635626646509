"""
Inventory import: parsing, product derivation, validation and bulk import.

Modules:
    inventory_parser - Positional tab/comma inventory exports
    spreadsheet - Header-based CSV and Excel records
    derivation - InventoryItem -> Product rules
    validator - Required-field checks and manual product entry
    bulk_importer - File import into a catalog store
"""

from .bulk_importer import BulkImporter, ImportFileError
from .derivation import (
    ProductDeriver,
    build_description,
    build_name,
    build_specs,
    build_tags,
    generate_product_id,
    is_present,
    parse_price,
    parse_stock,
)
from .inventory_parser import detect_delimiter, parse_inventory_data, split_line
from .spreadsheet import RecordMapper, SpreadsheetRow, read_csv_records, read_excel_records
from .validator import missing_required_fields, new_product, validation_error

__all__ = [
    'parse_inventory_data',
    'detect_delimiter',
    'split_line',
    'RecordMapper',
    'SpreadsheetRow',
    'read_csv_records',
    'read_excel_records',
    'ProductDeriver',
    'is_present',
    'build_name',
    'build_tags',
    'build_description',
    'build_specs',
    'parse_price',
    'parse_stock',
    'generate_product_id',
    'missing_required_fields',
    'validation_error',
    'new_product',
    'BulkImporter',
    'ImportFileError',
]
