"""
Inventory Row Parser

Converts a supplier inventory export (one record per line, header first)
into InventoryItem records. Tab- and comma-delimited exports are supported.

Malformed rows are expected in real exports (truncated trailing lines,
summary rows) and are dropped rather than reported.
"""

from __future__ import annotations

import csv
import logging
from typing import List, Optional

from ..common.constants import INVENTORY_COLUMN_COUNT
from ..models import InventoryItem

logger = logging.getLogger(__name__)

TAB = '\t'
COMMA = ','


def detect_delimiter(header_line: str) -> str:
    """
    Pick the field delimiter from the header line.

    Args:
        header_line: First line of the export

    Returns:
        Tab if the header contains one, otherwise comma
    """
    return TAB if TAB in header_line else COMMA


def split_line(line: str, delimiter: str) -> List[str]:
    """
    Split one record into stripped columns.

    Comma-delimited lines go through the csv module so quoted fields
    containing commas stay intact.
    """
    if delimiter == TAB:
        columns = line.split(TAB)
    else:
        columns = next(csv.reader([line], delimiter=delimiter), [])
    return [column.strip() for column in columns]


def parse_inventory_data(text: str, delimiter: Optional[str] = None) -> List[InventoryItem]:
    """
    Parse raw inventory text into items.

    The first line is a header and is skipped, as are blank lines. Rows
    with fewer than 21 columns are dropped silently.

    Args:
        text: Raw export content
        delimiter: Field delimiter (auto-detected from the header if None)

    Returns:
        Items in input order
    """
    if not text or not text.strip():
        return []

    lines = text.strip(' \r\n').splitlines()
    if delimiter is None:
        delimiter = detect_delimiter(lines[0])

    items: List[InventoryItem] = []
    dropped = 0

    for line_number, raw_line in enumerate(lines[1:], start=2):
        if not raw_line.strip():
            continue
        # Keep trailing tabs: empty trailing columns still count
        line = raw_line.strip(' \r\n')

        columns = split_line(line, delimiter)
        if len(columns) < INVENTORY_COLUMN_COUNT:
            dropped += 1
            logger.debug("Dropping line %d: %d columns (need %d)",
                         line_number, len(columns), INVENTORY_COLUMN_COUNT)
            continue

        items.append(InventoryItem.from_columns(columns))

    if dropped:
        logger.info("Parsed %d inventory rows, dropped %d short rows", len(items), dropped)
    else:
        logger.debug("Parsed %d inventory rows", len(items))

    return items
