"""
Spreadsheet Record Mapping

Reads header-based spreadsheets (CSV with a header row, Excel workbooks) and
maps each record onto an InventoryItem plus optional extra columns (product
name, description, image URL and technical specs).

Header names are matched case-insensitively against the aliases in
config/import_settings.yaml.
"""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from ..common.config_loader import build_alias_lookup
from ..common.csv_utils import iter_csv_records
from ..models import InventoryItem

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = ('.xlsx', '.xls')

# Headers that must map for a CSV to be read by name instead of position
REQUIRED_HEADER_FIELDS = ('manufacturer', 'model')


@dataclass
class SpreadsheetRow:
    """One mapped spreadsheet record."""
    item: InventoryItem
    extras: Dict[str, str] = field(default_factory=dict)


def cell_text(value: Any) -> str:
    """
    Render a spreadsheet cell as stripped text.

    Missing cells (None, NaN) become "", whole floats lose their ".0" so
    quantities read from Excel parse as integers.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def read_excel_records(data: bytes) -> List[Dict[str, str]]:
    """
    Read the first worksheet of an Excel workbook.

    Args:
        data: Raw .xlsx / .xls bytes

    Returns:
        One dict per non-empty row, keyed by stripped header text
    """
    frame = pd.read_excel(io.BytesIO(data), sheet_name=0)
    frame = frame.dropna(how='all')

    headers = [str(column).strip() for column in frame.columns]
    records = []
    for values in frame.itertuples(index=False, name=None):
        records.append({
            header: cell_text(value)
            for header, value in zip(headers, values)
            if header
        })

    logger.debug("Read %d rows from workbook (columns: %s)", len(records), ", ".join(headers))
    return records


def read_csv_records(text: str) -> List[Dict[str, str]]:
    """Read CSV text with a header row into stripped string records."""
    return [
        {name: (value or "").strip() for name, value in record.items()}
        for record in iter_csv_records(text)
    ]


class RecordMapper:
    """
    Maps header-keyed records to inventory items.

    Usage:
        mapper = RecordMapper(settings['column_aliases'], settings['extra_aliases'])
        if mapper.recognizes(headers):
            rows = mapper.map_records(records)
    """

    def __init__(
        self,
        column_aliases: Mapping[str, List[str]],
        extra_aliases: Optional[Mapping[str, List[str]]] = None,
    ):
        self.field_lookup = build_alias_lookup(dict(column_aliases))
        self.extra_lookup = build_alias_lookup(dict(extra_aliases or {}))

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "RecordMapper":
        return cls(settings.get('column_aliases', {}), settings.get('extra_aliases', {}))

    def recognizes(self, headers: Iterable[str]) -> bool:
        """True when the headers name at least the manufacturer and model columns."""
        mapped = {self.field_lookup.get(h.strip().lower()) for h in headers}
        return all(name in mapped for name in REQUIRED_HEADER_FIELDS)

    def map_record(self, record: Mapping[str, Any]) -> SpreadsheetRow:
        """
        Map one record. The first non-empty column feeding a field wins;
        unknown headers are ignored.
        """
        values: Dict[str, str] = {}
        extras: Dict[str, str] = {}

        for header, raw in record.items():
            key = str(header).strip().lower()
            value = cell_text(raw)
            if not value:
                continue

            target = self.field_lookup.get(key)
            if target is not None:
                values.setdefault(target, value)
                continue

            extra = self.extra_lookup.get(key)
            if extra is not None:
                extras.setdefault(extra, value)

        return SpreadsheetRow(item=InventoryItem(**values), extras=extras)

    def map_records(self, records: Iterable[Mapping[str, Any]]) -> List[SpreadsheetRow]:
        return [self.map_record(record) for record in records]
