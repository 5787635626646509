"""
CSV helpers shared by the importer and the browse script.
"""

import csv
import io
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence


def iter_csv_records(text: str) -> Iterator[Dict[str, str]]:
    """
    Yield one dict per data row of CSV text, keyed by the header.

    Header names are stripped, unnamed columns dropped, short rows padded
    with "" and all-empty rows skipped.
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        return
    columns = [(index, name.strip()) for index, name in enumerate(header) if name.strip()]

    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        yield {name: row[index] if index < len(row) else "" for index, name in columns}


def write_csv(
    file_path: str | Path,
    rows: Sequence[Mapping[str, Any]],
    fieldnames: Optional[List[str]] = None,
    encoding: str = 'utf-8'
) -> int:
    """
    Write rows to a CSV file and return how many were written.

    Without ``fieldnames`` the columns come from the first row, and an empty
    ``rows`` writes nothing. With them, the header is always written.
    Parent directories are created as needed.
    """
    if fieldnames is None:
        if not rows:
            return 0
        fieldnames = list(rows[0].keys())

    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding=encoding, newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction='ignore')
        writer.writeheader()
        writer.writerows(rows)

    return len(rows)
