"""
CSV template, import and export for bulk entry rows

Files are written as UTF-8 with a byte-order mark (so spreadsheet tools
detect the encoding) and RFC 4180 quoting. Imports map headers through
the column registry; unknown headers are ignored and missing columns
read as empty strings.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Union

from columns import COLUMNS, HEADERS, column_for_header, empty_row
from log_utils import sanitize_for_logging

logger = logging.getLogger(__name__)

CSV_ENCODING = 'utf-8-sig'

PathLike = Union[str, Path]


class CsvImportError(ValueError):
    """Raised when a CSV source cannot be read as bulk entry rows"""
    pass


def _write(handle, rows: Iterable[Mapping[str, str]]) -> int:
    writer = csv.writer(handle, quoting=csv.QUOTE_MINIMAL, lineterminator='\r\n')
    writer.writerow(HEADERS)
    count = 0
    for row in rows:
        writer.writerow([row.get(key) or '' for key in COLUMNS])
        count += 1
    return count


def rows_to_csv_text(rows: Iterable[Mapping[str, str]]) -> str:
    """CSV text (header plus one line per row), without byte-order mark"""
    buffer = io.StringIO()
    _write(buffer, rows)
    return buffer.getvalue()


def write_template(path: PathLike) -> Path:
    """Write the header-only template"""
    return export_rows([], path)


def export_rows(rows: Iterable[Mapping[str, str]], path: PathLike) -> Path:
    """Write rows to path as UTF-8 CSV with byte-order mark"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding=CSV_ENCODING, newline='') as f:
        count = _write(f, rows)
    logger.info(f"Exported {count} row(s) to {path}")
    return path


def rows_from_csv_text(text: str) -> List[Dict[str, str]]:
    """Parse CSV text into rows keyed by column

    Raises:
        CsvImportError: If the text has no header row
    """
    if text.startswith('\ufeff'):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise CsvImportError("CSV has no header row")

    mapping = {}
    for header in reader.fieldnames:
        key = column_for_header(header)
        if key is None:
            logger.debug("Ignoring unknown CSV header: %s", sanitize_for_logging(header))
        elif key not in mapping.values():
            mapping[header] = key

    if not mapping:
        logger.warning("CSV header matched no known columns")

    rows = []
    for record in reader:
        row = empty_row()
        for header, key in mapping.items():
            value = record.get(header)
            row[key] = value if isinstance(value, str) else ''
        rows.append(row)
    return rows


def import_rows(path: PathLike) -> List[Dict[str, str]]:
    """Read rows from a CSV file (byte-order mark optional)

    Raises:
        FileNotFoundError: If path does not exist
        CsvImportError: If the file is not UTF-8 or has no header row
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding=CSV_ENCODING, newline='') as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise CsvImportError(f"{path.name} is not valid UTF-8: {e}")

    rows = rows_from_csv_text(text)
    logger.info(f"Imported {len(rows)} row(s) from {path}")
    return rows
