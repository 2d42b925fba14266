"""
Partial date assembly

A PartialDate is a dict with any subset of the integer keys day, month
and year. No range checks happen here; out-of-range parts are reported
by the advisory validation pass instead.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from transform.primitives import cell_value, safe_int, split_delimited

PartialDate = Dict[str, int]

DATE_LIST_DELIMITERS = ';|'
DATE_PART_PATTERN = re.compile(r'[-/,]')
MIN_PASTED_YEAR = 1900


def parse_date(day: Any, month: Any, year: Any) -> Optional[PartialDate]:
    """Combine day/month/year into a PartialDate

    Each part is kept only if it parses as an integer. Returns None when
    none of them does.
    """
    result: PartialDate = {}
    for key, raw in (('day', day), ('month', month), ('year', year)):
        value = safe_int(raw)
        if value is not None:
            result[key] = value
    return result or None


def date_from_row(row: Mapping[str, Any], prefix: str = '') -> Optional[PartialDate]:
    """parse_date over the '<prefix>day', '<prefix>month', '<prefix>year' cells"""
    return parse_date(
        cell_value(row, f'{prefix}day'),
        cell_value(row, f'{prefix}month'),
        cell_value(row, f'{prefix}year')
    )


def parse_dates(text: Optional[str], min_year: int = MIN_PASTED_YEAR) -> List[PartialDate]:
    """Parse a pasted multi-date cell such as '1-2-1980; 15/06/1975'

    Dates are separated by ';' or '|' and written day, month, year with
    '-', '/' or ',' between the parts. A piece without exactly three
    non-empty parts, or whose year is missing or before min_year, is
    dropped on its own; the other dates are kept.
    """
    dates: List[PartialDate] = []
    for piece in split_delimited(text, DATE_LIST_DELIMITERS):
        parts = [p.strip() for p in DATE_PART_PATTERN.split(piece)]
        if len(parts) != 3 or not all(parts):
            continue
        date = parse_date(*parts)
        if not date or date.get('year') is None or date['year'] < min_year:
            continue
        dates.append(date)
    return dates
