"""
Row classification and de-duplication

Create rows have a name and no reference id (or the literal 'create').
Update rows carry any other reference id. Within a mode the first row
seen for a given key wins; later duplicates are dropped, never merged.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from log_utils import sanitize_for_logging
from transform.names import split_name
from transform.primitives import cell_value, clean_string

logger = logging.getLogger(__name__)

MODE_CREATE = 'create'
MODE_UPDATE = 'update'
MODES = (MODE_CREATE, MODE_UPDATE)

NAME_FIELD = 'full_name'
REFERENCE_FIELD = 'reference_id'
CREATE_MARKER = 'create'


def _is_create_marker(reference: str) -> bool:
    return not reference or reference == CREATE_MARKER


def is_create_row(row: Mapping[str, Any]) -> bool:
    """Row has a usable name and an empty/'create' reference id

    A name made only of placeholder tokens or periods has no usable part.
    """
    if not _is_create_marker(cell_value(row, REFERENCE_FIELD)):
        return False
    return split_name(cell_value(row, NAME_FIELD)).has_valid_part()


def is_update_row(row: Mapping[str, Any]) -> bool:
    """Row has a reference id other than 'create'"""
    return not _is_create_marker(cell_value(row, REFERENCE_FIELD))


def classify_row(row: Mapping[str, Any]) -> Optional[str]:
    """Mode the row belongs to, None if it has no usable identity"""
    if is_update_row(row):
        return MODE_UPDATE
    if is_create_row(row):
        return MODE_CREATE
    return None


def dedupe_key(row: Mapping[str, Any], mode: str) -> str:
    """Cleaned, case-folded name for create rows; trimmed reference id for update rows"""
    if mode == MODE_UPDATE:
        return cell_value(row, REFERENCE_FIELD)
    return clean_string(cell_value(row, NAME_FIELD)).lower()


@dataclass
class Selection:
    """Rows kept for a mode plus the indices that were left out"""
    mode: str
    rows: List[Mapping[str, Any]] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    excluded: List[int] = field(default_factory=list)
    duplicates: Dict[int, int] = field(default_factory=dict)  # dropped index -> kept index


def select_rows(rows: Sequence[Mapping[str, Any]], mode: str) -> Selection:
    """Filter rows for the mode and drop later duplicates

    Args:
        rows: Row snapshot in grid order
        mode: 'create' or 'update'

    Returns:
        Selection with surviving rows in their original order
    """
    member = is_update_row if mode == MODE_UPDATE else is_create_row
    selection = Selection(mode=mode)
    first_seen: Dict[str, int] = {}

    for index, row in enumerate(rows):
        if not member(row):
            selection.excluded.append(index)
            continue

        key = dedupe_key(row, mode)
        if key in first_seen:
            selection.duplicates[index] = first_seen[key]
            logger.debug(
                "Dropping duplicate row %d (same %s as row %d): %s",
                index, 'reference id' if mode == MODE_UPDATE else 'name',
                first_seen[key], sanitize_for_logging(key)
            )
            continue

        first_seen[key] = index
        selection.rows.append(row)
        selection.indices.append(index)

    return selection
