"""
Document assembly

Turns a snapshot of grid rows into the {"individuals": [...]} document
for one of four variants (create/update x rel/pep). Pure: the same rows,
mode, profile type and policy always give the same document.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from transform.builders import (
    TransformPolicy,
    build_addresses,
    build_aliases,
    build_dates_of_birth,
    build_dates_of_death,
    build_evidences,
    build_gender,
    build_nationalities,
    build_pep_fields,
    build_profile_images,
    build_rel_entries,
    has_evidence,
    has_rel_classification,
)
from transform.classifier import MODE_CREATE, MODE_UPDATE, MODES, REFERENCE_FIELD, NAME_FIELD, select_rows
from transform.names import split_name
from transform.primitives import cell_value, parse_flag, prune_empty

logger = logging.getLogger(__name__)

PROFILE_REL = 'rel'
PROFILE_PEP = 'pep'
PROFILE_TYPES = (PROFILE_REL, PROFILE_PEP)

COLLECTION_KEY = 'individuals'


def _check_selectors(mode: str, profile_type: str) -> None:
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}', expected one of {MODES}")
    if profile_type not in PROFILE_TYPES:
        raise ValueError(f"Unknown profile type '{profile_type}', expected one of {PROFILE_TYPES}")


class DocumentAssembler:
    """Builds PersonRecords and wraps them in the output document"""

    def __init__(self, policy: Optional[TransformPolicy] = None):
        self.policy = policy or TransformPolicy()

    def _common_fields(self, row: Mapping[str, Any], record: Dict[str, Any]) -> None:
        record['gender'] = build_gender(row)
        record['isDead'] = parse_flag(cell_value(row, 'is_dead'))
        record['nationalities'] = build_nationalities(row)
        record['datesOfBirth'] = build_dates_of_birth(row, self.policy)
        record['datesOfDeath'] = build_dates_of_death(row)
        record['profileImages'] = build_profile_images(row)

    def build_create_record(self, row: Mapping[str, Any], profile_type: str) -> Optional[Dict[str, Any]]:
        """Record for a new individual, keyed by name"""
        name_parts = split_name(cell_value(row, NAME_FIELD))
        if not name_parts.has_valid_part():
            return None

        record: Dict[str, Any] = dict(name_parts.to_dict())
        self._common_fields(row, record)
        record['aliases'] = build_aliases(row, self.policy, name_parts)
        record['evidences'] = build_evidences(row)
        record['addresses'] = build_addresses(row, self.policy)

        if profile_type == PROFILE_PEP:
            record.update(build_pep_fields(row))
        else:
            record['relEntries'] = build_rel_entries(row, self.policy)

        return prune_empty(record)

    def build_update_record(self, row: Mapping[str, Any], profile_type: str) -> Optional[Dict[str, Any]]:
        """Partial update keyed by reference number

        A categorized REL entry (category and event type both present)
        takes precedence. Otherwise bare evidence is attached only when
        the row does not also update a date of birth; in that case the
        evidence is dropped.
        """
        reference = cell_value(row, REFERENCE_FIELD)
        record: Dict[str, Any] = {'referenceNumber': reference}
        self._common_fields(row, record)
        record['aliases'] = build_aliases(row, self.policy)
        record['addresses'] = build_addresses(row, self.policy)

        if profile_type == PROFILE_REL and has_rel_classification(row):
            record['evidences'] = build_evidences(row)
            record['relEntries'] = build_rel_entries(row, self.policy, include_id=True)
        elif has_evidence(row):
            if record['datesOfBirth']:
                logger.debug("Reference %s updates a date of birth; evidence not attached", reference)
            else:
                record['evidences'] = build_evidences(row)

        record = prune_empty(record)
        if not record or set(record) == {'referenceNumber'}:
            return None
        return record

    def build_record(self, row: Mapping[str, Any], mode: str, profile_type: str) -> Optional[Dict[str, Any]]:
        if mode == MODE_UPDATE:
            return self.build_update_record(row, profile_type)
        return self.build_create_record(row, profile_type)

    def assemble(self, rows: Sequence[Mapping[str, Any]], mode: str = MODE_CREATE,
                 profile_type: str = PROFILE_REL) -> Dict[str, List[Dict[str, Any]]]:
        """Filter, de-duplicate and convert rows into the output document

        Args:
            rows: Row snapshot in grid order
            mode: 'create' or 'update'
            profile_type: 'rel' or 'pep'

        Returns:
            {"individuals": [...]}; the list may be empty

        Raises:
            ValueError: If mode or profile_type is not a known selector
        """
        _check_selectors(mode, profile_type)
        selection = select_rows(rows, mode)

        records = []
        for index, row in zip(selection.indices, selection.rows):
            record = self.build_record(row, mode, profile_type)
            if record:
                records.append(record)
            else:
                logger.debug("Row %d produced no meaningful fields, omitted", index)

        logger.info(
            "Generated %d record(s) from %d row(s) [mode=%s, profile=%s, excluded=%d, duplicates=%d]",
            len(records), len(rows), mode, profile_type,
            len(selection.excluded), len(selection.duplicates)
        )
        return {COLLECTION_KEY: records}


def generate_document(rows: Sequence[Mapping[str, Any]], mode: str = MODE_CREATE,
                      profile_type: str = PROFILE_REL,
                      policy: Optional[TransformPolicy] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Convenience wrapper around DocumentAssembler.assemble"""
    return DocumentAssembler(policy).assemble(rows, mode, profile_type)


def to_json(document: Dict[str, Any], indent: int = 4) -> str:
    """Pretty-printed JSON text, non-ASCII kept as-is"""
    return json.dumps(document, indent=indent, ensure_ascii=False)


def export_filename(mode: str, profile_type: str, on_date: Optional[date] = None,
                    date_format: str = '%Y-%m-%d') -> str:
    """'{PEP|REL}_{CREATE|UPDATE}_{date}.json'"""
    _check_selectors(mode, profile_type)
    on_date = on_date or date.today()
    return f"{profile_type.upper()}_{mode.upper()}_{on_date.strftime(date_format)}.json"
