"""
Transformation engine for the bulk entry converter

This package provides:
- Primitive parsers (integers, cleaned/title-cased strings, delimited lists)
- Name splitting with a non-Latin script heuristic
- Partial date assembly
- Create/update row classification and de-duplication
- Field-group builders (aliases, addresses, evidences, REL and PEP entries)
- The document assembler producing {"individuals": [...]}
"""

from transform.primitives import (
    safe_int,
    clean_string,
    title_case,
    split_delimited,
    is_placeholder,
    normalize_pdf,
    prune_empty,
)
from transform.names import NameParts, split_name
from transform.dates import PartialDate, parse_date, parse_dates
from transform.classifier import (
    MODE_CREATE,
    MODE_UPDATE,
    MODES,
    Selection,
    classify_row,
    is_create_row,
    is_update_row,
    select_rows,
)
from transform.builders import (
    TransformPolicy,
    build_aliases,
    build_addresses,
    build_evidences,
    build_evidence_reference,
    build_profile_images,
    build_rel_entries,
    build_pep_fields,
)
from transform.assembler import (
    PROFILE_REL,
    PROFILE_PEP,
    PROFILE_TYPES,
    DocumentAssembler,
    generate_document,
    to_json,
    export_filename,
)

__all__ = [
    # Primitives
    'safe_int',
    'clean_string',
    'title_case',
    'split_delimited',
    'is_placeholder',
    'normalize_pdf',
    'prune_empty',
    # Names and dates
    'NameParts',
    'split_name',
    'PartialDate',
    'parse_date',
    'parse_dates',
    # Classification
    'MODE_CREATE',
    'MODE_UPDATE',
    'MODES',
    'Selection',
    'classify_row',
    'is_create_row',
    'is_update_row',
    'select_rows',
    # Builders
    'TransformPolicy',
    'build_aliases',
    'build_addresses',
    'build_evidences',
    'build_evidence_reference',
    'build_profile_images',
    'build_rel_entries',
    'build_pep_fields',
    # Assembly
    'PROFILE_REL',
    'PROFILE_PEP',
    'PROFILE_TYPES',
    'DocumentAssembler',
    'generate_document',
    'to_json',
    'export_filename',
]
