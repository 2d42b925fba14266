"""
Advisory input-quality checks

Reports placeholder cells, rows the converter will skip, out-of-range
date parts, values outside the allowed lists and near-duplicate names.
Nothing here blocks generation: the report is shown to the operator and
the converter runs regardless.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rapidfuzz import fuzz

from columns import COUNTRY_ISO_CODES, GENDER_OPTIONS, PEP_TIER_OPTIONS
from config_manager import ConfigManager, get_config
from log_utils import sanitize_for_logging
from transform.classifier import MODE_CREATE, MODE_UPDATE, select_rows
from transform.dates import DATE_LIST_DELIMITERS, parse_dates
from transform.primitives import cell_value, clean_string, is_placeholder, safe_int, split_delimited

logger = logging.getLogger(__name__)

# (column prefix, label) for every day/month/year triple
DATE_TRIPLES = [
    ('dob_', 'date of birth'),
    ('dod_', 'date of death'),
    ('', 'evidence date'),
    ('from_', 'PEP start date'),
    ('to_', 'PEP end date'),
]


@dataclass
class ValidationIssue:
    """Single advisory finding"""
    row_index: int
    field: str
    code: str
    message: str
    suggestion: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'row': self.row_index,
            'field': self.field,
            'code': self.code,
            'message': self.message,
            'suggestion': self.suggestion
        }


@dataclass
class ValidationReport:
    """All findings for one row snapshot"""
    mode: str
    total_rows: int
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    def add(self, row_index: int, field_name: str, code: str, message: str, suggestion: str = "") -> None:
        self.issues.append(ValidationIssue(row_index, field_name, code, message, suggestion))

    def counts_by_code(self) -> Dict[str, int]:
        return dict(Counter(issue.code for issue in self.issues))

    def for_row(self, row_index: int) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.row_index == row_index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode,
            'total_rows': self.total_rows,
            'issue_count': len(self.issues),
            'counts': self.counts_by_code(),
            'issues': [issue.to_dict() for issue in self.issues]
        }


def _check_placeholders(report: ValidationReport, index: int, row: Mapping[str, Any]) -> None:
    for key, value in row.items():
        if isinstance(value, str) and is_placeholder(value):
            report.add(index, key, 'PLACEHOLDER_VALUE',
                       f"Placeholder value '{value.strip()}' will be treated as empty",
                       "Clear the cell or enter the real value")


def _check_date_parts(report: ValidationReport, index: int, row: Mapping[str, Any], min_year: int) -> None:
    for prefix, label in DATE_TRIPLES:
        for part, low, high in (('day', 1, 31), ('month', 1, 12), ('year', min_year, None)):
            key = f'{prefix}{part}'
            raw = cell_value(row, key)
            if not raw:
                continue
            value = safe_int(raw)
            if value is None:
                report.add(index, key, 'INVALID_DATE_PART',
                           f"{label.capitalize()} {part} '{raw}' is not a number and will be ignored",
                           f"Enter the {part} as digits")
            elif value < low or (high is not None and value > high):
                bound = f"{low}-{high}" if high is not None else f">= {low}"
                report.add(index, key, 'INVALID_DATE_PART',
                           f"{label.capitalize()} {part} {value} is outside {bound}",
                           f"Check the {label}")

    pasted = cell_value(row, 'dates_of_birth')
    if pasted:
        pieces = split_delimited(pasted, DATE_LIST_DELIMITERS)
        kept = parse_dates(pasted, min_year)
        if len(kept) < len(pieces):
            report.add(index, 'dates_of_birth', 'INVALID_DATE_PART',
                       f"{len(pieces) - len(kept)} of {len(pieces)} pasted date(s) could not be read",
                       f"Use day-month-year with a year from {min_year}, separated by ';' or '|'")


def _check_allowed_values(report: ValidationReport, index: int, row: Mapping[str, Any]) -> None:
    gender = cell_value(row, 'gender')
    if gender and gender.title() not in GENDER_OPTIONS:
        report.add(index, 'gender', 'INVALID_GENDER',
                   f"Gender '{gender}' is not one of {GENDER_OPTIONS}")

    pep_tier = cell_value(row, 'pep_tier')
    if pep_tier and pep_tier not in PEP_TIER_OPTIONS:
        report.add(index, 'pep_tier', 'INVALID_PEP_TIER',
                   f"PEP tier '{pep_tier}' is not one of {PEP_TIER_OPTIONS}")

    codes = [('country_iso_code', cell_value(row, 'country_iso_code'))]
    codes.extend(('nationalities', code) for code in split_delimited(cell_value(row, 'nationalities'), ',;|'))
    for key, code in codes:
        if code and code.upper() not in COUNTRY_ISO_CODES:
            report.add(index, key, 'INVALID_COUNTRY_CODE',
                       f"'{code}' is not a known two-letter country code",
                       "Use ISO 3166-1 alpha-2 codes such as 'GB' or 'US'")

    country_id = cell_value(row, 'country_id')
    if country_id and safe_int(country_id) is None:
        report.add(index, 'country_id', 'INVALID_COUNTRY_ID',
                   f"Country id '{country_id}' is not a number; the address will be skipped",
                   "Enter the numeric country id")


def _check_near_duplicates(report: ValidationReport, indices: List[int],
                           rows: Sequence[Mapping[str, Any]], threshold: float) -> None:
    names = []
    for index in indices:
        cleaned = clean_string(cell_value(rows[index], 'full_name')).lower()
        if cleaned:
            names.append((index, cleaned))

    for pos, (index, name) in enumerate(names):
        for other_index, other in names[pos + 1:]:
            score = fuzz.token_sort_ratio(name, other)
            if score >= threshold:
                report.add(other_index, 'full_name', 'NEAR_DUPLICATE_NAME',
                           f"Name is {score:.0f}% similar to row {index}",
                           "Check whether both rows describe the same person")


def validate_rows(rows: Sequence[Mapping[str, Any]], mode: str = MODE_CREATE,
                  config: Optional[ConfigManager] = None) -> ValidationReport:
    """Run every advisory check over a row snapshot

    Args:
        rows: Row snapshot in grid order
        mode: 'create' or 'update'
        config: Configuration (singleton if None)

    Returns:
        ValidationReport; never raises on row content
    """
    if config is None:
        config = get_config()
    settings = config.validation

    report = ValidationReport(mode=mode, total_rows=len(rows))
    selection = select_rows(rows, mode)

    for index in selection.excluded:
        if not any(cell_value(rows[index], key) for key in rows[index]):
            continue
        if mode == MODE_UPDATE:
            report.add(index, 'reference_id', 'MISSING_IDENTITY',
                       "Row has no reference id and is skipped in update mode")
        else:
            report.add(index, 'full_name', 'MISSING_IDENTITY',
                       "Row has no usable name or carries a reference id and is skipped in create mode")

    for index, kept in selection.duplicates.items():
        report.add(index, 'reference_id' if mode == MODE_UPDATE else 'full_name', 'DUPLICATE_ROW',
                   f"Duplicate of row {kept}; only the first occurrence is converted")

    for index, row in enumerate(rows):
        _check_placeholders(report, index, row)
        _check_date_parts(report, index, row, settings.min_year)
        _check_allowed_values(report, index, row)

    if mode == MODE_CREATE and settings.check_near_duplicates:
        _check_near_duplicates(report, selection.indices, rows, settings.duplicate_name_threshold)

    report.issues.sort(key=lambda issue: issue.row_index)
    if report.has_issues:
        logger.warning("Validation found %d issue(s) in %d row(s): %s",
                       len(report.issues), len(rows),
                       sanitize_for_logging(str(report.counts_by_code())))
    return report
