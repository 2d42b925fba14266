"""
Primitive parsers shared by every builder

None of these raise on malformed input: they return None, an empty
string or an empty list instead.
"""

import re
from typing import Any, Iterable, List, Mapping, Optional

PLACEHOLDER_PATTERN = re.compile(r'^_+$')
TRUE_VALUES = {'true', '1', 'yes', 'y'}
FALSE_VALUES = {'false', '0', 'no', 'n'}

_WORD_START = re.compile(r'(^|\s)(\S)')
_INTEGER = re.compile(r'[+-]?[0-9]+')


def safe_int(value: Any) -> Optional[int]:
    """Parse value as an integer, None on failure

    Only an optional sign followed by ASCII digits is accepted, so
    '1_000' and non-Latin digits read as absent.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def clean_string(value: Optional[str]) -> str:
    """Remove every period and trim surrounding whitespace"""
    if not value:
        return ''
    return str(value).replace('.', '').strip()


def title_case(value: Optional[str]) -> str:
    """Lower-case, then capitalize the first letter of each whitespace-delimited word"""
    if not value:
        return ''
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), str(value).lower())


def split_delimited(value: Optional[str], delimiters: str = '\n;|') -> List[str]:
    """Split on any delimiter character, trim pieces, drop empty ones"""
    if not value:
        return []
    pattern = '[' + re.escape(delimiters) + ']'
    return [piece.strip() for piece in re.split(pattern, str(value)) if piece.strip()]


def is_placeholder(value: Optional[str]) -> bool:
    """True for an all-underscore value such as '___' left by bulk imports"""
    if not value:
        return False
    return bool(PLACEHOLDER_PATTERN.match(str(value).strip()))


def cell_value(row: Mapping[str, Any], key: str) -> str:
    """Trimmed cell text; missing, None and placeholder cells read as ''"""
    value = row.get(key)
    if value is None:
        return ''
    value = str(value).strip()
    if is_placeholder(value):
        return ''
    return value


def normalize_pdf(filename: Optional[str]) -> str:
    """Append '.pdf' unless the name already ends with it (any case)"""
    if not filename:
        return ''
    filename = str(filename).strip()
    if not filename:
        return ''
    if not filename.lower().endswith('.pdf'):
        filename += '.pdf'
    return filename


def parse_flag(value: Optional[str]) -> Optional[bool]:
    """True/False for a recognised yes/no value, None for blank or anything else"""
    if not value:
        return None
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


def unique(items: Iterable[Any]) -> List[Any]:
    """Order-preserving de-duplication (works for unhashable dicts)"""
    result: List[Any] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def prune_empty(value: Any) -> Any:
    """Recursively drop None, '', [] and {} from dicts and lists

    False and 0 are kept: they are meaningful flags/values in the output.
    Returns None when the value itself ends up empty.
    """
    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            item = prune_empty(item)
            if item is not None:
                cleaned[key] = item
        return cleaned or None
    if isinstance(value, (list, tuple)):
        cleaned_list = [item for item in (prune_empty(v) for v in value) if item is not None]
        return cleaned_list or None
    if isinstance(value, str):
        return value if value.strip() else None
    return value
